"""Pure calendar calculations, no rendering dependencies."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from fractions import Fraction
from zoneinfo import ZoneInfo

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_MONTH_LENGTHS = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


@dataclass(frozen=True)
class CalendarProgress:
    year: int
    day_of_year: int
    total_days: int
    days_left: int
    percentage: int


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def month_lengths(year: int) -> list[int]:
    """Return the twelve month lengths, February adjusted for leap years."""
    lengths = list(_MONTH_LENGTHS)
    if is_leap_year(year):
        lengths[1] = 29
    return lengths


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


def round_half_away(value: float | Fraction) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    half = Fraction(1, 2)
    if value < 0:
        return -math.floor(-value + half)
    return math.floor(value + half)


def resolve_date(now: datetime | None = None, tz_name: str | None = None) -> date:
    """Return the calendar date of ``now`` in ``tz_name`` (or the local zone).

    Naive datetimes are treated as local wall-clock time.
    """
    if now is None:
        now = datetime.now().astimezone()
    if tz_name:
        if now.tzinfo is None:
            now = now.astimezone()
        return now.astimezone(ZoneInfo(tz_name)).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone().date()


def progress_for_date(d: date) -> CalendarProgress:
    total = days_in_year(d.year)
    doy = day_of_year(d)
    return CalendarProgress(
        year=d.year,
        day_of_year=doy,
        total_days=total,
        days_left=total - doy,
        percentage=round_half_away(Fraction(doy * 100, total)),
    )


def compute_progress(now: datetime | None = None,
                     tz_name: str | None = None) -> CalendarProgress:
    """Year progress for ``now``, with the day pinned to ``tz_name`` if given."""
    return progress_for_date(resolve_date(now, tz_name))


def month_grid(year: int, month: int,
               columns: int = 7, rows: int = 5) -> list[list[int | None]]:
    """Return a rows×columns grid for the given month.

    Days are laid out sequentially from the first slot (no weekday offset),
    so day 1 always sits at row 0, column 0. Unused trailing slots are None.
    Always ``rows`` rows so every month block has the same shape.
    """
    n_days = month_lengths(year)[month - 1]
    if n_days > columns * rows:
        raise ValueError(f"{n_days} days do not fit a {columns}x{rows} grid")

    grid: list[list[int | None]] = []
    for r in range(rows):
        row: list[int | None] = []
        for c in range(columns):
            d = r * columns + c + 1
            row.append(d if d <= n_days else None)
        grid.append(row)
    return grid
