"""Variant definitions: every endpoint is one of these data values."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum

from calendar_logic import CalendarProgress


class ColorToken(str, Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


class GridKind(str, Enum):
    FLAT = "flat"        # columns x rows day grid
    MONTHS = "months"    # 12 month blocks of 7x5 days


class VerticalAlign(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class CellShape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"


class CaptionStyle(str, Enum):
    INLINE = "inline"
    PROGRESS_BAR = "progress_bar"


@dataclass(frozen=True)
class Palette:
    background: str
    past: str
    current: str
    future: str

    def color_for(self, token: ColorToken) -> str:
        if token is ColorToken.PAST:
            return self.past
        if token is ColorToken.CURRENT:
            return self.current
        return self.future


@dataclass(frozen=True)
class LayoutConfig:
    """Proportions of a variant, all relative to the requested canvas."""

    columns: int = 15
    rows: int = 24
    top_frac: float = 0.24          # reserved for clock/widgets drawn by the device
    bottom_frac: float = 0.08       # caption area
    gap_frac: float = 0.0           # gap between grid region and captions
    side_margin_frac: float = 0.06
    side_margin_factor: float = 2.0
    spacing_scale: float = 0.75
    cell_frac: float = 0.88         # cell diameter / min(spacing_x, spacing_y)
    cell_shape: CellShape = CellShape.CIRCLE
    vertical_align: VerticalAlign = VerticalAlign.CENTER
    # Height below the flexible grid region, in units of bottom_frac*height.
    # Stacked captions add their own height on top of it.
    footer_text_spaces: float = 1.0
    font_divisor: int = 32

    # Month grid only
    month_columns: int = 3
    month_rows: int = 4
    inner_columns: int = 7
    inner_rows: int = 5
    month_area_width_frac: float = 0.8
    month_area_height_frac: float = 0.7
    month_gap_x_frac: float = 0.04
    month_gap_y_frac: float = 0.06
    label_frac: float = 0.15
    label_gap_frac: float = 0.02
    label_scale: float = 0.75
    label_color: str = "#aaaaaa"

    def font_size(self, width: int) -> int:
        return math.floor(width / self.font_divisor)


@dataclass(frozen=True)
class Segment:
    template: str
    color: str

    def format(self, progress: CalendarProgress) -> str:
        return self.template.format(**asdict(progress))


@dataclass(frozen=True)
class CaptionConfig:
    style: CaptionStyle = CaptionStyle.INLINE
    segments: tuple[Segment, ...] = ()
    # One bullet color per gap between segments; empty means no bullets.
    separator_colors: tuple[str, ...] = ()
    separator_scale: float = 0.2
    separator_margin: float = 0.6
    # Stats row centre sits at height - bottom_text_space * row_lift.
    # None stacks the row directly below the grid region instead.
    row_lift: float | None = 1.55
    line_height: float = 1.2
    tagline: str | None = None
    tagline_color: str = "#666666"
    tagline_scale: float = 0.85
    tagline_pad: float = 0.4
    bar_track: str = "#333333"
    bar_fill: str | None = None     # None uses the palette's current color
    bar_label_scale: float = 0.75
    bar_gap: float = 0.35
    bar_lift: float = 0.8

    def __post_init__(self) -> None:
        if self.separator_colors and len(self.separator_colors) != len(self.segments) - 1:
            raise ValueError("separator_colors needs one color per gap between segments")
        if self.style is CaptionStyle.PROGRESS_BAR and not self.segments:
            raise ValueError("progress bar captions need at least one segment")

    def bar_height(self, font_size: int) -> int:
        return max(8, math.floor(font_size * 0.5))

    def stacked_height(self, font_size: int) -> float:
        """Height the stats take below the grid region; 0 when the row is lifted."""
        if self.row_lift is not None:
            return 0.0
        if self.style is CaptionStyle.PROGRESS_BAR:
            label_line = font_size * self.bar_label_scale * self.line_height
            return (label_line + font_size * (self.bar_gap - self.bar_lift)
                    + self.bar_height(font_size))
        return font_size * self.line_height


@dataclass(frozen=True)
class VariantConfig:
    name: str
    grid: GridKind
    palette: Palette
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    captions: CaptionConfig = field(default_factory=CaptionConfig)
    timezone: str | None = None     # None: local zone of the server

    @property
    def path(self) -> str:
        return f"/api/{self.name}"


_DARK = Palette(background="#1a1a1a", past="#ffffff", current="#ff8c00", future="#333333")

_STATS_ORANGE = (
    Segment("{day_of_year}d done", "#ffffff"),
    Segment("{days_left}d left", "#ff6b35"),
    Segment("{percentage}%", "#888888"),
)

DAYS = VariantConfig(
    name="days",
    grid=GridKind.FLAT,
    palette=_DARK,
    layout=LayoutConfig(footer_text_spaces=1.6),
    captions=CaptionConfig(
        segments=_STATS_ORANGE,
        separator_colors=("#ffffff", "#888888"),
    ),
)

DAYS_CANVAS = VariantConfig(
    name="days-canvas",
    grid=GridKind.FLAT,
    palette=_DARK,
    layout=LayoutConfig(
        top_frac=0.18,
        spacing_scale=0.8,
        cell_frac=0.7,              # radius 0.35
        font_divisor=30,
    ),
    captions=CaptionConfig(
        segments=(
            Segment("{days_left}d left", "#ff6b35"),
            Segment(" · {percentage}%", "#888888"),
        ),
        row_lift=1.4,
    ),
)

MONTHS = VariantConfig(
    name="var-3",
    grid=GridKind.MONTHS,
    palette=Palette(background="#1a1a1a", past="#ffffff", current="#16a34a", future="#333333"),
    layout=LayoutConfig(
        top_frac=0.18,
        bottom_frac=0.1,
        gap_frac=0.04,
        side_margin_factor=0.5,
        spacing_scale=0.72,
        cell_frac=0.8,
        vertical_align=VerticalAlign.BOTTOM,
    ),
    captions=CaptionConfig(
        segments=(
            Segment("{day_of_year}d done", "#ffffff"),
            Segment("{days_left}d left", "#16a34a"),
            Segment("{percentage}%", "#888888"),
        ),
        separator_colors=("#ffffff", "#888888"),
        separator_margin=0.5,
        row_lift=None,
        tagline="one day at a time",
    ),
    timezone="Australia/Sydney",
)

SQUARES = VariantConfig(
    name="var-4",
    grid=GridKind.FLAT,
    palette=Palette(background="#ffffff", past="#111111", current="#1e6bff", future="#bfbfbf"),
    layout=LayoutConfig(
        top_frac=0.20,
        bottom_frac=0.1,
        gap_frac=0.04,
        side_margin_factor=0.5,
        spacing_scale=0.72,
        cell_frac=0.8,
        cell_shape=CellShape.SQUARE,
        vertical_align=VerticalAlign.BOTTOM,
    ),
    captions=CaptionConfig(
        style=CaptionStyle.PROGRESS_BAR,
        segments=(
            Segment("{day_of_year}d done", "#111111"),
            Segment("{total_days}d total", "#111111"),
        ),
        row_lift=None,
        tagline="vision is not a group project",
        tagline_color="#111111",
    ),
    timezone="Australia/Sydney",
)

VARIANTS: dict[str, VariantConfig] = {
    v.name: v for v in (DAYS, DAYS_CANVAS, MONTHS, SQUARES)
}


def get_variant(name: str) -> VariantConfig:
    if name not in VARIANTS:
        raise KeyError(f"Unknown variant '{name}'. Available: {list_variants()}")
    return VARIANTS[name]


def list_variants() -> list[str]:
    return sorted(VARIANTS)
