"""Progress grid layout: geometry, cell colors and the assembled render plan.

Everything here is pure. The only collaborator is the ``measure`` callable
used to centre caption text, supplied by the rasterizer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Iterator

from calendar_logic import (
    MONTH_ABBR,
    CalendarProgress,
    compute_progress,
    month_grid,
    month_lengths,
)
from captions import Caption, Measure, Shape, compose_captions
from variants import (
    CaptionConfig,
    CellShape,
    ColorToken,
    GridKind,
    LayoutConfig,
    Palette,
    VariantConfig,
    VerticalAlign,
)


@dataclass(frozen=True)
class GridSpec:
    columns: int
    rows: int
    extra_cells: int
    total_rows: int

    @classmethod
    def for_days(cls, total_days: int, columns: int, rows: int) -> GridSpec:
        extra = max(total_days - columns * rows, 0)
        return cls(columns=columns, rows=rows, extra_cells=extra,
                   total_rows=rows + (1 if extra > 0 else 0))


@dataclass(frozen=True)
class LayoutMetrics:
    top_padding: float
    bottom_text_space: float
    available_width: float
    available_height: float
    spacing_x: float
    spacing_y: float
    cell_size: float
    grid_width: float
    grid_height: float
    start_x: float
    start_y: float


@dataclass(frozen=True)
class MonthGridMetrics:
    columns: int
    rows: int
    top_padding: float
    bottom_text_space: float
    available_width: float
    available_height: float
    area_x: float
    area_y: float
    area_width: float
    area_height: float
    gap_x: float
    gap_y: float
    block_width: float
    block_height: float
    label_height: float
    label_gap: float
    spacing_x: float
    spacing_y: float
    cell_size: float


@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    day_number: int
    token: ColorToken
    x: float = 0.0
    y: float = 0.0
    size: float = 0.0


@dataclass(frozen=True)
class MonthBlock:
    name: str
    month: int
    cells: tuple[tuple[Cell | None, ...], ...]
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def days(self) -> Iterator[Cell]:
        for row in self.cells:
            for cell in row:
                if cell is not None:
                    yield cell


@dataclass(frozen=True)
class RenderPlan:
    variant: str
    width: int
    height: int
    palette: Palette
    cell_shape: CellShape
    progress: CalendarProgress
    grid: GridSpec | None
    metrics: LayoutMetrics | MonthGridMetrics
    cells: tuple[Cell, ...] = ()
    months: tuple[MonthBlock, ...] = ()
    captions: tuple[Caption, ...] = ()
    shapes: tuple[Shape, ...] = ()

    def all_cells(self) -> Iterator[Cell]:
        """Every day cell in calendar order, flat grid or month blocks alike."""
        yield from self.cells
        for block in self.months:
            yield from block.days()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ------------------------------------------------------------------
# Geometry
# ------------------------------------------------------------------
def _check_canvas(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"canvas must be positive, got {width}x{height}")


def footer_top(width: int, height: int, layout: LayoutConfig,
               stats: CaptionConfig | None = None) -> float:
    """Lower edge of the flexible region the grid is placed in.

    ``stats`` reserves room for captions stacked between grid and tagline.
    """
    footer = height * layout.bottom_frac * layout.footer_text_spaces + height * layout.gap_frac
    if stats is not None:
        footer += stats.stacked_height(layout.font_size(width))
    return height - footer


def _align(policy: VerticalAlign, top: float, bottom: float, extent: float) -> float:
    if policy is VerticalAlign.TOP:
        return top
    if policy is VerticalAlign.BOTTOM:
        return bottom - extent
    return top + (bottom - top - extent) / 2


def _available(width: int, height: int, layout: LayoutConfig) -> tuple[float, float, float, float]:
    top_padding = height * layout.top_frac
    bottom_text_space = height * layout.bottom_frac
    available_width = width - width * layout.side_margin_frac * layout.side_margin_factor
    available_height = height - top_padding - bottom_text_space - height * layout.gap_frac
    return top_padding, bottom_text_space, available_width, available_height


def resolve_grid(width: int, height: int, total_days: int, layout: LayoutConfig,
                 stats: CaptionConfig | None = None) -> tuple[GridSpec, LayoutMetrics]:
    """Pixel geometry of the flat day grid."""
    _check_canvas(width, height)
    grid = GridSpec.for_days(total_days, layout.columns, layout.rows)
    top_padding, bottom_text_space, available_width, available_height = _available(
        width, height, layout)

    # max(..., 1) keeps single-column / single-row grids finite
    spacing_x = available_width / max(grid.columns - 1, 1) * layout.spacing_scale
    spacing_y = available_height / max(grid.total_rows - 1, 1) * layout.spacing_scale
    cell_size = min(spacing_x, spacing_y) * layout.cell_frac

    grid_width = (grid.columns - 1) * spacing_x + cell_size
    grid_height = (grid.total_rows - 1) * spacing_y + cell_size
    start_x = (width - grid_width) / 2
    start_y = _align(layout.vertical_align, top_padding,
                     footer_top(width, height, layout, stats), grid_height)

    return grid, LayoutMetrics(
        top_padding=top_padding,
        bottom_text_space=bottom_text_space,
        available_width=available_width,
        available_height=available_height,
        spacing_x=spacing_x,
        spacing_y=spacing_y,
        cell_size=cell_size,
        grid_width=grid_width,
        grid_height=grid_height,
        start_x=start_x,
        start_y=start_y,
    )


def resolve_month_grid(width: int, height: int, layout: LayoutConfig,
                       stats: CaptionConfig | None = None) -> MonthGridMetrics:
    """Pixel geometry of the 12-month calendar grid."""
    _check_canvas(width, height)
    top_padding, bottom_text_space, available_width, available_height = _available(
        width, height, layout)

    area_width = available_width * layout.month_area_width_frac
    area_height = available_height * layout.month_area_height_frac
    gap_x = area_width * layout.month_gap_x_frac
    gap_y = area_height * layout.month_gap_y_frac
    block_width = (area_width - gap_x * (layout.month_columns - 1)) / layout.month_columns
    block_height = (area_height - gap_y * (layout.month_rows - 1)) / layout.month_rows

    label_height = block_height * layout.label_frac
    inner_height = block_height - label_height
    spacing_x = block_width / max(layout.inner_columns - 1, 1) * layout.spacing_scale
    spacing_y = inner_height / max(layout.inner_rows - 1, 1) * layout.spacing_scale

    return MonthGridMetrics(
        columns=layout.month_columns,
        rows=layout.month_rows,
        top_padding=top_padding,
        bottom_text_space=bottom_text_space,
        available_width=available_width,
        available_height=available_height,
        area_x=(width - area_width) / 2,
        area_y=_align(layout.vertical_align, top_padding,
                      footer_top(width, height, layout, stats), area_height),
        area_width=area_width,
        area_height=area_height,
        gap_x=gap_x,
        gap_y=gap_y,
        block_width=block_width,
        block_height=block_height,
        label_height=label_height,
        label_gap=inner_height * layout.label_gap_frac,
        spacing_x=spacing_x,
        spacing_y=spacing_y,
        cell_size=min(spacing_x, spacing_y) * layout.cell_frac,
    )


# ------------------------------------------------------------------
# Cells
# ------------------------------------------------------------------
def colorize(day_number: int, day_of_year: int) -> ColorToken:
    if day_number < day_of_year:
        return ColorToken.PAST
    if day_number == day_of_year:
        return ColorToken.CURRENT
    return ColorToken.FUTURE


def build_cells(grid: GridSpec, metrics: LayoutMetrics,
                total_days: int, day_of_year: int) -> list[Cell]:
    """One cell per day, row-major; the partial last row is left-packed."""
    cells: list[Cell] = []
    for i in range(total_days):
        row, col = divmod(i, grid.columns)
        if row >= grid.total_rows:
            break
        day = i + 1
        cells.append(Cell(
            row=row,
            col=col,
            day_number=day,
            token=colorize(day, day_of_year),
            x=metrics.start_x + col * metrics.spacing_x,
            y=metrics.start_y + row * metrics.spacing_y,
            size=metrics.cell_size,
        ))
    return cells


def assemble_months(total_days: int, day_of_year: int, year: int,
                    columns: int = 7, rows: int = 5) -> list[MonthBlock]:
    """Split the year into 12 month blocks of ``rows`` x ``columns`` slots."""
    lengths = month_lengths(year)
    if sum(lengths) != total_days:
        raise ValueError(f"{year} has {sum(lengths)} days, not {total_days}")

    blocks: list[MonthBlock] = []
    first = 1
    for month, n_days in enumerate(lengths, start=1):
        grid = month_grid(year, month, columns, rows)
        cells = tuple(
            tuple(
                None if d is None else Cell(
                    row=r, col=c,
                    day_number=first + d - 1,
                    token=colorize(first + d - 1, day_of_year),
                )
                for c, d in enumerate(row)
            )
            for r, row in enumerate(grid)
        )
        blocks.append(MonthBlock(name=MONTH_ABBR[month - 1], month=month, cells=cells))
        first += n_days
    return blocks


def place_months(blocks: list[MonthBlock], metrics: MonthGridMetrics) -> list[MonthBlock]:
    """Give each month block and its cells canvas coordinates."""
    placed: list[MonthBlock] = []
    for i, block in enumerate(blocks):
        block_row, block_col = divmod(i, metrics.columns)
        x = metrics.area_x + block_col * (metrics.block_width + metrics.gap_x)
        y = metrics.area_y + block_row * (metrics.block_height + metrics.gap_y)
        grid_y = y + metrics.label_height + metrics.label_gap
        cells = tuple(
            tuple(
                None if cell is None else replace(
                    cell,
                    x=x + cell.col * metrics.spacing_x,
                    y=grid_y + cell.row * metrics.spacing_y,
                    size=metrics.cell_size,
                )
                for cell in row
            )
            for row in block.cells
        )
        placed.append(replace(block, cells=cells, x=x, y=y,
                              width=metrics.block_width, height=metrics.block_height))
    return placed


def _month_labels(blocks: list[MonthBlock], metrics: MonthGridMetrics,
                  layout: LayoutConfig, width: int) -> list[Caption]:
    size = layout.font_size(width) * layout.label_scale
    return [
        Caption(text=block.name, x=block.x, y=block.y + metrics.label_height / 2,
                size=size, color=layout.label_color)
        for block in blocks
    ]


# ------------------------------------------------------------------
# Plan
# ------------------------------------------------------------------
def build_plan(variant: VariantConfig, width: int, height: int,
               progress: CalendarProgress, measure: Measure) -> RenderPlan:
    """Resolve the full render plan of ``variant`` for one canvas."""
    layout = variant.layout
    labels: list[Caption] = []
    if variant.grid is GridKind.MONTHS:
        metrics = resolve_month_grid(width, height, layout, variant.captions)
        blocks = assemble_months(progress.total_days, progress.day_of_year, progress.year,
                                 layout.inner_columns, layout.inner_rows)
        months = tuple(place_months(blocks, metrics))
        labels = _month_labels(list(months), metrics, layout, width)
        grid = None
        cells: tuple[Cell, ...] = ()
        grid_width = metrics.area_width
    else:
        grid, metrics = resolve_grid(width, height, progress.total_days, layout,
                                     variant.captions)
        cells = tuple(build_cells(grid, metrics, progress.total_days, progress.day_of_year))
        months = ()
        grid_width = metrics.grid_width

    captions, shapes = compose_captions(progress, variant, width, height,
                                        footer_top(width, height, layout, variant.captions),
                                        grid_width, measure)
    return RenderPlan(
        variant=variant.name,
        width=width,
        height=height,
        palette=variant.palette,
        cell_shape=layout.cell_shape,
        progress=progress,
        grid=grid,
        metrics=metrics,
        cells=cells,
        months=months,
        captions=tuple(labels + captions),
        shapes=tuple(shapes),
    )


def plan_for(variant: VariantConfig, width: int, height: int, measure: Measure,
             now: datetime | None = None, default_tz: str | None = None) -> RenderPlan:
    """Plan for the current day; the variant's pinned zone wins over ``default_tz``."""
    progress = compute_progress(now, variant.timezone or default_tz)
    return build_plan(variant, width, height, progress, measure)
