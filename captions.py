"""Caption text and decoration below the grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Callable

from calendar_logic import CalendarProgress, round_half_away
from variants import CaptionConfig, CaptionStyle, VariantConfig

class FontStyle(str, Enum):
    REGULAR = "regular"
    ITALIC = "italic"


class ShapeKind(str, Enum):
    ELLIPSE = "ellipse"
    ROUNDED_RECT = "rounded_rect"


# measure(text, font_size, style) -> rendered width in pixels
Measure = Callable[[str, float, FontStyle], float]


@dataclass(frozen=True)
class Caption:
    text: str
    x: float
    y: float
    size: float
    color: str
    style: FontStyle = FontStyle.REGULAR
    anchor: str = "lm"          # Pillow text anchor


@dataclass(frozen=True)
class Shape:
    kind: ShapeKind
    box: tuple[float, float, float, float]
    color: str
    radius: float = 0.0


def compose_captions(
    progress: CalendarProgress,
    variant: VariantConfig,
    width: int,
    height: int,
    footer_top: float,
    grid_width: float,
    measure: Measure,
) -> tuple[list[Caption], list[Shape]]:
    """Lay out the stats captions (and tagline) of a variant.

    ``footer_top`` is the lower edge of the flexible grid region and
    ``grid_width`` the drawn width of the grid; the progress bar is sized
    from it.
    """
    layout = variant.layout
    cfg = variant.captions
    font_size = layout.font_size(width)
    bottom_text_space = height * layout.bottom_frac

    if cfg.row_lift is None:
        stats_top = footer_top + height * layout.gap_frac
    else:
        stats_top = height - bottom_text_space * cfg.row_lift - font_size * cfg.line_height / 2

    if cfg.style is CaptionStyle.PROGRESS_BAR:
        bar_fill = cfg.bar_fill or variant.palette.current
        captions, shapes = _progress_bar(progress, cfg, width, stats_top,
                                         font_size, grid_width, bar_fill)
    else:
        row_y = stats_top + font_size * cfg.line_height / 2
        captions, shapes = _inline_row(progress, cfg, width, row_y, font_size, measure)

    if cfg.tagline:
        captions.append(Caption(
            text=cfg.tagline,
            x=width / 2,
            y=height - bottom_text_space + font_size * cfg.tagline_pad,
            size=font_size * cfg.tagline_scale,
            color=cfg.tagline_color,
            style=FontStyle.ITALIC,
            anchor="mt",
        ))
    return captions, shapes


def _inline_row(
    progress: CalendarProgress,
    cfg: CaptionConfig,
    width: int,
    row_y: float,
    font_size: int,
    measure: Measure,
) -> tuple[list[Caption], list[Shape]]:
    """Segments side by side, bullets between them, centred as one block."""
    texts = [seg.format(progress) for seg in cfg.segments]
    widths = [measure(text, font_size, FontStyle.REGULAR) for text in texts]
    bullet = font_size * cfg.separator_scale
    margin = font_size * cfg.separator_margin
    n_sep = len(cfg.separator_colors)

    total = sum(widths) + n_sep * (bullet + 2 * margin)
    x = (width - total) / 2

    captions: list[Caption] = []
    shapes: list[Shape] = []
    for i, (seg, text, w) in enumerate(zip(cfg.segments, texts, widths)):
        captions.append(Caption(text=text, x=x, y=row_y, size=font_size, color=seg.color))
        x += w
        if i < n_sep:
            x += margin
            shapes.append(Shape(
                kind=ShapeKind.ELLIPSE,
                box=(x, row_y - bullet / 2, x + bullet, row_y + bullet / 2),
                color=cfg.separator_colors[i],
            ))
            x += bullet + margin
    return captions, shapes


def _progress_bar(
    progress: CalendarProgress,
    cfg: CaptionConfig,
    width: int,
    stats_top: float,
    font_size: int,
    grid_width: float,
    bar_fill: str,
) -> tuple[list[Caption], list[Shape]]:
    """Done/total labels over a rounded bar half as wide as the grid."""
    bar_width = math.floor(grid_width * 0.5)
    bar_height = cfg.bar_height(font_size)
    fill_width = round_half_away(Fraction(bar_width * progress.percentage, 100))

    label_size = font_size * cfg.bar_label_scale
    label_line = label_size * cfg.line_height
    top = stats_top - font_size * cfg.bar_lift
    x0 = (width - bar_width) / 2
    y0 = top + label_line + font_size * cfg.bar_gap

    left, right = cfg.segments[0], cfg.segments[-1]
    captions = [
        Caption(text=left.format(progress), x=x0, y=top + label_line / 2,
                size=label_size, color=left.color, anchor="lm"),
        Caption(text=right.format(progress), x=x0 + bar_width, y=top + label_line / 2,
                size=label_size, color=right.color, anchor="rm"),
    ]
    shapes = [Shape(kind=ShapeKind.ROUNDED_RECT, box=(x0, y0, x0 + bar_width, y0 + bar_height),
                    color=cfg.bar_track, radius=bar_height / 2)]
    if fill_width > 0:
        shapes.append(Shape(kind=ShapeKind.ROUNDED_RECT,
                            box=(x0, y0, x0 + fill_width, y0 + bar_height),
                            color=bar_fill, radius=bar_height / 2))
    return captions, shapes
