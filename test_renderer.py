from dataclasses import replace
from datetime import date
from io import BytesIO

import pytest
from PIL import Image

from calendar_logic import progress_for_date
from captions import FontStyle, Shape, ShapeKind
from fonts import FontLoader
from layout import build_plan
from renderer import PillowRasterizer
from variants import DAYS, DAYS_CANVAS, MONTHS, SQUARES, ColorToken

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(scope="module")
def rasterizer():
    return PillowRasterizer()


def _hex(color):
    color = color.lstrip("#")
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


def _centre(cell):
    return int(cell.x + cell.size / 2), int(cell.y + cell.size / 2)


def _plan(variant, rasterizer, d=date(2024, 4, 9), size=(585, 1266)):
    return build_plan(variant, size[0], size[1], progress_for_date(d), rasterizer.measure)


def test_render_returns_png_of_requested_size(rasterizer):
    data = rasterizer.render(_plan(DAYS, rasterizer))
    assert data[:8] == PNG_MAGIC
    img = Image.open(BytesIO(data))
    assert img.size == (585, 1266)
    assert img.format == "PNG"


@pytest.mark.parametrize("variant", [DAYS, DAYS_CANVAS, MONTHS, SQUARES])
def test_cells_are_painted_in_palette_colors(rasterizer, variant):
    plan = _plan(variant, rasterizer)
    img = rasterizer.create_image(plan)
    cells = list(plan.all_cells())
    current = next(c for c in cells if c.token is ColorToken.CURRENT)
    past = next(c for c in cells if c.token is ColorToken.PAST)
    future = next(c for c in cells if c.token is ColorToken.FUTURE)

    assert img.getpixel(_centre(current)) == _hex(variant.palette.current)
    assert img.getpixel(_centre(past)) == _hex(variant.palette.past)
    assert img.getpixel(_centre(future)) == _hex(variant.palette.future)
    assert img.getpixel((0, 0)) == _hex(variant.palette.background)


def test_progress_bar_fill_is_drawn(rasterizer):
    plan = _plan(SQUARES, rasterizer)
    img = rasterizer.create_image(plan)
    track, fill = plan.shapes
    y = int((fill.box[1] + fill.box[3]) / 2)
    assert img.getpixel((int(fill.box[0] + fill.radius + 2), y)) == _hex("#1e6bff")
    assert img.getpixel((int(track.box[2] - track.radius - 2), y)) == _hex("#333333")


def test_shape_kinds_are_enumerated(rasterizer):
    with pytest.raises(ValueError):
        ShapeKind("triangle")
    plan = replace(_plan(DAYS, rasterizer),
                   shapes=(Shape(ShapeKind.ROUNDED_RECT, (10, 10, 60, 30), "#ff0000", radius=10),))
    img = rasterizer.create_image(plan)
    assert img.getpixel((35, 20)) == (255, 0, 0)
    assert {s.kind for s in _plan(DAYS, rasterizer).shapes} == {ShapeKind.ELLIPSE}


def test_measure_grows_with_text(rasterizer):
    short = rasterizer.measure("1d", 36, "regular")
    long = rasterizer.measure("100d done", 36, "regular")
    assert 0 < short < long
    assert rasterizer.measure("100d done", 72, "regular") > long


def test_font_loader_caches_and_falls_back():
    fonts = FontLoader(regular="/nonexistent/font.ttf", italic="/nonexistent/italic.ttf")
    assert fonts.get(20) is fonts.get(20.2)
    assert fonts.get(20, "italic") is fonts.get(20, FontStyle.ITALIC)
    assert fonts.get(20, FontStyle.REGULAR) is fonts.get(20)
    assert fonts.get(0.1) is fonts.get(1)
