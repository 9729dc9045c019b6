"""Rasterize a RenderPlan into a PNG (Pillow, in-memory)."""

from __future__ import annotations

from io import BytesIO
from typing import Protocol

from PIL import Image, ImageDraw

from captions import FontStyle, ShapeKind
from fonts import FontLoader
from layout import RenderPlan
from variants import CellShape


class Rasterizer(Protocol):
    def measure(self, text: str, size: float, style: FontStyle) -> float: ...
    def render(self, plan: RenderPlan) -> bytes: ...


class PillowRasterizer:
    """Draws plans with ImageDraw; text widths come from the same fonts."""

    def __init__(self, fonts: FontLoader | None = None) -> None:
        self.fonts = fonts or FontLoader()

    def measure(self, text: str, size: float,
                style: FontStyle = FontStyle.REGULAR) -> float:
        return self.fonts.get(size, style).getlength(text)

    def create_image(self, plan: RenderPlan) -> Image.Image:
        """Return the RGB image for ``plan``."""
        img = Image.new("RGB", (plan.width, plan.height), plan.palette.background)
        draw = ImageDraw.Draw(img)

        for cell in plan.all_cells():
            box = (cell.x, cell.y, cell.x + cell.size, cell.y + cell.size)
            fill = plan.palette.color_for(cell.token)
            if plan.cell_shape is CellShape.SQUARE:
                draw.rectangle(box, fill=fill)
            else:
                draw.ellipse(box, fill=fill)

        for shape in plan.shapes:
            if shape.kind is ShapeKind.ELLIPSE:
                draw.ellipse(shape.box, fill=shape.color)
            else:
                draw.rounded_rectangle(shape.box, radius=shape.radius, fill=shape.color)

        for caption in plan.captions:
            font = self.fonts.get(caption.size, caption.style)
            draw.text((caption.x, caption.y), caption.text, fill=caption.color,
                      font=font, anchor=caption.anchor)

        return img

    def render(self, plan: RenderPlan) -> bytes:
        buf = BytesIO()
        self.create_image(plan).save(buf, format="PNG")
        return buf.getvalue()
