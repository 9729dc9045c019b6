"""Font lookup for the Pillow rasterizer, with fallbacks down to Pillow's own font."""

from __future__ import annotations

import logging

from PIL import ImageFont

from captions import FontStyle

log = logging.getLogger(__name__)

_REGULAR = (
    "Inter-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "DejaVuSans.ttf",
    "arial.ttf",
    "segoeui.ttf",
)

_ITALIC = (
    "Inter-Italic.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Oblique.ttf",
    "DejaVuSans-Oblique.ttf",
    "ariali.ttf",
    "segoeuii.ttf",
)


class FontLoader:
    """Loads and caches FreeType fonts per (style, pixel size)."""

    def __init__(self, regular: str | None = None, italic: str | None = None) -> None:
        self._candidates: dict[FontStyle, tuple[str, ...]] = {
            FontStyle.REGULAR: ((regular,) if regular else ()) + _REGULAR,
            # italic tries upright faces before the bitmap font
            FontStyle.ITALIC: ((italic,) if italic else ()) + _ITALIC + _REGULAR,
        }
        self._cache: dict[tuple[FontStyle, int], ImageFont.FreeTypeFont] = {}
        self._warned: set[FontStyle] = set()

    def get(self, size: float,
            style: FontStyle | str = FontStyle.REGULAR) -> ImageFont.FreeTypeFont:
        style = FontStyle(style)
        px = max(1, round(size))
        key = (style, px)
        font = self._cache.get(key)
        if font is None:
            font = self._load(style, px)
            self._cache[key] = font
        return font

    def _load(self, style: FontStyle, px: int) -> ImageFont.FreeTypeFont:
        for path in self._candidates[style]:
            try:
                return ImageFont.truetype(path, px)
            except OSError:
                continue
        if style not in self._warned:
            self._warned.add(style)
            log.warning("No %s TrueType font found, falling back to Pillow's default font",
                        style.value)
        return ImageFont.load_default(px)
