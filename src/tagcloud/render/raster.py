"""Glyph rasterization with Pillow.

The engine only needs an RGBA buffer tightly bounding the rotated,
padded glyphs; :class:`TextRasterizer` is the seam, and
:class:`PillowTextRasterizer` the default implementation.
"""

from __future__ import annotations

__all__ = [
    "PillowTextRasterizer",
    "TextRasterizer",
    "buffer_from_image",
    "load_font",
]

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from tagcloud.parser.model import RasterBuffer

logger = logging.getLogger(__name__)

# Generic CSS family -> font file names Pillow can resolve from system dirs
_GENERIC_FAMILIES = {
    "sans-serif": ("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf"),
    "serif": ("DejaVuSerif.ttf", "LiberationSerif-Regular.ttf", "Times New Roman.ttf"),
    "monospace": ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf", "Courier New.ttf"),
}

_SYSTEM_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/Library/Fonts/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


class TextRasterizer(Protocol):
    def rasterize(
        self,
        text: str,
        font_family: str,
        font_size: int,
        angle: float,
        padding: int,
    ) -> RasterBuffer: ...


def buffer_from_image(
    image: Image.Image, anchor: tuple[float, float] | None = None
) -> RasterBuffer:
    """Wrap a Pillow image as an RGBA :class:`RasterBuffer`."""
    rgba = image.convert("RGBA")
    return RasterBuffer(
        rgba.width, rgba.height, np.asarray(rgba, dtype=np.uint8), anchor
    )


def _font_candidates(family: str) -> list[str]:
    candidates = []
    if Path(family).suffix.lower() in (".ttf", ".otf", ".ttc"):
        candidates.append(family)
    candidates.extend(_GENERIC_FAMILIES.get(family.lower(), (family, f"{family}.ttf")))
    candidates.extend(_SYSTEM_FONT_CANDIDATES)
    return candidates


@lru_cache(maxsize=256)
def load_font(family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Resolve *family* to a font at *size* px.

    Tries a file path, then the generic-family table, then common system
    fonts, and finally Pillow's bundled default font.
    """
    for candidate in _font_candidates(family):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.warning("No font found for %r, using Pillow's default font", family)
    return ImageFont.load_default(size=size)


class PillowTextRasterizer:
    """Draws filled, stroked and rotated glyphs on a transparent canvas.

    The stroke is *padding* px wide in total, so neighbouring tags keep
    roughly *padding* / 2 px of clearance each.  Positive angles rotate
    counter-clockwise; the canvas expands to the rotated bounding box.
    FreeType glyphs are laid out from their baseline origin, which is
    reported as the buffer's ``anchor`` so a painter can put the text
    over its mask.
    """

    fill = (0, 0, 0, 255)

    def rasterize(
        self,
        text: str,
        font_family: str,
        font_size: int,
        angle: float,
        padding: int,
    ) -> RasterBuffer:
        font = load_font(font_family, font_size)
        # bitmap fonts have no anchor support
        baseline = isinstance(font, ImageFont.FreeTypeFont)
        layout = {"anchor": "ls"} if baseline else {}
        left, top, right, bottom = font.getbbox(text, **layout)
        stroke = math.ceil(padding / 2)
        width = max(right - left + 2 * stroke, 1)
        height = max(bottom - top + 2 * stroke, 1)

        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(canvas)
        draw.text(
            (stroke - left, stroke - top),
            text,
            font=font,
            fill=self.fill,
            stroke_width=stroke,
            stroke_fill=self.fill,
            **layout,
        )
        anchor = None
        if baseline:
            anchor = (stroke - left - width / 2, stroke - top - height / 2)
        if angle % 360:
            canvas = canvas.rotate(angle, resample=Image.Resampling.BICUBIC, expand=True)
        return buffer_from_image(canvas, anchor)
