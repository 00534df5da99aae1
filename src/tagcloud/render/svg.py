"""SVG painter for laid-out tags."""

from __future__ import annotations

__all__ = ["render_svg"]

import random
from collections.abc import Sequence

import drawsvg as draw

from tagcloud.options import CloudOptions
from tagcloud.parser.model import TagResult
from tagcloud.render.style import Theme
from tagcloud.themes import RANDOM_THEME


def render_svg(
    results: Sequence[TagResult],
    options: CloudOptions,
    theme: Theme = RANDOM_THEME,
    rng: random.Random | None = None,
) -> str:
    """Paint every placed tag over its mask box.

    Text starts at the baseline origin the rasterizer measured when the
    result carries one, and is centred on the box otherwise.  Unplaced
    results are skipped.  Tags without a colour of their own get
    one from *theme*.
    """
    rng = rng or random.Random()
    d = draw.Drawing(options.width, options.height)

    if theme.background_color != "none":
        d.append(
            draw.Rectangle(
                0, 0, options.width, options.height, fill=theme.background_color
            )
        )

    for result in results:
        if not result.placed:
            continue
        cx, cy = result.center
        if result.anchor is not None:
            # baseline origin measured by the rasterizer
            dx, dy = result.anchor
            position = {"x": cx + dx, "y": cy + dy}
        else:
            position = {
                "x": cx,
                "y": cy,
                "text_anchor": "middle",
                "dominant_baseline": "central",
            }
        d.append(
            draw.Text(
                result.text,
                result.font_size,
                fill=result.color or theme.color_for(rng),
                font_family=options.font_family,
                font_weight=theme.font_weight,
                # SVG rotates clockwise; tag angles are counter-clockwise
                transform=f"rotate({-result.angle:g} {cx:g} {cy:g})",
                **position,
            )
        )

    return d.as_svg()
