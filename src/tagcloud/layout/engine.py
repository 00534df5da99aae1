"""Layout coordinator: owns the base grid and drives batches of tags.

Construction is two-phase when a silhouette is configured: the engine is
built synchronously, then :meth:`TagCloud.prepare` (or
:meth:`TagCloud.aprepare`) decodes the image and seeds the grid.  Until
then :meth:`TagCloud.draw` raises :class:`~tagcloud.errors.NotReadyError`.
"""

from __future__ import annotations

__all__ = ["LayoutSession", "ShapePainter", "TagCloud"]

import logging
import random
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from PIL import Image, ImageDraw

from tagcloud.errors import NotReadyError
from tagcloud.layout.constants import (
    GLYPH_LUMINANCE_THRESHOLD,
    GLYPH_OPACITY_THRESHOLD,
    SHAPE_LUMINANCE_THRESHOLD,
    SHAPE_OPACITY_THRESHOLD,
)
from tagcloud.layout.grid import LocalMask, OccupancyGrid
from tagcloud.layout.mask import extract_mask
from tagcloud.layout.scheduler import (
    font_size_for,
    order_tags,
    resolve_angle,
    weight_bounds,
)
from tagcloud.layout.search import find_position
from tagcloud.options import CloudOptions
from tagcloud.parser.model import BatchState, RasterBuffer, TagRequest, TagResult
from tagcloud.render.raster import PillowTextRasterizer, TextRasterizer, buffer_from_image
from tagcloud.render.silhouette import decode_silhouette, decode_silhouette_async

logger = logging.getLogger(__name__)

ShapePainter = Callable[[ImageDraw.ImageDraw], None]


@dataclass
class LayoutSession:
    """Mutable state of one batch: the grid being filled and what went in."""

    grid: OccupancyGrid
    batch: BatchState | None = None
    masks: dict[int, LocalMask] = field(default_factory=dict)


class TagCloud:
    """Tag cloud layout engine.

    Args:
        options: Starting options; keyword *overrides* are applied on top.
        rasterizer: Text rasterizer; defaults to Pillow.
        rng: Random source for angles and search directions.
    """

    def __init__(
        self,
        options: CloudOptions | None = None,
        *,
        rasterizer: TextRasterizer | None = None,
        rng: random.Random | None = None,
        **overrides,
    ) -> None:
        options = options or CloudOptions()
        self.options = options.replace(**overrides) if overrides else options
        self.rasterizer = rasterizer or PillowTextRasterizer()
        self.rng = rng or random.Random()
        self._session: LayoutSession | None = None
        self._reset_base()

    # ------------------------------------------------------------------
    # Configuration and seeding
    # ------------------------------------------------------------------

    def configure(self, **options) -> None:
        """Apply option changes atomically.

        Invalid options raise before anything changes.  The base grid is
        rebuilt, so a configured silhouette must be prepared again and a
        custom shape set again.
        """
        self.options = self.options.replace(**options)
        self._reset_base()

    def _reset_base(self) -> None:
        opts = self.options
        self._session = None
        if opts.mask_source is None:
            self._base: OccupancyGrid | None = OccupancyGrid.blank(
                opts.width, opts.height, opts.cell_size, False, opts.boundary_policy
            )
        else:
            self._base = None

    @property
    def ready(self) -> bool:
        return self._base is not None

    @property
    def session(self) -> LayoutSession | None:
        """Session of the most recent batch."""
        return self._session

    def seed(self, silhouette: RasterBuffer) -> None:
        """Seed the base grid from a decoded silhouette buffer.

        Ink in the silhouette (per the configured opacity and luminance
        thresholds) is the only area tags may occupy.
        """
        opts = self.options
        mask = extract_mask(
            silhouette,
            opts.cell_size,
            opts.opacity_threshold,
            opts.luminance_threshold,
        )
        self._seed_inside(mask)

    def _seed_inside(self, mask: LocalMask) -> None:
        opts = self.options
        grid = OccupancyGrid.blank(
            opts.width, opts.height, opts.cell_size, True, opts.boundary_policy
        )
        grid.seed_from_mask(mask, invert=True)
        self._base = grid
        self._session = None

    def prepare(self) -> None:
        """Decode the configured silhouette and seed the grid (blocking)."""
        opts = self.options
        if opts.mask_source is None or self.ready:
            return
        self.seed(decode_silhouette(opts.mask_source, opts.width, opts.height))

    async def aprepare(self) -> None:
        """Awaitable :meth:`prepare`; decoding runs in a worker thread."""
        opts = self.options
        if opts.mask_source is None or self.ready:
            return
        buffer = await decode_silhouette_async(opts.mask_source, opts.width, opts.height)
        self.seed(buffer)

    def set_shape(self, paint: ShapePainter) -> None:
        """Replace any silhouette with a shape drawn by *paint*.

        *paint* receives a drawing context over a transparent canvas of
        the surface size; whatever it paints becomes the placeable area.
        """
        opts = self.options
        canvas = Image.new("RGBA", (opts.width, opts.height), (0, 0, 0, 0))
        paint(ImageDraw.Draw(canvas))
        mask = extract_mask(
            buffer_from_image(canvas),
            opts.cell_size,
            SHAPE_OPACITY_THRESHOLD,
            SHAPE_LUMINANCE_THRESHOLD,
        )
        self.options = opts.replace(mask_source=None)
        self._seed_inside(mask)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def new_session(self) -> LayoutSession:
        if self._base is None:
            raise NotReadyError(
                "silhouette not seeded yet; call prepare() or aprepare() first"
            )
        return LayoutSession(grid=self._base.copy())

    def draw(
        self, tags: Sequence[TagRequest], incremental: bool = False
    ) -> list[TagResult]:
        """Lay out *tags*, heaviest first.

        Results come back in input order.  With *incremental*, the batch
        continues on the grid left by the previous one instead of a fresh
        copy of the base grid.
        """
        if incremental and self._session is not None:
            session = self._session
            session.masks = {}
        else:
            session = self.new_session()
        self._session = session
        if not tags:
            return []

        started = time.perf_counter()
        session.batch = weight_bounds(tags)
        results: list[TagResult | None] = [None] * len(tags)
        for index in order_tags(tags):
            results[index] = self._place_tag(session, index, tags[index])

        placed = sum(1 for r in results if r.placed)
        logger.debug(
            "Placed %d of %d tags in %.1f ms",
            placed,
            len(tags),
            (time.perf_counter() - started) * 1000,
        )
        return results

    def _place_tag(
        self, session: LayoutSession, index: int, tag: TagRequest
    ) -> TagResult:
        opts = self.options
        font_size = font_size_for(
            tag.weight, session.batch, opts.min_font_size, opts.max_font_size
        )
        angle = resolve_angle(
            tag, opts.angle_from, opts.angle_to, opts.angle_count, self.rng
        )
        result = TagResult(
            text=tag.text,
            weight=tag.weight,
            font_size=font_size,
            angle=angle,
            color=tag.color,
        )

        buffer = self.rasterizer.rasterize(
            tag.text, opts.font_family, font_size, angle, opts.padding
        )
        result.width, result.height = buffer.width, buffer.height
        result.anchor = buffer.anchor
        if buffer.width > opts.width or buffer.height > opts.height:
            logger.debug(
                "Tag %r at %dpx is %dx%d, larger than the surface",
                tag.text,
                font_size,
                buffer.width,
                buffer.height,
            )
            return result

        mask = extract_mask(
            buffer, opts.cell_size, GLYPH_OPACITY_THRESHOLD, GLYPH_LUMINANCE_THRESHOLD
        )
        result.position = find_position(session.grid, mask, self.rng)
        if result.position is None:
            logger.debug("No free position for %r at %dpx", tag.text, font_size)
        else:
            session.masks[index] = mask
            logger.debug("Placed %r at %s", tag.text, result.position)
        return result
