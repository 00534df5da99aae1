"""Reduce RGBA raster buffers to packed cell masks."""

from __future__ import annotations

__all__ = ["extract_mask", "ink_pixels"]

import math

import numpy as np

from tagcloud.layout.grid import LocalMask
from tagcloud.parser.model import RasterBuffer


def ink_pixels(
    buffer: RasterBuffer, opacity_threshold: int, luminance_threshold: int
) -> np.ndarray:
    """Boolean (height, width) array of pixels that are opaque and dark enough."""
    data = buffer.data
    opaque = data[..., 3] >= opacity_threshold
    dark = data[..., :3].sum(axis=-1, dtype=np.int32) <= luminance_threshold
    return opaque & dark


def extract_mask(
    buffer: RasterBuffer,
    cell_size: int,
    opacity_threshold: int,
    luminance_threshold: int,
    invert: bool = False,
) -> LocalMask:
    """Down-sample *buffer* into a :class:`LocalMask`.

    A cell is ink as soon as one of its pixels qualifies.  Cells on the
    right and bottom edges cover fewer than ``cell_size`` pixels when the
    buffer size is not a multiple of it; only their real pixels count.
    With *invert*, the non-ink cells are the ones set.
    """
    ink = ink_pixels(buffer, opacity_threshold, luminance_threshold)
    n_rows = math.ceil(buffer.height / cell_size)
    n_cols = math.ceil(buffer.width / cell_size)

    padded = np.zeros((n_rows * cell_size, n_cols * cell_size), dtype=bool)
    padded[: buffer.height, : buffer.width] = ink
    cells = padded.reshape(n_rows, cell_size, n_cols, cell_size).any(axis=(1, 3))
    if invert:
        cells = ~cells

    return LocalMask.from_cells(cells, buffer.width, buffer.height, cell_size)
