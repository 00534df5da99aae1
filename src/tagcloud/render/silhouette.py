"""Silhouette image decoding."""

from __future__ import annotations

__all__ = ["decode_silhouette", "decode_silhouette_async"]

import asyncio
import io
import logging
from pathlib import Path

from PIL import Image

from tagcloud.errors import SilhouetteDecodeError
from tagcloud.parser.model import RasterBuffer
from tagcloud.render.raster import buffer_from_image

logger = logging.getLogger(__name__)


def decode_silhouette(
    source: str | Path | bytes, width: int, height: int
) -> RasterBuffer:
    """Decode *source* and scale it to the surface size.

    *source* is a file path or the encoded image bytes.
    """
    if isinstance(source, bytes):
        fp, label = io.BytesIO(source), "<bytes>"
    else:
        fp, label = source, str(source)
    try:
        with Image.open(fp) as image:
            image.load()
            scaled = image.convert("RGBA").resize((width, height))
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise SilhouetteDecodeError(f"cannot decode silhouette {label}: {exc}") from exc
    logger.debug("Decoded silhouette %s to %dx%d", label, width, height)
    return buffer_from_image(scaled)


async def decode_silhouette_async(
    source: str | Path | bytes, width: int, height: int
) -> RasterBuffer:
    """Decode in a worker thread so the caller's event loop keeps running."""
    return await asyncio.to_thread(decode_silhouette, source, width, height)
