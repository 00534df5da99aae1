"""Data model for tag requests, layout results and raster buffers."""

from __future__ import annotations

__all__ = ["BatchState", "RasterBuffer", "TagRequest", "TagResult"]

from dataclasses import dataclass

import numpy as np


@dataclass
class TagRequest:
    """A tag to lay out."""

    text: str
    weight: float
    angle: float | None = None
    color: str | None = None

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("tag text must be non-empty")


@dataclass
class TagResult:
    """Outcome of laying out one tag.

    ``position`` is the top-left device coordinate of the tag's mask
    bounding box, or None when the tag could not be placed.  ``anchor``
    is the text baseline origin relative to the box centre, before
    rotation, when the rasterizer reports one.
    """

    text: str
    weight: float
    font_size: int
    angle: float
    position: tuple[int, int] | None = None
    width: int = 0
    height: int = 0
    color: str | None = None
    anchor: tuple[float, float] | None = None

    @property
    def placed(self) -> bool:
        return self.position is not None

    @property
    def x(self) -> int:
        return self.position[0] if self.position is not None else -1

    @property
    def y(self) -> int:
        return self.position[1] if self.position is not None else -1

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class BatchState:
    """Weight bounds of the batch currently being drawn."""

    min_weight: float
    max_weight: float

    @property
    def uniform(self) -> bool:
        return self.max_weight == self.min_weight


@dataclass
class RasterBuffer:
    """An RGBA pixel buffer: ``data`` has shape (height, width, 4), uint8.

    Text rasterizers may set ``anchor``: the baseline origin of the drawn
    text relative to the centre of the unrotated glyph canvas.  Rotation
    keeps the canvas centre fixed, so the offset still applies about the
    centre of the rotated buffer.
    """

    width: int
    height: int
    data: np.ndarray
    anchor: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=np.uint8)
        if self.data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"buffer shape {self.data.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )

    @classmethod
    def blank(cls, width: int, height: int) -> RasterBuffer:
        """Fully transparent buffer."""
        return cls(width, height, np.zeros((height, width, 4), dtype=np.uint8))
