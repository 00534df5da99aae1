"""Engine options with eager validation.

Every option has a default in :mod:`tagcloud.layout.constants`.  A
``CloudOptions`` instance is always valid: construction and
:meth:`CloudOptions.replace` either return a fully checked object or raise
:class:`~tagcloud.errors.ConfigurationError`.
"""

from __future__ import annotations

__all__ = ["BoundaryPolicy", "CloudOptions", "option_names"]

import dataclasses
import math
import warnings
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from tagcloud.errors import ConfigurationError
from tagcloud.layout.constants import (
    ANGLE_COUNT,
    ANGLE_FROM,
    ANGLE_TO,
    BOUNDARY_POLICY,
    CELL_SIZE,
    FONT_FAMILY,
    HEIGHT,
    LUMINANCE_THRESHOLD,
    MAX_FONT_SIZE,
    MAX_LUMINANCE,
    MIN_FONT_SIZE,
    OPACITY_THRESHOLD,
    PADDING,
    WIDTH,
)


class BoundaryPolicy(Enum):
    """How grid accesses beyond the surface behave."""

    CUT = "cut"  # off-grid reads free, writes dropped
    BOUNDED = "bounded"  # off-grid reads occupied


@dataclass
class CloudOptions:
    width: int = WIDTH
    height: int = HEIGHT
    mask_source: str | Path | bytes | None = None
    cell_size: int = CELL_SIZE
    opacity_threshold: int = OPACITY_THRESHOLD
    luminance_threshold: int = LUMINANCE_THRESHOLD
    min_font_size: int = MIN_FONT_SIZE
    max_font_size: int = MAX_FONT_SIZE
    angle_from: float = ANGLE_FROM
    angle_to: float = ANGLE_TO
    angle_count: int = ANGLE_COUNT
    font_family: str = FONT_FAMILY
    boundary_policy: BoundaryPolicy = BoundaryPolicy(BOUNDARY_POLICY)
    padding: int = PADDING

    def __post_init__(self) -> None:
        if not isinstance(self.boundary_policy, BoundaryPolicy):
            try:
                self.boundary_policy = BoundaryPolicy(self.boundary_policy)
            except ValueError:
                raise ConfigurationError(
                    f"boundary_policy must be 'cut' or 'bounded', "
                    f"got {self.boundary_policy!r}"
                ) from None

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"surface must be positive, got {self.width}x{self.height}"
            )
        if self.cell_size <= 0:
            raise ConfigurationError(f"cell_size must be positive, got {self.cell_size}")
        rounded = max(1, math.floor(self.cell_size + 0.5))
        if rounded != self.cell_size:
            warnings.warn(
                f"cell_size {self.cell_size} rounded to {rounded}",
                stacklevel=3,
            )
        self.cell_size = int(rounded)

        if not 0 <= self.opacity_threshold <= 255:
            raise ConfigurationError(
                f"opacity_threshold must be within 0-255, got {self.opacity_threshold}"
            )
        if not 0 <= self.luminance_threshold <= MAX_LUMINANCE:
            raise ConfigurationError(
                f"luminance_threshold must be within 0-{MAX_LUMINANCE}, "
                f"got {self.luminance_threshold}"
            )
        if self.min_font_size <= 0:
            raise ConfigurationError(
                f"min_font_size must be positive, got {self.min_font_size}"
            )
        if self.min_font_size > self.max_font_size:
            raise ConfigurationError(
                f"min_font_size ({self.min_font_size}) exceeds "
                f"max_font_size ({self.max_font_size})"
            )
        if self.angle_count < 1:
            raise ConfigurationError(
                f"angle_count must be at least 1, got {self.angle_count}"
            )
        if self.padding < 0:
            raise ConfigurationError(f"padding must not be negative, got {self.padding}")
        if not self.font_family:
            raise ConfigurationError("font_family must not be empty")

    def replace(self, **changes) -> CloudOptions:
        """Return a validated copy with *changes* applied."""
        unknown = set(changes) - set(option_names())
        if unknown:
            raise ConfigurationError(f"unknown option(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)


def option_names() -> list[str]:
    """Names accepted by :meth:`CloudOptions.replace`."""
    return [f.name for f in dataclasses.fields(CloudOptions)]
