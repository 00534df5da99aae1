"""
tagcloud - mask-aware tag cloud layout.

Tags are packed heaviest first onto a bit-packed occupancy grid, each at
the free position nearest the centre of the surface, optionally inside a
silhouette.
"""

__version__ = "0.1.0"

from tagcloud.errors import (
    ConfigurationError,
    NotReadyError,
    SilhouetteDecodeError,
    TagCloudError,
)
from tagcloud.layout.engine import TagCloud
from tagcloud.options import BoundaryPolicy, CloudOptions
from tagcloud.parser.model import TagRequest, TagResult

__all__ = [
    "BoundaryPolicy",
    "CloudOptions",
    "ConfigurationError",
    "NotReadyError",
    "SilhouetteDecodeError",
    "TagCloud",
    "TagCloudError",
    "TagRequest",
    "TagResult",
]
