"""Tag-list parsing and the shared data model."""

from tagcloud.parser.model import BatchState, RasterBuffer, TagRequest, TagResult
from tagcloud.parser.tags import parse_tags

__all__ = [
    "BatchState",
    "RasterBuffer",
    "TagRequest",
    "TagResult",
    "parse_tags",
]
