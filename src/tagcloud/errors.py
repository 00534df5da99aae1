"""Exception types raised by the tag cloud engine."""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "NotReadyError",
    "SilhouetteDecodeError",
    "TagCloudError",
    "TagParseError",
]


class TagCloudError(Exception):
    """Base class for every error raised by tagcloud."""


class ConfigurationError(TagCloudError, ValueError):
    """Options were rejected; nothing was applied."""


class NotReadyError(TagCloudError, RuntimeError):
    """draw() was called before the silhouette mask was seeded."""


class SilhouetteDecodeError(TagCloudError):
    """The silhouette image could not be decoded."""


class TagParseError(TagCloudError, ValueError):
    """A line of a tag list could not be parsed."""

    def __init__(self, message: str, line_no: int) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no
