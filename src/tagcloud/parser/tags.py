"""Parser for plain-text tag lists.

One tag per line::

    # text | weight [| angle] [| color]
    python | 120
    numpy  | 80 | 90
    pillow | 40 |    | #ca6702

Blank lines and lines starting with ``#`` are ignored.  Empty angle or
colour fields leave the value unspecified.
"""

from __future__ import annotations

__all__ = ["parse_tags"]

from tagcloud.errors import TagParseError
from tagcloud.parser.model import TagRequest


def _parse_number(field: str, what: str, line_no: int) -> float:
    try:
        return float(field)
    except ValueError:
        raise TagParseError(f"{what} {field!r} is not a number", line_no) from None


def parse_tags(text: str) -> list[TagRequest]:
    """Parse a tag list into requests, in file order."""
    tags: list[TagRequest] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        fields = [f.strip() for f in line.split("|")]
        if len(fields) < 2 or len(fields) > 4:
            raise TagParseError(
                f"expected 'text | weight [| angle] [| color]', got {line!r}",
                line_no,
            )
        label = fields[0]
        if not label:
            raise TagParseError("tag text is empty", line_no)

        weight = _parse_number(fields[1], "weight", line_no)
        angle = None
        if len(fields) > 2 and fields[2]:
            angle = _parse_number(fields[2], "angle", line_no)
        color = fields[3] if len(fields) > 3 and fields[3] else None

        tags.append(TagRequest(text=label, weight=weight, angle=angle, color=color))
    return tags
