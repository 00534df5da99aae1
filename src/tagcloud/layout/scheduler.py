"""Tag ordering, font sizing and rotation."""

from __future__ import annotations

__all__ = [
    "font_size_for",
    "order_tags",
    "resolve_angle",
    "round_half_up",
    "weight_bounds",
]

import math
import random
from collections.abc import Sequence

from tagcloud.parser.model import BatchState, TagRequest


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def order_tags(tags: Sequence[TagRequest]) -> list[int]:
    """Indices of *tags* by descending weight; ties keep input order."""
    return sorted(range(len(tags)), key=lambda i: -tags[i].weight)


def weight_bounds(tags: Sequence[TagRequest]) -> BatchState:
    weights = [t.weight for t in tags]
    return BatchState(min_weight=min(weights), max_weight=max(weights))


def font_size_for(
    weight: float,
    batch: BatchState,
    min_font_size: int,
    max_font_size: int,
) -> int:
    """Map *weight* linearly onto [min_font_size, max_font_size].

    A batch whose tags all share one weight gets the midpoint size.
    """
    if batch.uniform:
        return round_half_up((min_font_size + max_font_size) / 2)
    ratio = (weight - batch.min_weight) / (batch.max_weight - batch.min_weight)
    return round_half_up(min_font_size + (max_font_size - min_font_size) * ratio)


def resolve_angle(
    tag: TagRequest,
    angle_from: float,
    angle_to: float,
    angle_count: int,
    rng: random.Random,
) -> float:
    """Explicit tag angle, or one of *angle_count* evenly spaced steps."""
    if tag.angle is not None:
        return tag.angle
    if angle_count == 1:
        return angle_from
    index = rng.randrange(angle_count)
    return angle_from + index / (angle_count - 1) * (angle_to - angle_from)
