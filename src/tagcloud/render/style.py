"""Visual themes for rendered clouds."""

from __future__ import annotations

__all__ = ["Theme", "random_color"]

import random
from dataclasses import dataclass


def random_color(rng: random.Random) -> str:
    """Random hex colour, never pure white."""
    return f"#{int(0xFFFF00 * rng.random()):06x}"


@dataclass(frozen=True)
class Theme:
    """Colours and typography used when painting a cloud.

    An empty ``palette`` means every tag without its own colour gets a
    random one.
    """

    name: str
    background_color: str = "none"
    palette: tuple[str, ...] = ()
    font_weight: str = "normal"

    def color_for(self, rng: random.Random) -> str:
        if self.palette:
            return rng.choice(self.palette)
        return random_color(rng)
