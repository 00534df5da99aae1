"""Shared test fixtures and helpers for the tagcloud test suite."""

from __future__ import annotations

import random
from pathlib import Path

import numpy as np
import pytest

from tagcloud.layout.engine import TagCloud
from tagcloud.layout.grid import LocalMask
from tagcloud.options import CloudOptions
from tagcloud.parser.model import RasterBuffer, TagRequest
from tagcloud.parser.tags import parse_tags

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# --- Tag list constants ---

LANGUAGES_TEXT = (
    "Python | 100\n"
    "Rust | 70\n"
    "Go | 55\n"
    "Haskell | 20 | 90\n"
    "C | 10 | 0 | #ff0000\n"
)

SCENARIO_B_TEXT = (
    "low | 10\n"
    "mid | 55\n"
    "high | 100\n"
)


# --- Raster helpers ---


class BlockRasterizer:
    """Deterministic rasterizer: every tag is a solid black block.

    The block is ``len(text) * font_size // 2`` wide and ``font_size``
    tall, plus *padding* on each axis.  Angles of 90/270 swap the axes;
    other angles are ignored.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int, float, int]] = []

    def rasterize(self, text, font_family, font_size, angle, padding):
        self.calls.append((text, font_family, font_size, angle, padding))
        width = max(len(text) * font_size // 2, 1) + padding
        height = font_size + padding
        if angle % 180 == 90:
            width, height = height, width
        return solid_buffer(width, height)


def solid_buffer(width: int, height: int, rgba=(0, 0, 0, 255)) -> RasterBuffer:
    data = np.empty((height, width, 4), dtype=np.uint8)
    data[...] = rgba
    return RasterBuffer(width, height, data)


def solid_mask(width: int, height: int, cell_size: int = 1) -> LocalMask:
    n_rows = -(-height // cell_size)
    n_cols = -(-width // cell_size)
    return LocalMask.from_cells(
        np.ones((n_rows, n_cols), dtype=bool), width, height, cell_size
    )


def mask_from_rows(rows: list[str], cell_size: int = 1) -> LocalMask:
    """Build a mask from strings of '#' (ink) and '.' (empty), one per cell row."""
    cells = np.array([[c == "#" for c in row] for row in rows], dtype=bool)
    return LocalMask.from_cells(
        cells, cells.shape[1] * cell_size, cells.shape[0] * cell_size, cell_size
    )


def load_tags(name: str) -> list[TagRequest]:
    return parse_tags((FIXTURES_DIR / "clouds" / f"{name}.tags").read_text())


# --- Pytest fixtures ---


@pytest.fixture
def block_rasterizer() -> BlockRasterizer:
    return BlockRasterizer()


@pytest.fixture
def make_cloud(block_rasterizer):
    """Factory for engines using the block rasterizer and a seeded RNG."""

    def _make(seed: int = 7, **overrides) -> TagCloud:
        overrides.setdefault("padding", 0)
        return TagCloud(
            CloudOptions(**overrides),
            rasterizer=block_rasterizer,
            rng=random.Random(seed),
        )

    return _make


@pytest.fixture
def language_tags() -> list[TagRequest]:
    """Five tags with mixed weights, one explicit angle and one colour."""
    return parse_tags(LANGUAGES_TEXT)
