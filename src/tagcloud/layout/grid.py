"""Bit-packed occupancy grid and local masks.

Rows are stored as 2-D ``uint32`` arrays.  Within a word, bit ``j``
counted from the most significant bit represents cell column
``word_index * 32 + j``.  Bits past the last real column of a row are
padding: always zero in a mask, and set according to the boundary
policy in the grid (free under ``cut``, occupied under ``bounded``).
"""

from __future__ import annotations

__all__ = ["LocalMask", "OccupancyGrid", "pack_cells", "unpack_words"]

import math
from dataclasses import dataclass

import numpy as np

from tagcloud.layout.constants import WORD_BITS, WORD_MASK
from tagcloud.options import BoundaryPolicy


def pack_cells(cells: np.ndarray) -> np.ndarray:
    """Pack a 2-D boolean cell array into MSB-first ``uint32`` words."""
    cells = np.asarray(cells, dtype=bool)
    n_rows, n_cols = cells.shape
    n_words = math.ceil(n_cols / WORD_BITS)
    padded = np.zeros((n_rows, n_words * WORD_BITS), dtype=bool)
    padded[:, :n_cols] = cells
    packed = np.packbits(padded, axis=1, bitorder="big")
    return np.ascontiguousarray(packed).view(">u4").astype(np.uint32)


def unpack_words(words: np.ndarray, n_cols: int) -> np.ndarray:
    """Inverse of :func:`pack_cells`, trimmed to *n_cols* columns."""
    as_bytes = np.ascontiguousarray(words.astype(">u4")).view(np.uint8)
    bits = np.unpackbits(as_bytes, axis=1, bitorder="big")
    return bits[:, :n_cols].astype(bool)


def _cell_span(pixels: int, cell_size: int) -> int:
    return math.ceil(pixels / cell_size)


def _tail_bits(n_cols: int) -> int:
    """Word with the padding bits of a row's last word set."""
    used = n_cols % WORD_BITS
    if used == 0:
        return 0
    return WORD_MASK >> used


@dataclass
class LocalMask:
    """Packed footprint of one rendered tag (or a full-canvas silhouette)."""

    width: int
    height: int
    cell_size: int
    words: np.ndarray

    @classmethod
    def from_cells(
        cls, cells: np.ndarray, width: int, height: int, cell_size: int
    ) -> LocalMask:
        return cls(width, height, cell_size, pack_cells(cells))

    @property
    def n_rows(self) -> int:
        return self.words.shape[0]

    @property
    def n_cols(self) -> int:
        return _cell_span(self.width, self.cell_size)

    def cells(self) -> np.ndarray:
        return unpack_words(self.words, self.n_cols)

    def ink_count(self) -> int:
        return int(self.cells().sum())


class OccupancyGrid:
    """Shared spatial index of inked cells.

    Placement only ever ORs bits in, so within one batch an occupied
    cell stays occupied.
    """

    def __init__(
        self,
        width: int,
        height: int,
        cell_size: int,
        rows: np.ndarray,
        policy: BoundaryPolicy = BoundaryPolicy.CUT,
    ) -> None:
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.rows = rows
        self.policy = policy

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        cell_size: int,
        seed_filled: bool = False,
        policy: BoundaryPolicy = BoundaryPolicy.CUT,
    ) -> OccupancyGrid:
        """Allocate a grid with every cell free, or every cell blocked."""
        n_rows = _cell_span(height, cell_size)
        n_cols = _cell_span(width, cell_size)
        n_words = math.ceil(n_cols / WORD_BITS)
        fill = WORD_MASK if seed_filled else 0
        rows = np.full((n_rows, n_words), fill, dtype=np.uint32)
        grid = cls(width, height, cell_size, rows, policy)
        grid._apply_tail_policy()
        return grid

    @property
    def n_rows(self) -> int:
        return self.rows.shape[0]

    @property
    def n_cols(self) -> int:
        return _cell_span(self.width, self.cell_size)

    @property
    def n_words(self) -> int:
        return self.rows.shape[1]

    @property
    def _outside(self) -> int:
        return WORD_MASK if self.policy is BoundaryPolicy.BOUNDED else 0

    def _apply_tail_policy(self) -> None:
        tail = _tail_bits(self.n_cols)
        if not tail or self.n_words == 0:
            return
        if self.policy is BoundaryPolicy.BOUNDED:
            self.rows[:, -1] |= np.uint32(tail)
        else:
            self.rows[:, -1] &= np.uint32(~tail & WORD_MASK)

    def copy(self) -> OccupancyGrid:
        return OccupancyGrid(
            self.width, self.height, self.cell_size, self.rows.copy(), self.policy
        )

    def seed_from_mask(self, mask: LocalMask, invert: bool = False) -> None:
        """Merge a full-canvas mask anchored at the origin.

        With *invert*, mask bits free grid cells instead of blocking them,
        so the inside of a silhouette becomes the only placeable area.
        """
        if mask.cell_size != self.cell_size:
            raise ValueError(
                f"mask cell size {mask.cell_size} does not match grid {self.cell_size}"
            )
        n_rows = min(self.n_rows, mask.n_rows)
        n_words = min(self.n_words, mask.words.shape[1])
        region = mask.words[:n_rows, :n_words]
        if invert:
            self.rows[:n_rows, :n_words] &= ~region
        else:
            self.rows[:n_rows, :n_words] |= region
        self._apply_tail_policy()

    def _aligned(self, mask: LocalMask, x: int, y: int):
        """Shift *mask* into grid word alignment for device position (x, y).

        Returns (row0, word0, spread) where ``spread`` has one more word
        per row than the mask: each mask word lands partly in its own
        grid word and partly in the next one.
        """
        col = x // self.cell_size
        row0 = y // self.cell_size
        word0, shift = divmod(col, WORD_BITS)

        wide = mask.words.astype(np.uint64)
        spread = np.zeros((mask.n_rows, mask.words.shape[1] + 1), dtype=np.uint64)
        spread[:, :-1] |= wide >> np.uint64(shift)
        if shift:
            spread[:, 1:] |= (wide << np.uint64(WORD_BITS - shift)) & np.uint64(WORD_MASK)
        return row0, word0, spread.astype(np.uint32)

    def _window(self, row0: int, word0: int, n_rows: int, n_words: int):
        """Grid words under a window, with off-grid words per policy.

        Returns (window, bounds) where bounds is the in-range slice
        ``(r0, r1, w0, w1)`` in grid coordinates.
        """
        window = np.full((n_rows, n_words), self._outside, dtype=np.uint32)
        r0, r1 = max(row0, 0), min(row0 + n_rows, self.n_rows)
        w0, w1 = max(word0, 0), min(word0 + n_words, self.n_words)
        if r0 < r1 and w0 < w1:
            window[r0 - row0 : r1 - row0, w0 - word0 : w1 - word0] = self.rows[
                r0:r1, w0:w1
            ]
        return window, (r0, r1, w0, w1)

    def lands_on_grid(self, mask: LocalMask, x: int, y: int) -> bool:
        """True if at least one ink cell of *mask* at (x, y) falls on the grid.

        An empty box corner overlapping the grid does not count.
        """
        row0, word0, spread = self._aligned(mask, x, y)
        r0, r1 = max(row0, 0), min(row0 + spread.shape[0], self.n_rows)
        w0, w1 = max(word0, 0), min(word0 + spread.shape[1], self.n_words)
        if r0 >= r1 or w0 >= w1:
            return False
        inside = spread[r0 - row0 : r1 - row0, w0 - word0 : w1 - word0]
        if w1 == self.n_words:
            inside = inside.copy()
            inside[:, -1] &= np.uint32(~_tail_bits(self.n_cols) & WORD_MASK)
        return bool(np.any(inside))

    def overhangs(self, mask: LocalMask, x: int, y: int) -> bool:
        """True if any cell of *mask*'s box at (x, y) lies off the grid."""
        col0 = x // self.cell_size
        row0 = y // self.cell_size
        return (
            col0 < 0
            or row0 < 0
            or col0 + mask.n_cols > self.n_cols
            or row0 + mask.n_rows > self.n_rows
        )

    def collides(self, mask: LocalMask, x: int, y: int) -> bool:
        """True if *mask* at device position (x, y) overlaps occupied cells.

        Under the bounded policy everything off the grid is occupied, so
        a box that overhangs the edge collides even where it has no ink.
        """
        if self.policy is BoundaryPolicy.BOUNDED and self.overhangs(mask, x, y):
            return True
        row0, word0, spread = self._aligned(mask, x, y)
        window, _ = self._window(row0, word0, *spread.shape)
        return bool(np.any(window & spread))

    def try_place(self, mask: LocalMask, x: int, y: int) -> bool:
        """Claim the cells under *mask* at (x, y) if none are occupied.

        Ink falling outside the grid arrays is dropped.
        """
        if self.policy is BoundaryPolicy.BOUNDED and self.overhangs(mask, x, y):
            return False
        row0, word0, spread = self._aligned(mask, x, y)
        window, (r0, r1, w0, w1) = self._window(row0, word0, *spread.shape)
        if np.any(window & spread):
            return False
        if r0 < r1 and w0 < w1:
            self.rows[r0:r1, w0:w1] |= spread[
                r0 - row0 : r1 - row0, w0 - word0 : w1 - word0
            ]
            if w1 == self.n_words:
                # ink past the last column is off-grid
                self._apply_tail_policy()
        return True

    def cells(self) -> np.ndarray:
        return unpack_words(self.rows, self.n_cols)

    def fill_ratio(self) -> float:
        cells = self.cells()
        return float(cells.mean()) if cells.size else 0.0

    def to_text(self, filled: str = "1", empty: str = "0") -> str:
        """Dump the grid one cell row per line."""
        return "\n".join(
            "".join(filled if c else empty for c in row) for row in self.cells()
        )
