"""Expanding-ring search for a free mask position.

Starting from the centred position, the search walks a square spiral in
steps of one cell: ``step`` cells along x, flip, ``step`` cells along y,
flip, grow ``step``.  The first position where the grid accepts the mask
wins; positions where none of the mask's ink lands on the grid never
do, since under the ``cut`` policy they would claim nothing.  Initial
directions are drawn once per tag so repeated tags do not all drift the
same way.
"""

from __future__ import annotations

__all__ = ["centered_start", "find_position", "ring_limit"]

import random

from tagcloud.layout.grid import LocalMask, OccupancyGrid


def centered_start(grid: OccupancyGrid, mask: LocalMask) -> tuple[int, int]:
    """Position that centres *mask* on the grid surface."""
    return ((grid.width - mask.width) // 2, (grid.height - mask.height) // 2)


def ring_limit(grid: OccupancyGrid, start_x: int, start_y: int) -> int:
    """Half-step count past which the ring can no longer reach the grid."""
    reach = max(start_x, grid.width - start_x, start_y, grid.height - start_y)
    return int(reach / grid.cell_size + 1)


def find_position(
    grid: OccupancyGrid,
    mask: LocalMask,
    rng: random.Random | None = None,
    directions: tuple[int, int] | None = None,
    start: tuple[int, int] | None = None,
) -> tuple[int, int] | None:
    """Place *mask* at the nearest free position around *start*.

    Mutates *grid* on success and returns the device position; returns
    None once the ring radius is exhausted.

    Args:
        grid: Grid to search and fill.
        mask: Footprint to place.
        rng: Source for the initial walk directions.
        directions: Fixed ``(x_dir, y_dir)``, each +1 or -1; overrides *rng*.
        start: Starting device position; defaults to the centred one.
    """
    width, height, step_px = grid.width, grid.height, grid.cell_size
    start_x, start_y = start if start is not None else centered_start(grid, mask)
    limit = ring_limit(grid, start_x, start_y)

    x, y = start_x, start_y
    if grid.lands_on_grid(mask, x, y) and grid.try_place(mask, x, y):
        return (x, y)

    if directions is None:
        rng = rng or random.Random()
        directions = (rng.choice((1, -1)), rng.choice((1, -1)))
    x_dir, y_dir = directions

    step = 1
    while step // 2 < limit:
        # Horizontal leg; a row entirely off the grid is skipped in one move.
        if y < -mask.height or y > height:
            x += x_dir * step_px * step
        else:
            for _ in range(step):
                x += x_dir * step_px
                if x < -mask.width or x > width:
                    continue
                if grid.lands_on_grid(mask, x, y) and grid.try_place(mask, x, y):
                    return (x, y)
        x_dir = -x_dir

        if x < -mask.width or x > width:
            y += y_dir * step_px * step
        else:
            for _ in range(step):
                y += y_dir * step_px
                if y < -mask.height or y > height:
                    continue
                if grid.lands_on_grid(mask, x, y) and grid.try_place(mask, x, y):
                    return (x, y)
        y_dir = -y_dir

        step += 1

    return None
