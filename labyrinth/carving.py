# labyrinth/carving.py
from typing import List, Tuple

import structlog

from game_rng import GameRNG
from labyrinth.grid import ALL_DIRECTIONS, Coord, Direction, Grid

log = structlog.get_logger(__name__)


def shuffled_directions(rng: GameRNG) -> List[Direction]:
    """Return the four directions in a seeded random order."""
    dirs = list(ALL_DIRECTIONS)
    rng.shuffle(dirs)
    return dirs


def carve_maze(grid: Grid, rng: GameRNG, start: Coord | None = None) -> int:
    """
    Carves a perfect maze into ``grid`` with a randomized depth-first backtracker.

    Starting at ``start`` (default: the grid center), each newly entered cell is
    marked visited and gets its own shuffled direction list.  Directions are
    tried in that order; an in-bounds unvisited neighbor has the shared wall
    removed and is descended into before the remaining directions are tried.
    The explicit stack reproduces the recursive visiting order exactly.

    Returns the number of walls cleared (``width * height - 1`` on a fresh grid).
    """
    if not isinstance(rng, GameRNG):
        log.error("Carve called with invalid GameRNG object")
        raise TypeError("carve_maze requires a GameRNG instance")

    sx, sy = start if start is not None else grid.center
    if not grid.in_bounds(sx, sy):
        raise ValueError(f"Carve start ({sx}, {sy}) is outside the grid")

    log.info("Carving labyrinth", width=grid.width, height=grid.height, start=(sx, sy))

    # Each frame: (x, y, shuffled directions, index of next direction to try)
    grid.visited[sy, sx] = True
    stack: List[Tuple[int, int, List[Direction], int]] = [
        (sx, sy, shuffled_directions(rng), 0)
    ]
    carved = 0
    max_depth = 1

    while stack:
        x, y, dirs, idx = stack[-1]
        if idx >= len(dirs):
            stack.pop()
            continue
        stack[-1] = (x, y, dirs, idx + 1)

        direction = dirs[idx]
        nx, ny = grid.neighbor(x, y, direction)
        if not grid.in_bounds(nx, ny) or grid.visited[ny, nx]:
            continue

        grid.remove_wall(x, y, direction)
        carved += 1
        grid.visited[ny, nx] = True
        stack.append((nx, ny, shuffled_directions(rng), 0))
        if len(stack) > max_depth:
            max_depth = len(stack)

    log.info("Carving finished", passages=carved, max_depth=max_depth)
    return carved


__all__ = ["carve_maze", "shuffled_directions"]
