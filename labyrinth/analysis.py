# labyrinth/analysis.py
"""Structural checks for carved grids and written room graphs."""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Mapping, Set

import structlog

from labyrinth.grid import Coord, Grid
from labyrinth.placement import find_dead_ends

log = structlog.get_logger(__name__)


def reachable_cells(grid: Grid, start: Coord | None = None) -> Set[Coord]:
    """Cells reachable from ``start`` through cleared walls (portals ignored)."""
    sx, sy = start if start is not None else grid.center
    visited = {(sx, sy)}
    queue = deque([(sx, sy)])
    while queue:
        x, y = queue.popleft()
        for direction in grid.open_directions(x, y):
            nx, ny = grid.neighbor(x, y, direction)
            if grid.in_bounds(nx, ny) and (nx, ny) not in visited:
                visited.add((nx, ny))
                queue.append((nx, ny))
    return visited


def is_connected(grid: Grid) -> bool:
    return len(reachable_cells(grid)) == len(grid)


def has_cycle(grid: Grid) -> bool:
    """Depth-first cycle search over the passage graph."""
    parent = {}
    for sy in range(grid.height):
        for sx in range(grid.width):
            if (sx, sy) in parent:
                continue
            parent[(sx, sy)] = None
            stack = [(sx, sy)]
            while stack:
                x, y = stack.pop()
                for direction in grid.open_directions(x, y):
                    nxt = grid.neighbor(x, y, direction)
                    if not grid.in_bounds(*nxt) or nxt == parent[(x, y)]:
                        continue
                    if nxt in parent:
                        return True
                    parent[nxt] = (x, y)
                    stack.append(nxt)
    return False


def is_acyclic(grid: Grid) -> bool:
    return not has_cycle(grid)


def is_perfect_maze(grid: Grid) -> bool:
    """Spanning tree check: connected, acyclic and ``cells - 1`` passages."""
    edges = grid.passage_count()
    ok = edges == len(grid) - 1 and is_connected(grid) and is_acyclic(grid)
    if not ok:
        log.warning("Grid is not a perfect maze", passages=edges, cells=len(grid))
    return ok


def dead_ends(grid: Grid) -> List[Coord]:
    return find_dead_ends(grid)


def unreachable_rooms(
    exits_by_room: Mapping[str, Mapping[str, str]], start_id: str
) -> List[str]:
    """Room ids not reachable from ``start_id`` following every exit.

    ``exits_by_room`` maps a room id to its exit table, which is the shape of
    both built :class:`~labyrinth.serialization.Room` objects and loaded
    document records.
    """
    if start_id not in exits_by_room:
        raise KeyError(f"Unknown start room {start_id!r}")
    visited = {start_id}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for target in exits_by_room.get(current, {}).values():
            if target in exits_by_room and target not in visited:
                visited.add(target)
                queue.append(target)
    return sorted(rid for rid in exits_by_room if rid not in visited)


def exit_tables(rooms: Mapping[str, object]) -> dict[str, Mapping[str, str]]:
    """Extract ``{room_id: exits}`` from rooms or raw document records."""
    tables: dict[str, Mapping[str, str]] = {}
    for rid, room in rooms.items():
        if isinstance(room, Mapping):
            tables[rid] = room.get("exits") or {}
        else:
            tables[rid] = getattr(room, "exits", {})
    return tables


def portal_pairs(rooms: Mapping[str, Mapping[str, str]]) -> Iterable[tuple[str, str]]:
    """Yield ``(room, target)`` for every portal exit in an exit table map."""
    for rid in sorted(rooms):
        target = rooms[rid].get("portal")
        if target is not None:
            yield rid, target


__all__ = [
    "dead_ends",
    "exit_tables",
    "has_cycle",
    "is_acyclic",
    "is_connected",
    "is_perfect_maze",
    "portal_pairs",
    "reachable_cells",
    "unreachable_rooms",
]
