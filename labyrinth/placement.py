# labyrinth/placement.py
"""Point-of-interest and shortcut placement over a carved grid.

Treasure vaults, hidden merchants and lore NPCs go on dead ends.  Shortcut
portals join ordinary cells in diagonally opposite quadrants so that every
portal spans a long distance.  Running short of candidates is never an error:
as many items as fit are placed and generation carries on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, List, Mapping, Tuple

import numpy as np
import structlog

from game_rng import GameRNG
from labyrinth.grid import (
    Coord,
    Grid,
    Plain,
    POIKind,
    PointOfInterest,
    ShortcutEndpoint,
    ShortcutSide,
)

log = structlog.get_logger(__name__)

# Inclusive ranges, consumed in this order.
POI_QUOTAS: Final[Dict[POIKind, Tuple[int, int]]] = {
    POIKind.TREASURE: (5, 10),
    POIKind.MERCHANT: (3, 5),
    POIKind.LORE_NPC: (5, 8),
}
SHORTCUT_PAIR_RANGE: Final[Tuple[int, int]] = (2, 3)

# Quadrants: 0 = northwest, 1 = northeast, 2 = southwest, 3 = southeast.
DIAGONAL_QUADRANTS: Final[Tuple[Tuple[int, int], ...]] = ((0, 3), (1, 2))


@dataclass(frozen=True)
class ShortcutPair:
    """Two cells joined by a portal that ignores lattice adjacency."""

    pair_id: int
    a: Coord
    b: Coord

    def partner_of(self, pos: Coord) -> Coord | None:
        if pos == self.a:
            return self.b
        if pos == self.b:
            return self.a
        return None


def find_dead_ends(grid: Grid) -> List[Coord]:
    """Plain cells with exactly one open wall, in row-major order.

    Gates never count as dead ends even when carving left them with one exit.
    """
    ys, xs = np.nonzero(grid.exit_counts() == 1)
    dead_ends: List[Coord] = []
    for y, x in zip(ys.tolist(), xs.tolist()):
        if isinstance(grid.classification(x, y), Plain):
            dead_ends.append((x, y))
    return dead_ends


def place_points_of_interest(
    grid: Grid,
    rng: GameRNG,
    quotas: Mapping[POIKind, Tuple[int, int]] | None = None,
) -> Dict[POIKind, int]:
    """
    Assigns treasure, merchant and lore NPC tags to shuffled dead ends.

    ``quotas`` overrides the inclusive count ranges; production callers leave
    it unset.  Returns the number of cells actually tagged per kind.
    """
    quotas = POI_QUOTAS if quotas is None else quotas
    dead_ends = find_dead_ends(grid)
    rng.shuffle(dead_ends)
    log.info("Dead ends found", count=len(dead_ends))

    placed: Dict[POIKind, int] = {}
    cursor = 0
    for kind, (low, high) in quotas.items():
        wanted = rng.get_int(low, high)
        chosen = dead_ends[cursor : cursor + wanted]
        cursor += len(chosen)
        for x, y in chosen:
            grid.set_classification(x, y, PointOfInterest(kind))
        placed[kind] = len(chosen)
        if len(chosen) < wanted:
            log.debug(
                "Dead ends exhausted for POI quota",
                kind=kind.value,
                wanted=wanted,
                placed=len(chosen),
            )
        log.debug("Placed points of interest", kind=kind.value, count=len(chosen))
    return placed


def quadrant_of(grid: Grid, x: int, y: int) -> int:
    quadrant = 0
    if x >= grid.width // 2:
        quadrant += 1
    if y >= grid.height // 2:
        quadrant += 2
    return quadrant


def place_shortcuts(
    grid: Grid,
    rng: GameRNG,
    pair_range: Tuple[int, int] = SHORTCUT_PAIR_RANGE,
) -> List[ShortcutPair]:
    """
    Joins plain cells in diagonally opposite quadrants with portal pairs.

    Pair ``i`` links quadrants ``DIAGONAL_QUADRANTS[i]``, so at most one pair
    per diagonal is placed even when the drawn count is higher.  Each pair pops
    the front candidate of both shuffled quadrant lists.  A pair whose quadrants
    have run dry is skipped.
    """
    count = rng.get_int(*pair_range)

    quadrants: List[List[Coord]] = [[], [], [], []]
    for y in range(grid.height):
        for x in range(grid.width):
            if isinstance(grid.classification(x, y), Plain):
                quadrants[quadrant_of(grid, x, y)].append((x, y))
    for candidates in quadrants:
        rng.shuffle(candidates)

    pairs: List[ShortcutPair] = []
    for i in range(min(count, len(DIAGONAL_QUADRANTS))):
        q1, q2 = DIAGONAL_QUADRANTS[i]
        if not quadrants[q1] or not quadrants[q2]:
            log.debug("Shortcut pair skipped, quadrant empty", quadrants=(q1, q2))
            continue
        a = quadrants[q1].pop(0)
        b = quadrants[q2].pop(0)
        pair = ShortcutPair(pair_id=len(pairs), a=a, b=b)
        grid.set_classification(a[0], a[1], ShortcutEndpoint(pair.pair_id, ShortcutSide.A))
        grid.set_classification(b[0], b[1], ShortcutEndpoint(pair.pair_id, ShortcutSide.B))
        pairs.append(pair)
        log.debug("Placed shortcut pair", pair_id=pair.pair_id, a=a, b=b)

    log.info("Shortcuts placed", requested=count, placed=len(pairs))
    return pairs


__all__ = [
    "DIAGONAL_QUADRANTS",
    "POI_QUOTAS",
    "SHORTCUT_PAIR_RANGE",
    "ShortcutPair",
    "find_dead_ends",
    "place_points_of_interest",
    "place_shortcuts",
    "quadrant_of",
]
