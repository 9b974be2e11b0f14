# labyrinth/generator.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import structlog

from game_rng import GameRNG
from labyrinth.carving import carve_maze
from labyrinth.gates import place_gates
from labyrinth.grid import GateInfo, Grid, POIKind
from labyrinth.placement import (
    ShortcutPair,
    place_points_of_interest,
    place_shortcuts,
)
from labyrinth.serialization import Room, build_document, build_rooms, write_document

log = structlog.get_logger(__name__)

DEFAULT_SIZE = 40
DEFAULT_SEED = 42


@dataclass(frozen=True)
class GenerationSummary:
    rooms: int
    gates: int
    treasure: int
    merchants: int
    lore_npcs: int
    shortcut_pairs: int

    @property
    def points_of_interest(self) -> int:
        """Tagged cells, counting both ends of every shortcut."""
        return self.treasure + self.merchants + self.lore_npcs + 2 * self.shortcut_pairs


class LabyrinthGenerator:
    """Owns the grid and the RNG for one offline labyrinth build.

    Stages must run in order: :meth:`carve`, :meth:`place_gates`,
    :meth:`place_points_of_interest`, then serialization.  :meth:`run` does all
    of them.
    """

    def __init__(self, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE, seed: int = DEFAULT_SEED):
        self.seed = seed
        self.rng = GameRNG(seed=seed)
        self.grid = Grid(width, height)
        self.gates: List[GateInfo] = []
        self.shortcuts: List[ShortcutPair] = []
        self.poi_counts: Dict[POIKind, int] = {kind: 0 for kind in POIKind}
        self._carved = False
        self._placed = False
        log.info("Labyrinth generator created", width=width, height=height, seed=seed)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def carve(self) -> int:
        if self._carved:
            raise RuntimeError("Labyrinth has already been carved")
        carved = carve_maze(self.grid, self.rng)
        self._carved = True
        return carved

    def place_gates(self) -> List[GateInfo]:
        self.gates = place_gates(self.grid)
        return self.gates

    def place_points_of_interest(
        self, quotas: Mapping[POIKind, Tuple[int, int]] | None = None
    ) -> int:
        """Place dead-end POIs then shortcut pairs; returns tagged cell count."""
        if self._placed:
            raise RuntimeError("Points of interest have already been placed")
        placed = place_points_of_interest(self.grid, self.rng, quotas)
        self.poi_counts.update(placed)
        self.shortcuts = place_shortcuts(self.grid, self.rng)
        self._placed = True
        return self.summary().points_of_interest

    def build_rooms(self) -> Dict[str, Room]:
        return build_rooms(self.grid, self.shortcuts)

    def to_document(self) -> Dict[str, Any]:
        return build_document(
            self.width, self.height, self.seed, self.gates, self.shortcuts, self.build_rooms()
        )

    def write(self, out_dir: Path | str) -> Path:
        return write_document(self.to_document(), out_dir)

    def run(self) -> Dict[str, Any]:
        """Run every stage and return the finished document."""
        self.carve()
        self.place_gates()
        self.place_points_of_interest()
        document = self.to_document()
        log.info("Labyrinth generation complete", **asdict(self.summary()))
        return document

    def summary(self) -> GenerationSummary:
        return GenerationSummary(
            rooms=len(self.grid),
            gates=len(self.gates),
            treasure=self.poi_counts[POIKind.TREASURE],
            merchants=self.poi_counts[POIKind.MERCHANT],
            lore_npcs=self.poi_counts[POIKind.LORE_NPC],
            shortcut_pairs=len(self.shortcuts),
        )


__all__ = ["DEFAULT_SEED", "DEFAULT_SIZE", "GenerationSummary", "LabyrinthGenerator"]
