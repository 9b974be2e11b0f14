# labyrinth/grid.py
"""Cell lattice for the labyrinth.

Wall and visited state live in numpy arrays indexed ``[y, x]``, row-major
like every other per-cell array.  Each cell additionally
carries exactly one classification value; the variants below make illegal
combinations such as a gate that is also a treasure vault unrepresentable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, List, NamedTuple, Tuple, Union

import numpy as np
import structlog

log = structlog.get_logger(__name__)

Coord = Tuple[int, int]


class Direction(Enum):
    """Cardinal directions; the value is the wall-array index."""

    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def delta(self) -> Coord:
        return _DELTAS[self]

    @property
    def exit_name(self) -> str:
        return self.name.lower()


_OPPOSITES: Final = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_DELTAS: Final = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}

# Canonical order used for carving shuffles and exit tables.
ALL_DIRECTIONS: Final[Tuple[Direction, ...]] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


class CellType(Enum):
    PASSAGE = "passage"
    GATE = "gate"
    TREASURE = "treasure"
    MERCHANT = "merchant"
    LORE_NPC = "lore_npc"
    SHORTCUT = "shortcut"


class POIKind(Enum):
    """Point-of-interest kinds that occupy dead ends."""

    TREASURE = "treasure"
    MERCHANT = "merchant"
    LORE_NPC = "lore_npc"


class POITag(Enum):
    NONE = "none"
    TREASURE = "treasure"
    MERCHANT = "merchant"
    LORE_NPC = "lore_npc"
    SHORTCUT_A = "shortcut_a"
    SHORTCUT_B = "shortcut_b"


class ShortcutSide(Enum):
    A = "a"
    B = "b"


@dataclass(frozen=True)
class GateInfo:
    """A city entry point pinned to a fixed cell."""

    city_id: str
    city_name: str
    x: int
    y: int


@dataclass(frozen=True)
class Plain:
    """An ordinary passage cell."""


@dataclass(frozen=True)
class Gate:
    info: GateInfo


@dataclass(frozen=True)
class PointOfInterest:
    kind: POIKind


@dataclass(frozen=True)
class ShortcutEndpoint:
    pair_id: int
    side: ShortcutSide


Classification = Union[Plain, Gate, PointOfInterest, ShortcutEndpoint]

PLAIN: Final = Plain()

_POI_CELL_TYPES: Final = {
    POIKind.TREASURE: CellType.TREASURE,
    POIKind.MERCHANT: CellType.MERCHANT,
    POIKind.LORE_NPC: CellType.LORE_NPC,
}

_POI_TAGS: Final = {
    POIKind.TREASURE: POITag.TREASURE,
    POIKind.MERCHANT: POITag.MERCHANT,
    POIKind.LORE_NPC: POITag.LORE_NPC,
}


def cell_type_of(classification: Classification) -> CellType:
    if isinstance(classification, Gate):
        return CellType.GATE
    if isinstance(classification, PointOfInterest):
        return _POI_CELL_TYPES[classification.kind]
    if isinstance(classification, ShortcutEndpoint):
        return CellType.SHORTCUT
    return CellType.PASSAGE


def poi_tag_of(classification: Classification) -> POITag:
    if isinstance(classification, PointOfInterest):
        return _POI_TAGS[classification.kind]
    if isinstance(classification, ShortcutEndpoint):
        return POITag.SHORTCUT_A if classification.side is ShortcutSide.A else POITag.SHORTCUT_B
    return POITag.NONE


class Cell(NamedTuple):
    """Read-only snapshot of one lattice position."""

    x: int
    y: int
    walls: Tuple[bool, bool, bool, bool]
    visited: bool
    classification: Classification

    def has_wall(self, direction: Direction) -> bool:
        return self.walls[direction.value]

    @property
    def exit_count(self) -> int:
        return sum(1 for wall in self.walls if not wall)

    @property
    def cell_type(self) -> CellType:
        return cell_type_of(self.classification)

    @property
    def poi(self) -> POITag:
        return poi_tag_of(self.classification)


class Grid:
    def __init__(self, width: int, height: int):
        """Create a fully walled, unvisited grid of plain cells."""
        if width < 2 or height < 2:
            log.error("Invalid labyrinth dimensions", width=width, height=height)
            raise ValueError("Labyrinth width and height must both be at least 2.")
        self._width = width
        self._height = height
        self.walls: np.ndarray = np.ones((height, width, 4), dtype=bool, order="C")
        self.visited: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        self._classes: List[List[Classification]] = [
            [PLAIN for _ in range(width)] for _ in range(height)
        ]
        log.debug("Grid initialized", shape=(height, width))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def center(self) -> Coord:
        return self._width // 2, self._height // 2

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    @staticmethod
    def neighbor(x: int, y: int, direction: Direction) -> Coord:
        """Coordinate one step away; callers check ``in_bounds``."""
        dx, dy = direction.delta
        return x + dx, y + dy

    def has_wall(self, x: int, y: int, direction: Direction) -> bool:
        return bool(self.walls[y, x, direction.value])

    def remove_wall(self, x: int, y: int, direction: Direction) -> Coord:
        """Clear the wall shared with the neighbor in ``direction``.

        Returns the neighbor coordinate.
        """
        nx, ny = self.neighbor(x, y, direction)
        if not self.in_bounds(nx, ny):
            raise IndexError(f"No neighbor {direction.exit_name} of ({x}, {y})")
        self.walls[y, x, direction.value] = False
        self.walls[ny, nx, direction.opposite.value] = False
        return nx, ny

    def open_directions(self, x: int, y: int) -> List[Direction]:
        return [d for d in ALL_DIRECTIONS if not self.walls[y, x, d.value]]

    def exit_count(self, x: int, y: int) -> int:
        return 4 - int(np.count_nonzero(self.walls[y, x]))

    def exit_counts(self) -> np.ndarray:
        """Per-cell number of open walls, shape ``(height, width)``."""
        return 4 - np.count_nonzero(self.walls, axis=2)

    def passage_count(self) -> int:
        """Number of cleared shared walls (edges of the passage graph)."""
        # Every passage is cleared on both sides.
        return int(np.count_nonzero(~self.walls)) // 2

    def classification(self, x: int, y: int) -> Classification:
        return self._classes[y][x]

    def set_classification(self, x: int, y: int, value: Classification) -> None:
        self._classes[y][x] = value

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self._width}x{self._height} grid")
        walls = tuple(bool(w) for w in self.walls[y, x])
        return Cell(x, y, walls, bool(self.visited[y, x]), self._classes[y][x])  # type: ignore[arg-type]

    def cells(self) -> Iterator[Cell]:
        """Iterate every cell in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                yield self.cell(x, y)

    def __len__(self) -> int:
        return self._width * self._height


__all__ = [
    "ALL_DIRECTIONS",
    "Cell",
    "CellType",
    "Classification",
    "Coord",
    "Direction",
    "Gate",
    "GateInfo",
    "Grid",
    "PLAIN",
    "POIKind",
    "POITag",
    "Plain",
    "PointOfInterest",
    "ShortcutEndpoint",
    "ShortcutSide",
    "cell_type_of",
    "poi_tag_of",
]
