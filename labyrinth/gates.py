"""City gate placement.

Gates are pinned to fixed perimeter cells computed from the grid size alone,
so the city-to-labyrinth topology survives regeneration with a new seed.
Placing a gate changes what a cell *means*; the carved walls are untouched.
"""

from __future__ import annotations

from typing import Callable, Final, List, NamedTuple

import structlog

from labyrinth.grid import Coord, Gate, GateInfo, Grid

log = structlog.get_logger(__name__)


class CityGate(NamedTuple):
    city_id: str
    city_name: str
    position: Callable[[int, int], Coord]


# One gate per playable city, in output order.
CITY_GATES: Final[tuple[CityGate, ...]] = (
    CityGate("human", "Ironhaven", lambda w, h: (w // 2, 0)),  # north center
    CityGate("elf", "Sylvanthal", lambda w, h: (w - 1, h // 2)),  # east center
    CityGate("dwarf", "Khazad-Karn", lambda w, h: (w // 2, h - 1)),  # south center
    CityGate("gnome", "Cogsworth", lambda w, h: (0, h // 2)),  # west center
    CityGate("orc", "Skullgar", lambda w, h: (0, 0)),  # northwest corner
)


def gate_positions(width: int, height: int) -> List[GateInfo]:
    """Return the gate list for a ``width`` x ``height`` labyrinth."""
    gates = []
    for city in CITY_GATES:
        x, y = city.position(width, height)
        gates.append(GateInfo(city_id=city.city_id, city_name=city.city_name, x=x, y=y))
    return gates


def place_gates(grid: Grid) -> List[GateInfo]:
    """Mark the fixed gate cells on ``grid`` and return every gate placed.

    On very small grids two cities can land on the same cell; both stay in the
    returned list but the cell keeps the first gate.
    """
    gates = gate_positions(grid.width, grid.height)
    for gate in gates:
        existing = grid.classification(gate.x, gate.y)
        if isinstance(existing, Gate):
            log.warning(
                "Gate cell already claimed",
                city_id=gate.city_id,
                claimed_by=existing.info.city_id,
                pos=(gate.x, gate.y),
            )
            continue
        grid.set_classification(gate.x, gate.y, Gate(gate))
        log.debug("Placed city gate", city_id=gate.city_id, pos=(gate.x, gate.y))
    log.info("City gates placed", count=len(gates))
    return gates


__all__ = ["CITY_GATES", "CityGate", "gate_positions", "place_gates"]
