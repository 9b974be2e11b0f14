# labyrinth/render.py
"""ASCII map of a generated labyrinth, for eyeballing a seed from the CLI."""

from __future__ import annotations

from typing import Final, List

from labyrinth.grid import (
    Cell,
    Direction,
    Gate,
    Grid,
    POIKind,
    PointOfInterest,
    ShortcutEndpoint,
)

_POI_SYMBOLS: Final = {
    POIKind.TREASURE: "$",
    POIKind.MERCHANT: "M",
    POIKind.LORE_NPC: "L",
}
_PASSAGE_SYMBOLS: Final = {1: "x", 2: ".", 3: "+", 4: "#"}

LEGEND: Final[str] = """
Legend:
  [G] City gate
  [$] Treasure vault
  [M] Hidden merchant
  [L] Lore NPC
  [P] Shortcut portal
  [x] Dead end
  [.] Corridor
  [+] Junction
  [#] Four-way crossing

  Connections:
  -   Horizontal passage (east-west)
  |   Vertical passage (north-south)
"""


def cell_symbol(cell: Cell) -> str:
    classification = cell.classification
    if isinstance(classification, Gate):
        return "G"
    if isinstance(classification, PointOfInterest):
        return _POI_SYMBOLS[classification.kind]
    if isinstance(classification, ShortcutEndpoint):
        return "P"
    return _PASSAGE_SYMBOLS.get(cell.exit_count, "?")


def render_grid(grid: Grid, legend: bool = False) -> str:
    """Render each cell as a 5x3 block: north link, ``-[S]-``, south link."""
    lines: List[str] = []
    for y in range(grid.height):
        top, middle, bottom = [], [], []
        for x in range(grid.width):
            cell = grid.cell(x, y)
            top.append("  |  " if not cell.has_wall(Direction.NORTH) else "     ")
            west = "-" if not cell.has_wall(Direction.WEST) else " "
            east = "-" if not cell.has_wall(Direction.EAST) else " "
            middle.append(f"{west}[{cell_symbol(cell)}]{east}")
            bottom.append("  |  " if not cell.has_wall(Direction.SOUTH) else "     ")
        lines.extend("".join(row).rstrip() for row in (top, middle, bottom))
    text = "\n".join(lines) + "\n"
    if legend:
        text += LEGEND
    return text


__all__ = ["LEGEND", "cell_symbol", "render_grid"]
