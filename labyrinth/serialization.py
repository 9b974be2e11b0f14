# labyrinth/serialization.py
"""Conversion of a finished grid into the room graph document.

Every cell becomes exactly one :class:`Room`.  Naming is deterministic: gates
and points of interest use kind-specific templates, and plain passages pick a
template from their exit count plus a coordinate-derived variant so that
neighbouring corridors read differently without any further randomness.

The document is a plain mapping dumped with PyYAML.  Rooms are put in order
by an explicit sort on their identifier before dumping, and key order inside
every record is fixed, so identical grids always produce identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Final, Iterable, List, Mapping, Sequence, Tuple

import structlog
import yaml

from labyrinth.grid import (
    ALL_DIRECTIONS,
    Cell,
    Gate,
    GateInfo,
    Grid,
    POIKind,
    PointOfInterest,
    ShortcutEndpoint,
)
from labyrinth.placement import ShortcutPair

log = structlog.get_logger(__name__)

DOCUMENT_FILENAME: Final[str] = "labyrinth.yaml"
ROOM_ID_PREFIX: Final[str] = "labyrinth_"
PORTAL_EXIT: Final[str] = "portal"
ROOM_TYPE_PASSAGE: Final[str] = "labyrinth"
ROOM_TYPE_GATE: Final[str] = "labyrinth_gate"
EXIT_ORDER: Final[Tuple[str, ...]] = tuple(d.exit_name for d in ALL_DIRECTIONS) + (
    PORTAL_EXIT,
)
# Wide enough that PyYAML never folds a description onto several lines.
_YAML_WIDTH: Final[int] = 4096


def room_id(x: int, y: int) -> str:
    return f"{ROOM_ID_PREFIX}{x}_{y}"


@dataclass(frozen=True)
class Room:
    """Serialized form of one cell. Never mutated after creation."""

    id: str
    name: str
    description: str
    type: str
    features: Tuple[str, ...] = ()
    exits: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type,
        }
        if self.features:
            record["features"] = list(self.features)
        if self.exits:
            record["exits"] = {k: self.exits[k] for k in _ordered_exit_keys(self.exits)}
        return record


def _ordered_exit_keys(exits: Mapping[str, str]) -> List[str]:
    rank = {name: i for i, name in enumerate(EXIT_ORDER)}
    return sorted(exits, key=lambda k: (rank.get(k, len(EXIT_ORDER)), k))


# --- Flavor text ---

GATE_DESCRIPTION: Final[str] = (
    "A massive archway marks the entrance to the labyrinth from {city}. Ancient "
    "runes carved into the stone pulse with a faint light. The air here feels "
    "different, the boundary between city and labyrinth almost tangible."
)

POI_TEMPLATES: Final[Dict[str, Tuple[Tuple[str, str], ...]]] = {
    POIKind.TREASURE.value: (
        (
            "Hidden Vault",
            "A forgotten chamber filled with the remnants of ancient treasures. Dust "
            "motes dance in the dim light filtering through cracks in the ceiling. "
            "Someone hid their valuables here long ago.",
        ),
        (
            "Sealed Treasury",
            "Iron-banded chests line the walls of this cramped vault. Most have been "
            "pried open, but a few locks still hold.",
        ),
        (
            "Smuggler's Cache",
            "A loose flagstone reveals a hollow packed with coin pouches and trinkets. "
            "Whoever stashed them never came back.",
        ),
    ),
    POIKind.MERCHANT.value: (
        (
            "Merchant's Alcove",
            "A surprisingly well-maintained alcove where a hooded figure has set up a "
            "small trading post. How they get their supplies this deep in the "
            "labyrinth is a mystery.",
        ),
        (
            "Lantern Stall",
            "A ring of hooded lanterns lights a folding table heaped with wares. The "
            "trader watches the passage with unblinking patience.",
        ),
        (
            "Wanderer's Market",
            "Bedrolls, crates and a battered scale crowd this dead end. A peddler "
            "waits here for the few who find the way.",
        ),
    ),
    POIKind.LORE_NPC.value: (
        (
            "Scholar's Refuge",
            "A quiet corner of the labyrinth where someone has made a small camp. "
            "Books and scrolls are scattered about, and strange symbols are drawn on "
            "the walls.",
        ),
        (
            "Hermit's Nook",
            "A threadbare blanket and a guttering candle mark the home of someone who "
            "has lived among these walls for a very long time.",
        ),
        (
            "Chronicler's Cell",
            "Charcoal maps and half-finished histories cover every inch of stone. The "
            "writer seems to know the labyrinth better than anyone.",
        ),
    ),
    "shortcut": (
        (
            "Mysterious Passage",
            "The walls here shimmer with an otherworldly energy. A strange portal "
            "hovers in the air, leading to somewhere else in the labyrinth. Ancient "
            "magic allows instant travel through these connected points.",
        ),
        (
            "Shimmering Threshold",
            "A doorway of pale light stands where the passage should end. Through it "
            "you glimpse distant corridors of the same ancient stone.",
        ),
    ),
}

POI_FEATURES: Final[Dict[str, Tuple[str, ...]]] = {
    POIKind.TREASURE.value: ("treasure",),
    POIKind.MERCHANT.value: ("merchant",),
    POIKind.LORE_NPC.value: ("lore_npc",),
    "shortcut": ("shortcut",),
}

# Keyed by exit count: 1 dead end, 2 corridor, 3 junction, 4 crossing.
PASSAGE_TEMPLATES: Final[Dict[int, Tuple[Tuple[str, str], ...]]] = {
    1: (
        ("Dead End", "The passage ends abruptly here. Ancient stones have fallen to block any further progress."),
        ("Collapsed Passage", "Rubble fills this end of the tunnel. Whatever lay beyond is now inaccessible."),
        ("Blocked Tunnel", "The walls close in here, with no way forward. Scratches on the stone suggest others have tried to dig through."),
        ("Sealed Alcove", "A small alcove marks the end of this path. Cobwebs hang thick in the corners."),
        ("Rubble-Filled Chamber", "The tunnel terminates in a pile of collapsed masonry. The air is stale and musty."),
    ),
    2: (
        ("Winding Passage", "A narrow passage winds through the ancient stone. The walls bear the marks of countless travelers."),
        ("Stone Corridor", "This corridor stretches into darkness in both directions. The stones are worn smooth by age."),
        ("Ancient Tunnel", "An ancient tunnel carved through solid rock. Strange symbols are barely visible on the walls."),
        ("Dusty Hallway", "Dust coats every surface of this forgotten hallway. Your footsteps echo eerily."),
        ("Forgotten Path", "A path through the labyrinth that few have walked in ages. The silence is oppressive."),
    ),
    3: (
        ("Junction", "The passage branches here, offering multiple routes through the labyrinth."),
        ("Crossroads", "A crossroads in the ancient maze. Scratched arrows on the walls point in different directions."),
        ("Three-Way Split", "Three passages meet at this junction. The air currents hint at the paths ahead."),
        ("Branching Passage", "The tunnel splits here. Each direction looks equally dark and foreboding."),
        ("Fork in the Path", "A fork in the winding path. Someone has left old torch stubs at the base of one wall."),
    ),
    4: (
        ("Central Chamber", "A central chamber where four passages meet. The ceiling rises higher here, giving a sense of space."),
        ("Grand Intersection", "A grand intersection in the labyrinth. Worn carvings suggest this was once an important location."),
        ("Four-Way Crossing", "Four passages converge at this crossing. The stone floor is worn into grooves by countless feet."),
        ("Hub Chamber", "A hub chamber connecting multiple routes. The air here moves freely, carrying distant sounds."),
        ("Meeting of Paths", "Four paths meet in this open space. Ancient pillars support the ceiling at each corner."),
    ),
}


def flavor_variant(x: int, y: int, choices: int) -> int:
    """Deterministic template index for a cell."""
    return (x + y * 3) % choices


def passage_flavor(cell: Cell) -> Tuple[str, str]:
    # A single-cell grid is the only way to get zero exits; treat it as a dead end.
    exits = min(max(cell.exit_count, 1), 4)
    templates = PASSAGE_TEMPLATES[exits]
    return templates[flavor_variant(cell.x, cell.y, len(templates))]


# --- Room construction ---


def build_exits(
    grid: Grid, cell: Cell, shortcut_partners: Mapping[Tuple[int, int], Tuple[int, int]]
) -> Dict[str, str]:
    exits: Dict[str, str] = {}
    for direction in ALL_DIRECTIONS:
        if cell.has_wall(direction):
            continue
        nx, ny = grid.neighbor(cell.x, cell.y, direction)
        if grid.in_bounds(nx, ny):
            exits[direction.exit_name] = room_id(nx, ny)
    partner = shortcut_partners.get((cell.x, cell.y))
    if partner is not None:
        exits[PORTAL_EXIT] = room_id(*partner)
    return exits


def cell_to_room(
    grid: Grid, cell: Cell, shortcut_partners: Mapping[Tuple[int, int], Tuple[int, int]]
) -> Room:
    """Build the room for one cell, in priority order gate > POI > passage."""
    classification = cell.classification
    room_type = ROOM_TYPE_PASSAGE
    features: Tuple[str, ...] = ()

    if isinstance(classification, Gate):
        city = classification.info.city_name
        name = f"{city} Gate"
        description = GATE_DESCRIPTION.format(city=city)
        room_type = ROOM_TYPE_GATE
        features = ("gate", "labyrinth_entrance")
    elif isinstance(classification, (PointOfInterest, ShortcutEndpoint)):
        key = (
            classification.kind.value
            if isinstance(classification, PointOfInterest)
            else "shortcut"
        )
        templates = POI_TEMPLATES[key]
        name, description = templates[flavor_variant(cell.x, cell.y, len(templates))]
        features = POI_FEATURES[key]
    else:
        name, description = passage_flavor(cell)

    exits = build_exits(grid, cell, shortcut_partners)
    return Room(
        id=room_id(cell.x, cell.y),
        name=name,
        description=description,
        type=room_type,
        features=features,
        exits=MappingProxyType(exits),
    )


def shortcut_partner_map(
    shortcuts: Iterable[ShortcutPair],
) -> Dict[Tuple[int, int], Tuple[int, int]]:
    partners: Dict[Tuple[int, int], Tuple[int, int]] = {}
    for pair in shortcuts:
        partners[pair.a] = pair.b
        partners[pair.b] = pair.a
    return partners


def build_rooms(grid: Grid, shortcuts: Sequence[ShortcutPair] = ()) -> Dict[str, Room]:
    """Walk every cell once and return rooms keyed by identifier.

    Reads the grid only, so calling it again on the same grid gives an equal
    room set.
    """
    partners = shortcut_partner_map(shortcuts)
    rooms: Dict[str, Room] = {}
    for cell in grid.cells():
        room = cell_to_room(grid, cell, partners)
        rooms[room.id] = room
    log.info("Rooms built", count=len(rooms))
    return rooms


# --- Document ---


def build_document(
    width: int,
    height: int,
    seed: int,
    gates: Sequence[GateInfo],
    shortcuts: Sequence[ShortcutPair],
    rooms: Mapping[str, Room],
) -> Dict[str, Any]:
    """Assemble the plain-data document in its fixed key order."""
    ordered_rooms = sorted(rooms.items(), key=lambda item: item[0])
    return {
        "width": width,
        "height": height,
        "generated_seed": seed,
        "gates": [
            {
                "city_id": gate.city_id,
                "city_name": gate.city_name,
                "room_id": room_id(gate.x, gate.y),
            }
            for gate in gates
        ],
        "shortcuts": [
            {"room_a": room_id(*pair.a), "room_b": room_id(*pair.b)} for pair in shortcuts
        ],
        "rooms": {rid: room.to_record() for rid, room in ordered_rooms},
    }


def dump_document(document: Mapping[str, Any]) -> str:
    """Render the document as YAML text, header comment included."""
    header = (
        "# The Great Labyrinth - Connecting all cities\n"
        f"# Generated maze: {document['width']}x{document['height']} grid\n"
        f"# Total rooms: {len(document['rooms'])}\n\n"
    )
    body = yaml.safe_dump(
        dict(document),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=_YAML_WIDTH,
        indent=2,
    )
    return header + body


def write_document(document: Mapping[str, Any], out_dir: Path | str) -> Path:
    """Write ``labyrinth.yaml`` into ``out_dir`` and return its path.

    ``OSError`` propagates to the caller.
    """
    path = Path(out_dir) / DOCUMENT_FILENAME
    text = dump_document(document)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    log.info("Labyrinth document written", path=str(path), bytes=len(text.encode("utf-8")))
    return path


__all__ = [
    "DOCUMENT_FILENAME",
    "EXIT_ORDER",
    "PORTAL_EXIT",
    "ROOM_TYPE_GATE",
    "ROOM_TYPE_PASSAGE",
    "Room",
    "build_document",
    "build_exits",
    "build_rooms",
    "cell_to_room",
    "dump_document",
    "flavor_variant",
    "passage_flavor",
    "room_id",
    "shortcut_partner_map",
    "write_document",
]
