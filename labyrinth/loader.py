"""Read a generated ``labyrinth.yaml`` back into a read-only index.

This is the document-consuming half of the world loader: rooms indexed by id,
exits resolved against rooms in the same document, and gates exposed as the
labyrinth-side endpoints of city connections.  Exits naming rooms outside the
document are dropped here; joining gates to real city rooms happens in the
game server, not in this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog
import yaml

log = structlog.get_logger(__name__)

GATE_ROOM_TYPE = "labyrinth_gate"
PASSAGE_ROOM_TYPE = "labyrinth"


class LabyrinthLoadError(ValueError):
    """The document is empty or does not have the expected shape."""


@dataclass(frozen=True)
class LoadedGate:
    city_id: str
    city_name: str
    room_id: str


@dataclass(frozen=True)
class LoadedShortcut:
    room_a: str
    room_b: str


@dataclass(frozen=True)
class LoadedRoom:
    id: str
    name: str
    description: str
    type: str
    features: Tuple[str, ...] = ()
    exits: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def has_feature(self, feature: str) -> bool:
        return feature in self.features


def parse_room_type(value: Any) -> str:
    # Unknown tags fall back to an ordinary passage.
    return GATE_ROOM_TYPE if value == GATE_ROOM_TYPE else PASSAGE_ROOM_TYPE


class Labyrinth:
    """Index over one loaded labyrinth document."""

    def __init__(
        self,
        width: int,
        height: int,
        seed: Optional[int],
        rooms: Dict[str, LoadedRoom],
        gates: List[LoadedGate],
        shortcuts: List[LoadedShortcut],
    ) -> None:
        self.width = width
        self.height = height
        self.seed = seed
        self._rooms = rooms
        self._gates = list(gates)
        self._shortcuts = list(shortcuts)
        self._gate_rooms = {gate.city_id: gate.room_id for gate in gates}

    @property
    def rooms(self) -> Mapping[str, LoadedRoom]:
        return MappingProxyType(self._rooms)

    @property
    def shortcuts(self) -> List[LoadedShortcut]:
        return list(self._shortcuts)

    def get_room(self, room_id: str) -> Optional[LoadedRoom]:
        return self._rooms.get(room_id)

    def room_count(self) -> int:
        return len(self._rooms)

    def is_labyrinth_room(self, room_id: str) -> bool:
        return room_id in self._rooms

    def all_gates(self) -> List[LoadedGate]:
        return list(self._gates)

    def gate_room_for_city(self, city_id: str) -> Optional[LoadedRoom]:
        room_id = self._gate_rooms.get(city_id)
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def city_for_gate_room(self, room_id: str) -> Optional[str]:
        for gate in self._gates:
            if gate.room_id == room_id:
                return gate.city_id
        return None


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise LabyrinthLoadError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def build_labyrinth(config: Mapping[str, Any] | None) -> Labyrinth:
    """Create a :class:`Labyrinth` from an already-parsed document."""
    if not config:
        raise LabyrinthLoadError("labyrinth configuration is empty")
    config = _require_mapping(config, "labyrinth document")
    if not config.get("rooms"):
        raise LabyrinthLoadError("labyrinth configuration has no rooms")
    room_defs = _require_mapping(config["rooms"], "rooms")

    try:
        gates = [
            LoadedGate(str(g["city_id"]), str(g["city_name"]), str(g["room_id"]))
            for g in config.get("gates") or []
        ]
        shortcuts = [
            LoadedShortcut(str(s["room_a"]), str(s["room_b"]))
            for s in config.get("shortcuts") or []
        ]
    except (KeyError, TypeError) as e:
        raise LabyrinthLoadError(f"malformed gate or shortcut entry: {e}") from e

    # First pass collects ids so exits can be checked against the full set.
    known = set(room_defs)
    rooms: Dict[str, LoadedRoom] = {}
    dropped = 0
    for rid, raw in room_defs.items():
        definition = _require_mapping(raw, f"room {rid!r}")
        exits: Dict[str, str] = {}
        for direction, target in (definition.get("exits") or {}).items():
            if target in known:
                exits[str(direction)] = str(target)
            else:
                dropped += 1
                log.debug("Dropping exit to unknown room", room=rid, direction=direction, target=target)
        rooms[str(rid)] = LoadedRoom(
            id=str(rid),
            name=str(definition.get("name", "")),
            description=str(definition.get("description", "")),
            type=parse_room_type(definition.get("type")),
            features=tuple(str(f) for f in definition.get("features") or ()),
            exits=MappingProxyType(exits),
        )

    labyrinth = Labyrinth(
        width=int(config.get("width", 0)),
        height=int(config.get("height", 0)),
        seed=config.get("generated_seed"),
        rooms=rooms,
        gates=gates,
        shortcuts=shortcuts,
    )
    log.info(
        "Labyrinth loaded",
        rooms=labyrinth.room_count(),
        gates=len(gates),
        shortcuts=len(shortcuts),
        dropped_exits=dropped,
    )
    return labyrinth


def load_labyrinth(path: Path | str) -> Labyrinth:
    """Load and index a labyrinth document from disk."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error("Error parsing labyrinth YAML", path=str(path), error=str(e))
        raise
    return build_labyrinth(config)


__all__ = [
    "Labyrinth",
    "LabyrinthLoadError",
    "LoadedGate",
    "LoadedRoom",
    "LoadedShortcut",
    "build_labyrinth",
    "load_labyrinth",
    "parse_room_type",
]
