import pytest
import yaml

from labyrinth.grid import (
    Direction,
    Gate,
    GateInfo,
    Grid,
    POIKind,
    PointOfInterest,
    ShortcutEndpoint,
    ShortcutSide,
)
from labyrinth.placement import ShortcutPair
from labyrinth.serialization import (
    DOCUMENT_FILENAME,
    build_document,
    build_rooms,
    dump_document,
    room_id,
    write_document,
)


@pytest.fixture
def small_grid():
    """2x2 tree: (0,0) joins east and south, (1,0) joins south."""
    grid = Grid(2, 2)
    grid.remove_wall(0, 0, Direction.EAST)
    grid.remove_wall(0, 0, Direction.SOUTH)
    grid.remove_wall(1, 0, Direction.SOUTH)
    return grid


def test_room_id_format():
    assert room_id(0, 0) == "labyrinth_0_0"
    assert room_id(12, 3) == "labyrinth_12_3"


def test_passage_rooms(small_grid):
    rooms = build_rooms(small_grid)
    assert set(rooms) == {"labyrinth_0_0", "labyrinth_1_0", "labyrinth_0_1", "labyrinth_1_1"}
    corner = rooms["labyrinth_0_0"]
    assert corner.type == "labyrinth"
    assert corner.features == ()
    assert corner.name == "Winding Passage"
    assert list(corner.exits) == ["south", "east"]
    assert corner.exits["east"] == "labyrinth_1_0"
    assert rooms["labyrinth_1_1"].name == "Rubble-Filled Chamber"
    assert dict(rooms["labyrinth_1_1"].exits) == {"north": "labyrinth_1_0"}


def test_gate_room(small_grid):
    small_grid.set_classification(0, 0, Gate(GateInfo("orc", "Skullgar", 0, 0)))
    room = build_rooms(small_grid)["labyrinth_0_0"]
    assert room.name == "Skullgar Gate"
    assert room.type == "labyrinth_gate"
    assert room.features == ("gate", "labyrinth_entrance")
    assert "Skullgar" in room.description


def test_poi_and_portal_rooms(small_grid):
    small_grid.set_classification(1, 0, PointOfInterest(POIKind.MERCHANT))
    small_grid.set_classification(0, 1, ShortcutEndpoint(0, ShortcutSide.A))
    small_grid.set_classification(1, 1, ShortcutEndpoint(0, ShortcutSide.B))
    rooms = build_rooms(small_grid, [ShortcutPair(0, (0, 1), (1, 1))])

    merchant = rooms["labyrinth_1_0"]
    assert merchant.features == ("merchant",)
    assert merchant.type == "labyrinth"

    portal = rooms["labyrinth_0_1"]
    assert portal.name == "Shimmering Threshold"
    assert portal.features == ("shortcut",)
    assert list(portal.exits) == ["north", "portal"]
    assert portal.exits["portal"] == "labyrinth_1_1"
    assert rooms["labyrinth_1_1"].exits["portal"] == "labyrinth_0_1"


def test_build_rooms_is_repeatable(small_grid):
    assert build_rooms(small_grid) == build_rooms(small_grid)


def test_record_omits_empty_fields():
    grid = Grid(2, 2)
    record = build_rooms(grid)["labyrinth_0_0"].to_record()
    assert list(record) == ["name", "description", "type"]


def _document(grid, seed=5):
    gates = [GateInfo("orc", "Skullgar", 0, 0)]
    grid.set_classification(0, 0, Gate(gates[0]))
    return build_document(grid.width, grid.height, seed, gates, [], build_rooms(grid))


def test_document_layout(small_grid):
    document = _document(small_grid)
    assert list(document) == ["width", "height", "generated_seed", "gates", "shortcuts", "rooms"]
    assert document["generated_seed"] == 5
    assert document["gates"] == [
        {"city_id": "orc", "city_name": "Skullgar", "room_id": "labyrinth_0_0"}
    ]
    assert document["shortcuts"] == []
    assert list(document["rooms"]) == sorted(document["rooms"])


def test_rooms_sorted_as_strings():
    grid = Grid(12, 2)
    document = build_document(12, 2, 1, [], [], build_rooms(grid))
    ids = list(document["rooms"])
    assert ids == sorted(ids)
    assert ids.index("labyrinth_10_0") < ids.index("labyrinth_1_0")


def test_dump_has_header_and_parses_back(small_grid):
    document = _document(small_grid)
    text = dump_document(document)
    assert text.startswith(
        "# The Great Labyrinth - Connecting all cities\n"
        "# Generated maze: 2x2 grid\n"
        "# Total rooms: 4\n\n"
    )
    assert text.index("width:") < text.index("height:") < text.index("generated_seed:")
    assert text.index("labyrinth_0_0:") < text.index("labyrinth_0_1:") < text.index("labyrinth_1_0:")
    assert yaml.safe_load(text) == document


def test_descriptions_stay_on_one_line(small_grid):
    text = dump_document(_document(small_grid))
    line = next(l for l in text.splitlines() if "Ancient runes carved" in l)
    assert line.strip().startswith("description:")
    assert "almost tangible." in line


def test_write_document(tmp_path, small_grid):
    document = _document(small_grid)
    path = write_document(document, tmp_path)
    assert path == tmp_path / DOCUMENT_FILENAME
    assert path.read_text(encoding="utf-8") == dump_document(document)


def test_write_document_missing_directory(tmp_path, small_grid):
    with pytest.raises(OSError):
        write_document(_document(small_grid), tmp_path / "missing")
