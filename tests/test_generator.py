import pytest

from labyrinth.analysis import exit_tables, unreachable_rooms
from labyrinth.generator import GenerationSummary, LabyrinthGenerator
from labyrinth.serialization import dump_document


@pytest.fixture(scope="module")
def default_document():
    return LabyrinthGenerator(40, 40, 42).run()


def test_default_run_is_byte_identical(default_document):
    again = LabyrinthGenerator(40, 40, 42).run()
    assert dump_document(again) == dump_document(default_document)


def test_different_seed_changes_document(default_document):
    other = LabyrinthGenerator(40, 40, 43).run()
    assert dump_document(other) != dump_document(default_document)


def test_default_counts(default_document):
    rooms = default_document["rooms"]
    assert len(rooms) == 1600
    assert default_document["generated_seed"] == 42
    assert [g["city_id"] for g in default_document["gates"]] == [
        "human", "elf", "dwarf", "gnome", "orc"
    ]

    def tagged(feature):
        return sum(1 for r in rooms.values() if feature in r.get("features", []))

    assert 5 <= tagged("treasure") <= 10
    assert 3 <= tagged("merchant") <= 5
    assert 5 <= tagged("lore_npc") <= 8
    assert len(default_document["shortcuts"]) == 2
    assert tagged("shortcut") == 2 * len(default_document["shortcuts"])
    assert sum(1 for r in rooms.values() if r["type"] == "labyrinth_gate") == 5


def test_portals_are_symmetric(default_document):
    rooms = default_document["rooms"]
    for shortcut in default_document["shortcuts"]:
        a, b = shortcut["room_a"], shortcut["room_b"]
        assert rooms[a]["exits"]["portal"] == b
        assert rooms[b]["exits"]["portal"] == a


def test_cardinal_exits_are_symmetric(default_document):
    opposite = {"north": "south", "south": "north", "east": "west", "west": "east"}
    rooms = default_document["rooms"]
    for rid, record in rooms.items():
        for direction, target in record.get("exits", {}).items():
            if direction == "portal":
                continue
            assert rooms[target]["exits"][opposite[direction]] == rid


def test_every_room_reachable_without_portals():
    document = LabyrinthGenerator(10, 10, 1).run()
    tables = {
        rid: {d: t for d, t in exits.items() if d != "portal"}
        for rid, exits in exit_tables(document["rooms"]).items()
    }
    assert unreachable_rooms(tables, "labyrinth_5_5") == []
    assert sum(len(t) for t in tables.values()) == 2 * 99


def test_smallest_grid_generates():
    gen = LabyrinthGenerator(2, 2, 0)
    document = gen.run()
    assert len(document["rooms"]) == 4
    assert len(document["gates"]) == 5
    summary = gen.summary()
    assert summary.rooms == 4
    assert summary.gates == 5


def test_carve_only_once():
    gen = LabyrinthGenerator(5, 5, 1)
    gen.carve()
    with pytest.raises(RuntimeError):
        gen.carve()


def test_place_points_of_interest_only_once():
    gen = LabyrinthGenerator(20, 20, 9)
    gen.carve()
    gen.place_gates()
    gen.place_points_of_interest()
    before = gen.to_document()
    with pytest.raises(RuntimeError):
        gen.place_points_of_interest()
    assert gen.to_document() == before
    for record in before["rooms"].values():
        if "shortcut" in record.get("features", []):
            assert "portal" in record["exits"]


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        LabyrinthGenerator(1, 10, 1)


def test_summary_counts_both_portal_ends():
    summary = GenerationSummary(
        rooms=100, gates=5, treasure=5, merchants=3, lore_npcs=6, shortcut_pairs=2
    )
    assert summary.points_of_interest == 18


def test_stage_results_feed_summary(tmp_path):
    gen = LabyrinthGenerator(20, 20, 9)
    gen.carve()
    gen.place_gates()
    poi_count = gen.place_points_of_interest()
    summary = gen.summary()
    assert poi_count == summary.points_of_interest
    path = gen.write(tmp_path)
    assert path.name == "labyrinth.yaml"
    assert path.read_text(encoding="utf-8").startswith("# The Great Labyrinth")
