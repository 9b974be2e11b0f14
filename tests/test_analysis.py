import pytest

from game_rng import GameRNG
from labyrinth.analysis import (
    dead_ends,
    exit_tables,
    has_cycle,
    is_connected,
    is_perfect_maze,
    portal_pairs,
    reachable_cells,
    unreachable_rooms,
)
from labyrinth.carving import carve_maze
from labyrinth.grid import Direction, Grid
from labyrinth.serialization import build_rooms


def test_carved_grid_is_perfect():
    grid = Grid(15, 11)
    carve_maze(grid, GameRNG(seed=21))
    assert is_perfect_maze(grid)
    assert len(reachable_cells(grid, (0, 0))) == 165


def test_fresh_grid_is_disconnected():
    grid = Grid(3, 3)
    assert not is_connected(grid)
    assert not is_perfect_maze(grid)
    assert reachable_cells(grid) == {(1, 1)}


def test_loop_detected():
    grid = Grid(2, 2)
    grid.remove_wall(0, 0, Direction.EAST)
    grid.remove_wall(0, 0, Direction.SOUTH)
    grid.remove_wall(1, 0, Direction.SOUTH)
    assert not has_cycle(grid)
    grid.remove_wall(0, 1, Direction.EAST)
    assert has_cycle(grid)
    assert is_connected(grid)
    assert not is_perfect_maze(grid)


def test_dead_ends_of_corridor():
    grid = Grid(3, 2)
    grid.remove_wall(0, 0, Direction.EAST)
    grid.remove_wall(1, 0, Direction.EAST)
    assert dead_ends(grid) == [(0, 0), (2, 0)]


def test_unreachable_rooms():
    exits = {
        "a": {"east": "b"},
        "b": {"west": "a"},
        "c": {"north": "a"},
        "d": {},
    }
    assert unreachable_rooms(exits, "a") == ["c", "d"]
    assert unreachable_rooms(exits, "c") == ["d"]


def test_unreachable_rooms_unknown_start():
    with pytest.raises(KeyError):
        unreachable_rooms({"a": {}}, "zzz")


def test_exit_tables_accepts_rooms_and_records():
    grid = Grid(2, 2)
    grid.remove_wall(0, 0, Direction.EAST)
    rooms = build_rooms(grid)
    from_rooms = exit_tables(rooms)
    from_records = exit_tables({rid: room.to_record() for rid, room in rooms.items()})
    assert dict(from_rooms["labyrinth_0_0"]) == {"east": "labyrinth_1_0"}
    assert from_records["labyrinth_0_0"] == {"east": "labyrinth_1_0"}
    assert from_records["labyrinth_1_1"] == {}


def test_portal_pairs():
    tables = {
        "x": {"portal": "y", "north": "z"},
        "y": {"portal": "x"},
        "z": {"south": "x"},
    }
    assert list(portal_pairs(tables)) == [("x", "y"), ("y", "x")]
