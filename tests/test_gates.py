import numpy as np
import pytest

from game_rng import GameRNG
from labyrinth.carving import carve_maze
from labyrinth.gates import gate_positions, place_gates
from labyrinth.grid import Gate, Grid

EXPECTED_40 = {
    "human": ("Ironhaven", (20, 0)),
    "elf": ("Sylvanthal", (39, 20)),
    "dwarf": ("Khazad-Karn", (20, 39)),
    "gnome": ("Cogsworth", (0, 20)),
    "orc": ("Skullgar", (0, 0)),
}


def test_gate_positions_for_default_size():
    gates = gate_positions(40, 40)
    assert [g.city_id for g in gates] == ["human", "elf", "dwarf", "gnome", "orc"]
    for gate in gates:
        name, pos = EXPECTED_40[gate.city_id]
        assert gate.city_name == name
        assert (gate.x, gate.y) == pos


@pytest.mark.parametrize("seed", [0, 1, 42, 987654321])
def test_gates_are_seed_independent(seed):
    grid = Grid(40, 40)
    carve_maze(grid, GameRNG(seed=seed))
    gates = place_gates(grid)
    assert {g.city_id: (g.x, g.y) for g in gates} == {k: v[1] for k, v in EXPECTED_40.items()}
    for gate in gates:
        classification = grid.classification(gate.x, gate.y)
        assert isinstance(classification, Gate)
        assert classification.info == gate


def test_gate_placement_keeps_walls():
    grid = Grid(10, 10)
    carve_maze(grid, GameRNG(seed=3))
    before = grid.walls.copy()
    place_gates(grid)
    assert np.array_equal(before, grid.walls)


def test_colliding_gates_keep_first_city():
    # On a 2x2 grid the east and south gates share cell (1, 1).
    grid = Grid(2, 2)
    gates = place_gates(grid)
    assert len(gates) == 5
    assert grid.classification(1, 1).info.city_id == "elf"
