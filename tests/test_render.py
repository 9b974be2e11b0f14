from labyrinth.grid import Direction, Gate, GateInfo, Grid, POIKind, PointOfInterest
from labyrinth.render import LEGEND, cell_symbol, render_grid


def _small_grid():
    grid = Grid(2, 2)
    grid.remove_wall(0, 0, Direction.EAST)
    grid.remove_wall(0, 0, Direction.SOUTH)
    grid.remove_wall(1, 0, Direction.SOUTH)
    return grid


def test_render_small_grid():
    lines = render_grid(_small_grid()).split("\n")
    assert lines == [
        "",
        " [.]--[.]",
        "  |    |",
        "  |    |",
        " [x]  [x]",
        "",
        "",
    ]


def test_special_cells_use_their_symbols():
    grid = _small_grid()
    grid.set_classification(0, 0, Gate(GateInfo("orc", "Skullgar", 0, 0)))
    grid.set_classification(1, 1, PointOfInterest(POIKind.TREASURE))
    assert cell_symbol(grid.cell(0, 0)) == "G"
    assert cell_symbol(grid.cell(1, 1)) == "$"
    text = render_grid(grid)
    assert " [G]--[.]" in text
    assert " [x]  [$]" in text


def test_legend_appended_on_request():
    grid = _small_grid()
    assert "Legend:" not in render_grid(grid)
    assert render_grid(grid, legend=True).endswith(LEGEND)
