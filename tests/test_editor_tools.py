from sprite_editor.core.editor_tools import MAX_HISTORY, HistoryStack, flood_fill, line_points
from sprite_editor.core.pixel_grid import PixelGrid

from conftest import BLUE, GREEN, RED


# ---------- flood fill ----------
def test_fill_scenario_on_small_grid(small_grid):
    small_grid.set(0, 0, RED)
    small_grid.set(1, 0, RED)
    small_grid.set(0, 1, RED)

    flood_fill(small_grid, 0, 0, BLUE)

    assert small_grid.get(0, 0) == BLUE
    assert small_grid.get(1, 0) == BLUE
    assert small_grid.get(0, 1) == BLUE
    assert small_grid.get(1, 1) is None
    assert small_grid.get(2, 2) is None


def test_fill_same_color_is_noop(small_grid):
    small_grid.set(0, 0, RED)
    before = small_grid.copy()
    assert flood_fill(small_grid, 0, 0, RED) == 0
    assert small_grid == before


def test_fill_transparent_with_none_is_noop(small_grid):
    assert flood_fill(small_grid, 2, 2, None) == 0
    assert small_grid.is_empty()


def test_fill_is_idempotent(small_grid):
    flood_fill(small_grid, 0, 0, GREEN)
    after_first = small_grid.copy()
    flood_fill(small_grid, 3, 3, GREEN)
    assert small_grid == after_first


def test_fill_does_not_cross_diagonals_or_boundaries():
    grid = PixelGrid(5)
    # vertical wall at x == 2 splits the grid in two
    for y in range(5):
        grid.set(2, y, RED)
    grid.set(4, 4, GREEN)

    count = flood_fill(grid, 0, 0, BLUE)

    assert count == 10
    for y in range(5):
        for x in range(2):
            assert grid.get(x, y) == BLUE
        assert grid.get(2, y) == RED
        for x in range(3, 5):
            if (x, y) != (4, 4):
                assert grid.get(x, y) is None
    assert grid.get(4, 4) == GREEN


def test_fill_diagonal_neighbour_is_not_connected(small_grid):
    small_grid.set(0, 0, RED)
    small_grid.set(1, 1, RED)
    flood_fill(small_grid, 0, 0, BLUE)
    assert small_grid.get(1, 1) == RED


def test_fill_whole_32_grid_without_recursion():
    grid = PixelGrid()
    assert flood_fill(grid, 16, 16, RED) == 32 * 32
    assert all(c == RED for _, _, c in grid.iter_cells())


def test_fill_out_of_range_seed(small_grid):
    assert flood_fill(small_grid, -1, 9, RED) == 0
    assert small_grid.is_empty()


def test_line_points_includes_both_ends():
    assert list(line_points((0, 0), (3, 0))) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    diagonal = list(line_points((0, 0), (2, 2)))
    assert diagonal[0] == (0, 0) and diagonal[-1] == (2, 2)
    assert list(line_points((1, 1), (1, 1))) == [(1, 1)]


# ---------- history ----------
def _edit(history, grid, x, color=RED):
    history.begin_edit(grid)
    grid.set(x, 0, color)


def test_undo_redo_round_trip():
    history = HistoryStack()
    grid = PixelGrid(4)
    states = [grid.copy()]
    for x in range(3):
        _edit(history, grid, x)
        states.append(grid.copy())

    current = grid
    for expected in reversed(states[:-1]):
        current = history.undo(current)
        assert current == expected
    assert history.undo(current) is None
    assert not history.can_undo

    for expected in states[1:]:
        current = history.redo(current)
        assert current == expected
    assert current == states[-1]
    assert history.redo(current) is None


def test_new_edit_clears_redo():
    history = HistoryStack()
    grid = PixelGrid(4)
    _edit(history, grid, 0)
    grid = history.undo(grid)
    assert history.can_redo

    _edit(history, grid, 1, GREEN)
    assert not history.can_redo
    assert history.redo(grid) is None


def test_continue_edit_adds_no_snapshot():
    history = HistoryStack()
    grid = PixelGrid(4)
    history.begin_edit(grid)
    for x in range(4):
        history.continue_edit()
        grid.set(x, 0, RED)
    assert history.undo_depth == 1
    assert history.undo(grid).is_empty()


def test_capacity_keeps_last_20():
    history = HistoryStack()
    grid = PixelGrid(32)
    for i in range(25):
        history.begin_edit(grid)
        grid.set(i, 0, RED)
    assert history.undo_depth == MAX_HISTORY == 20

    undone = 0
    current = grid
    while True:
        previous = history.undo(current)
        if previous is None:
            break
        current = previous
        undone += 1
    assert undone == 20
    # oldest recoverable state is the one before edit #5
    assert current.get(4, 0) == RED
    assert current.get(5, 0) is None


def test_snapshot_is_independent_of_caller_grid():
    history = HistoryStack()
    grid = PixelGrid(4)
    history.begin_edit(grid)
    grid.set(0, 0, RED)
    assert history.undo(grid).get(0, 0) is None


def test_reset_clears_both():
    history = HistoryStack()
    grid = PixelGrid(4)
    _edit(history, grid, 0)
    _edit(history, grid, 1)
    history.undo(grid)
    history.reset()
    assert not history.can_undo
    assert not history.can_redo
