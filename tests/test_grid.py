"""
Tests for the grid model and positions.
"""

import pytest

from driller.core.cell import BlockColor, Cell, CellKind, FallPhase
from driller.core.grid import Direction, Grid, Position


@pytest.fixture
def grid():
    return Grid(9, 4)


class TestBounds:
    """Positions are validated against the grid size."""

    def test_position_in_bounds(self, grid):
        pos = grid.position(8, 3)
        assert pos.x == 8
        assert pos.y == 3

    @pytest.mark.parametrize("x,y", [(9, 0), (-1, 0), (0, 4), (0, -1)])
    def test_position_out_of_bounds(self, grid, x, y):
        with pytest.raises(IndexError):
            grid.position(x, y)

    def test_cell_out_of_bounds(self, grid):
        with pytest.raises(IndexError):
            grid.cell(Position(y=10, x=0))

    def test_row_out_of_bounds(self, grid):
        with pytest.raises(IndexError):
            grid.row(4)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            Grid(0, 3)

    def test_new_grid_is_empty(self, grid):
        assert grid.count_non_empty() == 0
        assert all(grid.cell(pos).is_empty for pos in grid.positions())


class TestNeighbors:
    """Neighbor lookup, bounded and wrapping."""

    def test_neighbor_inside(self, grid):
        pos = grid.position(4, 2)
        assert grid.neighbor(pos, Direction.LEFT) == grid.position(3, 2)
        assert grid.neighbor(pos, Direction.RIGHT) == grid.position(5, 2)
        assert grid.neighbor(pos, Direction.UP) == grid.position(4, 1)
        assert grid.neighbor(pos, Direction.DOWN) == grid.position(4, 3)

    def test_neighbor_none_at_edges(self, grid):
        corner = grid.position(0, 0)
        assert grid.neighbor(corner, Direction.LEFT) is None
        assert grid.neighbor(corner, Direction.UP) is None
        far = grid.position(8, 3)
        assert grid.neighbor(far, Direction.RIGHT) is None
        assert grid.neighbor(far, Direction.DOWN) is None

    def test_neighbors_skip_edges(self, grid):
        assert len(list(grid.neighbors(grid.position(0, 0)))) == 2
        assert len(list(grid.neighbors(grid.position(4, 2)))) == 4

    def test_wrap_neighbors(self):
        grid = Grid(9, 4, wrap=True)
        corner = grid.position(0, 0)
        assert grid.neighbor(corner, Direction.LEFT) == grid.position(8, 0)
        assert grid.neighbor(corner, Direction.UP) is None
        assert len(list(grid.neighbors(corner))) == 3

    def test_wrap_rows_stay_bounded(self):
        grid = Grid(9, 4, wrap=True)
        bottom = grid.position(5, 3)
        assert grid.neighbor(bottom, Direction.DOWN) is None
        assert grid.neighbor(bottom, Direction.RIGHT) == grid.position(6, 3)

    def test_below_never_wraps(self):
        grid = Grid(9, 4, wrap=True)
        assert grid.below(grid.position(3, 3)) is None
        assert grid.below(grid.position(3, 2)) == grid.position(3, 3)

    def test_direction_opposite(self):
        assert Direction.LEFT.opposite() is Direction.RIGHT
        assert Direction.UP.opposite() is Direction.DOWN


class TestIteration:
    """Scan orders."""

    def test_positions_row_major(self, grid):
        positions = list(grid.positions())
        assert positions[0] == Position(y=0, x=0)
        assert positions[1] == Position(y=0, x=1)
        assert positions[9] == Position(y=1, x=0)
        assert positions == sorted(positions)

    def test_positions_bottom_up(self, grid):
        positions = list(grid.positions_bottom_up())
        assert positions[0] == Position(y=3, x=0)
        assert positions[-1] == Position(y=0, x=8)
        assert len(positions) == 36


class TestMutation:
    """Placing and clearing cells."""

    def test_set_block(self, grid):
        pos = grid.position(2, 1)
        grid.set_block(pos, BlockColor.BLUE, 100)
        cell = grid.cell(pos)
        assert cell.is_block
        assert cell.color is BlockColor.BLUE
        assert cell.durability == 100
        assert grid.count_kind(CellKind.BLOCK) == 1

    def test_set_air_replaces_block(self, grid):
        pos = grid.position(2, 1)
        grid.set_block(pos, BlockColor.RED, 100)
        grid.set_air(pos)
        assert grid.cell(pos).is_air
        assert grid.cell(pos).durability == 0

    def test_set_block_drops_transient_state(self, grid):
        pos = grid.position(2, 1)
        grid.set_air(pos)
        cell = grid.cell(pos)
        cell.supported = True
        cell.phase = FallPhase.FALLING
        cell.phase_frames = 2

        grid.set_block(pos, BlockColor.GREEN, 40)
        assert cell == Cell.block(BlockColor.GREEN, 40)

    def test_passable_kinds(self, grid):
        pos = grid.position(2, 1)
        assert grid.cell(pos).is_passable
        grid.set_air(pos)
        assert grid.cell(pos).is_passable
        grid.set_block(pos, BlockColor.RED, 100)
        assert not grid.cell(pos).is_passable

    def test_clear_drops_transient_state(self, grid):
        pos = grid.position(2, 1)
        grid.set_block(pos, BlockColor.RED, 100)
        cell = grid.cell(pos)
        cell.label = pos
        cell.supported = True
        cell.phase = FallPhase.SHAKING
        cell.phase_frames = 3
        cell.just_landed = True

        grid.clear_cell(pos)
        assert cell.is_empty
        assert cell.label is None
        assert not cell.supported
        assert cell.phase is FallPhase.IDLE
        assert cell.phase_frames == 0
        assert not cell.just_landed


class TestTextFormat:
    """from_rows / dump."""

    def test_from_rows(self):
        grid = Grid.from_rows(["Rb.", "oCG"])
        assert grid.width == 3
        assert grid.height == 2
        assert grid.cell_at(0, 0).color is BlockColor.RED
        assert grid.cell_at(1, 0).color is BlockColor.BROWN
        assert grid.cell_at(2, 0).is_empty
        assert grid.cell_at(0, 1).is_air
        assert grid.cell_at(1, 1).color is BlockColor.CLEAR

    def test_dump(self):
        grid = Grid.from_rows(["Rb.", "oCG"])
        assert grid.dump() == "  0: Rb.\n  1: oCG"
        assert grid.dump(rows=(1, 2)) == "  1: oCG"

    def test_uneven_rows(self):
        with pytest.raises(ValueError):
            Grid.from_rows(["RR", "R"])

    def test_unknown_symbol(self):
        with pytest.raises(ValueError):
            Grid.from_rows(["R?"])
