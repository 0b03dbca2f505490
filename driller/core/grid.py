"""
Grid
====

Fixed-size 2D array of cells with bounds-checked positions and neighbor lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from driller.core.cell import Cell, CellKind, BlockColor


class Direction(Enum):
    """Cardinal directions. Row indices grow downward."""
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES: Dict[Direction, Direction] = {
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}


@dataclass(frozen=True, order=True)
class Position:
    """Grid coordinate. Ordering is row-major (y first)."""
    y: int
    x: int

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"


class Grid:
    """
    Bounded grid of cells, indexed as cells[y][x].

    Positions are only ever built through `position()`, which rejects
    out-of-range coordinates. With `wrap=True`, the left and right edges join;
    the top and bottom rows never do.
    """

    def __init__(self, width: int, height: int, wrap: bool = False):
        """
        Create an all-empty grid.

        Args:
            width: Number of columns.
            height: Number of rows.
            wrap: Whether the left and right edges join.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._wrap = wrap
        self._cells: List[List[Cell]] = [
            [Cell() for _ in range(width)] for _ in range(height)
        ]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def wrap(self) -> bool:
        return self._wrap

    @property
    def bottom_row(self) -> int:
        return self._height - 1

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def position(self, x: int, y: int) -> Position:
        """
        Build a validated position.

        Raises:
            IndexError: If (x, y) lies outside the grid.
        """
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Position ({x}, {y}) out of range [0, {self._width}) x [0, {self._height})"
            )
        return Position(y=y, x=x)

    def cell(self, position: Position) -> Cell:
        """Get the cell at a position."""
        if not self.in_bounds(position.x, position.y):
            raise IndexError(f"{position!r} out of range for {self._width}x{self._height} grid")
        return self._cells[position.y][position.x]

    def cell_at(self, x: int, y: int) -> Cell:
        """Get the cell at raw coordinates."""
        return self.cell(self.position(x, y))

    def neighbor(self, position: Position, direction: Direction) -> Optional[Position]:
        """
        Get the adjacent position in a direction.

        Returns:
            The neighbor position, or None past the top or bottom row, and
            past the left or right edge unless the grid wraps.
        """
        x = position.x + direction.dx
        y = position.y + direction.dy
        if self._wrap:
            x %= self._width
        if not self.in_bounds(x, y):
            return None
        return Position(y=y, x=x)

    def neighbors(self, position: Position) -> Iterator[Position]:
        """Iterate over in-bounds 4-neighbors."""
        for direction in Direction:
            pos = self.neighbor(position, direction)
            if pos is not None:
                yield pos

    def below(self, position: Position) -> Optional[Position]:
        """Downward neighbor. Never wraps: the floor is always a hard boundary."""
        if position.y + 1 >= self._height:
            return None
        return Position(y=position.y + 1, x=position.x)

    def positions(self) -> Iterator[Position]:
        """All positions in row-major order (top to bottom, left to right)."""
        for y in range(self._height):
            for x in range(self._width):
                yield Position(y=y, x=x)

    def positions_bottom_up(self) -> Iterator[Position]:
        """All positions, bottom row first."""
        for y in range(self._height - 1, -1, -1):
            for x in range(self._width):
                yield Position(y=y, x=x)

    def row(self, y: int) -> List[Cell]:
        if not 0 <= y < self._height:
            raise IndexError(f"Row {y} out of range [0, {self._height})")
        return self._cells[y]

    def set_block(self, position: Position, color: BlockColor, durability: int) -> None:
        """Place a block, replacing whatever was there."""
        self.cell(position).copy_from(Cell.block(color, durability))

    def set_air(self, position: Position) -> None:
        """Place an air pocket, replacing whatever was there."""
        self.cell(position).copy_from(Cell.air())

    def clear_cell(self, position: Position) -> None:
        self.cell(position).clear()

    def count_non_empty(self) -> int:
        return sum(1 for row in self._cells for cell in row if not cell.is_empty)

    def count_kind(self, kind: CellKind) -> int:
        return sum(1 for row in self._cells for cell in row if cell.kind is kind)

    def dump(self, rows: Optional[Tuple[int, int]] = None) -> str:
        """
        Text view of the grid for debugging.

        Blocks print as the first letter of their color (lowercase for
        brown), air as 'o' and empty as '.'.

        Args:
            rows: Optional (start, stop) row range.
        """
        start, stop = rows if rows is not None else (0, self._height)
        symbols = {
            BlockColor.RED: "R",
            BlockColor.YELLOW: "Y",
            BlockColor.GREEN: "G",
            BlockColor.BLUE: "B",
            BlockColor.CLEAR: "C",
            BlockColor.BROWN: "b",
        }
        lines = []
        for y in range(max(0, start), min(self._height, stop)):
            chars = []
            for cell in self._cells[y]:
                if cell.is_block:
                    chars.append(symbols[cell.color])
                elif cell.is_air:
                    chars.append("o")
                else:
                    chars.append(".")
            lines.append(f"{y:3d}: {''.join(chars)}")
        return "\n".join(lines)

    @classmethod
    def from_rows(cls, rows: List[str], block_life: int = 100, wrap: bool = False) -> "Grid":
        """
        Build a grid from the `dump()` symbol format (without row numbers).

        Useful for setting up scenarios in tests and tools.
        """
        if not rows:
            raise ValueError("from_rows needs at least one row")
        width = len(rows[0])
        colors = {
            "R": BlockColor.RED,
            "Y": BlockColor.YELLOW,
            "G": BlockColor.GREEN,
            "B": BlockColor.BLUE,
            "C": BlockColor.CLEAR,
            "b": BlockColor.BROWN,
        }
        grid = cls(width, len(rows), wrap=wrap)
        for y, line in enumerate(rows):
            if len(line) != width:
                raise ValueError(f"Row {y} has width {len(line)}, expected {width}")
            for x, ch in enumerate(line):
                pos = grid.position(x, y)
                if ch in colors:
                    grid.set_block(pos, colors[ch], block_life)
                elif ch == "o":
                    grid.set_air(pos)
                elif ch != ".":
                    raise ValueError(f"Unknown cell symbol {ch!r} at ({x}, {y})")
        return grid
