"""
Gravity Engine
==============

Advances the shake/fall animation of unsupported cells and drops them one
row at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from driller.core.cell import Cell, FallPhase
from driller.core.config_loader import GameConfig, get_config
from driller.core.grid import Grid, Position


@dataclass
class GravityResult:
    """Outcome of one gravity pass."""
    moved: List[Position] = field(default_factory=list)    # Destinations of relocated cells
    popped: List[Position] = field(default_factory=list)   # Air pockets burst by falling blocks

    @property
    def any_moved(self) -> bool:
        return bool(self.moved)


class GravityEngine:
    """
    Per-cell gravity.

    Every unsupported, non-empty cell runs IDLE -> SHAKING -> FALLING and
    relocates one row down once both phases are complete. A cell that
    entered the pass unsupported and idle relocates on pass number
    `shake_frames + fall_frames + 1`. A relocated cell keeps its completed
    fall phase, so while it stays unsupported it drops one row per pass.

    The relocation unit is a single cell: same-colored neighbors that are
    supported do not hold an unsupported cell up.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize gravity engine.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._shake_frames = config.gravity.shake_frames
        self._fall_frames = config.gravity.fall_frames

    @property
    def shake_frames(self) -> int:
        return self._shake_frames

    @property
    def fall_frames(self) -> int:
        return self._fall_frames

    @property
    def frames_to_drop(self) -> int:
        """Passes needed for a freshly unsupported cell to move one row."""
        return self._shake_frames + self._fall_frames + 1

    def advance_phase(self, cell: Cell) -> bool:
        """
        Advance one cell's animation by one tick.

        Returns:
            True if the cell has finished falling and should relocate.
        """
        if cell.phase is FallPhase.IDLE:
            cell.phase = FallPhase.SHAKING
            cell.phase_frames = 0

        if cell.phase is FallPhase.SHAKING:
            if cell.phase_frames < self._shake_frames:
                cell.phase_frames += 1
                return False
            cell.phase = FallPhase.FALLING
            cell.phase_frames = 0

        if cell.phase_frames < self._fall_frames:
            cell.phase_frames += 1
            return False
        return True

    def step(self, grid: Grid) -> GravityResult:
        """
        Run one gravity pass over the grid.

        Rows are processed bottom-up so a cell that moves down is never
        processed twice in the same pass.
        """
        result = GravityResult()

        for pos in grid.positions():
            grid.cell(pos).just_landed = False

        for pos in grid.positions_bottom_up():
            cell = grid.cell(pos)
            if cell.is_empty or cell.supported:
                continue

            if not self.advance_phase(cell):
                continue

            below = grid.below(pos)
            if below is None or not grid.cell(below).is_empty:
                # Blocked: hold the completed timer and retry next pass
                continue

            self._relocate(grid, pos, below, result)

        return result

    def _relocate(
        self,
        grid: Grid,
        source: Position,
        dest: Position,
        result: GravityResult
    ) -> None:
        """Move a cell down one row, bursting an air pocket beneath it."""
        src_cell = grid.cell(source)
        dest_cell = grid.cell(dest)
        dest_cell.copy_from(src_cell)
        dest_cell.just_landed = True
        src_cell.clear()
        result.moved.append(dest)

        if not dest_cell.is_block:
            return

        under = grid.below(dest)
        if under is not None and grid.cell(under).is_air:
            grid.clear_cell(under)
            result.popped.append(under)
