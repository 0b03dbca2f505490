"""
Support Propagator
==================

Marks every cell held up by the floor, directly or through its component.
"""

from __future__ import annotations

from typing import Optional

from driller.core.connectivity import Components, group_by_label
from driller.core.grid import Grid, Position


def _rests_on_support(grid: Grid, pos: Position) -> bool:
    """True if the cell is on the bottom row or sits on a supported cell."""
    below = grid.below(pos)
    if below is None:
        return True
    below_cell = grid.cell(below)
    return not below_cell.is_empty and below_cell.supported


def propagate_support(grid: Grid, components: Optional[Components] = None) -> int:
    """
    Recompute the `supported` flag of every cell.

    Rows are swept from the bottom up. A non-empty cell resting on the floor
    or on supported material is supported; for a block, its whole component
    becomes supported and every member's fall animation is cancelled.

    A component can be supported through a member higher up than cells that
    were already swept, so sweeps repeat until nothing changes.

    Args:
        grid: Labeled grid to update in place.
        components: Label to members mapping. Rebuilt from current labels if None.

    Returns:
        Number of supported cells.
    """
    if components is None:
        components = group_by_label(grid)

    for pos in grid.positions():
        grid.cell(pos).supported = False

    supported_count = 0
    changed = True
    while changed:
        changed = False
        for pos in grid.positions_bottom_up():
            cell = grid.cell(pos)
            if cell.is_empty or cell.supported:
                continue
            if not _rests_on_support(grid, pos):
                continue

            if cell.is_air or cell.label is None:
                cell.supported = True
                cell.reset_phase()
                supported_count += 1
            else:
                for member in components.get(cell.label, [pos]):
                    member_cell = grid.cell(member)
                    # Members erased since labeling are skipped
                    if member_cell.is_block and not member_cell.supported:
                        member_cell.supported = True
                        member_cell.reset_phase()
                        supported_count += 1
            changed = True

    return supported_count
