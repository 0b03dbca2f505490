"""
Connectivity Labeler
====================

Assigns every block the label of its same-color 4-connected component.
"""

from __future__ import annotations

from typing import Dict, List

from driller.core.grid import Grid, Position

Components = Dict[Position, List[Position]]


def label_components(grid: Grid) -> Components:
    """
    Recompute labels for the whole grid.

    All labels are cleared first. Cells are scanned row-major; each unlabeled
    block seeds a flood fill and its own position becomes the label of every
    cell reached. The fill uses an explicit stack, so component membership
    matches a recursive fill without depending on the recursion limit.

    Args:
        grid: Grid to label in place.

    Returns:
        Mapping of label to member positions, in scan order of the seeds.
    """
    for pos in grid.positions():
        grid.cell(pos).label = None

    components: Components = {}
    for seed in grid.positions():
        seed_cell = grid.cell(seed)
        if not seed_cell.is_block or seed_cell.label is not None:
            continue

        seed_cell.label = seed
        members = [seed]
        stack = [seed]
        while stack:
            pos = stack.pop()
            cell = grid.cell(pos)
            for npos in grid.neighbors(pos):
                ncell = grid.cell(npos)
                if ncell.label is None and ncell.same_block_color(cell):
                    ncell.label = seed
                    members.append(npos)
                    stack.append(npos)

        components[seed] = members

    return components


def group_by_label(grid: Grid) -> Components:
    """
    Group blocks by their current label without relabeling.

    Blocks with no label (placed since the last labeling pass) are skipped.
    """
    components: Components = {}
    for pos in grid.positions():
        cell = grid.cell(pos)
        if cell.is_block and cell.label is not None:
            components.setdefault(cell.label, []).append(pos)
    return components


def component_of(grid: Grid, position: Position) -> List[Position]:
    """All positions sharing the label of the block at `position`."""
    label = grid.cell(position).label
    if label is None:
        return []
    return [
        pos for pos in grid.positions()
        if grid.cell(pos).is_block and grid.cell(pos).label == label
    ]
