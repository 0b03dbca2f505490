"""
Cascade Eraser
==============

Erases components that a falling block has just joined once they reach the
size threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set

from driller.core.config_loader import GameConfig, get_config
from driller.core.connectivity import Components, group_by_label
from driller.core.grid import Grid, Position


@dataclass
class CascadeResult:
    """A single erased component."""
    label: Position
    members: List[Position]

    @property
    def size(self) -> int:
        return len(self.members)


class CascadeEraser:
    """
    Erases just-landed components of at least `cascade_threshold` blocks.

    Must run after a gravity pass and a fresh labeling pass. Erasing removes
    support from material above, which falls on later ticks and can trigger
    further erasures.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize cascade eraser.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._threshold = config.gravity.cascade_threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def erase(self, grid: Grid, components: Optional[Components] = None) -> List[CascadeResult]:
        """
        Scan for just-landed blocks and erase their large components.

        Args:
            grid: Labeled grid, modified in place.
            components: Label to members mapping. Rebuilt from labels if None.

        Returns:
            Erased components in scan order; each appears at most once.
        """
        if components is None:
            components = group_by_label(grid)

        results: List[CascadeResult] = []
        erased_labels: Set[Position] = set()

        for pos in grid.positions():
            cell = grid.cell(pos)
            if not cell.is_block or not cell.just_landed:
                continue

            label = cell.label
            if label is None or label in erased_labels:
                continue

            members = components.get(label, [pos])
            if len(members) < self._threshold:
                continue

            for member in members:
                grid.clear_cell(member)
            erased_labels.add(label)
            results.append(CascadeResult(label=label, members=list(members)))

        return results
