"""
Dig Operation
=============

Resolves a dig against a target block: damage, break, or stage clear.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from driller.core.cell import BlockColor
from driller.core.config_loader import GameConfig, get_config
from driller.core.connectivity import Components, component_of
from driller.core.grid import Grid, Position


class DigKind(Enum):
    DAMAGED = "damaged"    # Block survived the hit
    BROKEN = "broken"      # Component erased
    CLEARED = "cleared"    # Clear floor reached


@dataclass
class DigOutcome:
    """Result of digging one target."""
    kind: DigKind
    target: Position
    color: BlockColor
    durability_left: int
    erased: List[Position] = field(default_factory=list)
    air_penalty: int = 0

    @property
    def is_clear(self) -> bool:
        return self.kind is DigKind.CLEARED

    @property
    def broke_brown(self) -> bool:
        return self.kind is DigKind.BROKEN and self.color is BlockColor.BROWN


class Digger:
    """
    Applies digs to the grid.

    - Clear blocks are never damaged; digging one clears the stage.
    - Brown blocks lose `brown_damage` per hit.
    - Every other color breaks in one hit.
    - A broken block takes its whole connected component with it.
    - Breaking a brown block costs `brown_air_penalty` of the air maximum.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize digger.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._brown_damage = config.dig.brown_damage
        self._brown_air_penalty = int(config.player.air_max * config.dig.brown_air_penalty)

    @property
    def brown_air_penalty(self) -> int:
        return self._brown_air_penalty

    def dig(
        self,
        grid: Grid,
        target: Position,
        components: Optional[Components] = None
    ) -> DigOutcome:
        """
        Dig the block at `target`.

        Args:
            grid: Labeled grid, modified in place.
            target: Position of a block.
            components: Label to members mapping from the last labeling pass.

        Returns:
            DigOutcome describing what happened. Air penalties are reported,
            not applied; the caller owns the player.

        Raises:
            ValueError: If the target is not a block.
        """
        cell = grid.cell(target)
        if not cell.is_block:
            raise ValueError(f"Cannot dig {cell!r} at {target!r}")

        color = cell.color
        if color is BlockColor.CLEAR:
            return DigOutcome(
                kind=DigKind.CLEARED,
                target=target,
                color=color,
                durability_left=cell.durability
            )

        if color is BlockColor.BROWN:
            cell.durability = max(0, cell.durability - self._brown_damage)
        else:
            cell.durability = 0

        if cell.durability > 0:
            return DigOutcome(
                kind=DigKind.DAMAGED,
                target=target,
                color=color,
                durability_left=cell.durability
            )

        if components is not None and cell.label in components:
            members = list(components[cell.label])
        else:
            members = component_of(grid, target) or [target]

        for member in members:
            grid.clear_cell(member)

        return DigOutcome(
            kind=DigKind.BROKEN,
            target=target,
            color=color,
            durability_left=0,
            erased=members,
            air_penalty=self._brown_air_penalty if color is BlockColor.BROWN else 0
        )
