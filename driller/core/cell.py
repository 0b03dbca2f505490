"""
Cell Model
==========

Occupancy, color and per-cell animation state for one grid position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from driller.core.grid import Position


class CellKind(Enum):
    """Physical occupancy of a cell."""
    EMPTY = 0
    AIR = 1
    BLOCK = 2


class BlockColor(Enum):
    """Block colors. Only meaningful when the cell is a BLOCK."""
    RED = 0
    YELLOW = 1
    GREEN = 2
    BLUE = 3
    CLEAR = 4
    BROWN = 5

    @staticmethod
    def field_colors() -> Tuple["BlockColor", ...]:
        """Colors drawn uniformly for ordinary field blocks."""
        return (BlockColor.RED, BlockColor.YELLOW, BlockColor.GREEN, BlockColor.BLUE)


class FallPhase(Enum):
    """Animation phase of an unsupported cell."""
    IDLE = 0
    SHAKING = 1
    FALLING = 2


@dataclass
class Cell:
    """
    One grid cell.

    `label`, `supported` and `just_landed` are derived every tick and must not
    be trusted across ticks. `phase`/`phase_frames` persist while the cell
    stays unsupported.
    """
    kind: CellKind = CellKind.EMPTY
    color: BlockColor = BlockColor.RED
    durability: int = 0
    label: Optional["Position"] = None
    supported: bool = False
    phase: FallPhase = FallPhase.IDLE
    phase_frames: int = 0
    just_landed: bool = False

    @classmethod
    def block(cls, color: BlockColor, durability: int) -> "Cell":
        return cls(kind=CellKind.BLOCK, color=color, durability=durability)

    @classmethod
    def air(cls) -> "Cell":
        return cls(kind=CellKind.AIR)

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def is_block(self) -> bool:
        return self.kind is CellKind.BLOCK

    @property
    def is_air(self) -> bool:
        return self.kind is CellKind.AIR

    @property
    def is_passable(self) -> bool:
        """True if the player can stand in or walk into this cell."""
        return self.kind is not CellKind.BLOCK

    @property
    def shake_timer(self) -> int:
        """Shake frame count, -1 when not shaking (renderer encoding)."""
        if self.phase is FallPhase.SHAKING:
            return self.phase_frames
        return -1

    @property
    def fall_timer(self) -> int:
        """Fall frame count, -1 when not falling (renderer encoding)."""
        if self.phase is FallPhase.FALLING:
            return self.phase_frames
        return -1

    def reset_phase(self) -> None:
        """Cancel any in-progress shake or fall."""
        self.phase = FallPhase.IDLE
        self.phase_frames = 0

    def clear(self) -> None:
        """Turn this cell into EMPTY, dropping every transient field."""
        self.kind = CellKind.EMPTY
        self.color = BlockColor.RED
        self.durability = 0
        self.label = None
        self.supported = False
        self.just_landed = False
        self.reset_phase()

    def copy_from(self, other: "Cell") -> None:
        """Copy the full contents of another cell into this one."""
        self.kind = other.kind
        self.color = other.color
        self.durability = other.durability
        self.label = other.label
        self.supported = other.supported
        self.phase = other.phase
        self.phase_frames = other.phase_frames
        self.just_landed = other.just_landed

    def same_block_color(self, other: "Cell") -> bool:
        """True if both cells are blocks of the same color."""
        return self.is_block and other.is_block and self.color is other.color

    def __repr__(self) -> str:
        if self.kind is CellKind.BLOCK:
            return f"Cell(BLOCK {self.color.name}, life={self.durability})"
        return f"Cell({self.kind.name})"
