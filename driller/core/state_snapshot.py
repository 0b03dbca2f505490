"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from driller.core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from driller.core.game import Game


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Grid arrays are (height, width), indexed [y, x].
    """
    # Grid layers
    kind: np.ndarray          # (H, W) int8, CellKind values
    color: np.ndarray         # (H, W) int8, BlockColor values, -1 where not a block
    durability: np.ndarray    # (H, W) int16
    supported: np.ndarray     # (H, W) int8, 0/1

    # Player
    player_x: int
    player_y: int
    player_state: int
    air: float                # Fraction of air_max in [0, 1]

    # Progress
    depth: int
    frame: int
    camera_y: int

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "kind": self.kind,
            "color": self.color,
            "durability": self.durability,
            "supported": self.supported,
            "player_x": np.array(self.player_x, dtype=np.int32),
            "player_y": np.array(self.player_y, dtype=np.int32),
            "player_state": np.array(self.player_state, dtype=np.int32),
            "air": np.array(self.air, dtype=np.float32),
            "depth": np.array(self.depth, dtype=np.int32),
            "frame": np.array(self.frame, dtype=np.int32),
            "camera_y": np.array(self.camera_y, dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._height = config.grid.height
        self._width = config.grid.width

        # Pre-allocate arrays
        shape = (self._height, self._width)
        self._kind = np.zeros(shape, dtype=np.int8)
        self._color = np.zeros(shape, dtype=np.int8)
        self._durability = np.zeros(shape, dtype=np.int16)
        self._supported = np.zeros(shape, dtype=np.int8)

    @property
    def shape(self):
        return (self._height, self._width)

    def build(self, game: "Game") -> GameSnapshot:
        """Build a snapshot from current game state."""
        grid = game.grid
        if (grid.height, grid.width) != self.shape:
            raise ValueError(
                f"Grid shape {(grid.height, grid.width)} does not match snapshot shape {self.shape}"
            )

        self._kind.fill(0)
        self._color.fill(-1)
        self._durability.fill(0)
        self._supported.fill(0)

        for pos in grid.positions():
            cell = grid.cell(pos)
            self._kind[pos.y, pos.x] = cell.kind.value
            if cell.is_block:
                self._color[pos.y, pos.x] = cell.color.value
                self._durability[pos.y, pos.x] = cell.durability
            self._supported[pos.y, pos.x] = 1 if cell.supported else 0

        player = game.player
        return GameSnapshot(
            kind=self._kind.copy(),
            color=self._color.copy(),
            durability=self._durability.copy(),
            supported=self._supported.copy(),
            player_x=player.x,
            player_y=player.y,
            player_state=player.state.value,
            air=player.air / self._config.player.air_max,
            depth=game.depth,
            frame=game.frame,
            camera_y=game.camera_y
        )
