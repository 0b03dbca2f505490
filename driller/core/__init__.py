"""
Driller Core - The game simulation and its agent-facing wrappers.

This module provides the grid model, the per-tick passes (gravity,
connectivity, cascade, support), the player controller, and the
Gymnasium environment built on top of them.

Main exports:
- DrillerEnv: Gymnasium environment for single-agent training
- Game: Low-level game simulation (used internally and by tools)
- Grid: Cell grid with bounds-checked positions
- Command: Player commands / discrete action ids
- GameConfig: Configuration loaded from game_config.yaml
"""

from driller.core.config_loader import GameConfig, load_config
from driller.core.cell import BlockColor, Cell, CellKind
from driller.core.grid import Direction, Grid, Position
from driller.core.player import Command, PlayerState
from driller.core.game import Game, TickResult
from driller.core.env_gym import DrillerEnv

__all__ = [
    "GameConfig",
    "load_config",
    "BlockColor",
    "Cell",
    "CellKind",
    "Direction",
    "Grid",
    "Position",
    "Command",
    "PlayerState",
    "Game",
    "TickResult",
    "DrillerEnv",
]
