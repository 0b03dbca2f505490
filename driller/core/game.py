"""
Core Game
=========

Main game orchestrator combining the grid passes, the player and the rules.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from driller.core.cascade import CascadeEraser, CascadeResult
from driller.core.config_loader import GameConfig, get_config
from driller.core.connectivity import Components, label_components
from driller.core.dig import DigOutcome, Digger
from driller.core.gravity import GravityEngine
from driller.core.grid import Grid, Position
from driller.core.player import Command, CommandResult, Player, PlayerController
from driller.core.rng import FieldGenerator
from driller.core.support import propagate_support

# Sound event identifiers, consumed by the audio collaborator
SOUND_CRASH = "crash"
SOUND_CLEAR = "clear"
SOUND_SHRINK = "shrink"
SOUND_BREAK_BROWN = "break_brown"
SOUND_AIR = "air"

SOUND_EVENTS = (SOUND_CRASH, SOUND_CLEAR, SOUND_SHRINK, SOUND_BREAK_BROWN, SOUND_AIR)


@dataclass
class TickResult:
    """Result of a single game tick."""
    frame: int
    command: Command
    moved: List[Position] = field(default_factory=list)
    popped: List[Position] = field(default_factory=list)
    cascades: List[CascadeResult] = field(default_factory=list)
    command_result: Optional[CommandResult] = None
    dig: Optional[DigOutcome] = None
    descended: int = 0
    sounds: List[str] = field(default_factory=list)
    is_over: bool = False
    is_clear: bool = False

    @property
    def terminated(self) -> bool:
        return self.is_over or self.is_clear


class Game:
    """
    Main game simulation class.

    Orchestrates, once per tick:
    - Player walk/fall animation
    - Gravity pass
    - Connectivity labeling
    - Cascade erasure
    - Player command (walk or dig)
    - Support propagation
    - Air update and win/lose checks
    - Camera update

    The sound queue is filled during ticks and emptied by `drain_sounds()`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. A seed is drawn from fresh
                entropy if None and kept, so `reset()` replays it.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed: int = seed if seed is not None else random.getrandbits(32)

        # Subsystems
        self._controller = PlayerController(config)
        self._gravity = GravityEngine(config)
        self._eraser = CascadeEraser(config)
        self._digger = Digger(config)

        # Game state
        self._rng = random.Random(self._seed)
        self._grid: Grid = Grid(config.grid.width, config.grid.height, wrap=config.grid.wrap)
        self._player: Player = self._controller.spawn()
        self._components: Components = {}
        self._frame: int = 0
        self._depth: int = 0
        self._is_over: bool = False
        self._is_clear: bool = False
        self._is_debug: bool = False
        self._camera_y: int = 0
        self._requested_sounds: List[str] = []

        self.reset(seed)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def player(self) -> Player:
        return self._player

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def depth(self) -> int:
        """Rows fallen so far, carried across stages."""
        return self._depth

    @property
    def is_over(self) -> bool:
        return self._is_over

    @property
    def is_clear(self) -> bool:
        return self._is_clear

    @property
    def is_debug(self) -> bool:
        return self._is_debug

    @property
    def camera_y(self) -> int:
        """Topmost visible row."""
        return self._camera_y

    @property
    def requested_sounds(self) -> List[str]:
        """Pending sound events (copy)."""
        return list(self._requested_sounds)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Start a new game.

        Args:
            seed: New random seed. Replays the current seed if None.
        """
        if seed is not None:
            self._seed = seed

        self._rng = random.Random(self._seed)
        self._frame = 0
        self._depth = 0
        self._requested_sounds = []
        self._start_stage()

    def next_stage(self) -> None:
        """Build a new stage, keeping depth and the random sequence."""
        self._start_stage()

    def proceed(self) -> bool:
        """
        Handle the restart / next-stage signal.

        Game over starts a fresh game with a new seed; a clear moves on to
        the next stage.

        Returns:
            True if a new game or stage was started.
        """
        if self._is_over:
            # New game with a new seed drawn from the current sequence
            self.reset(seed=self._rng.getrandbits(32))
            return True
        if self._is_clear:
            self.next_stage()
            return True
        return False

    def toggle_debug(self) -> None:
        self._is_debug = not self._is_debug

    def load_stage(self, grid: Grid, player: Optional[Player] = None) -> None:
        """
        Install a prepared grid (and optionally player) as the current stage.

        Used for hand-built scenarios; depth and frame are kept.
        """
        self._install(grid, player if player is not None else self._controller.spawn())

    def _start_stage(self) -> None:
        """Generate the grid and player and settle derived state."""
        grid = FieldGenerator(self._config, rng=self._rng).generate()
        self._install(grid, self._controller.spawn())

    def _install(self, grid: Grid, player: Player) -> None:
        # Validates the player position against the new grid
        grid.position(player.x, player.y)
        self._grid = grid
        self._player = player
        self._is_over = False
        self._is_clear = False
        self._components = label_components(self._grid)
        propagate_support(self._grid, self._components)
        self._update_camera()

    def drain_sounds(self) -> List[str]:
        """Return and clear the pending sound events."""
        sounds = self._requested_sounds
        self._requested_sounds = []
        return sounds

    def _request_sound(self, sound: str, result: TickResult) -> None:
        self._requested_sounds.append(sound)
        result.sounds.append(sound)

    def tick(self, command: Command = Command.NONE) -> TickResult:
        """
        Advance the simulation by one frame.

        Args:
            command: The player command for this tick.

        Returns:
            TickResult describing what happened.
        """
        command = Command(command)
        self._frame += 1
        result = TickResult(frame=self._frame, command=command)

        if self._is_over or self._is_clear:
            result.is_over = self._is_over
            result.is_clear = self._is_clear
            return result

        grid = self._grid
        player = self._player

        descended = self._controller.animate(grid, player)
        self._depth += descended
        result.descended = descended

        gravity = self._gravity.step(grid)
        result.moved = gravity.moved
        result.popped = gravity.popped

        self._components = label_components(grid)

        cascades = self._eraser.erase(grid, self._components)
        result.cascades = cascades
        if cascades:
            self._request_sound(SOUND_SHRINK, result)

        command_result = self._controller.resolve(grid, player, command)
        result.command_result = command_result
        if command_result.dig_target is not None:
            outcome = self._digger.dig(grid, command_result.dig_target, self._components)
            result.dig = outcome
            if outcome.is_clear:
                self._is_clear = True
                self._request_sound(SOUND_CLEAR, result)
                result.is_clear = True
                return result
            if outcome.broke_brown:
                self._controller.add_air(player, -outcome.air_penalty)
                self._request_sound(SOUND_BREAK_BROWN, result)

        propagate_support(grid, self._components)

        self._update_air(result)

        player_cell = grid.cell(player.position(grid))
        if player_cell.is_block and not self._is_over:
            self._is_over = True
            self._request_sound(SOUND_CRASH, result)

        self._update_camera()

        result.is_over = self._is_over
        result.is_clear = self._is_clear
        return result

    def _update_air(self, result: TickResult) -> None:
        """Pick up air under the player, then breathe."""
        grid = self._grid
        player = self._player
        pos = player.position(grid)

        if grid.cell(pos).is_air:
            grid.clear_cell(pos)
            self._controller.add_air(player, self._config.player.air_pickup_amount)
            self._request_sound(SOUND_AIR, result)

        self._controller.add_air(player, -1)
        if player.air <= 0 and not self._is_over:
            self._is_over = True
            self._request_sound(SOUND_CRASH, result)

    def _update_camera(self) -> None:
        view = self._config.view
        max_camera = max(0, self._grid.height - view.visible_rows)
        self._camera_y = max(0, min(max_camera, self._player.y - view.camera_margin))

    def air_percent(self) -> float:
        return self._controller.air_percent(self._player)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        if self._is_over:
            reason = "crushed" if self._grid.cell(self._player.position(self._grid)).is_block else "air"
        elif self._is_clear:
            reason = "clear"
        else:
            reason = ""
        return {
            "depth": self._depth,
            "frame": self._frame,
            "air": self._player.air,
            "air_percent": self.air_percent(),
            "player_state": self._player.state.name.lower(),
            "terminated_reason": reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with the visible non-empty cells, player and status flags.
        """
        view = self._config.view
        top = self._camera_y
        bottom = min(self._grid.height, top + view.visible_rows)

        cells_data = []
        for y in range(top, bottom):
            for x, cell in enumerate(self._grid.row(y)):
                if cell.is_empty:
                    continue
                cells_data.append({
                    "x": x,
                    "y": y,
                    "kind": cell.kind.name.lower(),
                    "color": cell.color.name.lower(),
                    "durability": cell.durability,
                    "supported": cell.supported,
                    "shake_timer": cell.shake_timer,
                    "fall_timer": cell.fall_timer,
                })

        player = self._player
        return {
            "grid_width": self._grid.width,
            "grid_height": self._grid.height,
            "camera_y": top,
            "visible_rows": view.visible_rows,
            "cells": cells_data,
            "player": {
                "x": player.x,
                "y": player.y,
                "state": player.state.name.lower(),
                "direction": player.direction.name.lower(),
                "walking_frames": player.walking_frames,
                "falling_frames": player.falling_frames,
            },
            "air_percent": self.air_percent(),
            "depth": self._depth,
            "frame": self._frame,
            "is_over": self._is_over,
            "is_clear": self._is_clear,
            "is_debug": self._is_debug,
        }
