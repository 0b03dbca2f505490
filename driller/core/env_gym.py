"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Driller game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from driller.core.cell import BlockColor, CellKind
from driller.core.config_loader import GameConfig, load_config
from driller.core.game import Game, TickResult
from driller.core.player import Command, PlayerState
from driller.core.state_snapshot import GameSnapshot, SnapshotBuilder


class DrillerEnv(gym.Env):
    """
    Driller digging game as a Gymnasium environment.

    Action Space:
        Discrete(5): NONE, LEFT, RIGHT, UP, DOWN (see Command).
        One action is applied per tick.

    Observation Space:
        Dict of grid layers (kind, color, durability, supported) and
        player/progress scalars.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.

    Termination:
        Terminated when the player runs out of air, is crushed, or clears
        the stage. Truncated after caps.max_frames ticks.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 30,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize Driller environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            debug: If True, prints per-step debug output.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self.metadata = {**self.metadata, "render_fps": self._config.view.fps}
        self._debug = debug

        self._game = Game(config=self._config)
        self._snapshot_builder = SnapshotBuilder(self._config)

        # Initialized lazily
        self._renderer = None
        self._window = None

        self.action_space = spaces.Discrete(len(Command))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] DrillerEnv initialized")
            print(f"[DEBUG]   Grid: {self._config.grid.width}x{self._config.grid.height}")
            print(f"[DEBUG]   Air max: {self._config.player.air_max}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        grid = self._config.grid
        shape = (grid.height, grid.width)
        max_kind = max(k.value for k in CellKind)
        max_color = max(c.value for c in BlockColor)

        return spaces.Dict({
            # Grid layers
            "kind": spaces.Box(low=0, high=max_kind, shape=shape, dtype=np.int8),
            "color": spaces.Box(low=-1, high=max_color, shape=shape, dtype=np.int8),
            "durability": spaces.Box(low=0, high=self._config.dig.block_life_max, shape=shape, dtype=np.int16),
            "supported": spaces.Box(low=0, high=1, shape=shape, dtype=np.int8),

            # Player
            "player_x": spaces.Box(low=0, high=grid.width - 1, shape=(), dtype=np.int32),
            "player_y": spaces.Box(low=0, high=grid.height - 1, shape=(), dtype=np.int32),
            "player_state": spaces.Box(low=0, high=len(PlayerState) - 1, shape=(), dtype=np.int32),
            "air": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),

            # Progress
            "depth": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "frame": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "camera_y": spaces.Box(low=0, high=grid.height - 1, shape=(), dtype=np.int32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if seed is None:
            # Game seed drawn from the env generator
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game))
        info = self._game.get_info()
        info["delta_depth"] = 0
        info["sounds"] = []
        info["cascades"] = 0

        if self._debug:
            print(f"[DEBUG] Reset (seed={seed})")
            print(self._game.grid.dump())

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: Command id in [0, 4].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])
        command = Command(int(action))

        depth_before = self._game.depth
        result: TickResult = self._game.tick(command)
        sounds = self._game.drain_sounds()

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game))

        reward = 0.0
        terminated = result.terminated
        truncated = not terminated and self._game.frame >= self._config.caps.max_frames

        info = self._game.get_info()
        info["delta_depth"] = self._game.depth - depth_before
        info["sounds"] = sounds
        info["cascades"] = len(result.cascades)
        if truncated:
            info["terminated_reason"] = "frame_cap"

        if self._debug:
            print(f"[DEBUG] Step: action={command.name}, depth={self._game.depth}, "
                  f"air={self._game.player.air}, moved={len(result.moved)}, "
                  f"cascades={len(result.cascades)}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            from driller.core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(self._game.get_render_data())

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            import pygame

            frame = self._render_to_array()
            if self._window is None:
                pygame.init()
                self._window = pygame.display.set_mode((frame.shape[1], frame.shape[0]))
                pygame.display.set_caption("Driller")
            surface = pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))
            self._window.blit(surface, (0, 0))
            pygame.event.pump()
            pygame.display.flip()
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None
        if self._window is not None:
            import pygame
            pygame.display.quit()
            self._window = None

    @property
    def game(self) -> Game:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
