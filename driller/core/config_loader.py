"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class GridConfig:
    """Grid geometry."""
    width: int                   # Columns
    up_space_height: int         # Empty rows above the field
    normal_blocks_height: int    # Rows of random blocks
    clear_blocks_height: int     # Rows of clear floor blocks
    wrap: bool                   # Left and right edges join

    @property
    def height(self) -> int:
        """Total number of rows."""
        return self.up_space_height + self.normal_blocks_height + self.clear_blocks_height

    @property
    def clear_top(self) -> int:
        """First row of the clear floor band."""
        return self.height - self.clear_blocks_height


@dataclass(frozen=True)
class FieldConfig:
    """Random field population parameters."""
    brown_probability: float
    air_interval: int
    air_jitter: int


@dataclass(frozen=True)
class GravityConfig:
    """Per-cell gravity timing and cascade rules."""
    shake_frames: int
    fall_frames: int
    cascade_threshold: int


@dataclass(frozen=True)
class PlayerConfig:
    """Player animation pacing and air resource."""
    air_max: int
    walk_frames: int
    fall_frames: int
    air_pickup: float

    @property
    def air_pickup_amount(self) -> int:
        return int(self.air_max * self.air_pickup)


@dataclass(frozen=True)
class DigConfig:
    """Block durability and digging penalties."""
    block_life_max: int
    brown_damage: int
    brown_air_penalty: float


@dataclass(frozen=True)
class ViewConfig:
    """Camera and presentation parameters."""
    fps: int
    cell_size: int
    visible_rows: int
    camera_margin: int
    info_width: int


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_frames: int


@dataclass(frozen=True)
class ColorConfig:
    """RGB colors used by renderers."""
    red: Tuple[int, int, int]
    yellow: Tuple[int, int, int]
    green: Tuple[int, int, int]
    blue: Tuple[int, int, int]
    clear: Tuple[int, int, int]
    brown: Tuple[int, int, int]
    air: Tuple[int, int, int]
    player: Tuple[int, int, int]
    background: Tuple[int, int, int]
    panel: Tuple[int, int, int]


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    grid: GridConfig
    field: FieldConfig
    gravity: GravityConfig
    player: PlayerConfig
    dig: DigConfig
    view: ViewConfig
    caps: CapsConfig
    colors: ColorConfig

    @property
    def brown_hits(self) -> int:
        """Number of hits needed to break a brown block."""
        return -(-self.dig.block_life_max // self.dig.brown_damage)


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_colors(colors_data: dict) -> ColorConfig:
    """Parse the colors section, one RGB triple per field."""
    missing = [name for name in ColorConfig.__dataclass_fields__ if name not in colors_data]
    if missing:
        raise ValueError(f"Missing colors in config: {', '.join(missing)}")
    return ColorConfig(**{
        name: _parse_color(colors_data[name])
        for name in ColorConfig.__dataclass_fields__
    })


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    grid = config.grid
    if grid.width < 1:
        raise ValueError(f"grid.width must be positive, got {grid.width}")

    if grid.up_space_height < 1:
        raise ValueError(
            f"grid.up_space_height must leave room for the player, got {grid.up_space_height}"
        )

    if grid.clear_blocks_height < 1:
        raise ValueError(
            f"grid.clear_blocks_height must be at least 1, got {grid.clear_blocks_height}"
        )

    if not 0.0 <= config.field.brown_probability <= 1.0:
        raise ValueError(
            f"field.brown_probability must be in [0, 1], got {config.field.brown_probability}"
        )

    if config.field.air_interval < 1:
        raise ValueError(f"field.air_interval must be positive, got {config.field.air_interval}")

    if config.field.air_jitter >= config.field.air_interval:
        raise ValueError(
            f"field.air_jitter ({config.field.air_jitter}) must be smaller than "
            f"field.air_interval ({config.field.air_interval})"
        )

    gravity = config.gravity
    if gravity.shake_frames < 0 or gravity.fall_frames < 0:
        raise ValueError(
            f"gravity frame counts must be non-negative, got "
            f"shake_frames={gravity.shake_frames}, fall_frames={gravity.fall_frames}"
        )

    if gravity.cascade_threshold < 2:
        raise ValueError(
            f"gravity.cascade_threshold must be at least 2, got {gravity.cascade_threshold}"
        )

    player = config.player
    if player.air_max < 1:
        raise ValueError(f"player.air_max must be positive, got {player.air_max}")

    if player.walk_frames < 1 or player.fall_frames < 1:
        raise ValueError(
            f"player frame counts must be positive, got "
            f"walk_frames={player.walk_frames}, fall_frames={player.fall_frames}"
        )

    dig = config.dig
    if not 0 < dig.brown_damage <= dig.block_life_max:
        raise ValueError(
            f"dig.brown_damage ({dig.brown_damage}) must be in (0, block_life_max={dig.block_life_max}]"
        )

    if config.view.visible_rows > grid.height:
        raise ValueError(
            f"view.visible_rows ({config.view.visible_rows}) exceeds grid height ({grid.height})"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    grid_data = raw["grid"]
    grid = GridConfig(
        width=int(grid_data["width"]),
        up_space_height=int(grid_data["up_space_height"]),
        normal_blocks_height=int(grid_data["normal_blocks_height"]),
        clear_blocks_height=int(grid_data["clear_blocks_height"]),
        wrap=bool(grid_data.get("wrap", False))
    )

    field_data = raw["field"]
    field = FieldConfig(
        brown_probability=float(field_data.get("brown_probability", 0.0)),
        air_interval=int(field_data["air_interval"]),
        air_jitter=int(field_data.get("air_jitter", 0))
    )

    gravity_data = raw["gravity"]
    gravity = GravityConfig(
        shake_frames=int(gravity_data["shake_frames"]),
        fall_frames=int(gravity_data["fall_frames"]),
        cascade_threshold=int(gravity_data.get("cascade_threshold", 4))
    )

    player_data = raw["player"]
    player = PlayerConfig(
        air_max=int(player_data["air_max"]),
        walk_frames=int(player_data["walk_frames"]),
        fall_frames=int(player_data["fall_frames"]),
        air_pickup=float(player_data.get("air_pickup", 0.2))
    )

    dig_data = raw["dig"]
    dig = DigConfig(
        block_life_max=int(dig_data["block_life_max"]),
        brown_damage=int(dig_data["brown_damage"]),
        brown_air_penalty=float(dig_data.get("brown_air_penalty", 0.0))
    )

    view_data = raw.get("view", {})
    view = ViewConfig(
        fps=int(view_data.get("fps", 30)),
        cell_size=int(view_data.get("cell_size", 40)),
        visible_rows=int(view_data.get("visible_rows", 12)),
        camera_margin=int(view_data.get("camera_margin", 5)),
        info_width=int(view_data.get("info_width", 100))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_frames=int(caps_data.get("max_frames", 20000))
    )

    colors = _parse_colors(raw["colors"])

    config = GameConfig(
        grid=grid,
        field=field,
        gravity=gravity,
        player=player,
        dig=dig,
        view=view,
        caps=caps,
        colors=colors
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
