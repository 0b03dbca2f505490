"""
Player Controller
=================

Standing/walking/falling state machine, command resolution and the air resource.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from driller.core.config_loader import GameConfig, get_config
from driller.core.grid import Direction, Grid, Position


class Command(IntEnum):
    """One command per tick. Values double as the discrete action ids."""
    NONE = 0
    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4

    @property
    def direction(self) -> Optional[Direction]:
        return _COMMAND_DIRECTIONS.get(self)


_COMMAND_DIRECTIONS = {
    Command.LEFT: Direction.LEFT,
    Command.RIGHT: Direction.RIGHT,
    Command.UP: Direction.UP,
    Command.DOWN: Direction.DOWN,
}


class PlayerState(Enum):
    STANDING = 0
    WALKING = 1
    FALLING = 2


@dataclass
class Player:
    """Player position, animation counters and air."""
    x: int
    y: int
    air: int
    state: PlayerState = PlayerState.STANDING
    direction: Direction = Direction.LEFT
    walking_frames: int = 0
    falling_frames: int = 0

    def position(self, grid: Grid) -> Position:
        return grid.position(self.x, self.y)

    @property
    def is_standing(self) -> bool:
        return self.state is PlayerState.STANDING


@dataclass
class CommandResult:
    """What a command resolved to."""
    command: Command
    walked: bool = False
    dig_target: Optional[Position] = None
    rejected: bool = False

    @staticmethod
    def ignored(command: Command) -> "CommandResult":
        return CommandResult(command=command, rejected=True)


class PlayerController:
    """
    Drives the player state machine.

    - STANDING -> FALLING when the cell below is empty or air
    - FALLING -> STANDING after `fall_frames`, one row lower
    - STANDING -> WALKING on LEFT/RIGHT into an empty or air cell
    - WALKING -> STANDING after `walk_frames`, one column over
    - A command toward a block digs it instead; UP/DOWN only ever dig
    - Commands are only honored while STANDING
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize controller.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._walk_frames = config.player.walk_frames
        self._fall_frames = config.player.fall_frames
        self._air_max = config.player.air_max

    @property
    def air_max(self) -> int:
        return self._air_max

    def spawn(self) -> Player:
        """Create a player standing on top of the field."""
        return Player(
            x=self._config.grid.width // 2,
            y=self._config.grid.up_space_height - 1,
            air=self._air_max
        )

    def has_footing(self, grid: Grid, player: Player) -> bool:
        """True if the player stands on a block or the bottom edge."""
        below = grid.below(player.position(grid))
        if below is None:
            return True
        return not grid.cell(below).is_passable

    def animate(self, grid: Grid, player: Player) -> int:
        """
        Advance the walk/fall animation by one tick.

        Returns:
            Rows descended this tick (0 or 1).
        """
        if player.is_standing and not self.has_footing(grid, player):
            player.state = PlayerState.FALLING
            player.falling_frames = 0

        descended = 0
        if player.state is PlayerState.FALLING:
            player.falling_frames += 1
            if player.falling_frames >= self._fall_frames:
                player.falling_frames = 0
                player.y += 1
                player.state = PlayerState.STANDING
                descended = 1

        if player.state is PlayerState.WALKING:
            player.walking_frames += 1
            if player.walking_frames >= self._walk_frames:
                player.x += player.direction.dx
                if grid.wrap:
                    player.x %= grid.width
                player.walking_frames = 0
                player.state = PlayerState.STANDING

        return descended

    def resolve(self, grid: Grid, player: Player, command: Command) -> CommandResult:
        """
        Turn a command into a walk, a dig target, or nothing.

        Walking starts here; digging is left to the caller so it can apply
        the game-level effects.
        """
        direction = command.direction
        if direction is None or not player.is_standing:
            return CommandResult.ignored(command)

        target = grid.neighbor(player.position(grid), direction)
        if target is None:
            return CommandResult.ignored(command)

        target_cell = grid.cell(target)
        if not target_cell.is_passable:
            return CommandResult(command=command, dig_target=target)

        if direction in (Direction.LEFT, Direction.RIGHT):
            player.state = PlayerState.WALKING
            player.direction = direction
            player.walking_frames = 0
            return CommandResult(command=command, walked=True)

        return CommandResult.ignored(command)

    def add_air(self, player: Player, amount: int) -> None:
        """Change air by `amount`, clamped to [0, air_max]."""
        player.air = max(0, min(self._air_max, player.air + amount))

    def air_percent(self, player: Player) -> float:
        return 100.0 * player.air / self._air_max
