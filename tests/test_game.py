"""
Tests for the game orchestrator.
"""

import pytest

from driller.core.config_loader import load_config
from driller.core.dig import DigKind
from driller.core.game import (
    Game,
    SOUND_AIR,
    SOUND_BREAK_BROWN,
    SOUND_CLEAR,
    SOUND_CRASH,
    SOUND_SHRINK,
)
from driller.core.grid import Grid
from driller.core.player import Command, Player, PlayerState


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return Game(config=config, seed=42)


@pytest.fixture
def drop_ticks(config):
    """Ticks for a freshly unsupported cell to move one row."""
    return config.gravity.shake_frames + config.gravity.fall_frames + 1


def _stage(game, rows, x, y, air=None):
    player = Player(x=x, y=y, air=air if air is not None else game.config.player.air_max)
    game.load_stage(Grid.from_rows(rows), player)
    return player


class TestLifecycle:
    """Game start, reset and stage transitions."""

    def test_initial_state(self, game, config):
        assert game.frame == 0
        assert game.depth == 0
        assert not game.is_over
        assert not game.is_clear
        assert game.player.x == config.grid.width // 2
        assert game.player.y == config.grid.up_space_height - 1
        assert game.grid.height == config.grid.height
        assert game.camera_y == 0

    def test_same_seed_same_grid(self, config):
        a = Game(config=config, seed=123)
        b = Game(config=config, seed=123)
        assert a.grid.dump() == b.grid.dump()

    def test_different_seed_different_grid(self, config):
        a = Game(config=config, seed=1)
        b = Game(config=config, seed=2)
        assert a.grid.dump() != b.grid.dump()

    def test_same_seed_same_play(self, config):
        commands = [Command.DOWN, Command.NONE, Command.LEFT, Command.DOWN] * 30
        a = Game(config=config, seed=7)
        b = Game(config=config, seed=7)
        for command in commands:
            a.tick(command)
            b.tick(command)
        assert a.grid.dump() == b.grid.dump()
        assert a.depth == b.depth
        assert a.player.air == b.player.air

    def test_reset_reuses_seed(self, config):
        game = Game(config=config, seed=9)
        start = game.grid.dump()
        for _ in range(10):
            game.tick(Command.DOWN)
        game.reset()
        assert game.grid.dump() == start
        assert game.frame == 0
        assert game.depth == 0

    def test_reset_new_seed(self, config):
        game = Game(config=config, seed=9)
        game.reset(seed=10)
        assert game.seed == 10
        assert game.grid.dump() == Game(config=config, seed=10).grid.dump()

    def test_unseeded_game_keeps_drawn_seed(self, config):
        game = Game(config=config)
        assert game.seed is not None
        start = game.grid.dump()
        game.tick(Command.DOWN)
        game.reset()
        assert game.grid.dump() == start
        assert game.grid.dump() == Game(config=config, seed=game.seed).grid.dump()

    def test_fresh_field_fully_supported(self, game):
        for pos in game.grid.positions():
            cell = game.grid.cell(pos)
            if not cell.is_empty:
                assert cell.supported

    def test_proceed_noop_while_playing(self, game):
        assert not game.proceed()

    def test_toggle_debug(self, game):
        assert not game.is_debug
        game.toggle_debug()
        assert game.is_debug
        game.toggle_debug()
        assert not game.is_debug

    def test_load_stage_rejects_bad_player(self, game):
        with pytest.raises(IndexError):
            game.load_stage(Grid.from_rows(["..."]), Player(x=5, y=0, air=10))


class TestTick:
    """Per-tick orchestration."""

    def test_frame_increments(self, game):
        result = game.tick()
        assert result.frame == 1
        assert game.frame == 1

    def test_breathing_uses_air(self, game, config):
        for _ in range(5):
            game.tick()
        assert game.player.air == config.player.air_max - 5

    def test_fall_adds_depth(self, game, config):
        _stage(game, [
            "...",
            "...",
            "RRR",
        ], x=1, y=0)
        for _ in range(config.player.fall_frames):
            game.tick()
        assert game.player.y == 1
        assert game.depth == 1

    def test_dig_breaks_component(self, game):
        _stage(game, [
            "...",
            "RRR",
            "GGG",
        ], x=1, y=0)
        result = game.tick(Command.DOWN)
        assert result.dig is not None
        assert result.dig.kind is DigKind.BROKEN
        assert len(result.dig.erased) == 3
        assert game.grid.count_non_empty() == 3

    def test_brown_break_costs_air(self, game, config):
        _stage(game, [
            "...",
            ".b.",
            "GGG",
        ], x=1, y=0)
        for _ in range(config.brown_hits - 1):
            result = game.tick(Command.DOWN)
            assert result.dig.kind is DigKind.DAMAGED

        result = game.tick(Command.DOWN)
        assert result.dig.broke_brown
        assert SOUND_BREAK_BROWN in result.sounds
        penalty = int(config.player.air_max * config.dig.brown_air_penalty)
        assert game.player.air == config.player.air_max - config.brown_hits - penalty

    def test_walk_takes_walk_frames(self, game, config):
        _stage(game, [
            "...",
            "RRR",
        ], x=1, y=0)
        result = game.tick(Command.LEFT)
        assert result.command_result.walked
        assert game.player.state is PlayerState.WALKING
        for _ in range(config.player.walk_frames):
            game.tick()
        assert game.player.x == 0
        assert game.player.state is PlayerState.STANDING

    def test_cascade_requests_shrink(self, game, drop_ticks):
        _stage(game, [
            "R...",
            ".RRR",
        ], x=3, y=0)
        for _ in range(drop_ticks - 1):
            result = game.tick()
            assert result.cascades == []

        result = game.tick()
        assert len(result.cascades) == 1
        assert result.cascades[0].size == 4
        assert SOUND_SHRINK in result.sounds
        assert game.grid.count_non_empty() == 0

    def test_camera_follows_player(self, game, config):
        rows = ["..."] * 29 + ["RRR"]
        _stage(game, rows, x=1, y=28)
        visible = config.view.visible_rows
        assert game.camera_y == 30 - visible

        _stage(game, rows, x=1, y=8)
        assert game.camera_y == 8 - config.view.camera_margin


class TestAirAndEnding:
    """Air pickup, exhaustion, crushing and clearing."""

    def test_air_pickup_clamps(self, game, config):
        player = game.player
        pos = player.position(game.grid)
        game.grid.set_air(pos)
        player.air = config.player.air_max - 100

        result = game.tick()
        assert SOUND_AIR in result.sounds
        assert game.grid.cell(pos).is_empty
        assert player.air == config.player.air_max - 1

    def test_air_exhaustion_ends_once(self, game):
        game.player.air = 1
        result = game.tick()
        assert result.is_over
        assert game.is_over
        assert game.get_info()["terminated_reason"] == "air"

        for _ in range(5):
            result = game.tick()
            assert result.is_over
        assert game.frame == 6
        assert game.player.air == 0
        assert game.drain_sounds().count(SOUND_CRASH) == 1

    def test_crushed_by_falling_block(self, game, drop_ticks):
        _stage(game, [
            "R..",
            "...",
            "GGG",
        ], x=0, y=1)
        for _ in range(drop_ticks - 1):
            game.tick()
        assert not game.is_over

        result = game.tick()
        assert result.is_over
        assert result.sounds.count(SOUND_CRASH) == 1
        assert game.get_info()["terminated_reason"] == "crushed"

    def test_dig_clear_block(self, game):
        _stage(game, [
            "...",
            "CCC",
        ], x=1, y=0)
        before = game.grid.dump()

        result = game.tick(Command.DOWN)
        assert result.is_clear
        assert result.terminated
        assert result.sounds == [SOUND_CLEAR]
        assert game.grid.dump() == before
        assert game.get_info()["terminated_reason"] == "clear"

    def test_dig_clear_block_on_last_air(self, game):
        player = _stage(game, [
            "...",
            "CCC",
        ], x=1, y=0, air=1)

        result = game.tick(Command.DOWN)
        assert result.is_clear
        assert not result.is_over
        assert not game.is_over
        assert player.air == 1

    def test_up_from_top_row_does_not_reach_floor_with_wrap(self, game):
        player = Player(x=1, y=0, air=game.config.player.air_max)
        game.load_stage(Grid.from_rows([
            "...",
            "RRR",
            "CCC",
        ], wrap=True), player)

        result = game.tick(Command.UP)
        assert not result.is_clear
        assert not game.is_clear
        assert game.grid.cell_at(1, 2).is_block

    def test_proceed_after_clear_keeps_depth(self, game, config):
        _stage(game, [
            "...",
            "...",
            "CCC",
        ], x=1, y=0)
        for _ in range(config.player.fall_frames):
            game.tick()
        game.tick(Command.DOWN)
        assert game.is_clear

        assert game.proceed()
        assert not game.is_clear
        assert game.depth == 1
        assert game.grid.height == config.grid.height
        assert game.player.y == config.grid.up_space_height - 1

    def test_proceed_after_over_restarts(self, game):
        _stage(game, [
            "...",
            "...",
            "RRR",
        ], x=1, y=0, air=5)
        for _ in range(5):
            game.tick()
        assert game.is_over
        assert game.depth == 1
        old_seed = game.seed

        assert game.proceed()
        assert game.seed != old_seed
        assert not game.is_over
        assert game.depth == 0
        assert game.frame == 0


class TestOutputs:
    """Sound queue, info and render data."""

    def test_drain_sounds_clears(self, game):
        game.player.air = 1
        game.tick()
        assert game.requested_sounds == [SOUND_CRASH]
        assert game.drain_sounds() == [SOUND_CRASH]
        assert game.drain_sounds() == []
        assert game.requested_sounds == []

    def test_info_keys(self, game):
        info = game.get_info()
        for key in ("depth", "frame", "air", "air_percent", "player_state", "terminated_reason"):
            assert key in info
        assert info["terminated_reason"] == ""
        assert info["air_percent"] == pytest.approx(100.0)

    def test_render_data_visible_cells(self, game, config):
        data = game.get_render_data()
        assert data["camera_y"] == game.camera_y
        assert data["visible_rows"] == config.view.visible_rows
        assert data["cells"]
        for cell in data["cells"]:
            assert game.camera_y <= cell["y"] < game.camera_y + config.view.visible_rows
            assert cell["kind"] in ("air", "block")
        assert data["player"]["state"] == "standing"


class TestDerivedState:
    """Derived flags stay consistent after digging."""

    def test_emptied_cells_not_supported(self, game):
        _stage(game, [
            "...",
            "RRR",
            "GGG",
        ], x=1, y=0)
        game.tick(Command.DOWN)
        for x in range(3):
            assert not game.grid.cell_at(x, 1).supported
