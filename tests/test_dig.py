"""
Tests for digging rules.
"""

import pytest

from driller.core.cell import BlockColor
from driller.core.config_loader import load_config
from driller.core.connectivity import label_components
from driller.core.dig import DigKind, Digger
from driller.core.grid import Grid


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def digger(config):
    return Digger(config)


class TestDig:
    """Dig outcomes by block color."""

    def test_clear_block_only_reports(self, digger):
        grid = Grid.from_rows([
            "RC.",
            "CCC",
        ])
        components = label_components(grid)
        before = grid.dump()

        outcome = digger.dig(grid, grid.position(1, 0), components)
        assert outcome.kind is DigKind.CLEARED
        assert outcome.is_clear
        assert grid.dump() == before
        assert grid.cell_at(1, 0).durability == 100

    def test_normal_block_erases_component(self, digger):
        grid = Grid.from_rows([
            "RRG",
            "GGG",
        ])
        components = label_components(grid)

        outcome = digger.dig(grid, grid.position(0, 0), components)
        assert outcome.kind is DigKind.BROKEN
        assert sorted(outcome.erased) == [grid.position(0, 0), grid.position(1, 0)]
        assert outcome.air_penalty == 0
        assert not outcome.broke_brown
        assert grid.cell_at(0, 0).is_empty
        assert grid.cell_at(1, 0).is_empty
        assert grid.count_non_empty() == 4

    def test_component_found_from_labels(self, digger):
        grid = Grid.from_rows(["BBB", "RRR"])
        label_components(grid)
        outcome = digger.dig(grid, grid.position(2, 1))
        assert len(outcome.erased) == 3
        assert grid.count_non_empty() == 3

    def test_brown_takes_four_hits(self, digger, config):
        grid = Grid.from_rows([
            "b.",
            "RR",
        ])
        target = grid.position(0, 0)

        for expected in (75, 50, 25):
            components = label_components(grid)
            outcome = digger.dig(grid, target, components)
            assert outcome.kind is DigKind.DAMAGED
            assert outcome.durability_left == expected
            assert grid.cell(target).is_block

        components = label_components(grid)
        outcome = digger.dig(grid, target, components)
        assert outcome.kind is DigKind.BROKEN
        assert outcome.broke_brown
        assert outcome.air_penalty == int(config.player.air_max * config.dig.brown_air_penalty)
        assert grid.cell(target).is_empty

    def test_brown_hits_match_config(self, digger, config):
        grid = Grid.from_rows(["b"])
        hits = 0
        while grid.cell_at(0, 0).is_block:
            digger.dig(grid, grid.position(0, 0), label_components(grid))
            hits += 1
        assert hits == config.brown_hits

    def test_brown_component_breaks_together(self, digger):
        grid = Grid.from_rows(["bb"])
        grid.cell_at(0, 0).durability = 25
        outcome = digger.dig(grid, grid.position(0, 0), label_components(grid))
        assert outcome.kind is DigKind.BROKEN
        assert grid.count_non_empty() == 0

    def test_damaged_block_keeps_color(self, digger):
        grid = Grid.from_rows(["b"])
        digger.dig(grid, grid.position(0, 0), label_components(grid))
        assert grid.cell_at(0, 0).color is BlockColor.BROWN

    @pytest.mark.parametrize("rows", [["o"], ["."]])
    def test_non_block_rejected(self, digger, rows):
        grid = Grid.from_rows(rows)
        with pytest.raises(ValueError):
            digger.dig(grid, grid.position(0, 0))
