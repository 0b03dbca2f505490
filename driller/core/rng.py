"""
RNG - Field Generator
=====================

Deterministic population of a fresh stage grid from a seeded generator.
"""

from __future__ import annotations

import random
from typing import List, Optional

from driller.core.config_loader import GameConfig, get_config
from driller.core.cell import BlockColor
from driller.core.grid import Grid


class FieldGenerator:
    """
    Fills a grid with the stage layout.

    Layout, top to bottom:
    - `up_space_height` empty rows where the player starts
    - `normal_blocks_height` rows of uniformly random colors, each cell
      independently brown with `brown_probability`
    - `clear_blocks_height` rows of clear blocks

    Air pockets are dropped into the random field every `air_interval`
    rows (± `air_jitter`) at a random column.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize generator.

        Args:
            config: Game configuration. Uses default if None.
            rng: Shared random generator. Takes precedence over seed.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def _random_color(self) -> BlockColor:
        if self._rng.random() < self._config.field.brown_probability:
            return BlockColor.BROWN
        return self._rng.choice(BlockColor.field_colors())

    def air_rows(self) -> List[int]:
        """Pick the rows that receive an air pocket, top to bottom."""
        grid_cfg = self._config.grid
        field_cfg = self._config.field
        rows = []
        y = grid_cfg.up_space_height + field_cfg.air_interval
        while y < grid_cfg.clear_top:
            rows.append(y)
            jitter = self._rng.randint(-field_cfg.air_jitter, field_cfg.air_jitter)
            y += field_cfg.air_interval + jitter
        return rows

    def generate(self) -> Grid:
        """Build a new populated grid."""
        grid_cfg = self._config.grid
        life = self._config.dig.block_life_max
        grid = Grid(grid_cfg.width, grid_cfg.height, wrap=grid_cfg.wrap)

        for y in range(grid_cfg.up_space_height, grid_cfg.clear_top):
            for x in range(grid_cfg.width):
                grid.set_block(grid.position(x, y), self._random_color(), life)

        for y in self.air_rows():
            x = self._rng.randrange(grid_cfg.width)
            grid.set_air(grid.position(x, y))

        for y in range(grid_cfg.clear_top, grid_cfg.height):
            for x in range(grid_cfg.width):
                grid.set_block(grid.position(x, y), BlockColor.CLEAR, life)

        return grid
