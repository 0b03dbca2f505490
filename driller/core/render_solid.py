"""
Solid Renderer
==============

Fast numpy-based renderer that draws the visible part of the grid as solid
cells, the player, and an air gauge in the side panel.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import numpy as np

from driller.core.config_loader import GameConfig, get_config

# Horizontal shake offsets in pixels, cycled by the shake timer
SHAKE_OFFSETS = (0, 1, 2, 1, 0, -1, -2, -1)

# Air gauge turns to the warning color below this percentage
AIR_WARNING_PERCENT = 20.0


class SolidRenderer:
    """
    Renders the game as solid-color rectangles.

    Features:
    - Shake and fall animation offsets for unsupported cells
    - Dug-in blocks drawn shorter in proportion to lost durability
    - Air gauge and depth bar in the side panel
    - Red tint on game over, yellow tint on clear
    - Debug overlay marking unsupported cells

    Output is an (height, width, 3) uint8 array; no window is needed.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._cell = config.view.cell_size
        self._info_width = config.view.info_width
        self._visible_rows = config.view.visible_rows
        self._fall_frames = config.gravity.fall_frames
        self._life_max = config.dig.block_life_max

        colors = config.colors
        self._block_colors = {
            "red": np.array(colors.red, dtype=np.uint8),
            "yellow": np.array(colors.yellow, dtype=np.uint8),
            "green": np.array(colors.green, dtype=np.uint8),
            "blue": np.array(colors.blue, dtype=np.uint8),
            "clear": np.array(colors.clear, dtype=np.uint8),
            "brown": np.array(colors.brown, dtype=np.uint8),
        }
        self._air_color = np.array(colors.air, dtype=np.uint8)
        self._player_color = np.array(colors.player, dtype=np.uint8)
        self._bg_color = np.array(colors.background, dtype=np.uint8)
        self._panel_color = np.array(colors.panel, dtype=np.uint8)
        self._gauge_color = np.array([1, 47, 208], dtype=np.uint8)
        self._warning_color = np.array([223, 122, 152], dtype=np.uint8)
        self._depth_color = np.array([254, 84, 0], dtype=np.uint8)

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) of rendered frames in pixels."""
        width = self._config.grid.width * self._cell + self._info_width
        return (width, self._visible_rows * self._cell)

    def render(self, render_data: Dict[str, Any]) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from Game.get_render_data().

        Returns:
            (height, width, 3) uint8 array.
        """
        width, height = self.size
        game_width = render_data["grid_width"] * self._cell
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        camera_y = render_data["camera_y"]
        for cell in render_data["cells"]:
            self._draw_cell(img, cell, camera_y, game_width, render_data["is_debug"])

        self._draw_player(img, render_data["player"], camera_y, game_width)
        self._draw_panel(img, render_data, game_width)

        if render_data["is_over"]:
            self._tint(img[:, :game_width], np.array([255, 0, 0], dtype=np.uint8))
        elif render_data["is_clear"]:
            self._tint(img[:, :game_width], np.array([255, 255, 0], dtype=np.uint8))

        return img

    def _draw_cell(
        self,
        img: np.ndarray,
        cell: Dict[str, Any],
        camera_y: int,
        game_width: int,
        debug: bool
    ) -> None:
        """Draw one block or air cell with its animation offsets."""
        size = self._cell
        offset_x = 0
        offset_y = 0
        if not cell["supported"]:
            if cell["shake_timer"] >= 0:
                offset_x = SHAKE_OFFSETS[cell["shake_timer"] % len(SHAKE_OFFSETS)]
            # A completed fall is drawn at the cell itself
            if 0 <= cell["fall_timer"] < self._fall_frames:
                offset_y = min(size, int(cell["fall_timer"] / self._fall_frames * size))

        left = cell["x"] * size + offset_x
        top = (cell["y"] - camera_y) * size + offset_y

        if cell["kind"] == "air":
            self._fill_ellipse(img, left + size // 2, top + size // 2, size // 2, size // 4,
                               self._air_color, game_width)
        else:
            dug_in = int((self._life_max - cell["durability"]) / self._life_max * size)
            self._fill_rect(img, left, top + dug_in, size, size - dug_in,
                            self._block_colors[cell["color"]], game_width)

        if debug and not cell["supported"]:
            cell_view = self._clip(img, cell["x"] * size, (cell["y"] - camera_y) * size,
                                   size, size, game_width)
            if cell_view is not None:
                self._tint(cell_view, np.array([255, 0, 0], dtype=np.uint8))

    def _draw_player(
        self,
        img: np.ndarray,
        player: Dict[str, Any],
        camera_y: int,
        game_width: int
    ) -> None:
        size = self._cell
        offset_x = 0
        if player["state"] == "walking":
            step = int(player["walking_frames"] / self._config.player.walk_frames * size)
            offset_x = -step if player["direction"] == "left" else step

        left = player["x"] * size + offset_x
        top = (player["y"] - camera_y) * size
        self._fill_rect(img, left, top, size, size * 7 // 10, self._player_color, game_width)

    def _draw_panel(self, img: np.ndarray, render_data: Dict[str, Any], game_width: int) -> None:
        """Side panel with air gauge and depth progress."""
        height = img.shape[0]
        img[:, game_width:] = self._panel_color

        margin = self._info_width // 5
        gauge_height = height // 2
        gauge_top = height // 4
        air_percent = max(0.0, min(100.0, render_data["air_percent"]))
        filled = int(gauge_height * air_percent / 100.0)
        color = self._gauge_color if air_percent >= AIR_WARNING_PERCENT else self._warning_color
        img[gauge_top + gauge_height - filled:gauge_top + gauge_height,
            game_width + margin:game_width + 2 * margin] = color

        depth_ratio = min(1.0, render_data["depth"] / max(1, render_data["grid_height"]))
        depth_height = int(gauge_height * depth_ratio)
        img[gauge_top:gauge_top + depth_height,
            game_width + 3 * margin:game_width + 4 * margin] = self._depth_color

    @staticmethod
    def _clip(
        img: np.ndarray,
        left: int,
        top: int,
        width: int,
        height: int,
        max_x: int
    ) -> Optional[np.ndarray]:
        """View of the rectangle clipped to the game area, or None if empty."""
        x0 = max(0, left)
        y0 = max(0, top)
        x1 = min(max_x, left + width)
        y1 = min(img.shape[0], top + height)
        if x0 >= x1 or y0 >= y1:
            return None
        return img[y0:y1, x0:x1]

    def _fill_rect(
        self,
        img: np.ndarray,
        left: int,
        top: int,
        width: int,
        height: int,
        color: np.ndarray,
        max_x: int
    ) -> None:
        view = self._clip(img, left, top, width, height, max_x)
        if view is not None:
            view[:] = color

    @staticmethod
    def _fill_ellipse(
        img: np.ndarray,
        cx: int,
        cy: int,
        rx: int,
        ry: int,
        color: np.ndarray,
        max_x: int
    ) -> None:
        y0 = max(0, cy - ry)
        y1 = min(img.shape[0], cy + ry + 1)
        x0 = max(0, cx - rx)
        x1 = min(max_x, cx + rx + 1)
        if x0 >= x1 or y0 >= y1 or rx <= 0 or ry <= 0:
            return

        yy, xx = np.ogrid[y0:y1, x0:x1]
        mask = ((xx - cx) / rx) ** 2 + ((yy - cy) / ry) ** 2 <= 1.0
        img[y0:y1, x0:x1][mask] = color

    @staticmethod
    def _tint(view: np.ndarray, color: np.ndarray, alpha: float = 0.5) -> None:
        blended = view.astype(np.float32) * (1.0 - alpha) + color.astype(np.float32) * alpha
        view[:] = blended.astype(np.uint8)

    def close(self) -> None:
        """Release resources (nothing held for numpy rendering)."""
