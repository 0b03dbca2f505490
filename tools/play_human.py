"""
Human Play Mode
================

Play Driller interactively in a pygame window, one game tick per frame.

Controls:
    - Arrow keys: Walk left/right, dig in any direction
    - Space: Restart after game over / next stage after a clear
    - F1: Toggle debug overlay
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--sound-dir DIR]
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Dict, Optional

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from driller.core.config_loader import load_config, GameConfig
from driller.core.game import Game, SOUND_EVENTS
from driller.core.player import Command
from driller.core.render_solid import SolidRenderer


# Held keys in priority order; the first one pressed wins the tick
KEY_COMMANDS = (
    ("K_LEFT", Command.LEFT),
    ("K_RIGHT", Command.RIGHT),
    ("K_UP", Command.UP),
    ("K_DOWN", Command.DOWN),
)


class SoundBank:
    """
    Maps sound event ids to pygame sounds loaded from `<sound_dir>/<id>.wav`.

    Missing files (or a missing audio device) leave that event silent.
    """

    def __init__(self, sound_dir: Optional[str]):
        self._sounds: Dict[str, "pygame.mixer.Sound"] = {}
        if sound_dir is None:
            return

        try:
            pygame.mixer.init()
        except pygame.error as e:
            print(f"Audio disabled: {e}")
            return

        for sound_id in SOUND_EVENTS:
            path = os.path.join(sound_dir, f"{sound_id}.wav")
            if os.path.exists(path):
                self._sounds[sound_id] = pygame.mixer.Sound(path)

    def play(self, sound_id: str) -> None:
        sound = self._sounds.get(sound_id)
        if sound is not None:
            sound.play()


class HumanPlayer:
    """
    Human-playable Driller game at a fixed frame rate.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: Optional[int] = None,
        sound_dir: Optional[str] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps if target_fps is not None else config.view.fps

        # Initialize game
        self._game = Game(config=config, seed=seed)

        # Initialize pygame
        pygame.init()
        self._renderer = SolidRenderer(config)
        self._screen = pygame.display.set_mode(self._renderer.size)
        pygame.display.set_caption("Driller")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 24)
        self._sounds = SoundBank(sound_dir)

        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the depth reached."""
        print("=== Driller ===")
        print("Arrow keys to walk and dig, Space to continue after a stage ends")
        print("F1 for debug view, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            if not self._running:
                break

            was_over = self._game.is_over
            was_clear = self._game.is_clear
            self._game.tick(self._read_command())

            for sound_id in self._game.drain_sounds():
                self._sounds.play(sound_id)

            if self._game.is_over and not was_over:
                print(f"\nGAME OVER - Depth: {self._game.depth}")
            elif self._game.is_clear and not was_clear:
                print(f"\nSTAGE CLEAR - Depth: {self._game.depth}")

            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.depth

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    if self._game.proceed():
                        print(f"Starting (depth {self._game.depth})")
                elif event.key == pygame.K_F1:
                    self._game.toggle_debug()

    def _read_command(self) -> Command:
        pressed = pygame.key.get_pressed()
        for key_name, command in KEY_COMMANDS:
            if pressed[getattr(pygame, key_name)]:
                return command
        return Command.NONE

    def _render(self) -> None:
        """Draw the current frame."""
        frame = self._renderer.render(self._game.get_render_data())
        surface = pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))
        self._screen.blit(surface, (0, 0))

        game_width = self._config.grid.width * self._config.view.cell_size
        text_color = (40, 40, 40)
        lines = [
            f"DEPTH {self._game.depth}",
            f"AIR {self._game.air_percent():.0f}%",
        ]
        if self._game.is_debug:
            lines.append(f"F {self._game.frame}")
        for i, line in enumerate(lines):
            label = self._font.render(line, True, text_color)
            self._screen.blit(label, (game_width + 8, 8 + i * 22))

        if self._game.is_over or self._game.is_clear:
            message = "GAME OVER" if self._game.is_over else "CLEAR!"
            title = self._font.render(message, True, (255, 255, 255))
            hint = self._font.render("Press Space", True, (255, 255, 255))
            cx = game_width // 2
            cy = self._screen.get_height() // 2
            self._screen.blit(title, (cx - title.get_width() // 2, cy - 20))
            self._screen.blit(hint, (cx - hint.get_width() // 2, cy + 4))

        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Driller")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=None, help="Ticks per second (default from config)")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--sound-dir", type=str, default=None,
                        help="Directory holding <sound>.wav files")
    args = parser.parse_args()

    if not PYGAME_AVAILABLE:
        print("Error: pygame is required for human play mode.")
        print("Install with: pip install pygame")
        sys.exit(1)

    config = load_config(args.config)
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        target_fps=args.fps,
        sound_dir=args.sound_dir
    )
    depth = player.run()
    print(f"\nFinal depth: {depth}")


if __name__ == "__main__":
    main()
