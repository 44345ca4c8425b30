"""
Human Play Mode
================

Play Shrimp Swim interactively.

Controls:
    - Click/Space: Swim up (or restart once the game-over roll has finished)
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

import pygame

from shrimp_swim.swim_core.config_loader import GameConfig, load_config
from shrimp_swim.swim_core.game import GamePhase, GameScene, InputOutcome
from shrimp_swim.swim_core.render_pygame import PygameRenderer


class HumanPlayer:
    """
    Human-playable game loop.

    Physics runs at the fixed config step; rendering runs at the
    display rate.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: int = 1024,
        window_height: int = 768,
        target_fps: int = 60,
        debug: bool = False
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._window_width = window_width
        self._window_height = window_height
        self._target_fps = target_fps
        self._debug = debug

        self._game = GameScene(config=config, seed=seed)

        pygame.init()
        self._clock = pygame.time.Clock()
        self._renderer = PygameRenderer()

        self._running = True
        self._best_score = 0
        self._last_score = 0
        self._last_phase = GamePhase.RUNNING

        # Physics timing
        self._physics_dt = config.physics.dt
        self._physics_accumulator = 0.0
        self._last_time = time.time()

    def run(self) -> int:
        """Run the game loop. Returns best score."""
        print("=== Shrimp Swim ===")
        print("Click or Space to swim up, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            self._update_physics()
            self._render()
            self._clock.tick(self._target_fps)

        self._renderer.close()
        pygame.quit()
        return self._best_score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._touch()

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._touch()

    def _touch(self) -> None:
        outcome = self._game.touches_began()
        if self._debug:
            print(f"[DEBUG] touch -> {outcome.value} (vy={self._game.player.body.velocity[1]:.1f})")
        if outcome is InputOutcome.RESTART:
            self._last_score = 0
            self._last_phase = GamePhase.RUNNING
            print("\n=== Game Restarted ===\n")

    def _update_physics(self) -> None:
        """Advance the scene in fixed steps to catch up with real time."""
        current_time = time.time()
        frame_dt = current_time - self._last_time
        self._last_time = current_time

        self._physics_accumulator += frame_dt

        # Limit to prevent spiral
        if self._physics_accumulator > 0.2:
            self._physics_accumulator = 0.2

        while self._physics_accumulator >= self._physics_dt:
            self._physics_accumulator -= self._physics_dt
            self._game.tick(self._physics_dt)

            score = self._game.score
            if score > self._last_score:
                print(f"  +{score - self._last_score} (Total: {score})")
                self._last_score = score

            phase = self._game.state
            if phase is GamePhase.GAME_OVER and self._last_phase is GamePhase.RUNNING:
                self._best_score = max(self._best_score, score)
                print(f"\nGAME OVER - Score: {score} (Best: {self._best_score})")
            self._last_phase = phase

    def _render(self) -> None:
        self._renderer.render_to_screen(
            self._game,
            self._window_width,
            self._window_height
        )
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Shrimp Swim interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=1024, help="Window width (default: 1024)")
    parser.add_argument("--height", type=int, default=768, help="Window height (default: 768)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--debug", action="store_true", help="Print input outcomes")

    args = parser.parse_args()

    config = load_config()
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        window_width=args.width,
        window_height=args.height,
        target_fps=args.fps,
        debug=args.debug
    )
    score = player.run()
    print(f"\nBest Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
