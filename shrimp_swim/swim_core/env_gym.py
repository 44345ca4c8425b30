"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the swimming game.
Reward is the score gained during the step.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from shrimp_swim.swim_core.config_loader import GameConfig, load_config
from shrimp_swim.swim_core.game import GamePhase, GameScene


ACTION_IDLE = 0
ACTION_TOUCH = 1


class SwimEnv(gym.Env):
    """
    Shrimp Swim as a Gymnasium environment.

    Action Space:
        Discrete(2). 0 = do nothing, 1 = tap (upward kick).

    Observation Space:
        Dict of scalars: player height and vertical speed, horizontal
        distance to the next obstacle's score trigger, that obstacle's gap
        centre, and the score.

    Reward:
        Score gained during the step (0 or 1 in practice).

    Info:
        Contains score, delta_score, phase, obstacle_count, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        frame_skip: int = 1,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize the environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            frame_skip: Frames simulated per step; the action applies to the first.
            image_width: Override rgb_array width.
            image_height: Override rgb_array height.
            debug: If True, prints a [DEBUG] line every step.
        """
        super().__init__()

        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._frame_skip = frame_skip
        self._debug = debug

        self._img_width = image_width or self._config.viewport.width
        self._img_height = image_height or self._config.viewport.height

        self._game = GameScene(config=self._config)

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] SwimEnv initialized")
            print(f"[DEBUG]   Viewport: {self._config.viewport.width}x{self._config.viewport.height}")
            print(f"[DEBUG]   Frame skip: {self._frame_skip}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        viewport = self._config.viewport
        return spaces.Dict({
            "player_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "player_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "next_obstacle_dx": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "next_gap_y": spaces.Box(low=0, high=viewport.height, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
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

        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        self._game = GameScene(config=self._config, seed=game_seed)

        obs = self._get_obs()
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 (idle) or 1 (touch).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action}, expected 0 or 1")

        game = self._game
        score_before = game.score

        if action == ACTION_TOUCH and game.state is GamePhase.RUNNING:
            game.touches_began()

        for _ in range(self._frame_skip):
            game.tick()
            if game.state is GamePhase.GAME_OVER:
                break

        delta_score = game.score - score_before
        terminated = game.state is GamePhase.GAME_OVER

        obs = self._get_obs()
        info = game.get_info()
        info["delta_score"] = delta_score

        if self._debug:
            print(f"[DEBUG] Step: action={action}, y={obs['player_y']:.1f}, "
                  f"vy={obs['player_vy']:.1f}, dx={obs['next_obstacle_dx']:.1f}, "
                  f"score={game.score}")
            if terminated:
                print(f"[DEBUG] TERMINATED: score {game.score} at t={game.current_time:.2f}s")

        if self.render_mode == "human":
            self.render()

        return obs, float(delta_score), terminated, False, info

    def _get_obs(self) -> Dict[str, np.ndarray]:
        """Build the observation dict from the live scene."""
        game = self._game
        player_x, player_y = game.player.node.world_position
        _, player_vy = game.player.body.velocity

        upcoming = game.next_obstacle()
        if upcoming is not None:
            dx = upcoming.score_trigger.node.world_position[0] - player_x
            gap_y = upcoming.vertical_gap_center
        else:
            dx = float(self._config.viewport.width)
            gap_y = self._config.viewport.mid_y

        return {
            "player_y": np.array(player_y, dtype=np.float32),
            "player_vy": np.array(player_vy, dtype=np.float32),
            "next_obstacle_dx": np.array(dx, dtype=np.float32),
            "next_gap_y": np.array(gap_y, dtype=np.float32),
            "score": np.array(game.score, dtype=np.int64),
        }

    def _init_renderer(self) -> None:
        from shrimp_swim.swim_core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer()

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode is None:
            return None

        if self._renderer is None:
            self._init_renderer()

        if self.render_mode == "rgb_array":
            return self._renderer.render(self._game, self._img_width, self._img_height)

        if self.render_mode == "human":
            import pygame
            self._renderer.render_to_screen(self._game, self._img_width, self._img_height)
            pygame.event.pump()
            pygame.display.flip()

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> GameScene:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
