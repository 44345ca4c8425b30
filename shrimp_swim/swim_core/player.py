"""
Player Controller
=================

Owns the swimmer sprite, its physics body, the looping swim animation,
the tap impulse, and the game-over roll.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Tuple

from shrimp_swim.swim_core.actions import animate_frames, repeat_forever, rotate_by
from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import PlayerConfig, ViewportConfig
from shrimp_swim.swim_core.physics_world import PhysicsBody
from shrimp_swim.swim_core.scene import SpriteNode
from shrimp_swim.swim_core.texture_catalog import TextureCatalog


PLAY_COLLISIONS = CollisionCategory.WORLD | CollisionCategory.OBSTACLE


class PlayerController:
    """The player entity; created once and repositioned on restart."""

    def __init__(
        self,
        config: PlayerConfig,
        viewport: ViewportConfig,
        catalog: TextureCatalog
    ):
        self._config = config
        self._viewport = viewport

        frames = catalog.frames(config.frames)
        self._node = SpriteNode(frames[0], name="player")
        self._node.position = self.setup_position
        self._node.z_position = config.z
        self._frames = frames
        self._start_swim()

        body = PhysicsBody(frames[0].width, frames[0].height, dynamic=True, mass=config.mass)
        body.allows_rotation = False
        body.category = CollisionCategory.PLAYER
        body.collision_mask = PLAY_COLLISIONS
        body.contact_test_mask = PLAY_COLLISIONS
        self._node.physics_body = body

    def _start_swim(self) -> None:
        self._node.run_action(repeat_forever(animate_frames(self._frames, self._config.time_per_frame)))

    @property
    def node(self) -> SpriteNode:
        return self._node

    @property
    def body(self) -> PhysicsBody:
        return self._node.physics_body

    @property
    def setup_position(self) -> Tuple[float, float]:
        return (
            self._viewport.mid_x * self._config.start_x_factor,
            self._viewport.height * self._config.setup_y_factor,
        )

    @property
    def start_position(self) -> Tuple[float, float]:
        return (
            self._viewport.mid_x * self._config.start_x_factor,
            self._viewport.mid_y * self._config.restart_y_factor,
        )

    @property
    def stopped(self) -> bool:
        """True once the game-over roll has finished."""
        return self._node.speed == 0.0

    def apply_touch(self, force_y: float) -> None:
        """Cancel current motion, then kick upward."""
        self.body.velocity = (0.0, 0.0)
        self.body.apply_impulse((0.0, force_y))

    def reset(self, position: Optional[Tuple[float, float]] = None) -> None:
        """Put the player back at the start, at rest, colliding with everything."""
        # drops an unfinished death roll along with its stop callback
        self._node.remove_all_actions()
        self._start_swim()
        self._node.position = position if position is not None else self.start_position
        self._node.rotation = 0.0
        self.body.velocity = (0.0, 0.0)
        self.restore_collisions()
        self._node.speed = 1.0

    def restrict_to_world(self) -> None:
        """Fall through hazards, still land on the floor."""
        self.body.collision_mask = CollisionCategory.WORLD

    def restore_collisions(self) -> None:
        self.body.collision_mask = PLAY_COLLISIONS

    def start_death_roll(self, on_finished: Optional[Callable[[], None]] = None) -> float:
        """
        Spin by an angle proportional to the current height, then stop.

        Returns:
            The roll angle in radians.
        """
        angle = math.pi * self._node.position[1] * self._config.roll_factor

        def finish() -> None:
            self._node.speed = 0.0
            if on_finished is not None:
                on_finished()

        self._node.run_action(rotate_by(angle, self._config.roll_duration), completion=finish)
        return angle
