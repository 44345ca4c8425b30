"""
Obstacle Spawner
================

Periodically creates a pair of hazard pillars (one from the floor, one
from the ceiling) with a randomly placed gap, plus an invisible score
trigger just behind them. Each obstacle slides off-screen and removes
itself; all of them live under one container so a restart can clear
them in one call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from shrimp_swim.swim_core.actions import (
    move_by,
    remove_from_parent,
    repeat_forever,
    run_block,
    sequence,
    wait,
)
from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import ObstacleConfig, ViewportConfig
from shrimp_swim.swim_core.physics_world import PhysicsBody
from shrimp_swim.swim_core.scene import Node, SpriteNode
from shrimp_swim.swim_core.texture_catalog import TextureCatalog


@dataclass
class Obstacle:
    """One spawned hazard pair and its score trigger."""
    vertical_gap_center: float
    node: Node
    lower_body: PhysicsBody
    upper_body: PhysicsBody
    score_trigger: PhysicsBody

    @property
    def alive(self) -> bool:
        """False once the obstacle has been removed from the scene."""
        return self.node.parent is not None

    @property
    def x(self) -> float:
        return self.node.world_position[0]


def _make_static(body: PhysicsBody, category: CollisionCategory) -> PhysicsBody:
    body.dynamic = False
    body.category = category
    body.contact_test_mask = CollisionCategory.PLAYER
    return body


class ObstacleSpawner:
    """
    Builds obstacles and keeps the spawn schedule.

    The gap centre is drawn from a seeded ``random.Random`` so a run can be
    reproduced.
    """

    def __init__(
        self,
        config: ObstacleConfig,
        viewport: ViewportConfig,
        catalog: TextureCatalog,
        container: Node,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Obstacle parameters.
            viewport: Visible scene size.
            catalog: Texture lookup.
            container: Node that owns every spawned obstacle.
            seed: Random seed for gap placement. Random if None.
        """
        self._config = config
        self._viewport = viewport
        self._container = container
        self._rng = random.Random(seed)

        self._lower = catalog[config.lower_texture]
        self._upper = catalog[config.upper_texture]

        self._obstacles: List[Obstacle] = []

    @property
    def container(self) -> Node:
        return self._container

    @property
    def gap_base(self) -> int:
        """Lowest gap centre; draws fall in [gap_base, 3 * gap_base)."""
        return int(self._viewport.height / self._config.gap_divisions)

    @property
    def travel_distance(self) -> float:
        """How far an obstacle moves before it removes itself."""
        return self._viewport.width + self._config.travel_factor * self._lower.width

    @property
    def travel_duration(self) -> float:
        return self.travel_distance / self._config.speed

    @property
    def start_x(self) -> float:
        return self._viewport.width + self._config.start_offset_factor * self._lower.width

    @property
    def active_obstacles(self) -> List[Obstacle]:
        """Obstacles still in the scene, oldest first."""
        self._obstacles = [o for o in self._obstacles if o.alive]
        return list(self._obstacles)

    def reseed(self, seed: Optional[int]) -> None:
        self._rng = random.Random(seed)

    def gap_offset(self) -> int:
        """Random gap centre height in [base, 3 * base)."""
        base = self.gap_base
        return base + self._rng.randrange(base * 2)

    def spawn_one(self) -> Obstacle:
        """Build one obstacle at the right edge and start it moving."""
        cfg = self._config

        node = Node("obstacle")
        node.position = (self.start_x, 0.0)
        node.z_position = cfg.z

        y = float(self.gap_offset())

        under = SpriteNode(self._lower)
        under.position = (0.0, y)
        under.physics_body = _make_static(
            PhysicsBody(self._lower.width, self._lower.height),
            CollisionCategory.OBSTACLE
        )
        node.add_child(under)

        above = SpriteNode(self._upper)
        above.position = (
            0.0,
            y + self._lower.height / 2.0 + cfg.gap_spacing + self._upper.height / 2.0
        )
        above.physics_body = _make_static(
            PhysicsBody(self._upper.width, self._upper.height),
            CollisionCategory.OBSTACLE
        )
        node.add_child(above)

        trigger = Node("score_trigger")
        trigger.position = (
            self._upper.width / 2.0 + cfg.trigger_margin,
            self._viewport.height / 2.0
        )
        trigger.physics_body = _make_static(
            PhysicsBody(cfg.trigger_width, float(self._viewport.height), sensor=True),
            CollisionCategory.SCORE_TRIGGER
        )
        node.add_child(trigger)

        node.run_action(sequence([
            move_by(-self.travel_distance, 0.0, self.travel_duration),
            remove_from_parent(),
        ]))
        self._container.add_child(node)

        obstacle = Obstacle(
            vertical_gap_center=y,
            node=node,
            lower_body=under.physics_body,
            upper_body=above.physics_body,
            score_trigger=trigger.physics_body
        )
        self._obstacles.append(obstacle)
        return obstacle

    def schedule(self, host: Node) -> None:
        """Spawn now and then every ``spawn_interval`` seconds of ``host`` time."""
        host.run_action(repeat_forever(sequence([
            run_block(self.spawn_one),
            wait(self._config.spawn_interval),
        ])))

    def clear(self) -> None:
        """Remove every child of the container (obstacles and overlays)."""
        self._container.remove_all_children()
        self._obstacles.clear()
