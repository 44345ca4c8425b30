"""
Tests for obstacle spawning, motion and removal.
"""

import pytest

from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import load_config
from shrimp_swim.swim_core.obstacles import ObstacleSpawner
from shrimp_swim.swim_core.scene import Node, Scene
from shrimp_swim.swim_core.texture_catalog import TextureCatalog


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scene(config):
    return Scene(size=(config.viewport.width, config.viewport.height))


@pytest.fixture
def container(scene):
    node = Node("obstacles")
    scene.add_child(node)
    return node


@pytest.fixture
def spawner(config, container):
    return ObstacleSpawner(
        config.obstacles,
        config.viewport,
        TextureCatalog(config),
        container,
        seed=42
    )


class TestGapPlacement:
    """Test the random gap centre."""

    def test_gap_base(self, spawner):
        assert spawner.gap_base == 64

    def test_gap_range(self, spawner):
        draws = [spawner.gap_offset() for _ in range(500)]
        assert min(draws) >= 64
        assert max(draws) < 192
        assert all(isinstance(d, int) for d in draws)

    def test_gap_uses_whole_range(self, spawner):
        draws = {spawner.gap_offset() for _ in range(2000)}
        assert len(draws) > 100

    def test_seed_reproducible(self, spawner, config, container):
        other = ObstacleSpawner(
            config.obstacles, config.viewport, TextureCatalog(config), container, seed=42
        )
        assert [spawner.gap_offset() for _ in range(20)] == [other.gap_offset() for _ in range(20)]

    def test_reseed(self, spawner):
        spawner.reseed(7)
        first = [spawner.gap_offset() for _ in range(10)]
        spawner.reseed(7)
        assert [spawner.gap_offset() for _ in range(10)] == first


class TestSpawnOne:
    """Test the layout of one obstacle."""

    def test_geometry(self, spawner, scene):
        obstacle = spawner.spawn_one()

        assert obstacle.node.position == (1024.0 + 2 * 88.0, 0.0)
        assert obstacle.node.z_position == -50.0

        lower = obstacle.lower_body.node
        upper = obstacle.upper_body.node
        assert lower.position == (0.0, obstacle.vertical_gap_center)
        assert upper.position[1] - lower.position[1] == pytest.approx(180.0 + 160.0 + 180.0)

    def test_score_trigger(self, spawner):
        obstacle = spawner.spawn_one()
        trigger = obstacle.score_trigger

        assert trigger.node.position == (44.0 + 5.0, 384.0)
        assert trigger.size == (10.0, 768.0)
        assert trigger.sensor
        assert trigger.category == CollisionCategory.SCORE_TRIGGER
        assert trigger.contact_test_mask == CollisionCategory.PLAYER

    def test_hazard_bodies(self, spawner):
        obstacle = spawner.spawn_one()
        for body in (obstacle.lower_body, obstacle.upper_body):
            assert body.category == CollisionCategory.OBSTACLE
            assert body.contact_test_mask == CollisionCategory.PLAYER
            assert not body.dynamic
            assert not body.sensor

    def test_bodies_registered(self, spawner, scene):
        obstacle = spawner.spawn_one()
        bodies = scene.physics_world.bodies
        assert obstacle.lower_body in bodies
        assert obstacle.upper_body in bodies
        assert obstacle.score_trigger in bodies

    def test_active_obstacles(self, spawner):
        first = spawner.spawn_one()
        second = spawner.spawn_one()
        assert spawner.active_obstacles == [first, second]


class TestMotion:
    """Test travel and self-removal."""

    def test_travel_distance(self, spawner):
        assert spawner.travel_distance == pytest.approx(1024.0 + 2.3 * 88.0)
        assert spawner.travel_duration == pytest.approx((1024.0 + 2.3 * 88.0) / 100.0)

    def test_moves_left(self, spawner, scene):
        obstacle = spawner.spawn_one()
        scene.tick(1.0)
        assert obstacle.x == pytest.approx(spawner.start_x - 100.0)

    def test_removed_after_travel(self, spawner, scene):
        obstacle = spawner.spawn_one()
        scene.tick(spawner.travel_duration)

        assert not obstacle.alive
        assert spawner.active_obstacles == []
        assert obstacle.score_trigger not in scene.physics_world.bodies
        assert obstacle.lower_body not in scene.physics_world.bodies

    def test_frozen_container(self, spawner, container, scene):
        obstacle = spawner.spawn_one()
        container.speed = 0.0
        scene.tick(1.0)
        assert obstacle.x == spawner.start_x


class TestSchedule:

    def test_spawns_immediately_then_periodically(self, spawner, scene):
        spawner.schedule(scene)

        scene.tick(0.1)
        assert len(spawner.active_obstacles) == 1

        scene.tick(2.3)
        assert len(spawner.active_obstacles) == 1

        scene.tick(0.2)
        assert len(spawner.active_obstacles) == 2

    def test_clear(self, spawner, container, scene):
        spawner.spawn_one()
        spawner.spawn_one()
        container.add_child(Node("overlay"))

        spawner.clear()
        assert container.children == ()
        assert spawner.active_obstacles == []
        assert not scene.physics_world.bodies
