"""
Tests for looping scroll layers.
"""

import pytest

from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import ScrollLayerConfig, load_config
from shrimp_swim.swim_core.scene import Node, Scene
from shrimp_swim.swim_core.scrolling import ScrollingLayer
from shrimp_swim.swim_core.texture_catalog import TextureCatalog


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def catalog(config):
    return TextureCatalog(config)


@pytest.fixture
def scene(config):
    return Scene(size=(config.viewport.width, config.viewport.height))


def _layer(config, name):
    for layer in config.scroll_layers:
        if layer.name == name:
            return layer
    raise KeyError(name)


def _build(config, catalog, scene, name):
    layer = _layer(config, name)
    scrolling = ScrollingLayer(layer, catalog[layer.texture], config.viewport)
    base = Node("base")
    scene.add_child(base)
    scrolling.build(base)
    return scrolling, base


class TestTileCount:

    def test_covers_view_plus_buffer(self):
        assert ScrollingLayer.tile_count(1024, 512) == 4
        assert ScrollingLayer.tile_count(1024, 320) == 6
        assert ScrollingLayer.tile_count(1024, 1024) == 3

    def test_wide_tile(self):
        assert ScrollingLayer.tile_count(1024, 4096) == 3


class TestBuild:

    def test_tiles_laid_left_to_right(self, config, catalog, scene):
        scrolling, base = _build(config, catalog, scene, "land")
        tiles = scrolling.tiles

        assert len(tiles) == 6
        assert [t.position[0] for t in tiles] == [i * 320.0 for i in range(6)]
        assert all(t.parent is base for t in tiles)

    def test_anchors(self, config, catalog, scene):
        land, _ = _build(config, catalog, scene, "land")
        ceiling, _ = _build(config, catalog, scene, "ceiling")

        assert land.y_position == 32.0
        assert ceiling.y_position == 768.0 - 24.0
        assert all(t.position[1] == 32.0 for t in land.tiles)

    def test_z_positions(self, config, catalog, scene):
        sea, _ = _build(config, catalog, scene, "sea")
        land, _ = _build(config, catalog, scene, "land")

        assert all(t.z_position == -100.0 for t in sea.tiles)
        assert all(t.z_position == 0.0 for t in land.tiles)

    def test_physics_layer_has_world_bodies(self, config, catalog, scene):
        scrolling, _ = _build(config, catalog, scene, "land")

        for tile in scrolling.tiles:
            body = tile.physics_body
            assert body is not None
            assert body.category == CollisionCategory.WORLD
            assert not body.dynamic
            assert body.size == (320.0, 64.0)
            assert body in scene.physics_world.bodies

    def test_decorative_layer_has_no_bodies(self, config, catalog, scene):
        scrolling, _ = _build(config, catalog, scene, "sea")
        assert all(t.physics_body is None for t in scrolling.tiles)


class TestLoop:

    def test_loop_duration(self, config, catalog):
        land = _layer(config, "land")
        scrolling = ScrollingLayer(land, catalog["land"], config.viewport)
        assert scrolling.loop_duration == pytest.approx(3.2)

    def test_half_loop(self, config, catalog, scene):
        scrolling, _ = _build(config, catalog, scene, "land")
        scene.tick(scrolling.loop_duration / 2)

        assert scrolling.tiles[0].position[0] == pytest.approx(-160.0)
        assert scrolling.tiles[1].position[0] == pytest.approx(160.0)

    def test_full_loop_snaps_back(self, config, catalog, scene):
        scrolling, _ = _build(config, catalog, scene, "land")
        scene.tick(scrolling.loop_duration)

        assert scrolling.tiles[0].position[0] == pytest.approx(0.0)

    def test_keeps_looping(self, config, catalog, scene):
        scrolling, _ = _build(config, catalog, scene, "land")
        scene.tick(scrolling.loop_duration)
        scene.tick(scrolling.loop_duration / 4)

        assert scrolling.tiles[0].position[0] == pytest.approx(-80.0)

    def test_frozen_parent(self, config, catalog, scene):
        scrolling, base = _build(config, catalog, scene, "land")
        base.speed = 0.0
        scene.tick(1.0)
        assert scrolling.tiles[0].position[0] == 0.0

    def test_custom_layer(self, config, catalog, scene):
        layer = ScrollLayerConfig(
            name="strip", texture="land", speed=64.0, z=3.0, anchor="top", physics=False
        )
        scrolling = ScrollingLayer(layer, catalog["land"], config.viewport)
        scrolling.build(scene)

        assert scrolling.name == "strip"
        assert scrolling.loop_duration == pytest.approx(5.0)
        scene.tick(2.5)
        assert scrolling.tiles[0].position[0] == pytest.approx(-160.0)
