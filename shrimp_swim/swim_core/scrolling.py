"""
Scrolling Layers
================

Tiled strips that loop horizontally forever (sea, rock silhouettes, land,
ceiling). Each tile moves left by one tile width, then snaps back, so a
row of tiles one view wide plus a buffer looks like an endless scroll.
"""

from __future__ import annotations

import math
from typing import List

from shrimp_swim.swim_core.actions import move_by, repeat_forever, sequence
from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import ScrollLayerConfig, ViewportConfig
from shrimp_swim.swim_core.physics_world import PhysicsBody
from shrimp_swim.swim_core.scene import Node, SpriteNode
from shrimp_swim.swim_core.texture_catalog import Texture


class ScrollingLayer:
    """One looping strip built from repeated tiles of a texture."""

    def __init__(
        self,
        layer: ScrollLayerConfig,
        texture: Texture,
        viewport: ViewportConfig
    ):
        self._layer = layer
        self._texture = texture
        self._viewport = viewport
        self._tiles: List[SpriteNode] = []

    @staticmethod
    def tile_count(viewport_width: float, tile_width: float) -> int:
        """Tiles needed to cover the view plus a buffer through the reset seam."""
        return int(math.ceil(2.0 + viewport_width / tile_width))

    @property
    def name(self) -> str:
        return self._layer.name

    @property
    def tiles(self) -> List[SpriteNode]:
        return list(self._tiles)

    @property
    def y_position(self) -> float:
        """Centre line of the strip, hugging the bottom or top edge."""
        half = self._texture.height / 2.0
        if self._layer.anchor == "top":
            return self._viewport.height - half
        return half

    @property
    def loop_duration(self) -> float:
        """Seconds for a tile to travel one tile width."""
        return self._texture.width / self._layer.speed

    def build(self, parent: Node) -> List[SpriteNode]:
        """
        Create the tiles under ``parent`` and start their loops.

        Returns:
            The created tile sprites, left to right.
        """
        width = self._texture.width
        loop = repeat_forever(sequence([
            move_by(-width, 0.0, self.loop_duration),
            move_by(width, 0.0, 0.0),
        ]))

        count = self.tile_count(self._viewport.width, width)
        for i in range(count):
            sprite = SpriteNode(self._texture, name=f"{self._layer.name}_{i}")
            sprite.z_position = self._layer.z
            sprite.position = (i * width, self.y_position)

            if self._layer.physics:
                body = PhysicsBody(width, self._texture.height, dynamic=False)
                body.category = CollisionCategory.WORLD
                sprite.physics_body = body

            sprite.run_action(loop)
            parent.add_child(sprite)
            self._tiles.append(sprite)

        return list(self._tiles)
