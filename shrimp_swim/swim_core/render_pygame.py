"""
Pygame Renderer
===============

Draws a scene graph with pygame. Supports both display mode (human play)
and headless RGB output.

Textures are loaded from ``assets/sprites/<name>.png``; any texture
without an image is drawn as a flat placeholder of its configured size
and colour.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pygame

from shrimp_swim.swim_core.scene import LabelNode, Node, Scene, SpriteNode
from shrimp_swim.swim_core.texture_catalog import Texture

SPRITES_DIR = Path(__file__).parent.parent.parent / "assets" / "sprites"


class PygameRenderer:
    """
    Renders a Scene to a pygame surface.

    Supports:
    - Image textures with flat fallbacks
    - Per-node z ordering, rotation and scale
    - Screen display for human mode
    - RGB array output for agents
    """

    def __init__(self, sprites_dir: Optional[Path] = None, use_sprites: bool = True):
        """
        Initialize renderer.

        Args:
            sprites_dir: Directory holding texture images. Uses default if None.
            use_sprites: Whether to load images at all.
        """
        if not pygame.get_init():
            pygame.init()
        pygame.font.init()

        self._sprites_dir = sprites_dir or SPRITES_DIR
        self._use_sprites = use_sprites

        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        self._bg_color = (20, 60, 100)
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._image_cache: Dict[str, Optional[pygame.Surface]] = {}
        self._scaled_cache: Dict[Tuple[str, int, int], pygame.Surface] = {}

    # -- public -------------------------------------------------------

    def render(self, scene: Scene, width: int, height: int) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self.draw(surface, scene)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        scene: Scene,
        window_width: int = 1024,
        window_height: int = 768,
        caption: str = "Shrimp Swim"
    ) -> pygame.Surface:
        """Render to the pygame window (caller flips the display)."""
        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height))
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption(caption)

        self.draw(self._screen, scene)
        return self._screen

    def draw(self, surface: pygame.Surface, scene: Scene) -> None:
        """Draw every visible node of ``scene`` onto ``surface``."""
        width, height = surface.get_size()
        scale = min(width / scene.width, height / scene.height)
        offset_x = (width - scene.width * scale) / 2
        offset_y = (height - scene.height * scale) / 2

        surface.fill(self._bg_color)

        for node in self._draw_order(scene):
            x, y = node.world_position
            cx = int(offset_x + x * scale)
            cy = int(offset_y + (scene.height - y) * scale)
            node_scale = node.world_scale * scale

            if isinstance(node, SpriteNode):
                self._draw_sprite(surface, node, cx, cy, node_scale)
            elif isinstance(node, LabelNode):
                self._draw_label(surface, node, cx, cy, node_scale)

    def close(self) -> None:
        """Clean up pygame resources."""
        self._image_cache.clear()
        self._scaled_cache.clear()
        if self._screen is not None:
            self._screen = None

    # -- drawing ------------------------------------------------------

    def _draw_order(self, scene: Scene) -> List[Node]:
        """Visible drawable nodes sorted by z (stable in tree order)."""
        nodes = []
        for index, node in enumerate(scene.walk()):
            if node.hidden or not isinstance(node, (SpriteNode, LabelNode)):
                continue
            if any(ancestor.hidden for ancestor in self._ancestors(node)):
                continue
            nodes.append((node.world_z, index, node))
        nodes.sort(key=lambda item: (item[0], item[1]))
        return [node for _, _, node in nodes]

    @staticmethod
    def _ancestors(node: Node):
        parent = node.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    def _draw_sprite(
        self,
        surface: pygame.Surface,
        node: SpriteNode,
        cx: int,
        cy: int,
        scale: float
    ) -> None:
        w = max(1, int(node.size[0] * scale))
        h = max(1, int(node.size[1] * scale))
        image = self._get_scaled(node.texture, w, h)

        if abs(node.rotation) > 0.001:
            image = pygame.transform.rotate(image, math.degrees(node.rotation))

        rect = image.get_rect(center=(cx, cy))
        surface.blit(image, rect)

    def _draw_label(
        self,
        surface: pygame.Surface,
        node: LabelNode,
        cx: int,
        cy: int,
        scale: float
    ) -> None:
        if not node.text:
            return
        size = max(8, int(node.font_size * scale))
        font = self._get_font(size)
        text = font.render(node.text, True, node.color)
        rect = text.get_rect(center=(cx, cy))
        surface.blit(text, rect)

    # -- resources ----------------------------------------------------

    def _get_font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def _load_image(self, name: str) -> Optional[pygame.Surface]:
        """Load a texture image once; None if it is missing or unreadable."""
        if name not in self._image_cache:
            image = None
            path = self._sprites_dir / f"{name}.png"
            if self._use_sprites and path.exists():
                try:
                    image = pygame.image.load(str(path))
                    if pygame.display.get_surface() is not None:
                        image = image.convert_alpha()
                except pygame.error:
                    # Silent fail - will use fallback drawing
                    image = None
            self._image_cache[name] = image
        return self._image_cache[name]

    def _get_scaled(self, texture: Texture, w: int, h: int) -> pygame.Surface:
        key = (texture.name, w, h)
        if key not in self._scaled_cache:
            image = self._load_image(texture.name)
            if image is not None:
                scaled = pygame.transform.smoothscale(image, (w, h))
            else:
                scaled = self._make_fallback(texture, w, h)
            self._scaled_cache[key] = scaled
        return self._scaled_cache[key]

    def _make_fallback(self, texture: Texture, w: int, h: int) -> pygame.Surface:
        """Flat placeholder shaped loosely after what the texture shows."""
        surface = pygame.Surface((w, h), pygame.SRCALPHA)
        color = texture.color
        outline = tuple(max(0, c - 50) for c in color)
        name = texture.name

        if name.startswith("shrimp"):
            pygame.draw.ellipse(surface, color, surface.get_rect())
            pygame.draw.ellipse(surface, outline, surface.get_rect(), 2)
            eye = (int(w * 0.75), int(h * 0.35))
            pygame.draw.circle(surface, (30, 30, 30), eye, max(2, h // 10))
        elif name == "gameover":
            pygame.draw.rect(surface, color, surface.get_rect(), border_radius=12)
            pygame.draw.rect(surface, outline, surface.get_rect(), 3, border_radius=12)
            font = self._get_font(max(8, int(h * 0.6)))
            text = font.render("GAME OVER", True, (80, 40, 40))
            surface.blit(text, text.get_rect(center=(w // 2, h // 2)))
        else:
            surface.fill(color)
            pygame.draw.rect(surface, outline, surface.get_rect(), 1)
        return surface
