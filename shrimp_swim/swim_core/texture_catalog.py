"""
Texture Catalog
===============

Provides access to named textures declared in config. A texture here is
only a name and a size; pixels are loaded by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from shrimp_swim.swim_core.config_loader import GameConfig, TextureConfig, get_config


@dataclass(frozen=True)
class Texture:
    """
    Runtime handle for a texture.

    Wraps TextureConfig; sprites built from it take its size.
    """
    config: TextureConfig

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def width(self) -> float:
        return self.config.width

    @property
    def height(self) -> float:
        return self.config.height

    @property
    def size(self) -> Tuple[float, float]:
        return (self.config.width, self.config.height)

    @property
    def color(self) -> Tuple[int, int, int]:
        """Flat colour used when no image is available."""
        return self.config.color

    def __repr__(self) -> str:
        return f"Texture({self.name}: {self.width:g}x{self.height:g})"


class TextureCatalog:
    """Collection of all textures named in the game config."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._textures: Dict[str, Texture] = {
            name: Texture(texture_config)
            for name, texture_config in config.textures.items()
        }

    def __len__(self) -> int:
        return len(self._textures)

    def __getitem__(self, name: str) -> Texture:
        """Get texture by name."""
        if name in self._textures:
            return self._textures[name]
        raise KeyError(f"Unknown texture: {name}")

    def __contains__(self, name: str) -> bool:
        return name in self._textures

    def __iter__(self) -> Iterator[Texture]:
        return iter(self._textures.values())

    def frames(self, names) -> Tuple[Texture, ...]:
        """Look up an ordered run of textures (e.g. animation frames)."""
        return tuple(self[name] for name in names)


# Module-level singleton
_cached_catalog: Optional[TextureCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> TextureCatalog:
    """
    Get the texture catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        TextureCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = TextureCatalog(config)
    return _cached_catalog
