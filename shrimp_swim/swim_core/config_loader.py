"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Optional

import yaml


VALID_ANCHORS = ("bottom", "top")


@dataclass(frozen=True)
class ViewportConfig:
    """Visible scene size in points."""
    width: int
    height: int

    @property
    def mid_x(self) -> float:
        return self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.height / 2.0


@dataclass(frozen=True)
class PhysicsConfig:
    """Physics simulation parameters."""
    gravity_x: float
    gravity_y: float
    points_per_meter: float
    dt: float
    substeps: int

    @property
    def gravity(self) -> Tuple[float, float]:
        """Gravity in points / s^2."""
        return (
            self.gravity_x * self.points_per_meter,
            self.gravity_y * self.points_per_meter,
        )


@dataclass(frozen=True)
class ScrollLayerConfig:
    """A single looping horizontal strip."""
    name: str
    texture: str
    speed: float
    z: float
    anchor: str      # "bottom" or "top" edge of the viewport
    physics: bool    # True for land/ceiling (World category)


@dataclass(frozen=True)
class ObstacleConfig:
    """Hazard pillar spawning and motion."""
    lower_texture: str
    upper_texture: str
    spawn_interval: float
    gap_divisions: int
    gap_spacing: float
    speed: float
    travel_factor: float
    start_offset_factor: float
    trigger_width: float
    trigger_margin: float
    z: float


@dataclass(frozen=True)
class PlayerConfig:
    """Player sprite, body and input response."""
    frames: Tuple[str, ...]
    time_per_frame: float
    mass: float
    start_x_factor: float
    setup_y_factor: float
    restart_y_factor: float
    touch_force_initial: float
    roll_factor: float
    roll_duration: float
    z: float


@dataclass(frozen=True)
class ScoreConfig:
    """Score label appearance and pulse animation."""
    font_size: int
    color: Tuple[int, int, int]
    y_factor: float
    z: float
    pulse_scale: float
    pulse_duration: float


@dataclass(frozen=True)
class GameOverConfig:
    """Game-over marker."""
    texture: str
    z: float


@dataclass(frozen=True)
class TextureConfig:
    """Size of a named texture and the colour used when no image is available."""
    name: str
    width: float
    height: float
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    viewport: ViewportConfig
    physics: PhysicsConfig
    scroll_layers: Tuple[ScrollLayerConfig, ...]
    obstacles: ObstacleConfig
    player: PlayerConfig
    score: ScoreConfig
    game_over: GameOverConfig
    textures: Dict[str, TextureConfig]

    def get_texture(self, name: str) -> TextureConfig:
        """Get texture config by name."""
        if name in self.textures:
            return self.textures[name]
        raise KeyError(f"Unknown texture: {name}")


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_texture(name: str, texture_data: dict) -> TextureConfig:
    """Parse a single texture entry from YAML."""
    size = texture_data["size"]
    if len(size) != 2:
        raise ValueError(f"Texture size must have 2 values [width, height], got {size}")
    return TextureConfig(
        name=name,
        width=float(size[0]),
        height=float(size[1]),
        color=_parse_color(texture_data.get("color", [255, 0, 255]))
    )


def _parse_layer(layer_data: dict) -> ScrollLayerConfig:
    """Parse a scroll layer entry from YAML."""
    return ScrollLayerConfig(
        name=str(layer_data["name"]),
        texture=str(layer_data.get("texture", layer_data["name"])),
        speed=float(layer_data["speed"]),
        z=float(layer_data.get("z", 0.0)),
        anchor=str(layer_data.get("anchor", "bottom")),
        physics=bool(layer_data.get("physics", False))
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.viewport.width <= 0 or config.viewport.height <= 0:
        raise ValueError(
            f"Viewport must be positive, got {config.viewport.width}x{config.viewport.height}"
        )

    if config.physics.dt <= 0 or config.physics.substeps < 1:
        raise ValueError("physics.dt must be > 0 and physics.substeps >= 1")

    # Every referenced texture must be declared
    referenced = [layer.texture for layer in config.scroll_layers]
    referenced += [config.obstacles.lower_texture, config.obstacles.upper_texture]
    referenced += list(config.player.frames)
    referenced.append(config.game_over.texture)
    for name in referenced:
        if name not in config.textures:
            raise ValueError(f"Texture '{name}' is referenced but not declared")

    for layer in config.scroll_layers:
        if layer.speed <= 0:
            raise ValueError(f"Scroll layer '{layer.name}' speed must be > 0")
        if layer.anchor not in VALID_ANCHORS:
            raise ValueError(
                f"Scroll layer '{layer.name}' anchor must be one of {VALID_ANCHORS}, got '{layer.anchor}'"
            )

    obstacles = config.obstacles
    if obstacles.spawn_interval <= 0 or obstacles.speed <= 0:
        raise ValueError("obstacles.spawn_interval and obstacles.speed must be > 0")
    if config.viewport.height // obstacles.gap_divisions < 1:
        raise ValueError(
            f"gap_divisions ({obstacles.gap_divisions}) leaves no room for a gap "
            f"in a {config.viewport.height} high viewport"
        )

    if not config.player.frames:
        raise ValueError("player.frames must name at least one texture")
    if config.player.mass <= 0 or config.player.time_per_frame <= 0:
        raise ValueError("player.mass and player.time_per_frame must be > 0")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    viewport_data = raw["viewport"]
    viewport = ViewportConfig(
        width=int(viewport_data["width"]),
        height=int(viewport_data["height"])
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity_x=float(physics_data.get("gravity_x", 0.0)),
        gravity_y=float(physics_data["gravity_y"]),
        points_per_meter=float(physics_data.get("points_per_meter", 150.0)),
        dt=float(physics_data["dt"]),
        substeps=int(physics_data.get("substeps", 1))
    )

    scroll_layers = tuple(_parse_layer(layer) for layer in raw["scroll"]["layers"])

    obstacle_data = raw["obstacles"]
    obstacles = ObstacleConfig(
        lower_texture=str(obstacle_data["lower_texture"]),
        upper_texture=str(obstacle_data["upper_texture"]),
        spawn_interval=float(obstacle_data["spawn_interval"]),
        gap_divisions=int(obstacle_data.get("gap_divisions", 12)),
        gap_spacing=float(obstacle_data["gap_spacing"]),
        speed=float(obstacle_data["speed"]),
        travel_factor=float(obstacle_data.get("travel_factor", 2.3)),
        start_offset_factor=float(obstacle_data.get("start_offset_factor", 2.0)),
        trigger_width=float(obstacle_data.get("trigger_width", 10.0)),
        trigger_margin=float(obstacle_data.get("trigger_margin", 5.0)),
        z=float(obstacle_data.get("z", -50.0))
    )

    player_data = raw["player"]
    player = PlayerConfig(
        frames=tuple(str(name) for name in player_data["frames"]),
        time_per_frame=float(player_data["time_per_frame"]),
        mass=float(player_data["mass"]),
        start_x_factor=float(player_data.get("start_x_factor", 0.7)),
        setup_y_factor=float(player_data.get("setup_y_factor", 0.5)),
        restart_y_factor=float(player_data.get("restart_y_factor", 1.2)),
        touch_force_initial=float(player_data["touch_force_initial"]),
        roll_factor=float(player_data.get("roll_factor", 0.01)),
        roll_duration=float(player_data.get("roll_duration", 1.0)),
        z=float(player_data.get("z", 0.0))
    )

    score_data = raw["score"]
    score = ScoreConfig(
        font_size=int(score_data.get("font_size", 72)),
        color=_parse_color(score_data.get("color", [0, 0, 0])),
        y_factor=float(score_data.get("y_factor", 0.9)),
        z=float(score_data.get("z", 100.0)),
        pulse_scale=float(score_data.get("pulse_scale", 1.5)),
        pulse_duration=float(score_data.get("pulse_duration", 0.1))
    )

    game_over_data = raw["game_over"]
    game_over = GameOverConfig(
        texture=str(game_over_data["texture"]),
        z=float(game_over_data.get("z", 90.0))
    )

    textures = {
        str(name): _parse_texture(str(name), data)
        for name, data in raw["textures"].items()
    }

    config = GameConfig(
        viewport=viewport,
        physics=physics,
        scroll_layers=scroll_layers,
        obstacles=obstacles,
        player=player,
        score=score,
        game_over=game_over,
        textures=textures
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
