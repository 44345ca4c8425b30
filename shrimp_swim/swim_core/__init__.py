"""
Swim Core - scene engine and game logic.

This module provides the scene graph and action runner, the pymunk
physics bridge, the game components, and the Gymnasium wrapper.

Main exports:
- GameScene: The game itself (state machine over the scene graph)
- SwimEnv: Gymnasium environment for single-agent training
- GameConfig: Configuration loaded from game_config.yaml
"""

from shrimp_swim.swim_core.config_loader import GameConfig, load_config
from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.texture_catalog import Texture, TextureCatalog
from shrimp_swim.swim_core.game import GamePhase, GameScene, InputOutcome
from shrimp_swim.swim_core.env_gym import SwimEnv

__all__ = [
    "GameConfig",
    "load_config",
    "CollisionCategory",
    "Texture",
    "TextureCatalog",
    "GamePhase",
    "GameScene",
    "InputOutcome",
    "SwimEnv",
]
