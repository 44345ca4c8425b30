"""
Game Scene
==========

Main game orchestrator: builds the world once, then moves between
running and game over.

Node layout::

    scene
    |-- base            (speed 0 freezes all non-player motion)
    |   |-- obstacles   (cleared on restart)
    |   |-- scroll tiles
    |   `-- spawn schedule runs here
    |-- player
    `-- score label
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from shrimp_swim.swim_core.config_loader import GameConfig, get_config
from shrimp_swim.swim_core.contact import ContactOutcome, ContactResolver
from shrimp_swim.swim_core.obstacles import Obstacle, ObstacleSpawner
from shrimp_swim.swim_core.physics_world import Contact
from shrimp_swim.swim_core.player import PlayerController
from shrimp_swim.swim_core.scene import LabelNode, Node, Scene, SpriteNode
from shrimp_swim.swim_core.scoring import ScoreTracker
from shrimp_swim.swim_core.scrolling import ScrollingLayer
from shrimp_swim.swim_core.texture_catalog import TextureCatalog


class GamePhase(Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


class InputOutcome(Enum):
    IMPULSE = "impulse"
    RESTART = "restart"
    IGNORED = "ignored"


class GameScene(Scene):
    """
    The single game screen.

    Orchestrates:
    - Scrolling background and world strips
    - Obstacle spawning
    - Player input
    - Contact resolution and scoring
    - Game over and restart
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Build and start the game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for obstacle placement.
        """
        if config is None:
            config = get_config()

        viewport = config.viewport
        super().__init__(
            size=(viewport.width, viewport.height),
            dt=config.physics.dt,
            substeps=config.physics.substeps
        )

        self._config = config
        self._seed = seed
        self._catalog = TextureCatalog(config)

        self.touch_force_y: float = 0.0
        self.last_contact: Optional[ContactOutcome] = None

        self.setup_game()
        self.start_game(config.player.touch_force_initial)

    # -- setup --------------------------------------------------------

    def setup_game(self) -> None:
        """Build every child component once."""
        config = self._config
        viewport = config.viewport

        self.physics_world.gravity = config.physics.gravity
        self.contact_delegate = self

        self.base_node = Node("base")
        self.add_child(self.base_node)

        self.obstacle_node = Node("obstacles")
        self.base_node.add_child(self.obstacle_node)

        self.scroll_layers = []
        for layer in config.scroll_layers:
            scrolling = ScrollingLayer(layer, self._catalog[layer.texture], viewport)
            scrolling.build(self.base_node)
            self.scroll_layers.append(scrolling)

        self.player = PlayerController(config.player, viewport, self._catalog)
        self.add_child(self.player.node)

        self.spawner = ObstacleSpawner(
            config.obstacles,
            viewport,
            self._catalog,
            self.obstacle_node,
            seed=self._seed
        )
        self.spawner.schedule(self.base_node)

        self.score_label = LabelNode(
            font_size=config.score.font_size,
            color=config.score.color,
            name="score"
        )
        self.score_label.position = (viewport.mid_x, viewport.height * config.score.y_factor)
        self.score_label.z_position = config.score.z
        self.add_child(self.score_label)

        self.scorer = ScoreTracker(config, label=self.score_label)
        self.resolver = ContactResolver(
            self.scorer,
            is_halted=lambda: self.base_node.speed <= 0.0,
            on_game_over=self.do_game_over
        )

        self.touch_force_y = 0.0

    # -- state machine ------------------------------------------------

    def start_game(self, force_y: float) -> None:
        """(Re)start play with the given tap strength."""
        self.touch_force_y = force_y
        self.scorer.reset()
        self.spawner.clear()
        self.player.reset(self.player.start_position)
        self.player.node.speed = 1.0
        self.base_node.speed = 1.0

    def do_game_over(self) -> None:
        """Freeze the world, let the player fall and roll, show the marker."""
        self.base_node.speed = 0.0
        self.player.restrict_to_world()
        self.player.start_death_roll()

        marker = SpriteNode(self._catalog[self._config.game_over.texture], name="game_over")
        marker.position = (self._config.viewport.mid_x, self._config.viewport.mid_y)
        marker.z_position = self._config.game_over.z
        self.obstacle_node.add_child(marker)

    def reset(self, seed: Optional[int] = None) -> None:
        """Restart with the initial tap strength, optionally reseeding obstacles."""
        if seed is not None:
            self._seed = seed
            self.spawner.reseed(seed)
        self.start_game(self._config.player.touch_force_initial)

    @property
    def state(self) -> GamePhase:
        if self.base_node.speed <= 0.0:
            return GamePhase.GAME_OVER
        return GamePhase.RUNNING

    @property
    def fully_stopped(self) -> bool:
        """Game over and the roll has finished; only now does a tap restart."""
        return self.base_node.speed == 0.0 and self.player.node.speed == 0.0

    # -- engine callbacks ---------------------------------------------

    def did_begin_contact(self, contact: Contact) -> ContactOutcome:
        self.last_contact = self.resolver.did_begin_contact(contact)
        return self.last_contact

    def touches_began(self, location: Optional[Tuple[float, float]] = None) -> InputOutcome:
        """Handle a tap or click; the location is not used."""
        if self.fully_stopped:
            self.start_game(self._config.player.touch_force_initial)
            return InputOutcome.RESTART

        if self.state is GamePhase.RUNNING:
            self.player.apply_touch(self.touch_force_y)
            return InputOutcome.IMPULSE

        return InputOutcome.IGNORED

    # -- queries ------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def catalog(self) -> TextureCatalog:
        return self._catalog

    @property
    def score(self) -> int:
        return self.scorer.score

    @property
    def obstacles(self):
        """Obstacles currently on screen, oldest first."""
        return self.spawner.active_obstacles

    def next_obstacle(self) -> Optional[Obstacle]:
        """First obstacle whose score trigger is still ahead of the player."""
        player_x = self.player.node.world_position[0]
        for obstacle in self.obstacles:
            trigger_x = obstacle.score_trigger.node.world_position[0]
            if trigger_x >= player_x:
                return obstacle
        return None

    def get_info(self) -> Dict[str, Any]:
        """Summary of the current state."""
        vx, vy = self.player.body.velocity
        return {
            "score": self.scorer.score,
            "phase": self.state.value,
            "touch_force_y": self.touch_force_y,
            "obstacle_count": len(self.obstacles),
            "player_y": self.player.node.position[1],
            "player_vy": vy,
            "time": self.current_time,
        }
