"""
Tests for the game state machine, end to end through the scene.
"""

import pytest

from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import load_config
from shrimp_swim.swim_core.contact import ContactOutcome
from shrimp_swim.swim_core.game import GamePhase, GameScene, InputOutcome
from shrimp_swim.swim_core.player import PLAY_COLLISIONS


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return GameScene(config=config, seed=42)


def _run_until_game_over(game, max_frames=300):
    for frame in range(max_frames):
        game.tick()
        if game.state is GamePhase.GAME_OVER:
            return frame
    raise AssertionError(f"no game over within {max_frames} frames")


class TestSetup:

    def test_initial_state(self, game, config):
        assert game.state is GamePhase.RUNNING
        assert game.score == 0
        assert game.touch_force_y == config.player.touch_force_initial
        assert game.base_node.speed == 1.0
        assert game.player.node.position == pytest.approx(game.player.start_position)

    def test_node_layout(self, game):
        assert game.base_node.parent is game
        assert game.obstacle_node.parent is game.base_node
        assert game.player.node.parent is game
        assert game.score_label.parent is game
        assert game.contact_delegate is game

    def test_score_label(self, game):
        assert game.score_label.text == "0"
        assert game.score_label.position == pytest.approx((512.0, 768.0 * 0.9))
        assert game.score_label.z_position == 100.0

    def test_scroll_layers_built(self, game):
        assert [layer.name for layer in game.scroll_layers] == [
            "sea", "rock_under", "rock_above", "land", "ceiling"
        ]

    def test_gravity(self, game):
        assert game.physics_world.gravity == pytest.approx((0.0, -300.0))

    def test_first_obstacle_on_first_frame(self, game):
        assert game.obstacles == []
        game.tick()
        assert len(game.obstacles) == 1

    def test_next_obstacle(self, game):
        assert game.next_obstacle() is None
        game.tick()
        assert game.next_obstacle() is game.obstacles[0]

    def test_get_info(self, game):
        info = game.get_info()
        assert info["score"] == 0
        assert info["phase"] == "running"
        assert info["touch_force_y"] == 10.0
        assert "player_y" in info
        assert "time" in info


class TestInput:

    def test_tap_kicks_player(self, game):
        outcome = game.touches_began()
        assert outcome is InputOutcome.IMPULSE
        assert game.player.body.velocity[1] == pytest.approx(250.0)

    def test_tap_location_ignored(self, game):
        assert game.touches_began((10.0, 10.0)) is InputOutcome.IMPULSE

    def test_tapping_keeps_player_up(self, game):
        for frame in range(120):
            if frame % 60 == 0:
                game.touches_began()
            game.tick()
        assert game.state is GamePhase.RUNNING
        assert game.player.node.position[1] > 100.0


class TestGameOver:

    def test_falling_to_land_ends_game(self, game):
        _run_until_game_over(game)

        assert game.last_contact is ContactOutcome.GAME_OVER
        assert game.base_node.speed == 0.0
        assert game.player.body.collision_mask == CollisionCategory.WORLD

    def test_marker_shown(self, game):
        _run_until_game_over(game)
        names = [child.name for child in game.obstacle_node.children]
        assert "game_over" in names

    def test_world_frozen(self, game):
        _run_until_game_over(game)
        obstacle = game.obstacles[0]
        x = obstacle.x
        for _ in range(30):
            game.tick()
        assert obstacle.x == x

    def test_no_spawns_after_game_over(self, game):
        _run_until_game_over(game)
        count = len(game.obstacles)
        # well past spawn_interval
        for _ in range(200):
            game.tick()
        assert len(game.obstacles) == count

    def test_player_rests_on_land(self, game):
        _run_until_game_over(game)
        for _ in range(120):
            game.tick()
        # above the 64 high land strip, however the roll left it
        assert 64.0 < game.player.node.position[1] < 110.0

    def test_tap_during_roll_ignored(self, game):
        _run_until_game_over(game)
        vy = game.player.body.velocity[1]

        assert game.touches_began() is InputOutcome.IGNORED
        assert game.state is GamePhase.GAME_OVER
        assert game.player.body.velocity[1] == vy

    def test_restart_after_roll(self, game):
        _run_until_game_over(game)
        assert not game.fully_stopped

        for _ in range(70):
            game.tick()
        assert game.fully_stopped

        assert game.touches_began() is InputOutcome.RESTART
        assert game.state is GamePhase.RUNNING
        assert game.score == 0
        assert game.obstacle_node.children == ()
        assert game.player.node.position == pytest.approx(game.player.start_position)
        assert game.player.node.rotation == 0.0
        assert game.player.body.collision_mask == PLAY_COLLISIONS

    def test_restarted_game_plays_again(self, game):
        _run_until_game_over(game)
        for _ in range(70):
            game.tick()
        game.touches_began()

        _run_until_game_over(game)
        assert game.last_contact is ContactOutcome.GAME_OVER


class TestScoringIntegration:

    def test_passing_trigger_scores_once(self, game):
        game.tick()
        obstacle = game.obstacles[0]
        # trigger lands on the player, hazards stay clear of it
        obstacle.node.position = (280.0, 0.0)

        game.tick()
        assert game.score == 1
        assert game.last_contact is ContactOutcome.SCORED
        assert obstacle.score_trigger.category == CollisionCategory.CONSUMED
        assert game.score_label.text == "1"

        game.tick()
        assert game.score == 1
        assert game.state is GamePhase.RUNNING

    def test_restart_clears_score(self, game):
        game.tick()
        game.obstacles[0].node.position = (280.0, 0.0)
        game.tick()
        assert game.score == 1

        _run_until_game_over(game)
        for _ in range(70):
            game.tick()
        game.touches_began()
        assert game.score == 0
        assert game.score_label.text == "0"


class TestReset:

    def test_reset_running_game(self, game):
        for _ in range(10):
            game.tick()
        game.reset(seed=3)

        assert game.state is GamePhase.RUNNING
        assert game.obstacles == []
        assert game.score == 0

    def test_same_seed_same_gaps(self, config):
        a = GameScene(config=config, seed=9)
        b = GameScene(config=config, seed=9)
        a.tick()
        b.tick()
        assert a.obstacles[0].vertical_gap_center == b.obstacles[0].vertical_gap_center

    def test_reset_during_roll_cancels_it(self, game):
        _run_until_game_over(game)
        assert not game.fully_stopped

        game.reset()
        # longer than the roll would have taken
        for _ in range(70):
            game.tick()

        assert game.state is GamePhase.RUNNING
        assert game.player.node.speed == 1.0
        assert game.player.node.rotation == 0.0
        assert game.player.node.has_actions

    def test_roll_after_early_reset_still_gates_restart(self, game):
        _run_until_game_over(game)
        game.reset()

        _run_until_game_over(game)
        assert not game.fully_stopped
        assert game.touches_began() is InputOutcome.IGNORED
        assert game.state is GamePhase.GAME_OVER
