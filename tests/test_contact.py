"""
Tests for contact interpretation.
"""

import pytest

from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.config_loader import load_config
from shrimp_swim.swim_core.contact import ContactOutcome, ContactResolver, consume_trigger
from shrimp_swim.swim_core.physics_world import Contact, PhysicsBody
from shrimp_swim.swim_core.scoring import ScoreTracker


def _body(category, contact_test=CollisionCategory.NONE):
    body = PhysicsBody(10, 10, dynamic=False)
    body.category = category
    body.contact_test_mask = contact_test
    return body


@pytest.fixture
def scorer():
    return ScoreTracker(load_config())


@pytest.fixture
def state():
    """Mutable flags shared with the resolver callbacks."""
    return {"halted": False, "game_overs": 0}


@pytest.fixture
def resolver(scorer, state):
    def on_game_over():
        state["game_overs"] += 1
        state["halted"] = True

    return ContactResolver(scorer, lambda: state["halted"], on_game_over)


@pytest.fixture
def player():
    return _body(CollisionCategory.PLAYER, CollisionCategory.WORLD | CollisionCategory.OBSTACLE)


@pytest.fixture
def trigger():
    return _body(CollisionCategory.SCORE_TRIGGER, CollisionCategory.PLAYER)


class TestScoring:

    def test_trigger_as_body_b(self, resolver, scorer, player, trigger):
        outcome = resolver.did_begin_contact(Contact(player, trigger))

        assert outcome is ContactOutcome.SCORED
        assert scorer.score == 1
        assert trigger.category == CollisionCategory.CONSUMED
        assert trigger.contact_test_mask == CollisionCategory.CONSUMED
        assert player.category == CollisionCategory.PLAYER

    def test_trigger_as_body_a(self, resolver, scorer, player, trigger):
        outcome = resolver.did_begin_contact(Contact(trigger, player))

        assert outcome is ContactOutcome.SCORED
        assert scorer.score == 1
        assert trigger.category == CollisionCategory.CONSUMED

    def test_two_triggers_consume_a_only(self, resolver, scorer):
        a = _body(CollisionCategory.SCORE_TRIGGER, CollisionCategory.PLAYER)
        b = _body(CollisionCategory.SCORE_TRIGGER, CollisionCategory.PLAYER)
        resolver.did_begin_contact(Contact(a, b))

        assert scorer.score == 1
        assert a.category == CollisionCategory.CONSUMED
        assert b.category == CollisionCategory.SCORE_TRIGGER

    def test_trigger_pays_once(self, resolver, scorer, player, trigger):
        resolver.did_begin_contact(Contact(player, trigger))
        outcome = resolver.did_begin_contact(Contact(player, trigger))

        assert outcome is ContactOutcome.ALREADY_SCORED
        assert scorer.score == 1

    def test_consumed_never_ends_game(self, resolver, state, player):
        consumed = _body(CollisionCategory.SCORE_TRIGGER)
        consume_trigger(consumed)

        outcome = resolver.did_begin_contact(Contact(consumed, player))
        assert outcome is ContactOutcome.ALREADY_SCORED
        assert state["game_overs"] == 0


class TestGameOver:

    def test_obstacle_ends_game(self, resolver, state, scorer, player):
        hazard = _body(CollisionCategory.OBSTACLE, CollisionCategory.PLAYER)
        outcome = resolver.did_begin_contact(Contact(player, hazard))

        assert outcome is ContactOutcome.GAME_OVER
        assert state["game_overs"] == 1
        assert scorer.score == 0

    def test_world_ends_game(self, resolver, state, player):
        land = _body(CollisionCategory.WORLD)
        outcome = resolver.did_begin_contact(Contact(land, player))

        assert outcome is ContactOutcome.GAME_OVER
        assert state["game_overs"] == 1

    def test_trigger_beats_hazard(self, resolver, state, scorer, trigger):
        hazard = _body(CollisionCategory.OBSTACLE)
        outcome = resolver.did_begin_contact(Contact(hazard, trigger))

        assert outcome is ContactOutcome.SCORED
        assert state["game_overs"] == 0


class TestHalted:
    """Nothing happens once the game is over."""

    def test_ignored_when_halted(self, resolver, state, scorer, player, trigger):
        state["halted"] = True

        assert resolver.did_begin_contact(Contact(player, trigger)) is ContactOutcome.IGNORED
        assert scorer.score == 0
        assert trigger.category == CollisionCategory.SCORE_TRIGGER

    def test_second_hazard_ignored(self, resolver, state, player):
        land = _body(CollisionCategory.WORLD)
        resolver.did_begin_contact(Contact(player, land))
        outcome = resolver.did_begin_contact(Contact(player, land))

        assert outcome is ContactOutcome.IGNORED
        assert state["game_overs"] == 1
