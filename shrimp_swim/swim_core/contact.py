"""
Contact Resolver
================

Interprets contact-begin events between the player, the world strips,
hazards and score triggers.

Precedence, checked in order:
    1. either body is a score trigger -> +1 and consume that trigger
    2. either body is a consumed trigger -> nothing
    3. anything else -> game over
Nothing happens at all once the game is over.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from shrimp_swim.swim_core.categories import CollisionCategory
from shrimp_swim.swim_core.physics_world import Contact, PhysicsBody, intersects
from shrimp_swim.swim_core.scoring import ScoreTracker


class ContactOutcome(Enum):
    IGNORED = "ignored"
    SCORED = "scored"
    ALREADY_SCORED = "already_scored"
    GAME_OVER = "game_over"


def _is(body: PhysicsBody, category: CollisionCategory) -> bool:
    return intersects(body.category, category)


def consume_trigger(body: PhysicsBody) -> None:
    """Downgrade a score trigger so it can never pay out again."""
    body.category = CollisionCategory.CONSUMED
    body.contact_test_mask = CollisionCategory.CONSUMED


class ContactResolver:
    """Turns contacts into scoring and the game-over transition."""

    def __init__(
        self,
        scorer: ScoreTracker,
        is_halted: Callable[[], bool],
        on_game_over: Callable[[], None]
    ):
        """
        Initialize resolver.

        Args:
            scorer: Score tracker credited for each trigger.
            is_halted: Returns True once the game is over.
            on_game_over: Called when the player hits something solid.
        """
        self._scorer = scorer
        self._is_halted = is_halted
        self._on_game_over = on_game_over

    def did_begin_contact(self, contact: Contact) -> ContactOutcome:
        if self._is_halted():
            return ContactOutcome.IGNORED

        body_a = contact.body_a
        body_b = contact.body_b

        if _is(body_a, CollisionCategory.SCORE_TRIGGER) or _is(body_b, CollisionCategory.SCORE_TRIGGER):
            self._scorer.increment()
            if _is(body_a, CollisionCategory.SCORE_TRIGGER):
                consume_trigger(body_a)
            else:
                consume_trigger(body_b)
            return ContactOutcome.SCORED

        if _is(body_a, CollisionCategory.CONSUMED) or _is(body_b, CollisionCategory.CONSUMED):
            return ContactOutcome.ALREADY_SCORED

        self._on_game_over()
        return ContactOutcome.GAME_OVER
