"""
Collision Categories
====================

Kinds of physics bodies, used for contact filtering and interpretation.
"""

from __future__ import annotations

from enum import Flag


class CollisionCategory(Flag):
    """
    Category tag of a physics body.

    Each member has exactly one bit. Masks (collision / contact-test)
    are unions of members and are queried with ``in``.
    """
    NONE = 0
    PLAYER = 1 << 0          # the swimmer
    WORLD = 1 << 1           # land and ceiling strips
    OBSTACLE = 1 << 2        # hazard pillars
    SCORE_TRIGGER = 1 << 3   # invisible pass-through volume behind a hazard
    CONSUMED = 1 << 4        # score trigger that has already paid out


ALL_CATEGORIES = (
    CollisionCategory.PLAYER
    | CollisionCategory.WORLD
    | CollisionCategory.OBSTACLE
    | CollisionCategory.SCORE_TRIGGER
    | CollisionCategory.CONSUMED
)
