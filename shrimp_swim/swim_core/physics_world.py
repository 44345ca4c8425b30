"""
Physics World
=============

Manages the pymunk Space, body registration, transform sync with scene
nodes, and contact reporting.

Every body carries three category sets:

- ``category``: what the body is.
- ``collision_mask``: categories this body is physically pushed by.
- ``contact_test_mask``: categories whose contact with this body is reported.

pymunk only knows about shapes, so both masks are applied in the
collision callbacks: a begin event is queued for the scene when either
body's contact-test mask holds the other's category, and the collision
is processed only if a dynamic participant's collision mask holds the
other's category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple, TYPE_CHECKING

import pymunk

from shrimp_swim.swim_core.categories import ALL_CATEGORIES, CollisionCategory

if TYPE_CHECKING:
    from shrimp_swim.swim_core.scene import Node


def intersects(a: CollisionCategory, b: CollisionCategory) -> bool:
    """True if the two category sets share a member."""
    return bool(a & b)


@dataclass
class Contact:
    """A pair of bodies that started touching during the last step."""
    body_a: "PhysicsBody"
    body_b: "PhysicsBody"


class PhysicsBody:
    """
    A pymunk body plus one shape, attached to a scene node.

    Non-dynamic bodies are pymunk kinematic bodies whose transform follows
    their node; dynamic bodies are simulated and push their position back
    to the node after each step.
    """

    def __init__(
        self,
        width: float,
        height: float,
        dynamic: bool = True,
        mass: float = 1.0,
        sensor: bool = False
    ):
        """
        Create a rectangular body centred on its node.

        Args:
            width: Box width in points.
            height: Box height in points.
            dynamic: Simulated (True) or driven by its node (False).
            mass: Mass used while dynamic.
            sensor: Report contacts without ever colliding.
        """
        self._width = width
        self._height = height
        self._mass = mass
        self._allows_rotation = True

        self._body = pymunk.Body(mass, pymunk.moment_for_box(mass, (width, height)))
        self._shape = pymunk.Poly.create_box(self._body, (width, height))
        self._shape.sensor = sensor
        self._body.physics_body = self

        self.category = CollisionCategory.NONE
        self.collision_mask = ALL_CATEGORIES
        self.contact_test_mask = CollisionCategory.NONE

        self.node: Optional["Node"] = None
        self.dynamic = dynamic

    def __repr__(self) -> str:
        return f"PhysicsBody({self.category}, dynamic={self.dynamic})"

    @property
    def body(self) -> pymunk.Body:
        return self._body

    @property
    def shape(self) -> pymunk.Poly:
        return self._shape

    @property
    def size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    @property
    def sensor(self) -> bool:
        return self._shape.sensor

    @property
    def dynamic(self) -> bool:
        return self._body.body_type == pymunk.Body.DYNAMIC

    @dynamic.setter
    def dynamic(self, value: bool) -> None:
        if value:
            self._body.body_type = pymunk.Body.DYNAMIC
            self._body.mass = self._mass
            self._apply_moment()
        else:
            self._body.body_type = pymunk.Body.KINEMATIC

    @property
    def allows_rotation(self) -> bool:
        return self._allows_rotation

    @allows_rotation.setter
    def allows_rotation(self, value: bool) -> None:
        self._allows_rotation = value
        if self.dynamic:
            self._apply_moment()

    def _apply_moment(self) -> None:
        if self._allows_rotation:
            self._body.moment = pymunk.moment_for_box(self._mass, (self._width, self._height))
        else:
            self._body.moment = float("inf")
            self._body.angular_velocity = 0.0

    @property
    def velocity(self) -> Tuple[float, float]:
        return self._body.velocity.x, self._body.velocity.y

    @velocity.setter
    def velocity(self, value: Tuple[float, float]) -> None:
        self._body.velocity = value

    def apply_impulse(self, impulse: Tuple[float, float]) -> None:
        """Apply an impulse at the body's centre."""
        self._body.apply_impulse_at_local_point(impulse)


def should_report(a: PhysicsBody, b: PhysicsBody) -> bool:
    return (
        intersects(a.category, b.contact_test_mask)
        or intersects(b.category, a.contact_test_mask)
    )


def should_collide(a: PhysicsBody, b: PhysicsBody) -> bool:
    if a.sensor or b.sensor:
        return False
    return (
        (a.dynamic and intersects(b.category, a.collision_mask))
        or (b.dynamic and intersects(a.category, b.collision_mask))
    )


class PhysicsWorld:
    """
    Manages the pymunk physics simulation for one scene.

    Handles:
    - Space creation and gravity
    - Body registration as nodes enter and leave the scene
    - Node/body transform sync around each step
    - Collision callback registration and contact queueing
    """

    def __init__(self, gravity: Tuple[float, float] = (0.0, 0.0), substeps: int = 1):
        """
        Initialize physics world.

        Args:
            gravity: Gravity vector in points / s^2.
            substeps: Space steps per frame.
        """
        self._space = pymunk.Space()
        self._space.gravity = gravity
        self._substeps = max(1, substeps)

        self._bodies: Set[PhysicsBody] = set()
        self._pending: List[Contact] = []

        # pymunk 7.x uses on_collision() instead of add_collision_handler()
        self._space.on_collision(begin=self._on_begin, pre_solve=self._on_pre_solve)

    @property
    def space(self) -> pymunk.Space:
        """The pymunk Space instance."""
        return self._space

    @property
    def gravity(self) -> Tuple[float, float]:
        return self._space.gravity.x, self._space.gravity.y

    @gravity.setter
    def gravity(self, value: Tuple[float, float]) -> None:
        self._space.gravity = value

    @property
    def bodies(self) -> Set[PhysicsBody]:
        return self._bodies

    def add_body(self, body: PhysicsBody) -> None:
        if body in self._bodies:
            return
        self._push_transform(body)
        self._space.add(body.body, body.shape)
        self._bodies.add(body)

    def remove_body(self, body: PhysicsBody) -> None:
        if body not in self._bodies:
            return
        self._space.remove(body.body, body.shape)
        self._bodies.discard(body)

    def _owner(self, shape: pymunk.Shape) -> Optional[PhysicsBody]:
        return getattr(shape.body, "physics_body", None)

    def _on_begin(self, arbiter: pymunk.Arbiter, space: pymunk.Space, data) -> None:
        """Queue a contact if either side asked for it, and decide collision."""
        shape_a, shape_b = arbiter.shapes
        body_a = self._owner(shape_a)
        body_b = self._owner(shape_b)
        if body_a is None or body_b is None:
            return

        arbiter.process_collision = should_collide(body_a, body_b)
        if should_report(body_a, body_b):
            self._pending.append(Contact(body_a, body_b))

    def _on_pre_solve(self, arbiter: pymunk.Arbiter, space: pymunk.Space, data) -> None:
        """Re-check masks every step so a mask change applies mid-contact."""
        shape_a, shape_b = arbiter.shapes
        body_a = self._owner(shape_a)
        body_b = self._owner(shape_b)
        if body_a is None or body_b is None:
            return
        arbiter.process_collision = should_collide(body_a, body_b)

    def _push_transform(self, body: PhysicsBody) -> None:
        node = body.node
        if node is None:
            return
        body.body.position = node.world_position
        body.body.angle = node.rotation
        if not body.dynamic:
            body.body.velocity = (0.0, 0.0)
        elif not body.allows_rotation:
            body.body.angular_velocity = 0.0

    def _pull_transform(self, body: PhysicsBody) -> None:
        node = body.node
        if node is None or not body.dynamic:
            return
        x, y = body.body.position
        parent = node.parent
        if parent is not None:
            px, py = parent.world_position
            x -= px
            y -= py
        node.position = (x, y)
        if body.allows_rotation:
            node.rotation = body.body.angle

    def step(self, dt: float) -> List[Contact]:
        """
        Advance physics simulation by one frame.

        Args:
            dt: Frame duration.

        Returns:
            Contacts that began during the frame, in report order.
        """
        for body in self._bodies:
            self._push_transform(body)

        for _ in range(self._substeps):
            self._space.step(dt / self._substeps)

        for body in self._bodies:
            self._pull_transform(body)

        contacts, self._pending = self._pending, []
        return contacts
