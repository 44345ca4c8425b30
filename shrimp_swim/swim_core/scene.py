"""
Scene Graph
===========

Nodes, sprites, labels and the scene root that drives the frame loop.

Positions are in scene points with Y pointing up. A node's position is
relative to its parent; containers are only ever translated, so a
node's world position is the sum of its ancestors' positions.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Tuple, TYPE_CHECKING

from shrimp_swim.swim_core.actions import Action, ActionState, run_block, sequence
from shrimp_swim.swim_core.physics_world import Contact, PhysicsBody, PhysicsWorld

if TYPE_CHECKING:
    from shrimp_swim.swim_core.texture_catalog import Texture


class Node:
    """
    Basic scene graph node.

    Holds a transform, an animation ``speed`` that scales the time seen by
    its own actions and by its whole subtree, children, and an optional
    physics body.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.position: Tuple[float, float] = (0.0, 0.0)
        self.z_position: float = 0.0
        self.rotation: float = 0.0
        self.scale: float = 1.0
        self.speed: float = 1.0
        self.hidden: bool = False

        self._parent: Optional[Node] = None
        self._children: List[Node] = []
        self._actions: List[ActionState] = []
        self._physics_body: Optional[PhysicsBody] = None

    def __repr__(self) -> str:
        label = self.name or type(self).__name__
        return f"<{label} at ({self.position[0]:.1f}, {self.position[1]:.1f})>"

    # -- tree ---------------------------------------------------------

    @property
    def parent(self) -> Optional["Node"]:
        return self._parent

    @property
    def children(self) -> Tuple["Node", ...]:
        return tuple(self._children)

    @property
    def scene(self) -> Optional["Scene"]:
        """The scene this node is attached to, if any."""
        node: Optional[Node] = self
        while node is not None:
            if isinstance(node, Scene):
                return node
            node = node._parent
        return None

    def add_child(self, child: "Node") -> None:
        if child._parent is not None:
            raise ValueError(f"{child!r} already has a parent")
        child._parent = self
        self._children.append(child)
        scene = self.scene
        if scene is not None:
            scene._attach_subtree(child)

    def remove_from_parent(self) -> None:
        parent = self._parent
        if parent is None:
            return
        scene = self.scene
        if scene is not None:
            scene._detach_subtree(self)
        parent._children.remove(self)
        self._parent = None

    def remove_all_children(self) -> None:
        for child in list(self._children):
            child.remove_from_parent()

    def walk(self) -> Iterator["Node"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self._children:
            yield from child.walk()

    @property
    def world_position(self) -> Tuple[float, float]:
        x, y = self.position
        node = self._parent
        while node is not None:
            px, py = node.position
            x += px
            y += py
            node = node._parent
        return (x, y)

    @property
    def world_z(self) -> float:
        z = self.z_position
        node = self._parent
        while node is not None:
            z += node.z_position
            node = node._parent
        return z

    @property
    def world_scale(self) -> float:
        scale = self.scale
        node = self._parent
        while node is not None:
            scale *= node.scale
            node = node._parent
        return scale

    # -- physics ------------------------------------------------------

    @property
    def physics_body(self) -> Optional[PhysicsBody]:
        return self._physics_body

    @physics_body.setter
    def physics_body(self, body: Optional[PhysicsBody]) -> None:
        scene = self.scene
        if scene is not None and self._physics_body is not None:
            scene.physics_world.remove_body(self._physics_body)
        if self._physics_body is not None:
            self._physics_body.node = None
        self._physics_body = body
        if body is not None:
            body.node = self
            if scene is not None:
                scene.physics_world.add_body(body)

    # -- actions ------------------------------------------------------

    def run_action(
        self,
        action: Action,
        completion: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Start running an action on this node.

        Args:
            action: Action descriptor.
            completion: Called once the action finishes.
        """
        if completion is not None:
            action = sequence([action, run_block(completion)])
        self._actions.append(action.make_state())

    def remove_all_actions(self) -> None:
        self._actions.clear()

    @property
    def has_actions(self) -> bool:
        return bool(self._actions)

    def _update_actions(self, dt: float) -> None:
        """Advance own actions, then children, by ``dt * speed``."""
        if self.speed <= 0.0:
            return
        dt *= self.speed

        for state in list(self._actions):
            state.advance(self, dt)
            if state.done and state in self._actions:
                self._actions.remove(state)

        if self._parent is None and not isinstance(self, Scene):
            # removed by one of its own actions
            return

        for child in list(self._children):
            if child._parent is self:
                child._update_actions(dt)


class SpriteNode(Node):
    """A node drawn with a texture."""

    def __init__(self, texture: "Texture", name: Optional[str] = None):
        super().__init__(name or texture.name)
        self.texture = texture
        self.size: Tuple[float, float] = texture.size


class LabelNode(Node):
    """A node drawn as text."""

    def __init__(
        self,
        text: str = "",
        font_size: int = 32,
        color: Tuple[int, int, int] = (0, 0, 0),
        name: Optional[str] = None
    ):
        super().__init__(name or "label")
        self.text = text
        self.font_size = font_size
        self.color = color


class Scene(Node):
    """
    Root node: owns the physics world and runs the frame loop.

    Each ``tick``:
        1. ``update(current_time)`` hook
        2. evaluate actions over the whole tree
        3. step physics
        4. hand every new contact to ``contact_delegate.did_begin_contact``
    """

    def __init__(
        self,
        size: Tuple[float, float],
        gravity: Tuple[float, float] = (0.0, 0.0),
        dt: float = 1.0 / 60.0,
        substeps: int = 1
    ):
        super().__init__("scene")
        self.size = size
        self.dt = dt
        self.current_time = 0.0
        self.physics_world = PhysicsWorld(gravity=gravity, substeps=substeps)
        self.contact_delegate = None

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def _attach_subtree(self, node: Node) -> None:
        for n in node.walk():
            if n.physics_body is not None:
                self.physics_world.add_body(n.physics_body)

    def _detach_subtree(self, node: Node) -> None:
        for n in node.walk():
            if n.physics_body is not None:
                self.physics_world.remove_body(n.physics_body)

    def update(self, current_time: float) -> None:
        """Called at the start of every frame. Override in subclasses."""

    def tick(self, dt: Optional[float] = None) -> List[Contact]:
        """
        Advance one frame.

        Args:
            dt: Frame duration. Uses the scene's fixed step if None.

        Returns:
            Contacts that began during this frame.
        """
        if dt is None:
            dt = self.dt

        self.current_time += dt
        self.update(self.current_time)
        self._update_actions(dt)

        contacts = self.physics_world.step(dt)
        if self.contact_delegate is not None:
            for contact in contacts:
                self.contact_delegate.did_begin_contact(contact)
        return contacts
