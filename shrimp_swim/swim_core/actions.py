"""
Actions
=======

Declarative timed behaviour for scene nodes.

An action is an immutable description (move, scale, rotate, wait, run a
callback, remove, flip through frames, sequence, repeat). Running it on a
node creates a state record that the scene advances every frame by the
node's effective elapsed time, i.e. the frame time multiplied by the
``speed`` of the node and all of its ancestors. A speed of 0 freezes the
whole subtree without discarding any state, so motion resumes exactly
where it stopped.

Time left over when a step finishes is handed to the next step of a
sequence, so periodic schedules (``repeat_forever(sequence([...]))``)
do not drift with the frame rate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence as SequenceType, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from shrimp_swim.swim_core.scene import Node
    from shrimp_swim.swim_core.texture_catalog import Texture


class Action:
    """Base class for action descriptors."""

    @property
    def duration(self) -> float:
        raise NotImplementedError

    def make_state(self) -> "ActionState":
        raise NotImplementedError


class ActionState:
    """Progress of one action on one node."""

    def __init__(self, action: Action):
        self.action = action
        self.done = False

    def advance(self, node: "Node", dt: float) -> float:
        """
        Advance by ``dt`` seconds of node time.

        Returns:
            Unused time once the action has finished, otherwise 0.0.
        """
        raise NotImplementedError


class _TimedState(ActionState):
    """State for actions that interpolate over a fixed duration."""

    def __init__(self, action: "_TimedAction"):
        super().__init__(action)
        self._elapsed = 0.0
        self._started = False

    def advance(self, node: "Node", dt: float) -> float:
        if self.done:
            return dt
        if not self._started:
            self._started = True
            self.action.begin(self, node)

        duration = self.action.duration
        if duration <= 0.0:
            self.action.apply(self, node, 1.0)
            self.done = True
            return dt

        target = self._elapsed + dt
        self._elapsed = min(duration, target)
        self.action.apply(self, node, self._elapsed / duration)

        if self._elapsed >= duration:
            self.done = True
            return target - duration
        return 0.0


class _TimedAction(Action):
    """Action with a fixed duration and an interpolation function."""

    def make_state(self) -> ActionState:
        return _TimedState(self)

    def begin(self, state: _TimedState, node: "Node") -> None:
        """Capture any starting values (called on first advance)."""
        state.applied = 0.0

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class MoveBy(_TimedAction):
    """Translate a node by (dx, dy) over the duration."""
    dx: float
    dy: float
    seconds: float

    @property
    def duration(self) -> float:
        return self.seconds

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        delta = fraction - state.applied
        state.applied = fraction
        x, y = node.position
        node.position = (x + self.dx * delta, y + self.dy * delta)


@dataclass(frozen=True)
class RotateBy(_TimedAction):
    """Rotate a node by ``angle`` radians over the duration."""
    angle: float
    seconds: float

    @property
    def duration(self) -> float:
        return self.seconds

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        delta = fraction - state.applied
        state.applied = fraction
        node.rotation += self.angle * delta


@dataclass(frozen=True)
class ScaleTo(_TimedAction):
    """Scale a node to ``scale`` from whatever scale it has when the step starts."""
    scale: float
    seconds: float

    @property
    def duration(self) -> float:
        return self.seconds

    def begin(self, state: _TimedState, node: "Node") -> None:
        state.start_scale = node.scale

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        node.scale = state.start_scale + (self.scale - state.start_scale) * fraction


@dataclass(frozen=True)
class Wait(_TimedAction):
    """Do nothing for the duration."""
    seconds: float

    @property
    def duration(self) -> float:
        return self.seconds

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        pass


@dataclass(frozen=True)
class AnimateFrames(_TimedAction):
    """Swap a sprite's texture through ``frames``, ``time_per_frame`` seconds each."""
    frames: Tuple["Texture", ...]
    time_per_frame: float

    @property
    def duration(self) -> float:
        return len(self.frames) * self.time_per_frame

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        index = min(int(fraction * len(self.frames)), len(self.frames) - 1)
        node.texture = self.frames[index]


@dataclass(frozen=True)
class RunBlock(_TimedAction):
    """Call ``block()`` once, taking no time."""
    block: Callable[[], None]

    @property
    def duration(self) -> float:
        return 0.0

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        self.block()


@dataclass(frozen=True)
class RemoveFromParent(_TimedAction):
    """Detach the node from the scene graph, taking no time."""

    @property
    def duration(self) -> float:
        return 0.0

    def apply(self, state: _TimedState, node: "Node", fraction: float) -> None:
        node.remove_from_parent()


class _SequenceState(ActionState):

    def __init__(self, action: "Sequence"):
        super().__init__(action)
        self._index = 0
        self._current: Optional[ActionState] = None

    def advance(self, node: "Node", dt: float) -> float:
        steps = self.action.actions
        while self._index < len(steps):
            if self._current is None:
                self._current = steps[self._index].make_state()
            dt = self._current.advance(node, dt)
            if not self._current.done:
                return 0.0
            self._current = None
            self._index += 1
        self.done = True
        return dt


@dataclass(frozen=True)
class Sequence(Action):
    """Run actions one after another."""
    actions: Tuple[Action, ...]

    @property
    def duration(self) -> float:
        return sum(a.duration for a in self.actions)

    def make_state(self) -> ActionState:
        return _SequenceState(self)


class _RepeatForeverState(ActionState):

    def __init__(self, action: "RepeatForever"):
        super().__init__(action)
        self._inner = action.action.make_state()

    def advance(self, node: "Node", dt: float) -> float:
        while True:
            leftover = self._inner.advance(node, dt)
            if not self._inner.done:
                return 0.0
            self._inner = self.action.action.make_state()
            # A cycle that consumed no time waits for the next frame
            if leftover >= dt:
                return 0.0
            dt = leftover


@dataclass(frozen=True)
class RepeatForever(Action):
    """Restart ``action`` every time it finishes."""
    action: Action

    @property
    def duration(self) -> float:
        return math.inf

    def make_state(self) -> ActionState:
        return _RepeatForeverState(self)


# Factory helpers

def move_by(dx: float, dy: float, duration: float) -> MoveBy:
    return MoveBy(dx, dy, duration)


def rotate_by(angle: float, duration: float) -> RotateBy:
    return RotateBy(angle, duration)


def scale_to(scale: float, duration: float) -> ScaleTo:
    return ScaleTo(scale, duration)


def wait(duration: float) -> Wait:
    return Wait(duration)


def run_block(block: Callable[[], None]) -> RunBlock:
    return RunBlock(block)


def remove_from_parent() -> RemoveFromParent:
    return RemoveFromParent()


def animate_frames(frames: SequenceType["Texture"], time_per_frame: float) -> AnimateFrames:
    if not frames:
        raise ValueError("animate_frames needs at least one frame")
    return AnimateFrames(tuple(frames), time_per_frame)


def sequence(actions: SequenceType[Action]) -> Sequence:
    return Sequence(tuple(actions))


def repeat_forever(action: Action) -> RepeatForever:
    return RepeatForever(action)
