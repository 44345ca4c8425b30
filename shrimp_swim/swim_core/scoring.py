"""
Scoring System
==============

Tracks the score and keeps the score label in sync.
"""

from __future__ import annotations

from typing import Optional

from shrimp_swim.swim_core.actions import scale_to, sequence
from shrimp_swim.swim_core.config_loader import GameConfig, get_config
from shrimp_swim.swim_core.scene import LabelNode


class ScoreTracker:
    """
    Monotonic obstacle counter.

    Every change rewrites the label text and plays a short scale-up /
    scale-down pulse on it.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        label: Optional[LabelNode] = None
    ):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
            label: Label to update. Score is tracked without display if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._label = label
        self._score: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def label(self) -> Optional[LabelNode]:
        return self._label

    def increment(self, by: int = 1) -> int:
        """
        Add points and refresh the label.

        Returns:
            The new score.
        """
        if by < 0:
            raise ValueError(f"Score can only grow, got increment {by}")
        self._score += by
        self._update_display()
        return self._score

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._update_display()

    def _update_display(self) -> None:
        if self._label is None:
            return
        self._label.text = str(self._score)
        pulse = self._config.score
        self._label.run_action(sequence([
            scale_to(pulse.pulse_scale, pulse.pulse_duration),
            scale_to(1.0, pulse.pulse_duration),
        ]))
