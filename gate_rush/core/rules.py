"""
Game Rules
==========

Win and loss conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gate_rush.core.config_loader import GameConfig, get_config


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    won: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def win(reason: str = "target_reached") -> "TerminationResult":
        return TerminationResult(True, True, reason)

    @staticmethod
    def loss(reason: str = "score_depleted") -> "TerminationResult":
        return TerminationResult(True, False, reason)


class TerminationRules:
    """
    Handles session termination.

    - Win: score reached the target
    - Loss: score fell to zero or below

    The win is checked first, so a score satisfying both ends as a win.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._target_score = config.scoring.target_score

    @property
    def target_score(self) -> int:
        return self._target_score

    def check_termination(self, score: int, target_score: Optional[int] = None) -> TerminationResult:
        """
        Check win/loss for the score at the end of a tick.

        Args:
            score: Score after every gate of the tick was applied.
            target_score: Session target. Uses the configured target if None.
        """
        target = self._target_score if target_score is None else target_score

        if score >= target:
            return TerminationResult.win()

        if score <= 0:
            return TerminationResult.loss()

        return TerminationResult.none()
