"""
Scoring System
==============

Applies gate operations to the running score and records the results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from gate_rush.core.config_loader import GameConfig, get_config
from gate_rush.core.operations import FeedbackKind, GateOperation
from gate_rush.core.session import Session


def apply_operation(score: int, operation: GateOperation, value: int) -> int:
    """
    Apply one gate operation to a score.

    Division floors toward negative infinity, so ``apply_operation(7, DIVIDE, 2)``
    is 3 and ``apply_operation(-7, DIVIDE, 2)`` is -4.

    Args:
        score: Score before the gate.
        operation: Gate operation.
        value: Gate operand (>= 1).

    Returns:
        The new score.
    """
    if operation is GateOperation.ADD:
        return score + value
    if operation is GateOperation.SUBTRACT:
        return score - value
    if operation is GateOperation.MULTIPLY:
        return score * value
    if operation is GateOperation.DIVIDE:
        return score // value
    raise ValueError(f"Unsupported operation: {operation!r}")


@dataclass
class ScoreEvent:
    """Record of a scored gate."""
    operation: GateOperation
    value: int
    lane: int
    before: int
    after: int

    @property
    def delta(self) -> int:
        return self.after - self.before

    @property
    def kind(self) -> FeedbackKind:
        return self.operation.feedback_kind

    def __repr__(self) -> str:
        return f"ScoreEvent({self.operation.label(self.value)}: {self.before} -> {self.after})"


class ScoreTracker:
    """
    Persists gate results into the current session.

    The session owns the score; the tracker is bound to a session when it
    starts and records each resolved gate as a ScoreEvent.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._session: Session = Session.idle(config)
        self._events: List[ScoreEvent] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def score(self) -> int:
        """Current score of the bound session."""
        return self._session.score

    @property
    def gates_scored(self) -> int:
        return self._session.gates_scored

    @property
    def events(self) -> List[ScoreEvent]:
        """Score events since the last reset, oldest first."""
        return self._events

    def reset(self, session: Session) -> None:
        """Bind to a new session and forget previous events."""
        self._session = session
        self._events = []

    def apply(self, operation: GateOperation, value: int, lane: int) -> ScoreEvent:
        """
        Apply a resolved gate to the session score.

        Args:
            operation: Gate operation.
            value: Gate operand.
            lane: Lane the gate was resolved in.

        Returns:
            The recorded ScoreEvent.
        """
        session = self._session
        before = session.score
        session.score = apply_operation(before, operation, value)
        session.gates_scored += 1

        event = ScoreEvent(
            operation=operation,
            value=value,
            lane=lane,
            before=before,
            after=session.score
        )
        self._events.append(event)
        return event
