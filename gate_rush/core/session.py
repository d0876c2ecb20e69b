"""
Session State
=============

Per-playthrough state owned by the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from gate_rush.core.config_loader import GameConfig


class SessionStatus(Enum):
    """Lifecycle of a session."""
    IDLE = auto()       # Before the first start, or after stop()
    RUNNING = auto()    # Ticks active
    ENDED = auto()      # Won or lost; waiting for a restart


@dataclass
class Session:
    """
    One playthrough from start to a win or loss.

    ``won`` is None until the session ends.
    """
    status: SessionStatus
    score: int
    target_score: int
    current_speed: float
    current_spawn_interval_ms: float
    started_at: float = 0.0
    last_spawn_time: float = 0.0
    last_tick_time: float = 0.0
    won: Optional[bool] = None
    ticks: int = 0
    gates_spawned: int = 0
    gates_scored: int = 0

    @classmethod
    def idle(cls, config: GameConfig) -> "Session":
        """A session that has not been started yet."""
        return cls(
            status=SessionStatus.IDLE,
            score=config.scoring.initial_score,
            target_score=config.scoring.target_score,
            current_speed=config.difficulty.initial_speed,
            current_spawn_interval_ms=config.difficulty.initial_spawn_interval_ms
        )

    @classmethod
    def fresh(cls, config: GameConfig, now: float) -> "Session":
        """A newly started, running session."""
        session = cls.idle(config)
        session.status = SessionStatus.RUNNING
        session.started_at = now
        session.last_spawn_time = now
        session.last_tick_time = now
        return session

    @property
    def is_running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    @property
    def is_over(self) -> bool:
        return self.status is SessionStatus.ENDED

    @property
    def elapsed_ms(self) -> float:
        """Play time as measured by tick timestamps."""
        return self.last_tick_time - self.started_at
