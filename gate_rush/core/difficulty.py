"""
Difficulty Ramp
===============

Speeds gates up and spawns them more often as a session goes on.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from gate_rush.core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from gate_rush.core.session import Session


class DifficultyRamp:
    """
    One-directional difficulty ramp applied on every spawn.

    - Spawn interval shrinks by a fixed step, floored at the minimum.
    - Gate speed grows by a fixed increment with no ceiling.

    Nothing here ever makes the game easier; only a new session resets it.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._initial_speed = config.difficulty.initial_speed
        self._speed_increment = config.difficulty.speed_increment
        self._initial_interval = config.difficulty.initial_spawn_interval_ms
        self._interval_step = config.difficulty.spawn_interval_step_ms
        self._min_interval = config.difficulty.min_spawn_interval_ms

    @property
    def initial_speed(self) -> float:
        return self._initial_speed

    @property
    def initial_spawn_interval_ms(self) -> float:
        return self._initial_interval

    @property
    def min_spawn_interval_ms(self) -> float:
        return self._min_interval

    def next_spawn_interval(self, interval_ms: float) -> float:
        """Interval after one more spawn."""
        if interval_ms > self._min_interval:
            return max(self._min_interval, interval_ms - self._interval_step)
        return interval_ms

    def next_speed(self, speed: float) -> float:
        """Gate speed after one more spawn."""
        return speed + self._speed_increment

    def on_spawn(self, session: "Session") -> None:
        """Advance the session's speed and spawn interval by one spawn."""
        session.current_spawn_interval_ms = self.next_spawn_interval(
            session.current_spawn_interval_ms
        )
        session.current_speed = self.next_speed(session.current_speed)
