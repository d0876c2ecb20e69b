"""
Frame Scheduler
===============

Per-display-refresh callback source that drives the simulation.

The game asks for exactly one tick at a time and only asks for the next one
after the current tick finished, so implementations never see overlapping
requests from it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


class FrameScheduler(ABC):
    """Scheduler interface: one callback per frame with a monotonic timestamp (ms)."""

    @abstractmethod
    def now(self) -> float:
        """Current timestamp in milliseconds."""
        raise NotImplementedError

    @abstractmethod
    def request_next_tick(self, callback: TickCallback) -> None:
        """Invoke ``callback(timestamp)`` on the next frame."""
        raise NotImplementedError

    @abstractmethod
    def cancel(self) -> None:
        """Drop any pending tick; it must not fire."""
        raise NotImplementedError

    @property
    @abstractmethod
    def pending(self) -> bool:
        """True while a tick is requested and has not fired."""
        raise NotImplementedError


class ManualScheduler(FrameScheduler):
    """
    Scheduler driven by synthetic timestamps.

    Used by tests and headless drivers (the Gymnasium env): call
    ``advance(dt_ms)`` to move time forward and fire the pending tick.
    """

    def __init__(self, start_time: float = 0.0, frame_ms: float = 1000.0 / 60.0):
        self._time = float(start_time)
        self._frame_ms = float(frame_ms)
        self._pending: Optional[TickCallback] = None
        self._frames_fired: int = 0

    def now(self) -> float:
        return self._time

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def frame_ms(self) -> float:
        return self._frame_ms

    @property
    def frames_fired(self) -> int:
        return self._frames_fired

    def request_next_tick(self, callback: TickCallback) -> None:
        if self._pending is not None:
            raise RuntimeError("A tick is already pending; ticks must not overlap")
        self._pending = callback

    def cancel(self) -> None:
        if self._pending is not None:
            logger.debug("Cancelled pending tick at t=%.1fms", self._time)
        self._pending = None

    def advance(self, dt_ms: Optional[float] = None) -> bool:
        """
        Move time forward and fire the pending tick, if any.

        Args:
            dt_ms: Milliseconds to advance. Uses the frame length if None.

        Returns:
            True if a tick fired.
        """
        if dt_ms is None:
            dt_ms = self._frame_ms
        if dt_ms < 0:
            raise ValueError(f"Time must not go backwards (dt_ms={dt_ms})")
        self._time += dt_ms

        callback = self._pending
        if callback is None:
            return False
        self._pending = None
        self._frames_fired += 1
        callback(self._time)
        return True

    def run_frames(self, count: int, dt_ms: Optional[float] = None) -> int:
        """
        Advance up to ``count`` frames, stopping early once nothing is pending.

        Returns:
            Number of ticks fired.
        """
        fired = 0
        for _ in range(count):
            if not self.advance(dt_ms):
                break
            fired += 1
        return fired
