"""
Gate Spawner
============

Creates gates on a timer with a random lane and a weighted operation/value.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Tuple

from gate_rush.core.config_loader import GameConfig, OperationConfig, get_config
from gate_rush.core.difficulty import DifficultyRamp
from gate_rush.core.motion import Gate
from gate_rush.core.operations import GateOperation
from gate_rush.core.session import Session

logger = logging.getLogger(__name__)


class GateSpawner:
    """
    Timed gate factory.

    A gate is produced once more than the session's current spawn interval
    has passed since the last spawn. Every spawn also advances the
    difficulty ramp.

    Draws are unseeded by default; ``seed`` exists so tests can make them
    repeatable.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        ramp: Optional[DifficultyRamp] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            ramp: Difficulty ramp to advance on each spawn.
            seed: Random seed. Unseeded if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._ramp = ramp if ramp is not None else DifficultyRamp(config)
        self._rng = random.Random(seed)
        self._lane_count = config.field.lane_count
        self._spawn_y = config.field.gate_spawn_y
        self._operations = config.gates.operations
        self._total_weight = config.gates.total_weight
        self._next_uid: int = 0

    @property
    def ramp(self) -> DifficultyRamp:
        return self._ramp

    def _weighted_operation(self) -> OperationConfig:
        """Choose an operation table entry weighted by config weights."""
        r = self._rng.random() * self._total_weight
        cumulative = 0.0
        for op in self._operations:
            cumulative += op.weight
            if r < cumulative:
                return op
        return self._operations[-1]

    def draw_operation(self) -> Tuple[GateOperation, int]:
        """Draw an (operation, value) pair from the weighted table."""
        op = self._weighted_operation()
        value = self._rng.choice(op.values)
        return GateOperation.from_symbol(op.symbol), value

    def draw_lane(self) -> int:
        """Draw a lane uniformly."""
        return self._rng.randrange(self._lane_count)

    def create_gate(self) -> Gate:
        """Build a new gate at the spawn line."""
        operation, value = self.draw_operation()
        gate = Gate(
            uid=self._next_uid,
            lane=self.draw_lane(),
            operation=operation,
            value=value,
            position_y=self._spawn_y
        )
        self._next_uid += 1
        return gate

    def is_due(self, now: float, session: Session) -> bool:
        """True if the spawn interval has elapsed at ``now``."""
        return now - session.last_spawn_time > session.current_spawn_interval_ms

    def maybe_spawn(self, now: float, session: Session) -> Optional[Gate]:
        """
        Spawn a gate if one is due.

        Args:
            now: Tick timestamp in milliseconds.
            session: The running session; its spawn clock and difficulty
                fields are updated when a gate spawns.

        Returns:
            The new gate, or None.
        """
        if not session.is_running or not self.is_due(now, session):
            return None

        session.last_spawn_time = now
        self._ramp.on_spawn(session)
        gate = self.create_gate()
        session.gates_spawned += 1

        logger.debug(
            "Spawned gate %d %s in lane %d (speed=%.3f, interval=%.0fms)",
            gate.uid, gate.label, gate.lane,
            session.current_speed, session.current_spawn_interval_ms
        )
        return gate

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset gate numbering, optionally reseeding.

        Args:
            seed: New random seed. Keeps current generator if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._next_uid = 0
