"""
Gate Field
==========

Holds the live gates, moves them each tick, detects gates passing through
the player and retires gates that fall off the field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from gate_rush.core.config_loader import GameConfig, get_config
from gate_rush.core.operations import GateOperation

logger = logging.getLogger(__name__)


@dataclass
class Gate:
    """
    A falling gate confined to one lane.

    ``position_y`` is the gate's top edge; the gate spans
    ``[position_y, position_y + gate_height)``.
    """
    uid: int
    lane: int
    operation: GateOperation
    value: int
    position_y: float
    resolved: bool = False

    @property
    def label(self) -> str:
        return self.operation.label(self.value)


@dataclass
class GateResolvedEvent:
    """A gate passed through the player and should be scored."""
    gate_id: int
    operation: GateOperation
    value: int
    lane: int


@dataclass
class MotionResult:
    """Outcome of one motion pass."""
    moved: List[Gate] = field(default_factory=list)
    resolved: List[GateResolvedEvent] = field(default_factory=list)
    removed: List[Gate] = field(default_factory=list)


class GateField:
    """
    The set of live gates.

    Handles:
    - Gate registration
    - Per-tick advance by the current speed
    - Player overlap detection (each gate resolves at most once)
    - Removal of gates past the bottom of the field

    Gates are kept in insertion order and each pass iterates a snapshot;
    removals are applied only after the whole pass.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize gate field.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._field_height = float(config.field.height)
        self._gate_height = config.field.gate_height
        self._player_top = config.field.player_top
        self._player_bottom = config.field.player_bottom

        self._gates: Dict[int, Gate] = {}

    @property
    def gates(self) -> Dict[int, Gate]:
        """Live gates by uid."""
        return self._gates

    @property
    def gate_count(self) -> int:
        return len(self._gates)

    @property
    def player_band(self) -> Tuple[float, float]:
        """(top, bottom) of the player's hit band."""
        return (self._player_top, self._player_bottom)

    @property
    def field_height(self) -> float:
        return self._field_height

    def add_gate(self, gate: Gate) -> None:
        """Register a newly spawned gate."""
        if gate.uid in self._gates:
            raise ValueError(f"Duplicate gate uid: {gate.uid}")
        self._gates[gate.uid] = gate

    def overlaps_player(self, gate: Gate) -> bool:
        """True if the gate's vertical extent overlaps the player's hit band."""
        return (
            gate.position_y + self._gate_height > self._player_top
            and gate.position_y < self._player_bottom
        )

    def is_off_field(self, gate: Gate) -> bool:
        return gate.position_y > self._field_height

    def step(self, speed: float, player_lane: int) -> MotionResult:
        """
        Advance every live gate by ``speed`` and resolve collisions.

        Args:
            speed: Distance each gate moves this tick.
            player_lane: The player's current lane.

        Returns:
            MotionResult with moved gates, resolution events and removed gates.
        """
        result = MotionResult()
        to_remove: List[int] = []

        for gate in list(self._gates.values()):
            gate.position_y += speed
            result.moved.append(gate)

            if (
                not gate.resolved
                and gate.lane == player_lane
                and self.overlaps_player(gate)
            ):
                gate.resolved = True
                result.resolved.append(GateResolvedEvent(
                    gate_id=gate.uid,
                    operation=gate.operation,
                    value=gate.value,
                    lane=gate.lane
                ))
                logger.debug("Gate %d (%s) resolved in lane %d", gate.uid, gate.label, gate.lane)

            if self.is_off_field(gate):
                to_remove.append(gate.uid)

        for uid in to_remove:
            result.removed.append(self._gates.pop(uid))

        return result

    def clear(self) -> List[Gate]:
        """Remove all gates and return them."""
        gates = list(self._gates.values())
        self._gates.clear()
        return gates
