"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
Includes per-lane derived features for agent decision-making.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np

from gate_rush.core.config_loader import GameConfig, get_config
from gate_rush.core.operations import OPERATION_IDS
from gate_rush.core.scoring import apply_operation

if TYPE_CHECKING:
    from gate_rush.core.game import CoreGame


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Gate arrays are fixed-size with masking for variable gate counts.
    """
    # Core state
    lane: int
    score: int
    target_score: int
    speed: float
    spawn_interval_ms: float
    gates_count: int

    # Per-lane derived features: nearest unresolved gate still able to reach
    # the player in each lane (-1 / field height when there is none)
    lane_next_op: np.ndarray          # (LANES,) int8
    lane_next_value: np.ndarray       # (LANES,) int16
    lane_next_distance: np.ndarray    # (LANES,) float32
    lane_projected_score: np.ndarray  # (LANES,) int64, score after that gate

    # Gate arrays (fixed size, padded)
    gate_lane: np.ndarray             # (MAX_GATES,) int8
    gate_op: np.ndarray               # (MAX_GATES,) int8
    gate_value: np.ndarray            # (MAX_GATES,) int16
    gate_y: np.ndarray                # (MAX_GATES,) float32
    gate_resolved: np.ndarray         # (MAX_GATES,) bool
    gate_mask: np.ndarray             # (MAX_GATES,) bool

    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "lane": np.array(self.lane, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "target_score": np.array(self.target_score, dtype=np.int64),
            "speed": np.array(self.speed, dtype=np.float32),
            "spawn_interval_ms": np.array(self.spawn_interval_ms, dtype=np.float32),
            "gates_count": np.array(self.gates_count, dtype=np.int32),

            "lane_next_op": self.lane_next_op.copy(),
            "lane_next_value": self.lane_next_value.copy(),
            "lane_next_distance": self.lane_next_distance.copy(),
            "lane_projected_score": self.lane_projected_score.copy(),

            "gate_lane": self.gate_lane.copy(),
            "gate_op": self.gate_op.copy(),
            "gate_value": self.gate_value.copy(),
            "gate_y": self.gate_y.copy(),
            "gate_resolved": self.gate_resolved.copy(),
            "gate_mask": self.gate_mask.copy(),
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_gates = config.observation.max_gates
        self._lane_count = config.field.lane_count
        self._field_height = float(config.field.height)
        self._gate_height = config.field.gate_height
        self._player_top = config.field.player_top
        self._player_bottom = config.field.player_bottom

        # Pre-allocate arrays
        self._gate_lane = np.zeros(self._max_gates, dtype=np.int8)
        self._gate_op = np.zeros(self._max_gates, dtype=np.int8)
        self._gate_value = np.zeros(self._max_gates, dtype=np.int16)
        self._gate_y = np.zeros(self._max_gates, dtype=np.float32)
        self._gate_resolved = np.zeros(self._max_gates, dtype=bool)
        self._gate_mask = np.zeros(self._max_gates, dtype=bool)

        self._lane_next_op = np.zeros(self._lane_count, dtype=np.int8)
        self._lane_next_value = np.zeros(self._lane_count, dtype=np.int16)
        self._lane_next_distance = np.zeros(self._lane_count, dtype=np.float32)
        self._lane_projected_score = np.zeros(self._lane_count, dtype=np.int64)

    @property
    def max_gates(self) -> int:
        return self._max_gates

    def build(self, game: "CoreGame", board_rgb: Optional[np.ndarray] = None) -> GameSnapshot:
        """Build a snapshot from current game state."""
        session = game.session

        # Reset arrays
        self._gate_lane.fill(-1)
        self._gate_op.fill(-1)
        self._gate_value.fill(0)
        self._gate_y.fill(0)
        self._gate_resolved.fill(False)
        self._gate_mask.fill(False)

        self._lane_next_op.fill(-1)
        self._lane_next_value.fill(0)
        self._lane_next_distance.fill(self._field_height)
        self._lane_projected_score.fill(session.score)

        # Gates nearest the player first so truncation drops the far ones
        gates = sorted(game.gates, key=lambda g: -g.position_y)
        count = min(len(gates), self._max_gates)

        for i in range(count):
            gate = gates[i]
            self._gate_lane[i] = gate.lane
            self._gate_op[i] = OPERATION_IDS[gate.operation]
            self._gate_value[i] = gate.value
            self._gate_y[i] = gate.position_y
            self._gate_resolved[i] = gate.resolved
            self._gate_mask[i] = True

        # Nearest approaching gate per lane (gates are already nearest-first)
        for gate in gates:
            if gate.resolved or gate.position_y >= self._player_bottom:
                continue
            distance = max(0.0, self._player_top - (gate.position_y + self._gate_height))
            lane = gate.lane
            if self._lane_next_op[lane] < 0:
                self._lane_next_op[lane] = OPERATION_IDS[gate.operation]
                self._lane_next_value[lane] = gate.value
                self._lane_next_distance[lane] = distance
                self._lane_projected_score[lane] = apply_operation(
                    session.score, gate.operation, gate.value
                )

        return GameSnapshot(
            lane=game.lane,
            score=session.score,
            target_score=session.target_score,
            speed=session.current_speed,
            spawn_interval_ms=session.current_spawn_interval_ms,
            gates_count=len(gates),
            lane_next_op=self._lane_next_op,
            lane_next_value=self._lane_next_value,
            lane_next_distance=self._lane_next_distance,
            lane_projected_score=self._lane_projected_score,
            gate_lane=self._gate_lane,
            gate_op=self._gate_op,
            gate_value=self._gate_value,
            gate_y=self._gate_y,
            gate_resolved=self._gate_resolved,
            gate_mask=self._gate_mask,
            board_rgb=board_rgb
        )
