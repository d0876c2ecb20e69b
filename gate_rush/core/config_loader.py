"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class FieldConfig:
    """Play-field geometry and lane layout."""
    width: int                   # Visible field width
    height: int                  # Visible travel distance for gates
    lane_count: int
    player_bottom_offset: float  # Distance from field bottom to player band bottom
    player_height: float         # Height of the player hit band
    gate_height: float
    gate_spawn_y: float          # Y coordinate new gates enter at

    @property
    def player_bottom(self) -> float:
        """Bottom edge (exclusive) of the player hit band."""
        return self.height - self.player_bottom_offset

    @property
    def player_top(self) -> float:
        """Top edge of the player hit band."""
        return self.player_bottom - self.player_height

    @property
    def center_lane(self) -> int:
        return self.lane_count // 2


@dataclass(frozen=True)
class OperationConfig:
    """Spawn weight and operand range for one gate operation."""
    symbol: str
    weight: float
    values: Tuple[int, ...]      # Candidate operands, drawn uniformly


@dataclass(frozen=True)
class GatesConfig:
    """Weighted gate operation table."""
    operations: Tuple[OperationConfig, ...]

    @property
    def total_weight(self) -> float:
        return sum(op.weight for op in self.operations)


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty ramp parameters."""
    initial_speed: float
    speed_increment: float
    initial_spawn_interval_ms: float
    spawn_interval_step_ms: float
    min_spawn_interval_ms: float


@dataclass(frozen=True)
class ScoringConfig:
    """Score thresholds."""
    initial_score: int
    target_score: int


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for headless drivers."""
    max_frames: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_gates: int
    frame_ms: float


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    field: FieldConfig
    gates: GatesConfig
    difficulty: DifficultyConfig
    scoring: ScoringConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def lane_count(self) -> int:
        return self.field.lane_count

    def get_operation(self, symbol: str) -> OperationConfig:
        """Get an operation table entry by symbol."""
        for op in self.gates.operations:
            if op.symbol == symbol:
                return op
        raise ValueError(f"Unknown gate operation: {symbol!r}")


def _parse_operation(op_data: dict) -> OperationConfig:
    """Parse a single operation table entry from YAML."""
    if "values" in op_data:
        values = tuple(int(v) for v in op_data["values"])
    else:
        low = int(op_data["min_value"])
        high = int(op_data["max_value"])
        values = tuple(range(low, high + 1))
    return OperationConfig(
        symbol=str(op_data["symbol"]),
        weight=float(op_data["weight"]),
        values=values
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    from gate_rush.core.operations import GateOperation

    field = config.field
    if field.lane_count < 1:
        raise ValueError(f"lane_count must be >= 1, got {field.lane_count}")
    if field.player_top < 0:
        raise ValueError(
            f"Player band ({field.player_top}, {field.player_bottom}) "
            f"lies outside field height {field.height}"
        )
    if field.gate_height <= 0 or field.player_height <= 0:
        raise ValueError("gate_height and player_height must be positive")

    # Every operation must be known, positive and usable
    seen = set()
    for op in config.gates.operations:
        operation = GateOperation.from_symbol(op.symbol)
        if operation in seen:
            raise ValueError(f"Duplicate gate operation: {op.symbol!r}")
        seen.add(operation)
        if op.weight < 0:
            raise ValueError(f"Weight for {op.symbol!r} must be >= 0, got {op.weight}")
        if not op.values:
            raise ValueError(f"Operation {op.symbol!r} has an empty value range")
        if any(v < 1 for v in op.values):
            raise ValueError(f"Operation {op.symbol!r} values must be >= 1, got {op.values}")
    if config.gates.total_weight <= 0:
        raise ValueError("Gate operation weights must sum to a positive total")

    difficulty = config.difficulty
    if difficulty.min_spawn_interval_ms > difficulty.initial_spawn_interval_ms:
        raise ValueError(
            f"min_spawn_interval_ms ({difficulty.min_spawn_interval_ms}) exceeds "
            f"initial_spawn_interval_ms ({difficulty.initial_spawn_interval_ms})"
        )
    if difficulty.spawn_interval_step_ms < 0 or difficulty.speed_increment < 0:
        raise ValueError("Difficulty ramp steps must be non-negative")

    if config.scoring.target_score <= config.scoring.initial_score:
        raise ValueError(
            f"target_score ({config.scoring.target_score}) must exceed "
            f"initial_score ({config.scoring.initial_score})"
        )
    if config.scoring.initial_score <= 0:
        raise ValueError("initial_score must be positive")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    field_data = raw["field"]
    field = FieldConfig(
        width=int(field_data.get("width", 480)),
        height=int(field_data["height"]),
        lane_count=int(field_data.get("lane_count", 3)),
        player_bottom_offset=float(field_data["player_bottom_offset"]),
        player_height=float(field_data["player_height"]),
        gate_height=float(field_data["gate_height"]),
        gate_spawn_y=float(field_data.get("gate_spawn_y", -100.0))
    )

    operations: List[OperationConfig] = [
        _parse_operation(op) for op in raw["gates"]["operations"]
    ]
    gates = GatesConfig(operations=tuple(operations))

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        initial_speed=float(difficulty_data["initial_speed"]),
        speed_increment=float(difficulty_data["speed_increment"]),
        initial_spawn_interval_ms=float(difficulty_data["initial_spawn_interval_ms"]),
        spawn_interval_step_ms=float(difficulty_data["spawn_interval_step_ms"]),
        min_spawn_interval_ms=float(difficulty_data["min_spawn_interval_ms"])
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        initial_score=int(scoring_data.get("initial_score", 1)),
        target_score=int(scoring_data["target_score"])
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_frames=int(caps_data.get("max_frames", 36000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_gates=int(obs_data.get("max_gates", 16)),
        frame_ms=float(obs_data.get("frame_ms", 1000.0 / 60.0))
    )

    config = GameConfig(
        field=field,
        gates=gates,
        difficulty=difficulty,
        scoring=scoring,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
