"""
Core Game
=========

Session state machine combining spawning, motion, scoring and rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from gate_rush.core.config_loader import GameConfig, get_config
from gate_rush.core.difficulty import DifficultyRamp
from gate_rush.core.lanes import LEFT, RIGHT, PlayerState
from gate_rush.core.motion import Gate, GateField
from gate_rush.core.presentation import Presenter
from gate_rush.core.rules import TerminationResult, TerminationRules
from gate_rush.core.scheduler import FrameScheduler, ManualScheduler
from gate_rush.core.scoring import ScoreEvent, ScoreTracker
from gate_rush.core.session import Session, SessionStatus
from gate_rush.core.spawner import GateSpawner

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    timestamp: float
    spawned: Optional[Gate] = None
    score_events: List[ScoreEvent] = field(default_factory=list)
    removed: List[Gate] = field(default_factory=list)
    delta_score: int = 0
    terminated: bool = False
    won: Optional[bool] = None
    termination_reason: str = ""


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Session lifecycle (Idle -> Running -> Ended)
    - Gate spawning and the difficulty ramp
    - Gate motion and player collisions
    - Scoring
    - Win/loss rules

    Time comes from an injected FrameScheduler: starting a session requests
    the first tick and every tick requests the next one until the session
    ends, at which point the scheduler is cancelled.

    Usage:
        scheduler = ManualScheduler()
        game = CoreGame(scheduler=scheduler)
        game.start_session()
        while game.is_running:
            scheduler.advance()
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[FrameScheduler] = None,
        presenter: Optional[Presenter] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            scheduler: Frame source. A ManualScheduler if None.
            presenter: Presentation callbacks. No-op presenter if None.
            seed: Random seed for gate draws. Unseeded if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scheduler = scheduler if scheduler is not None else ManualScheduler(
            frame_ms=config.observation.frame_ms
        )
        self._presenter = presenter if presenter is not None else Presenter()

        # Subsystems
        self._ramp = DifficultyRamp(config)
        self._spawner = GateSpawner(config, ramp=self._ramp, seed=seed)
        self._field = GateField(config)
        self._rules = TerminationRules(config)
        self._scorer = ScoreTracker(config)

        # State
        self._player = PlayerState(config.field.lane_count)
        self._session = Session.idle(config)
        self._scorer.reset(self._session)
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    @property
    def presenter(self) -> Presenter:
        return self._presenter

    @property
    def session(self) -> Session:
        """The current (or last) session."""
        return self._session

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def player(self) -> PlayerState:
        return self._player

    @property
    def gate_field(self) -> GateField:
        return self._field

    @property
    def gates(self) -> List[Gate]:
        """Live gates in spawn order."""
        return list(self._field.gates.values())

    @property
    def score(self) -> int:
        """Current score."""
        return self._session.score

    @property
    def lane(self) -> int:
        return self._player.lane

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def is_running(self) -> bool:
        return self._session.is_running

    @property
    def is_over(self) -> bool:
        """True if the session has ended."""
        return self._session.is_over

    @property
    def won(self) -> Optional[bool]:
        return self._session.won

    @property
    def termination_reason(self) -> str:
        """Reason for session end, or empty string."""
        return self._termination_reason

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start_session(self, seed: Optional[int] = None) -> bool:
        """
        Start a fresh session from Idle or Ended.

        Resets score, lane, speed, spawn interval and gates, then requests
        the first tick.

        Args:
            seed: Reseed gate draws. Keeps the current generator if None.

        Returns:
            True if a session started, False if one is already running.
        """
        if self._session.is_running:
            logger.debug("start_session() called while running; ignored")
            return False

        for gate in self._field.clear():
            self._presenter.render_gate_removed(gate)
        self._spawner.reset(seed)
        self._player.reset()
        self._session = Session.fresh(self._config, self._scheduler.now())
        self._scorer.reset(self._session)
        self._termination_reason = ""

        logger.info(
            "Session started (score=%d, target=%d, lane=%d)",
            self._session.score, self._session.target_score, self._player.lane
        )

        self._presenter.render_score(self._session.score)
        self._presenter.render_player_position(self._player.lane)
        self._scheduler.request_next_tick(self.tick)
        return True

    def stop(self) -> None:
        """Cancel ticking and return to Idle (e.g. when the window closes)."""
        self._scheduler.cancel()
        if self._session.status is SessionStatus.IDLE:
            return
        for gate in self._field.clear():
            self._presenter.render_gate_removed(gate)
        self._session.status = SessionStatus.IDLE
        logger.info("Session stopped at score=%d", self._session.score)

    # =========================================================================
    # INPUT COMMANDS
    # =========================================================================

    def on_move_left(self) -> bool:
        """Move the player one lane left. No-op unless running."""
        return self._move(LEFT)

    def on_move_right(self) -> bool:
        """Move the player one lane right. No-op unless running."""
        return self._move(RIGHT)

    def _move(self, direction: int) -> bool:
        if not self._session.is_running:
            return False
        changed = self._player.move(direction)
        if changed:
            self._presenter.render_player_position(self._player.lane)
        return changed

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def tick(self, timestamp: float) -> Optional[TickResult]:
        """
        Run one simulation tick.

        Order: spawn check, gate motion and collisions, scoring, win/loss.
        Skipped entirely (returns None) unless the session is running.

        Args:
            timestamp: Monotonic frame timestamp in milliseconds.
        """
        session = self._session
        if not session.is_running:
            return None

        session.ticks += 1
        session.last_tick_time = timestamp
        result = TickResult(timestamp=timestamp)
        score_before = session.score

        # Spawn
        gate = self._spawner.maybe_spawn(timestamp, session)
        if gate is not None:
            self._field.add_gate(gate)
            result.spawned = gate
            self._presenter.render_gate_created(gate)

        # Motion and collisions
        motion = self._field.step(session.current_speed, self._player.lane)

        # Scoring
        for event in motion.resolved:
            score_event = self._scorer.apply(event.operation, event.value, event.lane)
            result.score_events.append(score_event)
            self._presenter.render_score(session.score)
            self._presenter.emit_score_feedback(event.lane, score_event.kind)

        for moved in motion.moved:
            self._presenter.render_gate_moved(moved, moved.position_y)
        for removed in motion.removed:
            self._presenter.render_gate_removed(removed)
        result.removed = motion.removed
        result.delta_score = session.score - score_before

        # Win/loss, once per tick after every gate was processed
        term_result = self._rules.check_termination(session.score, session.target_score)
        if term_result.terminated:
            self._end_session(term_result)
            result.terminated = True
            result.won = term_result.won
            result.termination_reason = term_result.reason
        else:
            self._scheduler.request_next_tick(self.tick)

        return result

    def _end_session(self, term_result: TerminationResult) -> None:
        """Transition Running -> Ended and stop the scheduler."""
        self._scheduler.cancel()
        self._session.status = SessionStatus.ENDED
        self._session.won = term_result.won
        self._termination_reason = term_result.reason

        logger.info(
            "Session ended: %s (score=%d, ticks=%d, gates=%d)",
            "won" if term_result.won else "lost",
            self._session.score, self._session.ticks, self._session.gates_spawned
        )
        self._presenter.on_session_ended(term_result.won, self._session.score)

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium and tools."""
        session = self._session
        return {
            "score": session.score,
            "target_score": session.target_score,
            "status": session.status.name.lower(),
            "won": session.won,
            "lane": self._player.lane,
            "ticks": session.ticks,
            "gates_spawned": session.gates_spawned,
            "gates_scored": session.gates_scored,
            "gate_count": self._field.gate_count,
            "speed": session.current_speed,
            "spawn_interval_ms": session.current_spawn_interval_ms,
            "elapsed_ms": session.elapsed_ms,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with field geometry, player lane, gates and score.
        """
        field_cfg = self._config.field
        player_top, player_bottom = self._field.player_band

        gates_data = []
        for gate in self._field.gates.values():
            gates_data.append({
                "uid": gate.uid,
                "lane": gate.lane,
                "symbol": gate.operation.symbol,
                "value": gate.value,
                "label": gate.label,
                "feedback_kind": gate.operation.feedback_kind.value,
                "y": gate.position_y,
                "height": field_cfg.gate_height,
                "resolved": gate.resolved,
            })

        return {
            "field_width": field_cfg.width,
            "field_height": field_cfg.height,
            "lane_count": field_cfg.lane_count,
            "lane": self._player.lane,
            "player_top": player_top,
            "player_bottom": player_bottom,
            "gates": gates_data,
            "score": self._session.score,
            "target_score": self._session.target_score,
            "status": self._session.status.name.lower(),
            "won": self._session.won,
        }
