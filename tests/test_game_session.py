"""
Tests for the session lifecycle, tick ordering and win/loss handling.
"""

import dataclasses

import pytest

from gate_rush.core.config_loader import load_config
from gate_rush.core.game import CoreGame
from gate_rush.core.motion import Gate
from gate_rush.core.operations import FeedbackKind, GateOperation
from gate_rush.core.presentation import Presenter
from gate_rush.core.rules import TerminationRules
from gate_rush.core.scheduler import ManualScheduler
from gate_rush.core.session import SessionStatus


class RecordingPresenter(Presenter):
    """Collects every presentation call in order."""

    def __init__(self):
        self.calls = []

    def render_player_position(self, lane):
        self.calls.append(("player", lane))

    def render_gate_created(self, gate):
        self.calls.append(("created", gate.uid))

    def render_gate_moved(self, gate, y):
        self.calls.append(("moved", gate.uid, y))

    def render_gate_removed(self, gate):
        self.calls.append(("removed", gate.uid))

    def render_score(self, score):
        self.calls.append(("score", score))

    def on_session_ended(self, won, final_score):
        self.calls.append(("ended", won, final_score))

    def emit_score_feedback(self, lane, kind):
        self.calls.append(("feedback", lane, kind))

    def of(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def quiet_config(config):
    """Config whose spawner never fires during a test."""
    difficulty = dataclasses.replace(config.difficulty, initial_spawn_interval_ms=1e9)
    return dataclasses.replace(config, difficulty=difficulty)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def game(quiet_config, scheduler, presenter):
    return CoreGame(config=quiet_config, scheduler=scheduler, presenter=presenter, seed=3)


def place_gate(game, uid, op, value, lane=1, y=500.0):
    gate = Gate(uid=uid, lane=lane, operation=op, value=value, position_y=y)
    game.gate_field.add_gate(gate)
    return gate


class TestLifecycle:
    """Test Idle -> Running -> Ended transitions."""

    def test_initial_state_is_idle(self, game, scheduler):
        assert game.status is SessionStatus.IDLE
        assert game.score == 1
        assert game.lane == 1
        assert not scheduler.pending

    def test_start_session(self, game, scheduler, presenter, quiet_config):
        assert game.start_session() is True

        assert game.is_running
        assert game.score == 1
        assert game.lane == 1
        assert game.session.current_speed == 3.0
        assert game.session.current_spawn_interval_ms == (
            quiet_config.difficulty.initial_spawn_interval_ms
        )
        assert game.gates == []
        assert scheduler.pending
        assert ("score", 1) in presenter.calls
        assert ("player", 1) in presenter.calls

    def test_start_while_running_is_ignored(self, game, scheduler):
        game.start_session()
        game.on_move_left()
        scheduler.advance()

        assert game.start_session() is False
        assert game.lane == 0
        assert game.session.ticks == 1

    def test_moves_ignored_while_idle(self, game, presenter):
        assert game.on_move_left() is False
        assert game.on_move_right() is False
        assert game.lane == 1
        assert presenter.of("player") == []

    def test_stop_returns_to_idle(self, game, scheduler, presenter):
        game.start_session()
        place_gate(game, 1000, GateOperation.ADD, 2, lane=0, y=100.0)

        game.stop()

        assert game.status is SessionStatus.IDLE
        assert not scheduler.pending
        assert game.gates == []
        assert ("removed", 1000) in presenter.calls
        assert scheduler.advance() is False


class TestMovement:
    """Test lane commands while running."""

    def test_move_and_clamp(self, game, presenter):
        game.start_session()
        presenter.calls.clear()

        assert game.on_move_left() is True
        assert game.on_move_left() is False
        assert game.lane == 0
        assert game.on_move_right() is True
        assert game.on_move_right() is True
        assert game.on_move_right() is False
        assert game.lane == 2

        # Clamped moves do not re-render
        assert presenter.of("player") == [("player", 0), ("player", 1), ("player", 2)]


class TestScoringScenario:
    """Test score changes flowing through ticks."""

    def test_sequence_ends_in_loss(self, game, scheduler, presenter):
        """1 -> +5 -> x3 -> /2 -> -10 ends the session at -1."""
        game.start_session()
        steps = [
            (GateOperation.ADD, 5, 6),
            (GateOperation.MULTIPLY, 3, 18),
            (GateOperation.DIVIDE, 2, 9),
        ]
        for uid, (op, value, expected) in enumerate(steps, start=1000):
            place_gate(game, uid, op, value)
            scheduler.advance()
            assert game.score == expected
            assert game.is_running

        place_gate(game, 1003, GateOperation.SUBTRACT, 10)
        scheduler.advance()

        assert game.score == -1
        assert game.is_over
        assert game.won is False
        assert game.termination_reason == "score_depleted"
        assert presenter.of("ended") == [("ended", False, -1)]
        assert not scheduler.pending

    def test_reaching_target_wins(self, game, scheduler, presenter):
        game.start_session()
        game.session.score = 999
        place_gate(game, 1000, GateOperation.ADD, 1)

        scheduler.advance()

        assert game.score == 1000
        assert game.is_over
        assert game.won is True
        assert game.termination_reason == "target_reached"
        assert presenter.of("ended") == [("ended", True, 1000)]

    def test_divide_floors(self, game, scheduler):
        game.start_session()
        game.session.score = 7
        place_gate(game, 1000, GateOperation.DIVIDE, 2)
        scheduler.advance()
        assert game.score == 3

    def test_divide_to_zero_loses(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.DIVIDE, 3)
        scheduler.advance()
        assert game.score == 0
        assert game.won is False

    def test_gate_in_other_lane_is_ignored(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.SUBTRACT, 10, lane=2)
        for _ in range(10):
            scheduler.advance()
        assert game.score == 1
        assert game.is_running

    def test_gate_resolves_once(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.ADD, 4, y=470.0)
        for _ in range(40):
            scheduler.advance()
        assert game.score == 5
        assert game.session.gates_scored == 1

    def test_feedback_kinds(self, game, scheduler, presenter):
        game.start_session()
        game.session.score = 50
        place_gate(game, 1000, GateOperation.ADD, 1)
        scheduler.advance()
        place_gate(game, 1001, GateOperation.MULTIPLY, 2)
        scheduler.advance()
        place_gate(game, 1002, GateOperation.DIVIDE, 2)
        scheduler.advance()
        place_gate(game, 1003, GateOperation.SUBTRACT, 1)
        scheduler.advance()

        kinds = [c[2] for c in presenter.of("feedback")]
        assert kinds == [
            FeedbackKind.POSITIVE,
            FeedbackKind.MULTIPLY,
            FeedbackKind.NEGATIVE,
            FeedbackKind.NEGATIVE,
        ]

    def test_win_checked_before_loss(self, config):
        """A score satisfying both thresholds counts as a win."""
        rules = TerminationRules(config)
        result = rules.check_termination(0, target_score=0)
        assert result.terminated and result.won

    def test_termination_checked_after_all_gates(self, game, scheduler):
        """Two gates in one tick: -1 then x5 never ends the session mid-tick."""
        game.start_session()
        game.session.score = 2
        place_gate(game, 1000, GateOperation.SUBTRACT, 2, y=500.0)
        place_gate(game, 1001, GateOperation.ADD, 5, y=510.0)
        scheduler.advance()
        assert game.score == 5
        assert game.is_running


class TestEndedSession:
    """Test behavior after a session ends."""

    def _lose(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.SUBTRACT, 5)
        scheduler.advance()
        assert game.is_over

    def test_late_tick_is_noop(self, game, scheduler):
        self._lose(game, scheduler)
        assert game.tick(scheduler.now() + 16.0) is None
        assert game.score == -4

    def test_moves_ignored_after_end(self, game, scheduler):
        self._lose(game, scheduler)
        assert game.on_move_left() is False
        assert game.lane == 1

    def test_restart_resets_everything(self, game, scheduler, presenter):
        game.start_session()
        game.on_move_right()
        place_gate(game, 1000, GateOperation.SUBTRACT, 5, lane=2)
        place_gate(game, 1001, GateOperation.ADD, 9, lane=0, y=0.0)
        scheduler.advance()
        assert game.is_over

        assert game.start_session() is True

        assert game.is_running
        assert game.score == 1
        assert game.lane == 1
        assert game.gates == []
        assert game.won is None
        assert game.termination_reason == ""
        assert game.session.current_speed == 3.0
        assert ("removed", 1001) in presenter.calls

    def _ramp_up(self, config, spawns):
        scheduler = ManualScheduler()
        game = CoreGame(config=config, scheduler=scheduler, seed=5)
        game.start_session()
        for _ in range(spawns):
            scheduler.advance(1600.0)
        assert game.session.gates_spawned == spawns
        assert game.session.current_spawn_interval_ms == 1500 - 10 * spawns
        assert game.session.current_speed == pytest.approx(3.0 + 0.005 * spawns)
        return game, scheduler

    def test_restart_after_loss_resets_ramp(self, config):
        game, scheduler = self._ramp_up(config, 5)
        game.session.score = 0
        scheduler.advance()
        assert game.is_over

        game.start_session()

        assert game.session.current_spawn_interval_ms == 1500
        assert game.session.current_speed == 3.0
        assert game.session.gates_spawned == 0

    def test_restart_after_stop_resets_ramp(self, config):
        game, scheduler = self._ramp_up(config, 5)
        game.stop()

        game.start_session()
        scheduler.advance(100.0)

        assert game.session.current_spawn_interval_ms == 1500
        assert game.session.current_speed == 3.0
        assert game.gates == []


class TestTickOrdering:
    """Test per-tick sequencing and spawn timing."""

    def test_first_spawn_after_interval(self, config):
        scheduler = ManualScheduler()
        presenter = RecordingPresenter()
        game = CoreGame(config=config, scheduler=scheduler, presenter=presenter, seed=11)
        game.start_session()

        for _ in range(15):
            scheduler.advance(100.0)
        assert game.gates == []

        scheduler.advance(100.0)

        assert len(game.gates) == 1
        gate = game.gates[0]
        assert gate.position_y == pytest.approx(-100.0 + 3.005)
        assert game.session.current_spawn_interval_ms == 1490
        assert game.session.last_spawn_time == pytest.approx(1600.0)

    def test_spawned_gate_renders_create_then_move(self, config):
        scheduler = ManualScheduler()
        presenter = RecordingPresenter()
        game = CoreGame(config=config, scheduler=scheduler, presenter=presenter, seed=11)
        game.start_session()
        presenter.calls.clear()

        scheduler.advance(1600.0)

        uid = game.gates[0].uid
        names = [c[0] for c in presenter.calls if c[1] == uid]
        assert names == ["created", "moved"]

    def test_each_tick_requests_the_next(self, game, scheduler):
        game.start_session()
        assert scheduler.run_frames(25) == 25
        assert scheduler.pending
        assert game.session.ticks == 25

    def test_off_field_gate_removed_and_rendered(self, game, scheduler, presenter):
        game.start_session()
        place_gate(game, 1000, GateOperation.ADD, 5, lane=2, y=690.0)
        for _ in range(4):
            scheduler.advance()
        assert game.gates == []
        assert presenter.of("removed") == [("removed", 1000)]
        assert game.score == 1

    def test_tick_result(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.MULTIPLY, 3)
        scheduler.cancel()

        result = game.tick(scheduler.now())

        assert result.delta_score == 2
        assert len(result.score_events) == 1
        assert result.score_events[0].kind is FeedbackKind.MULTIPLY
        assert not result.terminated
        assert scheduler.pending


class TestInfo:
    """Test info and render data dictionaries."""

    def test_info_keys(self, game):
        game.start_session()
        info = game.get_info()
        for key in ("score", "target_score", "status", "won", "lane", "ticks",
                    "gates_spawned", "gate_count", "speed", "spawn_interval_ms"):
            assert key in info
        assert info["status"] == "running"

    def test_render_data_gates(self, game):
        game.start_session()
        place_gate(game, 1000, GateOperation.DIVIDE, 2, lane=0, y=10.0)
        data = game.get_render_data()
        assert data["lane_count"] == 3
        assert data["gates"][0]["label"] == "/2"
        assert data["gates"][0]["symbol"] == "/"


class TestScoreTrackerWiring:
    """Test the game's score tracker follows the session."""

    def test_tracker_records_tick_events(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.ADD, 5)
        scheduler.advance()

        assert game.scorer.session is game.session
        assert [e.after for e in game.scorer.events] == [6]

    def test_restart_rebinds_tracker(self, game, scheduler):
        game.start_session()
        place_gate(game, 1000, GateOperation.SUBTRACT, 5)
        scheduler.advance()
        assert game.is_over

        game.start_session()

        assert game.scorer.session is game.session
        assert game.scorer.events == []
        assert game.scorer.gates_scored == 0
