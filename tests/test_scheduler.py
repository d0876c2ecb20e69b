"""
Tests for the manual frame scheduler.
"""

import pytest

from gate_rush.core.scheduler import FrameScheduler, ManualScheduler


@pytest.fixture
def scheduler():
    return ManualScheduler(start_time=100.0, frame_ms=10.0)


class TestManualScheduler:

    def test_is_frame_scheduler(self, scheduler):
        assert isinstance(scheduler, FrameScheduler)

    def test_advance_fires_with_timestamp(self, scheduler):
        seen = []
        scheduler.request_next_tick(seen.append)

        assert scheduler.advance() is True
        assert seen == [110.0]
        assert not scheduler.pending
        assert scheduler.frames_fired == 1

    def test_advance_without_request(self, scheduler):
        assert scheduler.advance(5.0) is False
        assert scheduler.now() == 105.0

    def test_double_request_rejected(self, scheduler):
        scheduler.request_next_tick(lambda t: None)
        with pytest.raises(RuntimeError):
            scheduler.request_next_tick(lambda t: None)

    def test_callback_may_request_next(self, scheduler):
        seen = []

        def tick(t):
            seen.append(t)
            scheduler.request_next_tick(tick)

        scheduler.request_next_tick(tick)
        assert scheduler.run_frames(3) == 3
        assert seen == [110.0, 120.0, 130.0]
        assert scheduler.pending

    def test_cancel(self, scheduler):
        seen = []
        scheduler.request_next_tick(seen.append)
        scheduler.cancel()

        assert not scheduler.pending
        assert scheduler.advance() is False
        assert seen == []

    def test_run_frames_stops_when_idle(self, scheduler):
        scheduler.request_next_tick(lambda t: None)
        assert scheduler.run_frames(5) == 1

    def test_time_cannot_go_backwards(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.advance(-1.0)
