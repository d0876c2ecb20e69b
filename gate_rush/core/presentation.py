"""
Presentation Interface
======================

Fire-and-forget callbacks the game drives. Every method is a no-op here so
front ends only override what they draw.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gate_rush.core.operations import FeedbackKind

if TYPE_CHECKING:
    from gate_rush.core.motion import Gate


class Presenter:
    """Base presenter; subclass and override the hooks you need."""

    def render_player_position(self, lane: int) -> None:
        pass

    def render_gate_created(self, gate: "Gate") -> None:
        pass

    def render_gate_moved(self, gate: "Gate", y: float) -> None:
        pass

    def render_gate_removed(self, gate: "Gate") -> None:
        pass

    def render_score(self, score: int) -> None:
        pass

    def on_session_ended(self, won: bool, final_score: int) -> None:
        pass

    def emit_score_feedback(self, lane: int, kind: FeedbackKind) -> None:
        pass
