"""
Lane Model
==========

Discrete lane coordinates and the player's lane state.
"""

from __future__ import annotations

from dataclasses import dataclass

LEFT = -1
RIGHT = 1


def move_lane(current: int, direction: int, lane_count: int) -> int:
    """
    Move one lane in the given direction.

    Args:
        current: Current lane index.
        direction: -1 for left, +1 for right.
        lane_count: Number of lanes on the field.

    Returns:
        The new lane, or ``current`` unchanged if the move would leave the field.
    """
    target = current + direction
    if 0 <= target < lane_count:
        return target
    return current


def lane_left_fraction(lane: int, lane_count: int) -> float:
    """Left edge of a lane as a fraction of the field width."""
    return lane / lane_count


@dataclass
class PlayerState:
    """
    The runner's lane. Only lane-move commands mutate it.

    Any lane outside the field (including the default) starts centred.
    """
    lane_count: int
    lane: int = -1

    def __post_init__(self) -> None:
        if not 0 <= self.lane < self.lane_count:
            self.lane = self.lane_count // 2

    def move(self, direction: int) -> bool:
        """Move one lane; returns True if the lane changed."""
        new_lane = move_lane(self.lane, direction, self.lane_count)
        changed = new_lane != self.lane
        self.lane = new_lane
        return changed

    def reset(self) -> None:
        """Put the player back in the centre lane."""
        self.lane = self.lane_count // 2
