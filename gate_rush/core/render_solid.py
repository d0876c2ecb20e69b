"""
Solid Renderer
==============

Fast numpy-based renderer that draws lanes, gates and the player as
solid-color rectangles, with a score bar along the top.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from gate_rush.core.config_loader import GameConfig, get_config
from gate_rush.core.lanes import lane_left_fraction

# Gate fill colors by operation symbol
GATE_COLORS = {
    "+": (0, 255, 136),
    "-": (255, 0, 85),
    "x": (255, 215, 0),
    "/": (170, 80, 255),
}


class SolidRenderer:
    """
    Renders the play field as solid-color rectangles.

    Resolved gates are not drawn (they have already been passed through).
    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(self, config: Optional[GameConfig] = None, show_score_bar: bool = True):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
            show_score_bar: Whether to draw the progress-to-target bar.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._show_score_bar = show_score_bar

        self._bg_color = np.array([18, 18, 30], dtype=np.uint8)
        self._lane_line_color = np.array([60, 60, 80], dtype=np.uint8)
        self._player_color = np.array([0, 200, 255], dtype=np.uint8)
        self._bar_bg_color = np.array([40, 40, 55], dtype=np.uint8)
        self._bar_color = np.array([0, 255, 136], dtype=np.uint8)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        bar_height = max(2, height // 40) if self._show_score_bar else 0
        game_height = height - bar_height

        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        field_height = render_data["field_height"]
        lane_count = render_data["lane_count"]
        scale_y = game_height / field_height
        lane_px = width / lane_count

        def lane_x(lane: int) -> int:
            return int(width * lane_left_fraction(lane, lane_count))

        # Lane separators
        for lane in range(1, lane_count):
            x = lane_x(lane)
            img[bar_height:, max(0, x - 1):x + 1] = self._lane_line_color

        # Gates
        for gate in render_data["gates"]:
            if gate["resolved"]:
                continue
            top = bar_height + int(gate["y"] * scale_y)
            bottom = bar_height + int((gate["y"] + gate["height"]) * scale_y)
            left = lane_x(gate["lane"]) + 2
            right = lane_x(gate["lane"] + 1) - 2
            self._fill_rect(img, left, top, right, bottom, bar_height,
                            GATE_COLORS.get(gate["symbol"], (200, 200, 200)))

        # Player
        lane = render_data["lane"]
        p_top = bar_height + int(render_data["player_top"] * scale_y)
        p_bottom = bar_height + int(render_data["player_bottom"] * scale_y)
        inset = int(lane_px * 0.2)
        p_left = lane_x(lane) + inset
        p_right = lane_x(lane + 1) - inset
        self._fill_rect(img, p_left, p_top, p_right, p_bottom, bar_height, self._player_color)

        if self._show_score_bar:
            self._draw_score_bar(img, render_data["score"], render_data["target_score"],
                                 width, bar_height)

        return img

    def _fill_rect(
        self,
        img: np.ndarray,
        left: int,
        top: int,
        right: int,
        bottom: int,
        min_y: int,
        color
    ) -> None:
        """Fill a rectangle clipped to the image below ``min_y``."""
        h, w = img.shape[:2]
        top = max(min_y, top)
        bottom = min(h, bottom)
        left = max(0, left)
        right = min(w, right)
        if top >= bottom or left >= right:
            return
        img[top:bottom, left:right] = color

    def _draw_score_bar(
        self,
        img: np.ndarray,
        score: int,
        target: int,
        width: int,
        bar_height: int
    ) -> None:
        """Draw progress toward the target score."""
        img[:bar_height, :] = self._bar_bg_color
        fraction = min(1.0, max(0.0, score / target)) if target > 0 else 0.0
        filled = int(width * fraction)
        if filled > 0:
            img[:bar_height, :filled] = self._bar_color

    def close(self) -> None:
        """Nothing to release; present for renderer interface parity."""
