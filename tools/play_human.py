"""
Human Play Mode
================

Play Gate Rush interactively in a pygame window.

Controls:
    - Left / A: Move one lane left
    - Right / D: Move one lane right
    - Space / Enter: Start or restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--fps FPS]
"""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame

from gate_rush.core.config_loader import GameConfig, load_config
from gate_rush.core.game import CoreGame
from gate_rush.core.motion import Gate
from gate_rush.core.operations import FeedbackKind
from gate_rush.core.presentation import Presenter
from gate_rush.core.render_solid import GATE_COLORS
from gate_rush.core.scheduler import FrameScheduler, TickCallback

logger = logging.getLogger(__name__)

FEEDBACK_COLORS = {
    FeedbackKind.POSITIVE: (0, 255, 136),
    FeedbackKind.MULTIPLY: (255, 215, 0),
    FeedbackKind.NEGATIVE: (255, 0, 85),
}

PARTICLE_COUNT = 20
PARTICLE_LIFETIME_MS = 800
POP_DURATION_MS = 200


class PygameFrameScheduler(FrameScheduler):
    """Fires the pending tick once per rendered frame with pygame's clock."""

    def __init__(self):
        self._pending: Optional[TickCallback] = None

    def now(self) -> float:
        return float(pygame.time.get_ticks())

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request_next_tick(self, callback: TickCallback) -> None:
        if self._pending is not None:
            raise RuntimeError("A tick is already pending; ticks must not overlap")
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def pump(self) -> None:
        """Call once per display frame."""
        callback = self._pending
        if callback is None:
            return
        self._pending = None
        callback(self.now())


@dataclass
class Particle:
    x: float
    y: float
    tx: float
    ty: float
    color: Tuple[int, int, int]
    born: float


class EffectsPresenter(Presenter):
    """
    Presentation state the core cannot see: particle bursts, the player
    "pop" on scoring, and the end-of-session banner.
    """

    def __init__(self, lane_center: Callable[[int], Tuple[float, float]]):
        self.particles: List[Particle] = []
        self.pop_started: Optional[float] = None
        self._lane_center = lane_center
        self._rng = random.Random()

    def render_gate_removed(self, gate: Gate) -> None:
        logger.debug("Gate %d left the field", gate.uid)

    def render_score(self, score: int) -> None:
        self.pop_started = float(pygame.time.get_ticks())

    def on_session_ended(self, won: bool, final_score: int) -> None:
        print(f"\n{'YOU WON' if won else 'GAME OVER'} - Final Score: {final_score}")

    def emit_score_feedback(self, lane: int, kind: FeedbackKind) -> None:
        now = float(pygame.time.get_ticks())
        cx, cy = self._lane_center(lane)
        color = FEEDBACK_COLORS[kind]
        for _ in range(PARTICLE_COUNT):
            angle = self._rng.random() * math.pi * 2
            velocity = self._rng.random() * 100 + 50
            self.particles.append(Particle(
                x=cx, y=cy,
                tx=math.cos(angle) * velocity,
                ty=math.sin(angle) * velocity,
                color=color,
                born=now
            ))

    def reset(self) -> None:
        self.particles.clear()
        self.pop_started = None

    def prune(self, now: float) -> None:
        self.particles = [p for p in self.particles if now - p.born < PARTICLE_LIFETIME_MS]


class GateRushRenderer:
    """Draws the field, gates, player, particles and overlays."""

    def __init__(self, config: GameConfig, scale: float):
        self._config = config
        self._scale = scale
        self._width = int(config.field.width * scale)
        self._height = int(config.field.height * scale)
        self._lane_px = self._width / config.field.lane_count

        self._bg_color = (18, 18, 30)
        self._lane_line = (60, 60, 80)
        self._player_color = (0, 200, 255)
        self._text_color = (240, 240, 255)
        self._won_color = (0, 255, 136)
        self._lost_color = (255, 0, 85)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, int(64 * scale))
        self._font_large = pygame.font.Font(None, int(44 * scale))
        self._font_medium = pygame.font.Font(None, int(30 * scale))

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def player_center(self, lane: int) -> Tuple[float, float]:
        field = self._config.field
        x = (lane + 0.5) * self._lane_px
        y = (field.player_top + field.player_height / 2) * self._scale
        return (x, y)

    def render(
        self,
        screen: pygame.Surface,
        render_data: dict,
        effects: EffectsPresenter,
        now: float
    ) -> None:
        screen.fill(self._bg_color)

        for lane in range(1, render_data["lane_count"]):
            x = int(lane * self._lane_px)
            pygame.draw.line(screen, self._lane_line, (x, 0), (x, self._height), 2)

        self._draw_gates(screen, render_data)
        self._draw_player(screen, render_data, effects, now)
        self._draw_particles(screen, effects, now)

        status = render_data["status"]
        if status == "idle":
            self._draw_banner(screen, "GATE RUSH", self._text_color,
                              f"Reach {render_data['target_score']:,} - Space to start")
        elif status == "ended":
            won = bool(render_data["won"])
            self._draw_banner(
                screen,
                "You Won!" if won else "Game Over",
                self._won_color if won else self._lost_color,
                f"Final Score: {render_data['score']:,} - Space to restart"
            )

    def _draw_gates(self, screen: pygame.Surface, render_data: dict) -> None:
        for gate in render_data["gates"]:
            if gate["resolved"]:
                continue
            rect = pygame.Rect(
                int(gate["lane"] * self._lane_px) + 4,
                int(gate["y"] * self._scale),
                int(self._lane_px) - 8,
                int(gate["height"] * self._scale)
            )
            color = GATE_COLORS.get(gate["symbol"], (200, 200, 200))
            pygame.draw.rect(screen, color, rect, 3, border_radius=8)
            label = self._font_large.render(gate["label"], True, color)
            screen.blit(label, label.get_rect(center=rect.center))

    def _draw_player(
        self,
        screen: pygame.Surface,
        render_data: dict,
        effects: EffectsPresenter,
        now: float
    ) -> None:
        scale = 1.0
        if effects.pop_started is not None:
            t = (now - effects.pop_started) / POP_DURATION_MS
            if t < 1.0:
                scale = 1.0 + 0.2 * math.sin(t * math.pi)

        cx, cy = self.player_center(render_data["lane"])
        w = self._lane_px * 0.6 * scale
        h = (render_data["player_bottom"] - render_data["player_top"]) * self._scale * scale
        rect = pygame.Rect(0, 0, int(w), int(h))
        rect.center = (int(cx), int(cy))
        pygame.draw.rect(screen, self._player_color, rect, border_radius=10)

        score = self._font_medium.render(str(render_data["score"]), True, self._bg_color)
        screen.blit(score, score.get_rect(center=rect.center))

    def _draw_particles(self, screen: pygame.Surface, effects: EffectsPresenter, now: float) -> None:
        for p in effects.particles:
            t = min(1.0, (now - p.born) / PARTICLE_LIFETIME_MS)
            x = p.x + p.tx * t
            y = p.y + p.ty * t
            radius = max(1, int(4 * (1.0 - t) * self._scale))
            pygame.draw.circle(screen, p.color, (int(x), int(y)), radius)

    def _draw_banner(self, screen: pygame.Surface, title: str, color, hint: str) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        screen.blit(overlay, (0, 0))

        title_surface = self._font_huge.render(title, True, color)
        screen.blit(title_surface, title_surface.get_rect(center=(self._width // 2, self._height // 2 - 30)))

        hint_surface = self._font_medium.render(hint, True, self._text_color)
        screen.blit(hint_surface, hint_surface.get_rect(center=(self._width // 2, self._height // 2 + 30)))


class HumanPlayer:
    """Human-playable Gate Rush driven by pygame's display refresh."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: float = 1.0,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        pygame.init()
        self._renderer = GateRushRenderer(config, scale)
        self._screen = pygame.display.set_mode(self._renderer.size)
        pygame.display.set_caption("Gate Rush")
        self._clock = pygame.time.Clock()

        self._scheduler = PygameFrameScheduler()
        self._effects = EffectsPresenter(self._renderer.player_center)
        self._game = CoreGame(
            config=config,
            scheduler=self._scheduler,
            presenter=self._effects,
            seed=seed
        )

        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        print("=== Gate Rush ===")
        print("Left/Right or A/D to change lanes, Space to start, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            self._scheduler.pump()
            self._render()
            self._clock.tick(self._target_fps)

        self._game.stop()
        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in (pygame.K_LEFT, pygame.K_a):
                    self._game.on_move_left()
                elif event.key in (pygame.K_RIGHT, pygame.K_d):
                    self._game.on_move_right()
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self._start()

    def _start(self) -> None:
        """Start or restart a session."""
        if self._game.is_running:
            return
        self._effects.reset()
        self._game.start_session(seed=self._seed)
        print("\n=== Session Started ===\n")

    def _render(self) -> None:
        """Render the game."""
        now = float(pygame.time.get_ticks())
        self._effects.prune(now)
        self._renderer.render(self._screen, self._game.get_render_data(), self._effects, now)
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Gate Rush interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scale (default: 1.0)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = load_config(args.config)
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        scale=args.scale,
        target_fps=args.fps
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
