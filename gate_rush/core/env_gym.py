"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to Gate Rush.
One environment step is one display frame.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from gate_rush.core.config_loader import GameConfig, load_config
from gate_rush.core.game import CoreGame
from gate_rush.core.operations import OPERATION_IDS
from gate_rush.core.scheduler import ManualScheduler
from gate_rush.core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)

ACTION_STAY = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2


class GateRushEnv(gym.Env):
    """
    Gate Rush lane runner as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move left, 2 = move right.

    Observation Space:
        Dict containing structured game state and optional RGB image.

    Reward:
        Score change produced by the frame.

    Termination:
        ``terminated`` when the session is won or lost, ``truncated`` once
        ``caps.max_frames`` frames have been played.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: int = 120,
        image_height: int = 175,
        config: Optional[GameConfig] = None,
    ):
        """
        Initialize Gate Rush environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Observation/render image width.
            image_height: Observation/render image height.
            config: Already-loaded configuration; overrides config_path.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode!r}")

        self._config = config if config is not None else load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._img_width = image_width
        self._img_height = image_height

        self._scheduler = ManualScheduler(frame_ms=self._config.observation.frame_ms)
        self._game = CoreGame(config=self._config, scheduler=self._scheduler)
        self._snapshot_builder = SnapshotBuilder(self._config)
        self._frames: int = 0

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_gates = self._config.observation.max_gates
        lanes = self._config.field.lane_count
        height = float(self._config.field.height)
        num_ops = len(OPERATION_IDS)
        int64 = np.iinfo(np.int64)

        obs_dict = {
            # Core state
            "lane": spaces.Box(low=0, high=lanes - 1, shape=(), dtype=np.int32),
            "score": spaces.Box(low=int64.min, high=int64.max, shape=(), dtype=np.int64),
            "target_score": spaces.Box(low=0, high=int64.max, shape=(), dtype=np.int64),
            "speed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "spawn_interval_ms": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "gates_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            # Per-lane derived features
            "lane_next_op": spaces.Box(low=-1, high=num_ops - 1, shape=(lanes,), dtype=np.int8),
            "lane_next_value": spaces.Box(low=0, high=np.iinfo(np.int16).max, shape=(lanes,), dtype=np.int16),
            "lane_next_distance": spaces.Box(low=0, high=height, shape=(lanes,), dtype=np.float32),
            "lane_projected_score": spaces.Box(low=int64.min, high=int64.max, shape=(lanes,), dtype=np.int64),

            # Gate arrays
            "gate_lane": spaces.Box(low=-1, high=lanes - 1, shape=(max_gates,), dtype=np.int8),
            "gate_op": spaces.Box(low=-1, high=num_ops - 1, shape=(max_gates,), dtype=np.int8),
            "gate_value": spaces.Box(low=0, high=np.iinfo(np.int16).max, shape=(max_gates,), dtype=np.int16),
            "gate_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_gates,), dtype=np.float32),
            "gate_resolved": spaces.MultiBinary(max_gates),
            "gate_mask": spaces.MultiBinary(max_gates),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a fresh session.

        Args:
            seed: Random seed for gate draws.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.stop()
        self._game.start_session(seed=seed)
        self._frames = 0

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game))
        info = self._game.get_info()
        info["delta_score"] = 0
        info["frames"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Apply a lane command, then advance one frame.

        Args:
            action: 0 stay, 1 left, 2 right.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action: {action}")

        score_before = self._game.score

        if self._game.is_running:
            if action == ACTION_LEFT:
                self._game.on_move_left()
            elif action == ACTION_RIGHT:
                self._game.on_move_right()
            self._scheduler.advance()
            self._frames += 1

        delta_score = self._game.score - score_before
        terminated = self._game.is_over
        truncated = not terminated and self._frames >= self._config.caps.max_frames

        obs = self._snapshot_to_obs(self._snapshot_builder.build(self._game))
        info = self._game.get_info()
        info["delta_score"] = delta_score
        info["frames"] = self._frames

        if terminated:
            logger.debug("Episode terminated after %d frames: %s", self._frames, info["terminated_reason"])

        return obs, float(delta_score), terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            from gate_rush.core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        self._game.stop()
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
