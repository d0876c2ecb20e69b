"""
Gate Rush Core - the simulation behind the game.

This module provides the frame-driven session state machine, its
collaborator interfaces, and a Gymnasium environment wrapper.

Main exports:
- CoreGame: Session state machine (spawning, motion, scoring, win/loss)
- FrameScheduler / ManualScheduler: Tick sources
- Presenter: Presentation callbacks driven by the game
- GateRushEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from gate_rush.core.config_loader import GameConfig, load_config
from gate_rush.core.operations import FeedbackKind, GateOperation
from gate_rush.core.lanes import PlayerState, move_lane
from gate_rush.core.scoring import ScoreTracker, apply_operation
from gate_rush.core.motion import Gate, GateField
from gate_rush.core.session import Session, SessionStatus
from gate_rush.core.scheduler import FrameScheduler, ManualScheduler
from gate_rush.core.presentation import Presenter
from gate_rush.core.game import CoreGame, TickResult
from gate_rush.core.env_gym import GateRushEnv

__all__ = [
    "GameConfig",
    "load_config",
    "FeedbackKind",
    "GateOperation",
    "PlayerState",
    "move_lane",
    "apply_operation",
    "ScoreTracker",
    "Gate",
    "GateField",
    "Session",
    "SessionStatus",
    "FrameScheduler",
    "ManualScheduler",
    "Presenter",
    "CoreGame",
    "TickResult",
    "GateRushEnv",
]
