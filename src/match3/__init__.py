from match3.config import EngineConfig
from match3.engine import Match3Engine, new_game
from match3.errors import (
    BoardGenerationError,
    EngineBusy,
    EngineError,
    InvalidSwap,
    OutOfBounds,
    UnstableCascade,
)
from match3.outcome import CascadeStep, EngineState, RejectReason, StepKind, SwapOutcome
from match3.systems.board_ops import detect_matches
from match3.utils.grid_view import GridView

__all__ = [
    "BoardGenerationError",
    "CascadeStep",
    "EngineBusy",
    "EngineConfig",
    "EngineError",
    "EngineState",
    "GridView",
    "InvalidSwap",
    "Match3Engine",
    "OutOfBounds",
    "RejectReason",
    "StepKind",
    "SwapOutcome",
    "UnstableCascade",
    "detect_matches",
    "new_game",
]
