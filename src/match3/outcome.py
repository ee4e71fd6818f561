"""Values returned to the presentation layer after a swap request."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from match3.utils.grid_view import GridView

Position = Tuple[int, int]


class RejectReason(Enum):
    INVALID_SWAP = "invalid_swap"
    OUT_OF_BOUNDS = "out_of_bounds"
    ENGINE_BUSY = "engine_busy"
    NO_MATCH = "no_match"


class StepKind(str, Enum):
    REMOVE = "remove"
    GRAVITY = "gravity"
    REFILL = "refill"
    RESHUFFLE = "reshuffle"


@dataclass(frozen=True)
class CascadeStep:
    """One discrete board change, with the board as it looked right after it."""
    kind: StepKind
    depth: int
    positions: Tuple[Position, ...]
    grid: GridView
    score: int


@dataclass(frozen=True)
class EngineState:
    grid: GridView
    score: int
    busy: bool


@dataclass(frozen=True)
class SwapOutcome:
    """Result of ``request_swap``.

    ``accepted`` is True only when the swap produced at least one match.
    Rejected outcomes carry the untouched grid and a ``reason``.
    """
    accepted: bool
    src: Position
    dst: Position
    grid: GridView
    score: int
    reason: Optional[RejectReason] = None
    score_delta: int = 0
    depth: int = 0
    steps: Tuple[CascadeStep, ...] = field(default_factory=tuple)

    @property
    def removed_count(self) -> int:
        return sum(len(step.positions) for step in self.steps if step.kind is StepKind.REMOVE)

    def snapshots(self) -> List[GridView]:
        return [step.grid for step in self.steps]
