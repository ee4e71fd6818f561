"""Session configuration for the engine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from match3.constants import (
    GRID_HEIGHT,
    GRID_WIDTH,
    MAX_CASCADE_STEPS,
    MAX_FILL_ATTEMPTS,
    POINTS_PER_CELL,
    TILE_TYPE_COUNT,
)


@dataclass(slots=True)
class EngineConfig:
    """Board size, tile palette, scoring and safety limits for one session.

    ``seed`` feeds the shared ``random.Random`` used for the initial fill and
    every refill; leave it ``None`` for a non-deterministic session.
    """

    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    tile_type_count: int = TILE_TYPE_COUNT
    points_per_cell: int = POINTS_PER_CELL
    seed: Optional[int] = None
    max_cascade_steps: int = MAX_CASCADE_STEPS
    max_fill_attempts: int = MAX_FILL_ATTEMPTS
    reshuffle_on_stalemate: bool = False

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"board must be at least 1x1, got {self.width}x{self.height}")
        if self.tile_type_count < 1:
            raise ValueError(f"tile_type_count must be positive, got {self.tile_type_count}")
        if self.points_per_cell < 0:
            raise ValueError(f"points_per_cell must not be negative, got {self.points_per_cell}")
        if self.max_cascade_steps < 1:
            raise ValueError("max_cascade_steps must be at least 1")
        if self.max_fill_attempts < 1:
            raise ValueError("max_fill_attempts must be at least 1")
