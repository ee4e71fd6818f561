"""Library-level entry point for a presentation layer.

A renderer or input adapter talks to :class:`Match3Engine` only: it starts a
session with :func:`new_game`, forwards swap requests and redraws from the
returned :class:`~match3.outcome.SwapOutcome`. Everything in between runs in
the ECS world behind the facade.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from esper import World

from match3.config import EngineConfig
from match3.errors import BoardGenerationError, EngineBusy
from match3.events.bus import (EventBus, EVENT_BOARD_RESET, EVENT_TILE_CLICK, EVENT_TILE_SWAP_REQUEST,
                              EVENT_MATCH_CLEARED)
from match3.outcome import EngineState, StepKind, SwapOutcome
from match3.systems import board_ops
from match3.systems.board import BoardSystem
from match3.systems.match import MatchSystem
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.playback import StepPlaybackSystem
from match3.systems.score_system import ScoreSystem
from match3.utils.grid_view import GridView
from match3.world import create_world

Position = Tuple[int, int]
_Session = Tuple[World, BoardSystem, MatchSystem, ScoreSystem, MatchResolutionSystem]


class Match3Engine:
    """One play session: a settled board, a score and the systems that change them."""

    def __init__(self, config: EngineConfig | None = None, event_bus: EventBus | None = None):
        self.event_bus = event_bus or EventBus()
        self.playback: StepPlaybackSystem | None = None
        config = config or EngineConfig()
        self._install(config, self._build(config))

    def _build(self, config: EngineConfig) -> _Session:
        """Wire a world, its systems and a settled board without touching the live session."""
        world = create_world(self.event_bus, config)
        board_system = BoardSystem(world, self.event_bus, config.width, config.height,
                                   is_busy=self._playback_busy)
        match_system = MatchSystem(world, self.event_bus)
        score_system = ScoreSystem(world, self.event_bus)
        resolution_system = MatchResolutionSystem(
            world,
            self.event_bus,
            match_system,
            max_cascade_steps=config.max_cascade_steps,
            reshuffle_on_stalemate=config.reshuffle_on_stalemate,
            max_fill_attempts=config.max_fill_attempts,
        )
        try:
            board_ops.respawn_full_board(
                world,
                max_attempts=config.max_fill_attempts,
                require_valid_swap=config.reshuffle_on_stalemate,
            )
        except BoardGenerationError:
            self._detach(board_system, score_system, resolution_system)
            raise
        return world, board_system, match_system, score_system, resolution_system

    def _install(self, config: EngineConfig, session: _Session) -> None:
        self.config = config
        self.world, self.board_system, self.match_system, self.score_system, self.resolution_system = session
        self.event_bus.emit(EVENT_BOARD_RESET, width=config.width, height=config.height)

    def new_game(
        self,
        width: int,
        height: int,
        tile_type_count: int,
        points_per_cell: int,
        random_seed: Optional[int] = None,
        **options,
    ) -> EngineState:
        """Start over with a fresh settled board and zero score.

        The running session is kept when the new board cannot be generated.
        """
        if self.resolution_system.busy:
            raise EngineBusy("cannot start a new game while a cascade is resolving")
        config = EngineConfig(
            width=width,
            height=height,
            tile_type_count=tile_type_count,
            points_per_cell=points_per_cell,
            seed=random_seed,
            **options,
        )
        session = self._build(config)
        self._detach(self.board_system, self.score_system, self.resolution_system)
        self._install(config, session)
        return self.state()

    def _detach(self, board_system: BoardSystem, score_system: ScoreSystem,
                resolution_system: MatchResolutionSystem) -> None:
        # Sessions share the bus, so collaborator subscriptions survive a rebuild.
        self.event_bus.unsubscribe(EVENT_TILE_CLICK, board_system.on_tile_click)
        self.event_bus.unsubscribe(EVENT_TILE_SWAP_REQUEST, resolution_system.on_swap_request)
        self.event_bus.unsubscribe(EVENT_MATCH_CLEARED, score_system.on_match_cleared)

    def enable_playback(self, durations: Optional[Dict[StepKind, float]] = None) -> StepPlaybackSystem:
        """Replay resolved swaps on tick events; tile clicks wait until a replay finishes."""
        if self.playback is None:
            self.playback = StepPlaybackSystem(self.event_bus, durations)
        elif durations:
            self.playback.durations.update(durations)
        return self.playback

    def _playback_busy(self) -> bool:
        return self.playback is not None and self.playback.busy

    def request_swap(self, x1: int, y1: int, x2: int, y2: int) -> SwapOutcome:
        return self.resolution_system.request_swap((x1, y1), (x2, y2))

    def current_grid(self) -> GridView:
        return self.board_system.snapshot()

    def current_score(self) -> int:
        return self.score_system.total()

    def state(self) -> EngineState:
        return EngineState(
            grid=self.current_grid(),
            score=self.current_score(),
            busy=self.resolution_system.busy,
        )

    @property
    def busy(self) -> bool:
        return self.resolution_system.busy

    def find_valid_swaps(self) -> List[Tuple[Position, Position]]:
        return board_ops.find_valid_swaps(self.world)

    def has_valid_moves(self) -> bool:
        return bool(self.find_valid_swaps())

    def hint(self) -> Optional[Tuple[Position, Position]]:
        """A swap that would create a match, or None when the board is stuck."""
        swaps = self.find_valid_swaps()
        return swaps[0] if swaps else None


def new_game(
    width: int,
    height: int,
    tile_type_count: int,
    points_per_cell: int,
    random_seed: Optional[int] = None,
    *,
    event_bus: EventBus | None = None,
    **options,
) -> Match3Engine:
    """Create an engine with a settled ``width`` x ``height`` board and zero score."""
    config = EngineConfig(
        width=width,
        height=height,
        tile_type_count=tile_type_count,
        points_per_cell=points_per_cell,
        seed=random_seed,
        **options,
    )
    return Match3Engine(config, event_bus=event_bus)
