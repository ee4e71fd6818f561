from typing import List, Tuple
from esper import World
from match3.components.cascade_state import CascadePhase
from match3.constants import MAX_CASCADE_STEPS, MAX_FILL_ATTEMPTS
from match3.errors import EngineBusy, InvalidSwap, OutOfBounds, UnstableCascade
from match3.events.bus import (EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_INVALID, EVENT_TILE_SWAP_DO,
                               EVENT_TILE_SWAP_REVERTED, EVENT_SWAP_RESOLVED, EVENT_MATCH_FOUND,
                               EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED,
                               EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE, EVENT_BOARD_RESHUFFLED)
from match3.outcome import CascadeStep, RejectReason, StepKind, SwapOutcome
from match3.systems import board_ops
from match3.systems.cascade_state_utils import get_or_create_cascade_state
from match3.systems.match import MatchSystem
from match3.systems.score_system import get_score

Position = Tuple[int, int]


class MatchResolutionSystem:
    """Drives one swap from trial exchange to a settled board.

    TRIAL_SWAP -> (REVERT | REMOVE -> GRAVITY -> REFILL -> REMATCH -> REMOVE ...) -> IDLE.
    Every step runs synchronously; presentation pacing is layered on top
    by replaying the recorded steps.
    """

    def __init__(self, world: World, event_bus: EventBus, match_system: MatchSystem | None = None,
                 max_cascade_steps: int = MAX_CASCADE_STEPS, reshuffle_on_stalemate: bool = False,
                 max_fill_attempts: int = MAX_FILL_ATTEMPTS):
        self.world = world
        self.event_bus = event_bus
        self.match_system = match_system or MatchSystem(world, event_bus)
        self.max_cascade_steps = max_cascade_steps
        self.reshuffle_on_stalemate = reshuffle_on_stalemate
        self.max_fill_attempts = max_fill_attempts
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        outcome = self.request_swap(tuple(src), tuple(dst))
        self.event_bus.emit(EVENT_SWAP_RESOLVED, outcome=outcome)

    @property
    def busy(self) -> bool:
        return get_or_create_cascade_state(self.world).busy

    def request_swap(self, src: Position, dst: Position) -> SwapOutcome:
        """Validate and resolve one swap; caller errors come back as rejected outcomes."""
        state = get_or_create_cascade_state(self.world)
        if state.failed:
            raise UnstableCascade(self.max_cascade_steps)
        if state.busy:
            return self._reject(src, dst, RejectReason.ENGINE_BUSY)
        try:
            self.match_system.check(src, dst)
        except OutOfBounds:
            return self._reject(src, dst, RejectReason.OUT_OF_BOUNDS)
        except InvalidSwap:
            return self._reject(src, dst, RejectReason.INVALID_SWAP)
        try:
            return self._resolve(src, dst)
        finally:
            state.phase = CascadePhase.IDLE
            state.depth = 0

    def resolve(self, src: Position, dst: Position) -> SwapOutcome:
        """Like request_swap but raising the caller error instead of reporting it."""
        if self.busy:
            raise EngineBusy("a cascade is already resolving")
        self.match_system.check(src, dst)
        return self.request_swap(src, dst)

    def _reject(self, src: Position, dst: Position, reason: RejectReason) -> SwapOutcome:
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
        return SwapOutcome(
            accepted=False,
            src=src,
            dst=dst,
            grid=board_ops.snapshot(self.world),
            score=get_score(self.world).total(),
            reason=reason,
        )

    def _resolve(self, src: Position, dst: Position) -> SwapOutcome:
        state = get_or_create_cascade_state(self.world)
        score_before = get_score(self.world).total()

        state.phase = CascadePhase.TRIAL_SWAP
        self.match_system.apply(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=src, dst=dst)
        groups = board_ops.find_all_matches(self.world)
        if not groups:
            state.phase = CascadePhase.REVERT
            self.match_system.revert(src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_REVERTED, src=src, dst=dst)
            return self._reject(src, dst, RejectReason.NO_MATCH)

        steps: List[CascadeStep] = []
        generator = board_ops.get_generator(self.world)
        while groups:
            if state.depth >= self.max_cascade_steps:
                state.failed = True
                raise UnstableCascade(state.depth)
            state.depth += 1
            depth = state.depth
            positions = sorted({pos for group in groups for pos in group})
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, groups=groups, size=len(positions), depth=depth)

            state.phase = CascadePhase.REMOVE
            removed = board_ops.clear_tiles(self.world, positions)
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=removed, depth=depth)
            steps.append(self._step(StepKind.REMOVE, depth, positions))

            state.phase = CascadePhase.GRAVITY
            moves, columns = board_ops.apply_gravity(self.world)
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, columns=columns, depth=depth)
            steps.append(self._step(StepKind.GRAVITY, depth, [move.target for move in moves]))

            state.phase = CascadePhase.REFILL
            new_tiles = board_ops.refill_inactive_tiles(self.world, generator)
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles, depth=depth)
            steps.append(self._step(StepKind.REFILL, depth, new_tiles))

            state.phase = CascadePhase.REMATCH
            groups = board_ops.find_all_matches(self.world)

        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.depth)
        if self.reshuffle_on_stalemate and not board_ops.find_valid_swaps(self.world):
            steps.append(self.reshuffle(depth=state.depth))

        total = get_score(self.world).total()
        return SwapOutcome(
            accepted=True,
            src=src,
            dst=dst,
            grid=board_ops.snapshot(self.world),
            score=total,
            score_delta=total - score_before,
            depth=state.depth,
            steps=tuple(steps),
        )

    def reshuffle(self, depth: int = 0) -> CascadeStep:
        """Replace a board with no useful swap by a fresh settled, playable one."""
        positions = board_ops.respawn_full_board(
            self.world, max_attempts=self.max_fill_attempts, require_valid_swap=True)
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason='stalemate')
        return self._step(StepKind.RESHUFFLE, depth, positions)

    def _step(self, kind: StepKind, depth: int, positions) -> CascadeStep:
        return CascadeStep(
            kind=kind,
            depth=depth,
            positions=tuple(positions),
            grid=board_ops.snapshot(self.world),
            score=get_score(self.world).total(),
        )
