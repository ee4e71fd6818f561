from collections import deque
from typing import Deque, Dict, Optional, Tuple

from match3.constants import (GRAVITY_STEP_DURATION, REFILL_STEP_DURATION, REMOVE_STEP_DURATION,
                              RESHUFFLE_STEP_DURATION)
from match3.events.bus import (EventBus, EVENT_TICK, EVENT_SWAP_RESOLVED, EVENT_ANIMATION_START,
                               EVENT_ANIMATION_COMPLETE, EVENT_PLAYBACK_COMPLETE)
from match3.outcome import CascadeStep, StepKind, SwapOutcome

DEFAULT_DURATIONS: Dict[StepKind, float] = {
    StepKind.REMOVE: REMOVE_STEP_DURATION,
    StepKind.GRAVITY: GRAVITY_STEP_DURATION,
    StepKind.REFILL: REFILL_STEP_DURATION,
    StepKind.RESHUFFLE: RESHUFFLE_STEP_DURATION,
}


class StepPlaybackSystem:
    """Replays the steps of resolved swaps on tick events for animation pacing.

    The board is already settled when playback starts; this only decides when
    a renderer should show each intermediate snapshot. Outcomes arriving while
    a replay runs are queued behind it.
    """

    def __init__(self, event_bus: EventBus, durations: Optional[Dict[StepKind, float]] = None):
        self.event_bus = event_bus
        self.durations = dict(DEFAULT_DURATIONS)
        if durations:
            self.durations.update(durations)
        self._queue: Deque[Tuple[CascadeStep, Optional[SwapOutcome]]] = deque()
        self._current: Optional[CascadeStep] = None
        self._current_outcome: Optional[SwapOutcome] = None
        self._elapsed = 0.0
        event_bus.subscribe(EVENT_SWAP_RESOLVED, self.on_swap_resolved)
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def busy(self) -> bool:
        return self._current is not None or bool(self._queue)

    def on_swap_resolved(self, sender, **kwargs):
        outcome: SwapOutcome | None = kwargs.get('outcome')
        if outcome is None or not outcome.accepted or not outcome.steps:
            return
        last = len(outcome.steps) - 1
        for index, step in enumerate(outcome.steps):
            # The outcome rides on its final step so completion can be announced once.
            self._queue.append((step, outcome if index == last else None))
        if self._current is None:
            self._start_next()

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        while self._current is not None and dt > 0.0:
            remaining = self.durations.get(self._current.kind, 0.0) - self._elapsed
            if dt < remaining:
                self._elapsed += dt
                return
            dt -= max(remaining, 0.0)
            self._finish_current()

    def _start_next(self) -> None:
        if not self._queue:
            self._current = None
            self._current_outcome = None
            return
        self._current, self._current_outcome = self._queue.popleft()
        self._elapsed = 0.0
        self.event_bus.emit(EVENT_ANIMATION_START, kind=self._current.kind.value, step=self._current)

    def _finish_current(self) -> None:
        step = self._current
        outcome = self._current_outcome
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=step.kind.value, step=step)
        if outcome is not None:
            self.event_bus.emit(EVENT_PLAYBACK_COMPLETE, outcome=outcome)
        self._start_next()
