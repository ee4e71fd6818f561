from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from match3.events.bus import (
    EventBus,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_REVERTED,
    EVENT_MATCH_FOUND,
    EVENT_MATCH_CLEARED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_STEP,
    EVENT_CASCADE_COMPLETE,
    EVENT_BOARD_RESHUFFLED,
    EVENT_SCORE_CHANGED,
)

ENGINE_EVENTS = (
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_REVERTED,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_FOUND,
    EVENT_MATCH_CLEARED,
    EVENT_SCORE_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_COMPLETE,
    EVENT_BOARD_RESHUFFLED,
)


class EventTrace:
    """Records every emission of the given events in arrival order.

    Handy for debugging a cascade or asserting on its sequence::

        trace = EventTrace(bus)
        engine.request_swap(2, 2, 3, 2)
        print(trace.names())
    """

    def __init__(self, event_bus: EventBus, names: Iterable[str] = ENGINE_EVENTS):
        self.records: List[Tuple[str, Dict[str, Any]]] = []
        for name in names:
            event_bus.subscribe(name, self._recorder(name))

    def _recorder(self, name: str):
        def record(sender, **payload):
            self.records.append((name, payload))
        return record

    def names(self) -> List[str]:
        return [name for name, _ in self.records]

    def payloads(self, name: str) -> List[Dict[str, Any]]:
        return [payload for event, payload in self.records if event == name]

    def clear(self) -> None:
        self.records.clear()
