from esper import World

from match3.components.score import Score
from match3.events.bus import EventBus, EVENT_MATCH_CLEARED, EVENT_SCORE_CHANGED


def get_score(world: World) -> Score:
    for _, score in world.get_component(Score):
        return score
    raise RuntimeError("Score component not found")


class ScoreSystem:
    """Credits cleared cells to the session score."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)

    def on_match_cleared(self, sender, **kwargs):
        positions = kwargs.get('positions') or []
        # Positions arrive de-duplicated; a cross cell is one removal.
        removed = len(set(positions))
        score = get_score(self.world)
        gained = score.add(removed)
        if gained:
            self.event_bus.emit(EVENT_SCORE_CHANGED, total=score.total(), delta=gained, removed=removed)

    def total(self) -> int:
        return get_score(self.world).total()
