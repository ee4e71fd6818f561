import random

from esper import World
from match3.config import EngineConfig
from match3.events.bus import EventBus
from match3.components.cascade_state import CascadeState
from match3.components.score import Score
from match3.components.tile_type_registry import TileTypeRegistry
from match3.components.tile_types import TileTypes


def create_world(
    event_bus: EventBus,
    config: EngineConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create a world holding the session resources (palette, score, cascade state).

    The board itself is added by BoardSystem.
    """
    config = config or EngineConfig()
    world = World()
    setattr(world, "random", rng or random.Random(config.seed))

    # Single registry entity with the tile palette.
    world.create_entity(TileTypeRegistry(), TileTypes(count=config.tile_type_count))
    world.create_entity(Score(points_per_cell=config.points_per_cell))
    world.create_entity(CascadeState())
    return world
