import pytest

from match3.config import EngineConfig
from match3.constants import GRID_HEIGHT, GRID_WIDTH, POINTS_PER_CELL, TILE_TYPE_COUNT


def test_defaults_come_from_constants():
    config = EngineConfig()
    assert (config.width, config.height) == (GRID_WIDTH, GRID_HEIGHT)
    assert config.tile_type_count == TILE_TYPE_COUNT
    assert config.points_per_cell == POINTS_PER_CELL
    assert config.seed is None
    assert config.reshuffle_on_stalemate is False


@pytest.mark.parametrize("kwargs", [
    {"width": 0},
    {"height": -1},
    {"tile_type_count": 0},
    {"points_per_cell": -5},
    {"max_cascade_steps": 0},
    {"max_fill_attempts": 0},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_zero_points_allowed():
    assert EngineConfig(points_per_cell=0).points_per_cell == 0
