from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from match3.engine import Match3Engine, new_game
from match3.systems import board_ops

# No two neighbours share a type, so this board holds no runs at all.
DIAGONAL_5X5 = [
    [1, 2, 3, 4, 5],
    [3, 4, 5, 1, 2],
    [5, 1, 2, 3, 4],
    [2, 3, 4, 5, 1],
    [4, 5, 1, 2, 3],
]

# Swapping (2, 3) with (2, 4) completes 1 1 1 on the bottom row, nothing else.
BOTTOM_ROW_SETUP = [
    [1, 2, 3, 4, 5],
    [3, 4, 5, 1, 2],
    [5, 1, 2, 3, 4],
    [2, 3, 1, 5, 1],
    [1, 1, 5, 2, 3],
]

# Swapping (2, 2) with (3, 2) completes row 2 and column 2 through (2, 2).
CORNER_SETUP = [
    [1, 2, 1, 4, 5],
    [3, 4, 1, 1, 2],
    [1, 1, 2, 1, 4],
    [2, 3, 4, 5, 1],
    [4, 5, 1, 2, 3],
]


class ScriptedRandom(random.Random):
    """Random source whose refills follow a script.

    ``randint`` pops scripted values first, then repeats ``default`` when one
    is given; otherwise running out of script fails the test loudly.
    """

    def __init__(self, values: Iterable[int] = (), default: Optional[int] = None):
        super().__init__(0)
        self.values: List[int] = list(values)
        self.default = default

    def randint(self, a, b):
        if self.values:
            return self.values.pop(0)
        if self.default is not None:
            return self.default
        raise AssertionError("refill asked for more tiles than scripted")


def make_engine(rows: Sequence[Sequence[Optional[int]]], *, tile_type_count: int = 5,
                points_per_cell: int = 10, refills: Iterable[int] | None = None, **options) -> Match3Engine:
    """Engine whose board is replaced by ``rows`` (top to bottom)."""
    height = len(rows)
    width = len(rows[0])
    engine = new_game(width, height, tile_type_count, points_per_cell, random_seed=7, **options)
    board_ops.load_rows(engine.world, [list(row) for row in rows])
    if refills is not None:
        setattr(engine.world, "random", ScriptedRandom(refills))
    return engine


def has_run(grid) -> bool:
    """Independent row/column scan for three equal neighbours."""
    for line in list(grid.rows()) + list(grid.columns()):
        for i in range(len(line) - 2):
            if line[i] is not None and line[i] == line[i + 1] == line[i + 2]:
                return True
    return False
