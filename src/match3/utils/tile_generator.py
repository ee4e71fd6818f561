from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass(slots=True)
class TileGenerator:
    """Draws tile kinds uniformly from ``1..type_count``.

    Shares the world's ``random.Random`` so one seed drives the initial fill
    and every refill. Generated tiles may well form new runs; the resolver
    re-scans after each refill.
    """

    type_count: int
    rng: Optional[random.Random] = None
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.type_count < 1:
            raise ValueError("type_count must be positive")
        self._rng = self.rng if isinstance(self.rng, random.Random) else random.Random()

    def next(self) -> int:
        return self._rng.randint(1, self.type_count)

    def choice(self, candidates: Sequence[int]) -> int:
        """Pick uniformly among ``candidates`` (used to build settled layouts)."""
        return self._rng.choice(candidates)
