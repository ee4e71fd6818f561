from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class Board:
    width: int
    height: int
    # (x, y) -> tile entity; filled once by BoardSystem, cells never move between entities.
    cells: Dict[Tuple[int, int], int] = field(default_factory=dict)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height
