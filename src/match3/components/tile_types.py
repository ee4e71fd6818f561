from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class TileTypes:
    """Palette of tile kinds stored on the registry entity.

    Kinds are the integers ``1..count``.
    """
    count: int
    kinds: List[int] = field(init=False)

    def __post_init__(self) -> None:
        self.kinds = list(range(1, self.count + 1))

    def all_types(self) -> List[int]:
        return list(self.kinds)
