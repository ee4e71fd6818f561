from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from match3.errors import OutOfBounds

Cell = Optional[int]  # None is an empty cell
Position = Tuple[int, int]


@dataclass(frozen=True)
class GridView:
    """Read-only snapshot of the board, handed to collaborators."""
    width: int
    height: int
    cells: Tuple[Cell, ...]  # row-major, length == width * height

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> "GridView":
        """Build a view from top-to-bottom rows of equal length."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        flat: List[Cell] = []
        for row in rows:
            if len(row) != width:
                raise ValueError("all rows must have the same length")
            flat.extend(row)
        return cls(width=width, height=height, cells=tuple(flat))

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds(x, y, self.width, self.height)
        return self.cells[self.index(x, y)]

    def coords(self) -> Iterable[Position]:
        """Iterates over all coordinates, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def rows(self) -> List[Tuple[Cell, ...]]:
        return [self.cells[y * self.width:(y + 1) * self.width] for y in range(self.height)]

    def columns(self) -> List[Tuple[Cell, ...]]:
        return [tuple(self.cells[self.index(x, y)] for y in range(self.height)) for x in range(self.width)]

    def type_map(self) -> dict:
        """Mapping of occupied positions to their tile type."""
        return {pos: cell for pos, cell in zip(self.coords(), self.cells) if cell is not None}

    def has_empty(self) -> bool:
        return any(cell is None for cell in self.cells)

    def is_settled(self) -> bool:
        from match3.systems.board_ops import scan_runs
        if self.has_empty():
            return False
        return not scan_runs(self.type_map(), self.width, self.height)

    def __iter__(self) -> Iterator[Tuple[Cell, ...]]:
        return iter(self.rows())

    def pretty(self, marked: Optional[Iterable[Position]] = None) -> str:
        """Human-readable board; empty cells print as '.', marked cells as '*'."""
        marks = set(marked or ())
        lines: List[str] = []
        for y in range(self.height):
            row: List[str] = []
            for x in range(self.width):
                cell = self.cells[self.index(x, y)]
                if (x, y) in marks:
                    row.append("*")
                elif cell is None:
                    row.append(".")
                else:
                    row.append(str(cell))
            lines.append(" ".join(row))
        return "\n".join(lines)
