from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Running session score; it only ever grows."""
    points_per_cell: int
    value: int = 0

    def add(self, removed_count: int) -> int:
        """Credit ``removed_count`` cleared cells and return the points gained."""
        if removed_count <= 0:
            return 0
        gained = removed_count * self.points_per_cell
        self.value += gained
        return gained

    def total(self) -> int:
        return self.value
