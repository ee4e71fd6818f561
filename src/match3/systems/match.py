from typing import Tuple
from esper import World
from match3.errors import InvalidSwap, OutOfBounds
from match3.events.bus import EventBus
from match3.systems import board_ops

Position = Tuple[int, int]


class MatchSystem:
    """Swap validation and the trial exchange itself.

    ``apply`` is its own inverse: calling it again on the same pair reverts.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def check(self, a: Position, b: Position) -> None:
        """Raise OutOfBounds or InvalidSwap; bounds are checked first."""
        board = board_ops.get_board(self.world)
        for x, y in (a, b):
            if not board.contains(x, y):
                raise OutOfBounds(x, y, board.width, board.height)
        if not self.validate(a, b):
            raise InvalidSwap(a, b)

    @staticmethod
    def validate(a: Position, b: Position) -> bool:
        ax, ay = a
        bx, by = b
        return abs(ax - bx) + abs(ay - by) == 1

    def apply(self, a: Position, b: Position) -> None:
        board_ops.swap_tile_types(self.world, a, b)

    revert = apply

    def creates_match(self, a: Position, b: Position) -> bool:
        """Predict, without touching the board, whether swapping a and b would match."""
        types = board_ops.active_tile_type_map(self.world)
        return board_ops.predict_swap_creates_match(types, a, b)
