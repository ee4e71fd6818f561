from typing import Callable, Optional, Tuple
from esper import World
from match3.events.bus import (EventBus, EVENT_TILE_CLICK, EVENT_TILE_SELECTED, EVENT_TILE_DESELECTED,
                               EVENT_TILE_SWAP_REQUEST)
from match3.components.active_switch import ActiveSwitch
from match3.components.board import Board
from match3.components.board_position import BoardPosition
from match3.components.tile import TileType
from match3.systems import board_ops
from match3.systems.cascade_state_utils import get_or_create_cascade_state
from match3.systems.match import MatchSystem
from match3.utils.grid_view import GridView

Position = Tuple[int, int]


class BoardSystem:
    """Owns the grid: one Board entity plus one entity per cell.

    Also turns two successive tile clicks into a swap request, the way a
    player picks a tile and then its neighbour.
    """

    def __init__(self, world: World, event_bus: EventBus, width: int = 8, height: int = 8,
                 is_busy: Optional[Callable[[], bool]] = None):
        self.world = world
        self.event_bus = event_bus
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(width=width, height=height))
        self.selected: Optional[Position] = None
        # Extra gate (e.g. playback running); the resolver's own busy flag is checked separately.
        self.is_busy = is_busy
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self._init_board()

    def _init_board(self):
        board: Board = self.world.component_for_entity(self.board_entity, Board)
        for y in range(board.height):
            for x in range(board.width):
                # Cells start empty; the session fill writes real tiles.
                ent = self.world.create_entity(BoardPosition(x=x, y=y), TileType(type_id=0), ActiveSwitch(active=False))
                board.cells[(x, y)] = ent

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    def get(self, x: int, y: int) -> Optional[int]:
        return board_ops.read_cell(self.world, x, y)

    def set(self, x: int, y: int, value: Optional[int]) -> None:
        board_ops.write_cell(self.world, x, y, value)

    def snapshot(self) -> GridView:
        return board_ops.snapshot(self.world)

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        return MatchSystem.validate(a, b)

    def on_tile_click(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None or not self.board.contains(x, y):
            return
        if self._input_blocked():
            return
        if self.selected is None:
            self.selected = (x, y)
            self.event_bus.emit(EVENT_TILE_SELECTED, x=x, y=y)
            return
        prev = self.selected
        if prev == (x, y):
            self.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, x=x, y=y, reason='same_tile')
        elif self.is_adjacent(prev, (x, y)):
            self.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, x=prev[0], y=prev[1], reason='swap')
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=prev, dst=(x, y))
        else:
            # Change selection to new tile
            self.selected = (x, y)
            self.event_bus.emit(EVENT_TILE_SELECTED, x=x, y=y)

    def clear_selection(self, reason: str = 'cleared') -> None:
        prev = self.selected
        if prev is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, x=prev[0], y=prev[1], reason=reason)

    def _input_blocked(self) -> bool:
        state = get_or_create_cascade_state(self.world)
        if state.busy or state.failed:
            return True
        return bool(self.is_busy and self.is_busy())
