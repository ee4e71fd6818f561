from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from esper import World

from match3.components.active_switch import ActiveSwitch
from match3.components.board import Board
from match3.components.tile import TileType
from match3.components.tile_type_registry import TileTypeRegistry
from match3.components.tile_types import TileTypes
from match3.constants import MAX_FILL_ATTEMPTS, MIN_RUN_LENGTH
from match3.errors import BoardGenerationError, OutOfBounds
from match3.utils.grid_view import GridView
from match3.utils.tile_generator import TileGenerator

Position = Tuple[int, int]
TypeEntry = Tuple[int, int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_id: int


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.width, board.height
    return None


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def get_generator(world: World) -> TileGenerator:
    """Tile generator bound to the world's shared random source."""
    registry = get_tile_registry(world)
    rng = getattr(world, "random", None)
    return TileGenerator(type_count=registry.count, rng=rng)


def get_entity_at(world: World, x: int, y: int) -> int:
    board = get_board(world)
    if not board.contains(x, y):
        raise OutOfBounds(x, y, board.width, board.height)
    return board.cells[(x, y)]


def read_cell(world: World, x: int, y: int) -> Optional[int]:
    """Tile type at (x, y), or None when the cell is empty."""
    entity = get_entity_at(world, x, y)
    if not world.component_for_entity(entity, ActiveSwitch).active:
        return None
    return world.component_for_entity(entity, TileType).type_id


def write_cell(world: World, x: int, y: int, value: Optional[int]) -> None:
    entity = get_entity_at(world, x, y)
    switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
    if value is None:
        switch.active = False
        return
    world.component_for_entity(entity, TileType).type_id = value
    switch.active = True


def active_tile_type_map(world: World) -> Dict[Position, int]:
    """Return mapping of occupied positions to their tile type."""
    mapping: Dict[Position, int] = {}
    board = get_board(world)
    for position, entity in board.cells.items():
        switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
        if not switch.active:
            continue
        mapping[position] = world.component_for_entity(entity, TileType).type_id
    return mapping


def snapshot(world: World) -> GridView:
    board = get_board(world)
    types = active_tile_type_map(world)
    cells = tuple(types.get((x, y)) for y in range(board.height) for x in range(board.width))
    return GridView(width=board.width, height=board.height, cells=cells)


def load_rows(world: World, rows) -> None:
    """Overwrite the whole board from top-to-bottom rows (None marks an empty cell)."""
    board = get_board(world)
    if len(rows) != board.height or any(len(row) != board.width for row in rows):
        raise ValueError(f"expected {board.height} rows of {board.width} cells")
    for y, row in enumerate(rows):
        for x, value in enumerate(row):
            write_cell(world, x, y, value)


def swap_tile_types(world: World, src: Position, dst: Position) -> None:
    """Exchange the contents of two cells in place; applying it twice restores the board."""
    src_entity = get_entity_at(world, *src)
    dst_entity = get_entity_at(world, *dst)
    src_tile: TileType = world.component_for_entity(src_entity, TileType)
    dst_tile: TileType = world.component_for_entity(dst_entity, TileType)
    src_switch: ActiveSwitch = world.component_for_entity(src_entity, ActiveSwitch)
    dst_switch: ActiveSwitch = world.component_for_entity(dst_entity, ActiveSwitch)
    src_tile.type_id, dst_tile.type_id = dst_tile.type_id, src_tile.type_id
    src_switch.active, dst_switch.active = dst_switch.active, src_switch.active


def _collect_runs(line: List[Tuple[Position, Optional[int]]]) -> List[List[Position]]:
    """Runs of >= MIN_RUN_LENGTH equal, occupied cells along one row or column."""
    runs: List[List[Position]] = []
    run: List[Position] = []
    last_type: Optional[int] = None
    for position, tval in line:
        if tval is not None and tval == last_type:
            run.append(position)
            continue
        if len(run) >= MIN_RUN_LENGTH:
            runs.append(run)
        run = [position] if tval is not None else []
        last_type = tval
    if len(run) >= MIN_RUN_LENGTH:
        runs.append(run)
    return runs


def scan_runs(types: Dict[Position, int], width: int, height: int) -> List[List[Position]]:
    """Every horizontal run (rows left to right) then every vertical run (columns top to bottom)."""
    runs: List[List[Position]] = []
    if width >= MIN_RUN_LENGTH:
        for y in range(height):
            runs.extend(_collect_runs([((x, y), types.get((x, y))) for x in range(width)]))
    if height >= MIN_RUN_LENGTH:
        for x in range(width):
            runs.extend(_collect_runs([((x, y), types.get((x, y))) for y in range(height)]))
    return runs


def merge_runs(runs: List[List[Position]]) -> List[List[Position]]:
    """Merge runs sharing a cell (crosses, T and L shapes) into one group each."""
    groups = [set(run) for run in runs]
    merged: List[Set[Position]] = []
    while groups:
        first = groups.pop()
        changed = True
        while changed:
            changed = False
            for g in groups[:]:
                if first & g:
                    first |= g
                    groups.remove(g)
                    changed = True
        merged.append(first)
    return sorted(sorted(group) for group in merged)


def find_all_matches(world: World) -> List[List[Position]]:
    """Detect all contiguous horizontal or vertical matches, merged into groups."""
    dims = board_dimensions(world)
    if not dims:
        return []
    width, height = dims
    runs = scan_runs(active_tile_type_map(world), width, height)
    if not runs:
        return []
    return merge_runs(runs)


def matched_positions(world: World) -> Set[Position]:
    """Set of cells taking part in any run; a cross cell appears once."""
    dims = board_dimensions(world)
    if not dims:
        return set()
    width, height = dims
    return {pos for run in scan_runs(active_tile_type_map(world), width, height) for pos in run}


def detect_matches(grid: GridView) -> Set[Position]:
    """Matched cells of a snapshot, same rules as ``matched_positions``."""
    runs = scan_runs(grid.type_map(), grid.width, grid.height)
    return {pos for run in runs for pos in run}


def clear_tiles(world: World, positions) -> List[TypeEntry]:
    """Empty the given cells and report what was removed (each cell once)."""
    removed: List[TypeEntry] = []
    for x, y in sorted(set(positions)):
        entity = get_entity_at(world, x, y)
        switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
        if not switch.active:
            continue
        removed.append((x, y, world.component_for_entity(entity, TileType).type_id))
        switch.active = False
    return removed


def compute_gravity_moves(world: World) -> Tuple[List[GravityMove], int]:
    """Per column, slide occupied cells down keeping their order; return moves and affected columns."""
    board = get_board(world)
    types = active_tile_type_map(world)
    moves: List[GravityMove] = []
    columns = 0
    for x in range(board.width):
        filled_rows = [y for y in range(board.height) if (x, y) in types]
        first_target = board.height - len(filled_rows)
        column_moved = False
        for offset, original_row in enumerate(filled_rows):
            target_row = first_target + offset
            if original_row == target_row:
                continue
            moves.append(GravityMove(source=(x, original_row), target=(x, target_row), type_id=types[(x, original_row)]))
            column_moved = True
        if column_moved:
            columns += 1
    return moves, columns


def apply_gravity_moves(world: World, moves: List[GravityMove]) -> None:
    # Sources are read before any write so overlapping source/target cells are safe.
    for move in moves:
        write_cell(world, *move.source, None)
    for move in moves:
        write_cell(world, *move.target, move.type_id)


def apply_gravity(world: World) -> Tuple[List[GravityMove], int]:
    moves, columns = compute_gravity_moves(world)
    if moves:
        apply_gravity_moves(world, moves)
    return moves, columns


def refill_inactive_tiles(world: World, generator: TileGenerator | None = None) -> List[Position]:
    """Fill every empty cell, column by column from the top down."""
    board = get_board(world)
    generator = generator or get_generator(world)
    spawned: List[Position] = []
    for x in range(board.width):
        for y in range(board.height):
            entity = board.cells[(x, y)]
            switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
            if switch.active:
                continue
            world.component_for_entity(entity, TileType).type_id = generator.next()
            switch.active = True
            spawned.append((x, y))
    return spawned


def predict_swap_creates_match(types: Dict[Position, int], src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would leave a run through either cell."""
    if src not in types or dst not in types:
        return False
    swapped = types.copy()
    swapped[src], swapped[dst] = swapped[dst], swapped[src]
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def _has_line_match(types: Dict[Position, int], pos: Position) -> bool:
    x, y = pos
    tval = types.get(pos)
    if tval is None:
        return False
    for dx, dy in ((1, 0), (0, 1)):
        length = 1
        step = 1
        while types.get((x + dx * step, y + dy * step)) == tval:
            length += 1
            step += 1
        step = 1
        while types.get((x - dx * step, y - dy * step)) == tval:
            length += 1
            step += 1
        if length >= MIN_RUN_LENGTH:
            return True
    return False


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    dims = board_dimensions(world)
    if not dims:
        return []
    width, height = dims
    tile_map = active_tile_type_map(world)
    swaps: List[Tuple[Position, Position]] = []
    for y in range(height):
        for x in range(width):
            pos = (x, y)
            if pos not in tile_map:
                continue
            right = (x + 1, y)
            if x + 1 < width and tile_map.get(right) != tile_map[pos]:
                if predict_swap_creates_match(tile_map, pos, right):
                    swaps.append((pos, right))
            down = (x, y + 1)
            if y + 1 < height and tile_map.get(down) != tile_map[pos]:
                if predict_swap_creates_match(tile_map, pos, down):
                    swaps.append((pos, down))
    return swaps


def _settled_layout(width: int, height: int, kinds: List[int], generator: TileGenerator) -> List[List[int]] | None:
    """One attempt at a layout without runs; None when some cell had no candidate."""
    layout: List[List[int]] = []
    for y in range(height):
        row_values: List[int] = []
        for x in range(width):
            available = list(kinds)
            if x >= 2 and row_values[x - 1] == row_values[x - 2]:
                available = [t for t in available if t != row_values[x - 1]]
            if y >= 2 and layout[y - 1][x] == layout[y - 2][x]:
                available = [t for t in available if t != layout[y - 1][x]]
            if not available:
                return None
            row_values.append(generator.choice(available))
        layout.append(row_values)
    return layout


def respawn_full_board(
    world: World,
    *,
    rng: random.Random | None = None,
    max_attempts: int = MAX_FILL_ATTEMPTS,
    require_valid_swap: bool = False,
) -> List[Position]:
    """Fill the entire board with fresh tiles that contain no matches.

    With ``require_valid_swap`` the layout must also offer at least one swap
    that creates a match.
    """
    board = get_board(world)
    registry = get_tile_registry(world)
    candidate_rng = rng or getattr(world, "random", None)
    generator = TileGenerator(type_count=registry.count, rng=candidate_rng)
    kinds = registry.all_types()

    for _ in range(max_attempts):
        layout = _settled_layout(board.width, board.height, kinds, generator)
        if layout is None:
            continue
        load_rows(world, layout)
        if require_valid_swap and not find_valid_swaps(world):
            continue
        return sorted(board.cells.keys())

    raise BoardGenerationError(
        f"no settled {board.width}x{board.height} layout with {registry.count} tile types "
        f"after {max_attempts} attempts"
    )
