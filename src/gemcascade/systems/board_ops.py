from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from gemcascade.components.board import Grid
from gemcascade.constants import MIN_MATCH_LENGTH

Position = Tuple[int, int]
Swap = Tuple[Position, Position]


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    gem_type: int


def _rng(rng: random.Random | None) -> random.Random:
    if isinstance(rng, random.Random):
        return rng
    return random.Random()


def _thaw(grid: Grid) -> List[List[Optional[int]]]:
    return [list(row) for row in grid]


def _freeze(cells: List[List[Optional[int]]]) -> Grid:
    return tuple(tuple(row) for row in cells)


def dimensions(grid: Grid) -> Tuple[int, int]:
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    return rows, cols


def in_bounds(grid: Grid, pos: Position) -> bool:
    rows, cols = dimensions(grid)
    row, col = pos
    return 0 <= row < rows and 0 <= col < cols


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def empty_cells(grid: Grid) -> List[Position]:
    return [
        (row, col)
        for row, values in enumerate(grid)
        for col, value in enumerate(values)
        if value is None
    ]


def generate_board(size: int, type_count: int, rng: random.Random | None = None) -> Grid:
    """Fill a size x size grid so that no horizontal or vertical run of three exists.

    Cells are filled row-major, so only the two neighbours to the left and the two
    above can complete a run; those types are excluded before sampling.
    """
    if type_count < MIN_MATCH_LENGTH:
        raise ValueError(f"type_count must be at least {MIN_MATCH_LENGTH}, got {type_count}")
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    rng = _rng(rng)
    choices = list(range(type_count))
    layout: List[List[Optional[int]]] = []
    for row in range(size):
        row_values: List[Optional[int]] = []
        for col in range(size):
            available = choices
            if col >= 2:
                left1 = row_values[col - 1]
                left2 = row_values[col - 2]
                if left1 == left2:
                    available = [t for t in available if t != left1]
            if row >= 2:
                up1 = layout[row - 1][col]
                up2 = layout[row - 2][col]
                if up1 == up2:
                    available = [t for t in available if t != up1]
            row_values.append(rng.choice(available))
        layout.append(row_values)
    return _freeze(layout)


def _collect_runs(line: List[Tuple[Position, Optional[int]]]) -> Iterator[List[Position]]:
    run: List[Position] = []
    last_type: Optional[int] = None
    for pos, tval in line:
        if tval is not None and tval == last_type:
            run.append(pos)
            continue
        if len(run) >= MIN_MATCH_LENGTH:
            yield run
        run = [pos] if tval is not None else []
        last_type = tval
    if len(run) >= MIN_MATCH_LENGTH:
        yield run


def _all_runs(grid: Grid) -> Iterator[List[Position]]:
    rows, cols = dimensions(grid)
    for r in range(rows):
        yield from _collect_runs([((r, c), grid[r][c]) for c in range(cols)])
    for c in range(cols):
        yield from _collect_runs([((r, c), grid[r][c]) for r in range(rows)])


def find_matches(grid: Grid) -> Set[Position]:
    """Union of every cell that belongs to a horizontal or vertical run of three or more."""
    matched: Set[Position] = set()
    for run in _all_runs(grid):
        matched.update(run)
    return matched


def group_matches(grid: Grid) -> List[List[Position]]:
    """Detect matches and merge overlapping runs (L/T shapes) into single groups."""
    groups = [set(run) for run in _all_runs(grid)]
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


def remove_matches(grid: Grid, positions: Iterable[Position]) -> Grid:
    cells = _thaw(grid)
    for row, col in positions:
        cells[row][col] = None
    return _freeze(cells)


def swap_cells(grid: Grid, a: Position, b: Position) -> Grid:
    cells = _thaw(grid)
    (ar, ac), (br, bc) = a, b
    cells[ar][ac], cells[br][bc] = cells[br][bc], cells[ar][ac]
    return _freeze(cells)


def gravity_moves(grid: Grid) -> List[GravityMove]:
    """List every gem whose row changes when its column is compacted downward."""
    rows, cols = dimensions(grid)
    moves: List[GravityMove] = []
    for col in range(cols):
        target_row = rows - 1
        for row in range(rows - 1, -1, -1):
            gem_type = grid[row][col]
            if gem_type is None:
                continue
            if row != target_row:
                moves.append(GravityMove(source=(row, col), target=(target_row, col), gem_type=gem_type))
            target_row -= 1
    return moves


def drop_gems(grid: Grid) -> Grid:
    """Compact each column toward the bottom, keeping relative order; empties end up on top."""
    rows, cols = dimensions(grid)
    cells: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]
    for col in range(cols):
        stack = [grid[row][col] for row in range(rows) if grid[row][col] is not None]
        offset = rows - len(stack)
        for index, gem_type in enumerate(stack):
            cells[offset + index][col] = gem_type
    return _freeze(cells)


def fill_empty(grid: Grid, type_count: int, rng: random.Random | None = None) -> Grid:
    # No match avoidance: refills are what drive cascades.
    rng = _rng(rng)
    cells = _thaw(grid)
    for row, col in empty_cells(grid):
        cells[row][col] = rng.randrange(type_count)
    return _freeze(cells)


def predict_swap_creates_match(grid: Grid, src: Position, dst: Position) -> bool:
    if not (in_bounds(grid, src) and in_bounds(grid, dst)):
        return False
    return bool(find_matches(swap_cells(grid, src, dst)))


def iter_valid_swaps(grid: Grid) -> Iterator[Swap]:
    """Yield each adjacent pair whose swap produces a match.

    Every cell is paired with its right and bottom neighbour, which visits each
    unordered adjacent pair exactly once.
    """
    rows, cols = dimensions(grid)
    for row in range(rows):
        for col in range(cols):
            pos = (row, col)
            if col + 1 < cols and predict_swap_creates_match(grid, pos, (row, col + 1)):
                yield pos, (row, col + 1)
            if row + 1 < rows and predict_swap_creates_match(grid, pos, (row + 1, col)):
                yield pos, (row + 1, col)


def find_valid_swaps(grid: Grid) -> List[Swap]:
    return list(iter_valid_swaps(grid))


def has_valid_move(grid: Grid) -> bool:
    return any(True for _ in iter_valid_swaps(grid))
