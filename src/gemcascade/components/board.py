from dataclasses import dataclass
from typing import Optional, Tuple

Grid = Tuple[Tuple[Optional[int], ...], ...]


@dataclass(slots=True)
class Board:
    """Authoritative gem grid.

    ``grid`` is an immutable value; board operations return a new grid which the
    engine assigns back here. ``type_count`` is fixed for the lifetime of a game.
    """
    rows: int
    cols: int
    type_count: int
    grid: Grid = ()
