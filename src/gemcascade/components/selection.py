from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(slots=True)
class Selection:
    """The single player-selected cell, if any."""
    cell: Optional[Tuple[int, int]] = None
