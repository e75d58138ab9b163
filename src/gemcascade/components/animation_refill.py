from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class RefillAnimation:
    """Freshly spawned gem dropping into ``pos`` from above the board."""
    pos: Tuple[int,int]
    gem_type: int
    progress: float = 0.0
