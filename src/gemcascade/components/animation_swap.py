from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class SwapAnimation:
    """Gem sliding from ``src`` to ``dst``; one per swapped cell."""
    src: Tuple[int,int]
    dst: Tuple[int,int]
    gem_type: int
    progress: float = 0.0  # 0..1
