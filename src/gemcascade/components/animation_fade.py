from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FadeAnimation:
    """Matched gem disappearing in place."""
    pos: Tuple[int,int]
    gem_type: int
    progress: float = 0.0

    @property
    def alpha(self) -> float:
        return 1.0 - self.progress
