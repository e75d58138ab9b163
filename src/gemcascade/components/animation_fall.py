from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FallAnimation:
    src: Tuple[int,int]
    dst: Tuple[int,int]
    gem_type: int
    progress: float = 0.0  # 0..1
