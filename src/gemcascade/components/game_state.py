"""Engine phase resource describing where a swap sequence currently stands."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Tuple


class EnginePhase(Enum):
    """Phases of the swap/cascade sequence. Everything except IDLE holds the input lock."""
    IDLE = auto()
    SWAPPING = auto()
    REVERSING = auto()
    RESOLVING = auto()
    FALLING = auto()


@dataclass
class GameState:
    """Singleton component storing the active phase and its countdown."""
    phase: EnginePhase = EnginePhase.IDLE
    phase_remaining: float = 0.0
    game_over: bool = False
    cascade_depth: int = 0
    sequence_gain: int = 0
    swap: Tuple[Tuple[int, int], Tuple[int, int]] | None = None
    pending_matches: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def locked(self) -> bool:
        return self.phase is not EnginePhase.IDLE
