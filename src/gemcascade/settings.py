"""Player-adjustable game settings."""
from __future__ import annotations

from dataclasses import dataclass, replace

from gemcascade.constants import (
    BASE_DISAPPEAR_DURATION,
    BASE_FALL_DURATION,
    BASE_SWAP_DURATION,
    DEFAULT_DIFFICULTY,
    DEFAULT_SPEED,
    DIFFICULTY_TYPE_COUNTS,
    SPEED_DURATION_MULTIPLIERS,
)


def type_count_for_difficulty(difficulty: int) -> int:
    try:
        return DIFFICULTY_TYPE_COUNTS[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty: {difficulty!r}") from None


@dataclass(frozen=True, slots=True)
class Settings:
    """Difficulty and animation speed dials.

    The engine reads these when a phase starts and never mutates them; use
    :meth:`with_changes` to derive an updated copy.
    """

    difficulty: int = DEFAULT_DIFFICULTY
    disappear_speed: int = DEFAULT_SPEED
    falling_speed: int = DEFAULT_SPEED

    def __post_init__(self) -> None:
        type_count_for_difficulty(self.difficulty)
        for name in ("disappear_speed", "falling_speed"):
            value = getattr(self, name)
            if value not in SPEED_DURATION_MULTIPLIERS:
                raise ValueError(f"{name} must be one of {sorted(SPEED_DURATION_MULTIPLIERS)}, got {value!r}")

    @property
    def type_count(self) -> int:
        return type_count_for_difficulty(self.difficulty)

    @property
    def swap_duration(self) -> float:
        # Swaps share the disappear dial.
        return BASE_SWAP_DURATION * SPEED_DURATION_MULTIPLIERS[self.disappear_speed]

    @property
    def disappear_duration(self) -> float:
        return BASE_DISAPPEAR_DURATION * SPEED_DURATION_MULTIPLIERS[self.disappear_speed]

    @property
    def fall_duration(self) -> float:
        return BASE_FALL_DURATION * SPEED_DURATION_MULTIPLIERS[self.falling_speed]

    def with_changes(self, **changes) -> "Settings":
        unknown = set(changes) - {"difficulty", "disappear_speed", "falling_speed"}
        if unknown:
            raise ValueError(f"Unknown settings: {sorted(unknown)}")
        return replace(self, **changes)
