from __future__ import annotations

import random
from typing import Iterable, List

from gemcascade.components.board import Board, Grid
from gemcascade.components.game_state import EnginePhase
from gemcascade.events.bus import EVENT_TICK, EventBus


def parse_grid(text: str) -> Grid:
    """Build a grid from whitespace separated rows; '.' marks an empty cell."""
    rows = []
    for line in text.strip().splitlines():
        rows.append(tuple(None if token == '.' else int(token) for token in line.split()))
    return tuple(rows)


def pattern_grid(size: int) -> Grid:
    """Match-free board where no two neighbours share a type (values 0..4)."""
    return tuple(tuple((r + 2 * c) % 5 for c in range(size)) for r in range(size))


def replace_cells(grid: Grid, cells: dict) -> Grid:
    rows = [list(row) for row in grid]
    for (r, c), value in cells.items():
        rows[r][c] = value
    return tuple(tuple(row) for row in rows)


def set_grid(engine, grid: Grid) -> None:
    board = engine.world.component_for_entity(engine.engine_entity, Board)
    board.grid = grid


def drive_ticks(bus: EventBus, count: int = 30, dt: float = 0.02) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def drive_until_idle(bus: EventBus, engine, max_ticks: int = 1000, dt: float = 0.02) -> int:
    for tick in range(max_ticks):
        if engine.phase is EnginePhase.IDLE:
            return tick
        bus.emit(EVENT_TICK, dt=dt)
    raise AssertionError(f"Engine still {engine.phase.name} after {max_ticks} ticks")


def drive_until_phase(bus: EventBus, engine, phase: EnginePhase, max_ticks: int = 500, dt: float = 0.02) -> int:
    for tick in range(max_ticks):
        if engine.phase is phase:
            return tick
        bus.emit(EVENT_TICK, dt=dt)
    raise AssertionError(f"Engine never reached {phase.name}; stuck in {engine.phase.name}")


def record(bus: EventBus, *names: str) -> List[tuple]:
    """Subscribe to events and collect (name, payload) pairs in emission order."""
    log: List[tuple] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: log.append((_name, payload)))
    return log


class ScriptedRandom(random.Random):
    """Random source whose ``randrange`` replays scripted values (used for refills).

    Board generation uses ``choice`` and is unaffected by the script.
    """

    _values: tuple = ()

    def script(self, values: Iterable[int]) -> "ScriptedRandom":
        self._values = tuple(values)
        return self

    def randrange(self, *args, **kwargs):
        if self._values:
            value, self._values = self._values[0], self._values[1:]
            return value
        return super().randrange(*args, **kwargs)

    @property
    def remaining(self) -> int:
        return len(self._values)
