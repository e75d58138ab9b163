from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from esper import World

from gemcascade.animation_factory import AnimationFactory
from gemcascade.components.board import Board, Grid
from gemcascade.components.game_state import EnginePhase, GameState
from gemcascade.components.score import Score
from gemcascade.components.selection import Selection
from gemcascade.constants import FRAME_DT, GRID_ROWS, MATCH_BONUS
from gemcascade.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GAME_OVER,
    EVENT_GAME_STARTED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_RESTART_REQUEST,
    EVENT_SCORE_CHANGED,
    EVENT_SETTINGS_CHANGED,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_REVERTED,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from gemcascade.settings import Settings, type_count_for_difficulty
from gemcascade.systems.animation import AnimationSystem
from gemcascade.systems import board_ops

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

# Float slack so N ticks of duration/N always expire the phase.
PHASE_EPSILON = 1e-9
MAX_GENERATION_ATTEMPTS = 200


class MatchEngine:
    """Owns the authoritative board and sequences swap, disappear and fall phases.

    Phase waits are countdowns advanced by :meth:`advance`, which the window loop
    drives through ``EVENT_TICK``. Nothing here waits on wall-clock time, so tests
    can step the engine synchronously.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        settings: Settings | None = None,
        *,
        size: int = GRID_ROWS,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        candidate_rng = rng or getattr(world, "random", None)
        self.rng = candidate_rng if isinstance(candidate_rng, random.Random) else random.Random()
        self.animation_system = AnimationSystem(world)
        self.factory = AnimationFactory(world)
        settings = settings or Settings()
        self.engine_entity = world.create_entity(
            Board(rows=size, cols=size, type_count=settings.type_count),
            GameState(),
            Score(),
            Selection(),
            settings,
        )
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_RESTART_REQUEST, self.on_restart_request)
        self.event_bus.subscribe(EVENT_SETTINGS_CHANGED, self.on_settings_changed)
        self.initialize_game()

    # ------------------------------------------------------------------
    # Read access for renderers and callers
    # ------------------------------------------------------------------
    def _component(self, component_type):
        return self.world.component_for_entity(self.engine_entity, component_type)

    @property
    def board(self) -> Board:
        return self._component(Board)

    @property
    def grid(self) -> Grid:
        return self.board.grid

    @property
    def state(self) -> GameState:
        return self._component(GameState)

    @property
    def settings(self) -> Settings:
        return self._component(Settings)

    @property
    def score(self) -> int:
        return self._component(Score).value

    @property
    def selected(self) -> Optional[Position]:
        return self._component(Selection).cell

    @property
    def phase(self) -> EnginePhase:
        return self.state.phase

    @property
    def locked(self) -> bool:
        return self.state.locked

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def cascade_depth(self) -> int:
        return self.state.cascade_depth

    def animations(self) -> List[object]:
        return self.animation_system.active()

    def valid_swaps(self) -> List[Tuple[Position, Position]]:
        return board_ops.find_valid_swaps(self.grid)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_tick(self, sender, **kwargs):
        self.advance(kwargs.get('dt'))

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.handle_cell_interaction(row, col)

    def on_restart_request(self, sender, **kwargs):
        self.restart_game(kwargs.get('difficulty'))

    def on_settings_changed(self, sender, **kwargs):
        changes = {
            key: value
            for key, value in kwargs.items()
            if key in ("difficulty", "disappear_speed", "falling_speed") and value is not None
        }
        if changes:
            self.update_settings(**changes)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def initialize_game(self, difficulty: int | None = None, *, reason: str = "initialize") -> None:
        """Start a fresh game: new match-free board, zero score, no selection, unlocked."""
        if difficulty is None:
            difficulty = self.settings.difficulty
        type_count = type_count_for_difficulty(difficulty)
        self.animation_system.clear()
        board = self.board
        board.type_count = type_count
        grid, playable = self._generate_playable_grid(board.rows, type_count)
        board.grid = grid
        self._component(Score).value = 0
        self._component(Selection).cell = None
        self.world.add_component(self.engine_entity, GameState(game_over=not playable))
        logger.info("Game started (%s): difficulty=%s types=%s", reason, difficulty, type_count)
        self.event_bus.emit(EVENT_GAME_STARTED, difficulty=difficulty, type_count=type_count, reason=reason)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=0)

    def restart_game(self, difficulty: int | None = None) -> None:
        """Unconditional reset, allowed mid-cascade; in-flight phases are discarded."""
        if self.locked:
            logger.info("Restart discards in-flight %s phase", self.phase.name)
        self.initialize_game(difficulty, reason="restart")

    def update_settings(self, **changes) -> Settings:
        """Replace the settings value. Speeds apply from the next phase, difficulty from the next restart."""
        updated = self.settings.with_changes(**changes)
        self.world.add_component(self.engine_entity, updated)
        logger.debug("Settings updated: %s", updated)
        return updated

    def handle_cell_interaction(self, row: int, col: int) -> bool:
        """Process a click/tap on a cell.

        Returns True only when the click dispatched a swap that produces a match.
        The cascade it starts is still in flight at that point.
        """
        state = self.state
        if state.locked:
            logger.debug("Ignoring click at %s while %s", (row, col), state.phase.name)
            return False
        if state.game_over:
            logger.debug("Ignoring click at %s after game over", (row, col))
            return False
        if not isinstance(row, int) or not isinstance(col, int):
            return False
        pos = (row, col)
        if not board_ops.in_bounds(self.grid, pos):
            logger.debug("Ignoring out-of-bounds click at %s", pos)
            return False
        selection = self._component(Selection)
        if selection.cell is None:
            selection.cell = pos
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
            return False
        if selection.cell == pos:
            selection.cell = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='same_cell', prev_row=row, prev_col=col)
            return False
        if board_ops.is_adjacent(selection.cell, pos):
            return self.attempt_swap(selection.cell, pos)
        # Not adjacent: selection moves to the new cell.
        selection.cell = pos
        self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
        return False

    def attempt_swap(self, a: Position, b: Position) -> bool:
        """Swap two adjacent gems and start the swap animation.

        The board is updated immediately; validity is re-checked when the swap
        phase expires, and a swap without a match is played back in reverse.
        """
        state = self.state
        if state.locked or state.game_over:
            return False
        grid = self.grid
        if not (board_ops.in_bounds(grid, a) and board_ops.in_bounds(grid, b) and board_ops.is_adjacent(a, b)):
            return False
        selection = self._component(Selection)
        if selection.cell is not None:
            prev = selection.cell
            selection.cell = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='swap', prev_row=prev[0], prev_col=prev[1])
        swapped = board_ops.swap_cells(grid, a, b)
        self.board.grid = swapped
        valid = bool(board_ops.find_matches(swapped))
        state.swap = (a, b)
        state.cascade_depth = 0
        state.sequence_gain = 0
        duration = self.settings.swap_duration
        self.factory.create_swap_pair(a, b, grid[a[0]][a[1]], grid[b[0]][b[1]], duration)
        self._enter_phase(EnginePhase.SWAPPING, duration)
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=a, dst=b, valid=valid)
        return valid

    def advance_animations(self, dt: float | None = None) -> bool:
        """Per-tick driver: move animations, count down the phase, transition on expiry.

        A phase ends when its countdown runs out or once every descriptor it
        spawned has finished, whichever comes first. Returns True if anything
        moved or a phase ended; an idle engine with no descriptors is untouched.
        """
        step = FRAME_DT if dt is None else float(dt)
        if step <= 0.0:
            return False
        moved = self.animation_system.advance(step)
        state = self.state
        if state.phase is EnginePhase.IDLE:
            return moved
        state.phase_remaining -= step
        finished = bool(self.animation_system.active()) and self.animation_system.all_complete()
        if state.phase_remaining > PHASE_EPSILON and not finished:
            return moved
        self._on_phase_expired(state.phase)
        return True

    # EVENT_TICK handler and window loop use the shorter name.
    advance = advance_animations

    # ------------------------------------------------------------------
    # Phase sequencing
    # ------------------------------------------------------------------
    def _enter_phase(self, phase: EnginePhase, duration: float = 0.0) -> None:
        state = self.state
        logger.debug("Phase %s -> %s (%.3fs)", state.phase.name, phase.name, duration)
        state.phase = phase
        state.phase_remaining = duration if phase is not EnginePhase.IDLE else 0.0

    def _on_phase_expired(self, phase: EnginePhase) -> None:
        self.animation_system.clear()
        if phase is EnginePhase.SWAPPING:
            self._after_swap()
        elif phase is EnginePhase.REVERSING:
            self._after_reverse()
        elif phase is EnginePhase.RESOLVING:
            self._after_disappear()
        elif phase is EnginePhase.FALLING:
            self._after_fall()

    def _after_swap(self) -> None:
        state = self.state
        src, dst = state.swap
        matches = board_ops.find_matches(self.grid)
        if matches:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
            self._begin_resolution(matches)
            return
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
        grid = self.grid
        self.board.grid = board_ops.swap_cells(grid, src, dst)
        duration = self.settings.swap_duration
        self.factory.create_swap_pair(dst, src, grid[dst[0]][dst[1]], grid[src[0]][src[1]], duration)
        self._enter_phase(EnginePhase.REVERSING, duration)

    def _after_reverse(self) -> None:
        state = self.state
        src, dst = state.swap
        state.swap = None
        self._enter_phase(EnginePhase.IDLE)
        self.event_bus.emit(EVENT_TILE_SWAP_REVERTED, src=src, dst=dst)

    def _begin_resolution(self, matches) -> None:
        state = self.state
        grid = self.grid
        positions = sorted(matches)
        gained = len(positions) * MATCH_BONUS
        score = self._component(Score)
        score.value += gained
        state.sequence_gain += gained
        state.cascade_depth += 1
        state.pending_matches = positions
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=gained)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=state.cascade_depth)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
        duration = self.settings.disappear_duration
        self.factory.create_fade_group(((pos, grid[pos[0]][pos[1]]) for pos in positions), duration)
        self._enter_phase(EnginePhase.RESOLVING, duration)

    def _after_disappear(self) -> None:
        state = self.state
        board = self.board
        positions = state.pending_matches
        state.pending_matches = []
        grid = board.grid
        types = [(row, col, grid[row][col]) for row, col in positions]
        cleared = board_ops.remove_matches(grid, positions)
        moves = board_ops.gravity_moves(cleared)
        dropped = board_ops.drop_gems(cleared)
        spawned = board_ops.empty_cells(dropped)
        board.grid = board_ops.fill_empty(dropped, board.type_count, self.rng)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=types)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned)
        duration = self.settings.fall_duration
        self.factory.create_fall_group(moves, duration)
        self.factory.create_refill_group(((pos, board.grid[pos[0]][pos[1]]) for pos in spawned), duration)
        self._enter_phase(EnginePhase.FALLING, duration)

    def _after_fall(self) -> None:
        # No iteration cap: each round re-scans the fresh board and random refills settle almost surely.
        matches = board_ops.find_matches(self.grid)
        if matches:
            self._begin_resolution(matches)
            return
        self._finalize()

    def _finalize(self) -> None:
        state = self.state
        state.game_over = not board_ops.has_valid_move(self.grid)
        state.swap = None
        self._enter_phase(EnginePhase.IDLE)
        score = self.score
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth, gained=state.sequence_gain, score=score)
        if state.game_over:
            logger.info("No valid moves left; game over with score %s", score)
            self.event_bus.emit(EVENT_GAME_OVER, score=score)

    def _generate_playable_grid(self, size: int, type_count: int) -> Tuple[Grid, bool]:
        grid: Grid = ()
        for _ in range(MAX_GENERATION_ATTEMPTS):
            grid = board_ops.generate_board(size, type_count, self.rng)
            if board_ops.has_valid_move(grid):
                return grid, True
        logger.warning("No playable %sx%s board after %s attempts", size, size, MAX_GENERATION_ATTEMPTS)
        return grid, False
