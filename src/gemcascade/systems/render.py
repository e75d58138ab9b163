from typing import Callable, List, Set, Tuple

from gemcascade.components.animation_fade import FadeAnimation
from gemcascade.components.animation_fall import FallAnimation
from gemcascade.components.animation_refill import RefillAnimation
from gemcascade.components.animation_swap import SwapAnimation
from gemcascade.constants import GEM_COLORS
from gemcascade.events.bus import EventBus, EVENT_GAME_OVER, EVENT_GAME_STARTED
from gemcascade.systems.match_engine import MatchEngine
from gemcascade.ui.layout import cell_center, compute_board_geometry

PADDING = 4
REFILL_START_OFFSET = 1.2  # rows above the target cell where spawned gems appear

Point = Tuple[float, float]
# (centre, gem_type, alpha, scale)
GemDraw = Tuple[Point, int, float, float]


def ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1


class RenderSystem:
    """Draws the engine's board, in-flight animations, score and game-over banner."""
    def __init__(self, engine: MatchEngine, event_bus: EventBus, window):
        self.engine = engine
        self.event_bus = event_bus
        self.window = window
        self.use_easing = True
        self.show_game_over = False
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)
        self.event_bus.subscribe(EVENT_GAME_STARTED, self.on_game_started)

    def on_game_over(self, sender, **kwargs):
        self.show_game_over = True

    def on_game_started(self, sender, **kwargs):
        self.show_game_over = False

    def _ease(self, p: float) -> float:
        return ease_in_out(p) if self.use_easing else p

    def collect_moving(self, center: Callable[[float, float], Point]) -> Tuple[Set[Tuple[int, int]], List[GemDraw]]:
        """Cells whose static gem is hidden this frame, and one draw per animated gem.

        Draws are kept in a list so gems crossing the same point (a swap pair at
        its midpoint) are both drawn.
        """
        hidden: Set[Tuple[int, int]] = set()
        moving: List[GemDraw] = []
        for anim in self.engine.animations():
            if isinstance(anim, SwapAnimation):
                hidden.update((anim.src, anim.dst))
                p = self._ease(anim.progress)
                row = anim.src[0] + (anim.dst[0] - anim.src[0]) * p
                col = anim.src[1] + (anim.dst[1] - anim.src[1]) * p
                moving.append((center(row, col), anim.gem_type, 1.0, 1.0))
            elif isinstance(anim, FadeAnimation):
                hidden.add(anim.pos)
                moving.append((center(*anim.pos), anim.gem_type, anim.alpha, 0.4 + 0.6 * anim.alpha))
            elif isinstance(anim, FallAnimation):
                hidden.add(anim.dst)
                row = anim.src[0] + (anim.dst[0] - anim.src[0]) * self._ease(anim.progress)
                moving.append((center(row, anim.dst[1]), anim.gem_type, 1.0, 1.0))
            elif isinstance(anim, RefillAnimation):
                hidden.add(anim.pos)
                start_row = anim.pos[0] - REFILL_START_OFFSET
                row = start_row + (anim.pos[0] - start_row) * self._ease(anim.progress)
                moving.append((center(row, anim.pos[1]), anim.gem_type, anim.progress, 1.0))
        return hidden, moving

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        engine = self.engine
        board = engine.board
        tile_size, start_x, start_y = compute_board_geometry(
            self.window.width, self.window.height, board.rows, board.cols
        )
        radius = max(tile_size - PADDING, 4) / 2

        def center(row: float, col: float) -> Point:
            return cell_center(row, col, tile_size, start_x, start_y, board.rows)

        hidden, moving = self.collect_moving(center)

        board_w = board.cols * tile_size
        board_h = board.rows * tile_size
        arcade.draw_lrbt_rectangle_filled(start_x, start_x + board_w, start_y, start_y + board_h, (25, 25, 40))

        for row, values in enumerate(board.grid):
            for col, gem_type in enumerate(values):
                if gem_type is None or (row, col) in hidden:
                    continue
                x, y = center(row, col)
                arcade.draw_circle_filled(x, y, radius, GEM_COLORS[gem_type % len(GEM_COLORS)])

        for (x, y), gem_type, alpha, scale in moving:
            r, g, b = GEM_COLORS[gem_type % len(GEM_COLORS)]
            arcade.draw_circle_filled(x, y, radius * scale, (r, g, b, int(255 * max(0.0, min(1.0, alpha)))))

        if engine.selected is not None:
            x, y = center(*engine.selected)
            arcade.draw_circle_outline(x, y, radius + 3, (255, 255, 255), 3)

        text_y = start_y + board_h + 10
        arcade.draw_text(f"Score: {engine.score}", start_x, text_y, arcade.color.WHITE, 16)
        if self.show_game_over:
            arcade.draw_text(
                "No more moves! Press R to play again",
                start_x, start_y + board_h / 2, arcade.color.YELLOW, 18,
            )
