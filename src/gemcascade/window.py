"""Arcade window hosting the gem cascade board.

Sets up ECS world, event bus, engine and systems, and forwards ticks and input.
"""
import logging

from arcade import Window, run, color, key

from gemcascade.constants import GRID_ROWS, GRID_COLS, TILE_SIZE, BOTTOM_MARGIN
from gemcascade.events.bus import (
    EventBus, EVENT_TICK, EVENT_MOUSE_PRESS, EVENT_RESTART_REQUEST, EVENT_SETTINGS_CHANGED,
)
from gemcascade.settings import Settings
from gemcascade.systems.input import InputSystem
from gemcascade.systems.match_engine import MatchEngine
from gemcascade.systems.render import RenderSystem
from gemcascade.world import create_world

DIFFICULTY_KEYS = {key.KEY_1: 1, key.KEY_2: 2, key.KEY_3: 3}


class GemCascadeWindow(Window):
    def __init__(self, settings: Settings | None = None):
        width = int(GRID_COLS * TILE_SIZE / 0.75)
        height = int(GRID_ROWS * TILE_SIZE / 0.9) + BOTTOM_MARGIN + 40
        super().__init__(width, height, "Gem Cascade")
        self.set_update_rate(1/60)
        self.background_color = color.BLACK
        self.event_bus = EventBus()
        self.world = create_world()
        self.engine = MatchEngine(self.world, self.event_bus, settings, size=GRID_ROWS)
        self.input_system = InputSystem(self.event_bus, self, GRID_ROWS, GRID_COLS)
        self.render_system = RenderSystem(self.engine, self.event_bus, self)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == key.R:
            self.event_bus.emit(EVENT_RESTART_REQUEST, difficulty=None)
        elif symbol in DIFFICULTY_KEYS:
            self.event_bus.emit(EVENT_SETTINGS_CHANGED, difficulty=DIFFICULTY_KEYS[symbol])
            self.event_bus.emit(EVENT_RESTART_REQUEST, difficulty=None)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    GemCascadeWindow()
    run()
