import random

from gemcascade.events.bus import EVENT_TILE_CLICK, EVENT_TILE_DESELECTED, EVENT_TILE_SELECTED
from gemcascade.systems.match_engine import MatchEngine
from helpers import drive_until_idle, pattern_grid, record, set_grid


def make_engine(bus, world):
    engine = MatchEngine(world, bus, rng=random.Random(3))
    set_grid(engine, pattern_grid(8))
    return engine


def test_first_click_selects(bus, world):
    engine = make_engine(bus, world)
    log = record(bus, EVENT_TILE_SELECTED)
    assert engine.handle_cell_interaction(2, 3) is False
    assert engine.selected == (2, 3)
    assert log == [(EVENT_TILE_SELECTED, {'row': 2, 'col': 3})]


def test_same_cell_deselects(bus, world):
    engine = make_engine(bus, world)
    log = record(bus, EVENT_TILE_DESELECTED)
    engine.handle_cell_interaction(2, 3)
    assert engine.handle_cell_interaction(2, 3) is False
    assert engine.selected is None
    assert log[0][1]['reason'] == 'same_cell'


def test_non_adjacent_click_moves_selection(bus, world):
    engine = make_engine(bus, world)
    grid = engine.grid
    engine.handle_cell_interaction(0, 0)
    engine.handle_cell_interaction(5, 5)
    assert engine.selected == (5, 5)
    engine.handle_cell_interaction(1, 1)
    assert engine.selected == (1, 1)
    assert engine.grid == grid
    assert not engine.locked


def test_selection_clears_on_swap_request(bus, world):
    engine = make_engine(bus, world)
    log = record(bus, EVENT_TILE_DESELECTED)
    bus.emit(EVENT_TILE_CLICK, row=0, col=0)
    bus.emit(EVENT_TILE_CLICK, row=0, col=1)
    assert engine.selected is None
    assert log[0][1]['reason'] == 'swap'
    drive_until_idle(bus, engine)
    assert engine.selected is None


def test_out_of_bounds_click_ignored(bus, world):
    engine = make_engine(bus, world)
    assert engine.handle_cell_interaction(8, 0) is False
    assert engine.handle_cell_interaction(-1, 2) is False
    assert engine.selected is None
    engine.handle_cell_interaction(3, 3)
    engine.handle_cell_interaction(3, 99)
    assert engine.selected == (3, 3)
