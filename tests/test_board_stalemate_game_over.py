from gemcascade.events.bus import EVENT_CASCADE_COMPLETE, EVENT_GAME_OVER, EVENT_GRAVITY_APPLIED
from gemcascade.settings import Settings
from gemcascade.systems.board_ops import has_valid_move
from gemcascade.systems.match_engine import MatchEngine
from helpers import ScriptedRandom, drive_until_idle, record, replace_cells, set_grid

# Diagonal stripes of three types: no swap anywhere produces a match.
DEAD = tuple(tuple((r + c) % 3 for c in range(5)) for r in range(5))


def make_engine(bus, world):
    rng = ScriptedRandom(2).script([0, 1, 2])
    engine = MatchEngine(world, bus, Settings(difficulty=1), size=5, rng=rng)
    set_grid(engine, replace_cells(DEAD, {(0, 0): 2, (0, 1): 2, (0, 2): 0, (0, 3): 2, (0, 4): 1}))
    return engine


def test_dead_board_ends_game(bus, world):
    assert not has_valid_move(DEAD)
    engine = make_engine(bus, world)
    log = record(bus, EVENT_GRAVITY_APPLIED, EVENT_CASCADE_COMPLETE, EVENT_GAME_OVER)

    assert engine.attempt_swap((0, 2), (0, 3)) is True
    drive_until_idle(bus, engine)

    assert engine.grid == DEAD
    assert engine.score == 30
    assert engine.game_over
    assert not engine.locked
    assert log[0] == (EVENT_GRAVITY_APPLIED, {'moves': []})
    assert log[1] == (EVENT_CASCADE_COMPLETE, {'depth': 1, 'gained': 30, 'score': 30})
    assert log[2] == (EVENT_GAME_OVER, {'score': 30})


def test_clicks_ignored_after_game_over(bus, world):
    engine = make_engine(bus, world)
    engine.attempt_swap((0, 2), (0, 3))
    drive_until_idle(bus, engine)
    assert engine.game_over

    assert engine.handle_cell_interaction(1, 1) is False
    assert engine.selected is None
    assert engine.attempt_swap((1, 1), (1, 2)) is False
    assert engine.grid == DEAD


def test_restart_clears_game_over(bus, world):
    engine = make_engine(bus, world)
    engine.attempt_swap((0, 2), (0, 3))
    drive_until_idle(bus, engine)
    assert engine.game_over

    engine.restart_game()
    assert not engine.game_over
    assert engine.score == 0
    assert has_valid_move(engine.grid)
