import pytest

from gemcascade.animation_factory import AnimationFactory
from gemcascade.components.animation_fade import FadeAnimation
from gemcascade.components.animation_swap import SwapAnimation
from gemcascade.systems.animation import AnimationSystem
from gemcascade.systems.board_ops import GravityMove


def test_progress_advances_with_dt(world):
    factory = AnimationFactory(world)
    system = AnimationSystem(world)
    factory.create_swap_pair((0, 0), (0, 1), 2, 3, 0.2)

    assert system.advance(0.05) is True
    for anim in system.active():
        assert anim.progress == pytest.approx(0.25)
    assert not system.all_complete()

    system.advance(1.0)
    assert system.all_complete()
    assert all(anim.progress == 1.0 for anim in system.active())


def test_advance_is_idempotent_once_complete(world):
    factory = AnimationFactory(world)
    system = AnimationSystem(world)
    factory.create_fade_group([((1, 1), 4)], 0.1)
    system.advance(0.5)
    assert system.advance(0.5) is False
    (fade,) = system.active()
    assert fade.progress == 1.0
    assert fade.alpha == 0.0


def test_non_positive_dt_is_ignored(world):
    factory = AnimationFactory(world)
    system = AnimationSystem(world)
    factory.create_fade_group([((0, 0), 1)], 0.3)
    assert system.advance(0) is False
    assert system.advance(-1.0) is False
    assert system.active()[0].progress == 0.0


def test_zero_duration_completes_immediately(world):
    factory = AnimationFactory(world)
    system = AnimationSystem(world)
    factory.create_fall_group([GravityMove(source=(0, 2), target=(3, 2), gem_type=1)], 0.0)
    system.advance(0.01)
    assert system.all_complete()


def test_clear_removes_every_kind(world):
    factory = AnimationFactory(world)
    system = AnimationSystem(world)
    factory.create_swap_pair((0, 0), (1, 0), 1, 2, 0.2)
    factory.create_fade_group([((2, 2), 3)], 0.3)
    factory.create_fall_group([GravityMove(source=(0, 1), target=(1, 1), gem_type=0)], 0.2)
    factory.create_refill_group([((0, 1), 5)], 0.2)
    assert len(system.active()) == 5
    assert system.clear() == 5
    assert system.active() == []
    assert not list(world.get_component(SwapAnimation))
    assert not list(world.get_component(FadeAnimation))


def test_swap_pair_moves_each_gem_to_the_other_cell(world):
    factory = AnimationFactory(world)
    factory.create_swap_pair((2, 2), (2, 3), 1, 4, 0.2)
    pairs = sorted((a.src, a.dst, a.gem_type) for _, a in world.get_component(SwapAnimation))
    assert pairs == [((2, 2), (2, 3), 1), ((2, 3), (2, 2), 4)]
