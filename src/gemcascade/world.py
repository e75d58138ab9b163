import random

from esper import World


def create_world(rng: random.Random | None = None) -> World:
    """Create an empty ECS world carrying the shared random source used for gem spawns."""
    world = World()
    setattr(world, "random", rng or random.Random())
    return world
