from esper import World
from gemcascade.components.animation_swap import SwapAnimation
from gemcascade.components.animation_fade import FadeAnimation
from gemcascade.components.animation_fall import FallAnimation
from gemcascade.components.animation_refill import RefillAnimation
from gemcascade.components.duration import Duration
from gemcascade.systems.board_ops import GravityMove
from typing import Iterable, Tuple, List

Position = Tuple[int, int]


class AnimationFactory:
    def __init__(self, world: World):
        self.world = world

    def create_swap_pair(self, src: Position, dst: Position, src_type: int, dst_type: int, duration: float) -> List[int]:
        """One descriptor per swapped cell; each gem travels to the other's cell."""
        return [
            self.world.create_entity(SwapAnimation(src=src, dst=dst, gem_type=src_type), Duration(duration)),
            self.world.create_entity(SwapAnimation(src=dst, dst=src, gem_type=dst_type), Duration(duration)),
        ]

    def create_fade_group(self, cells: Iterable[Tuple[Position, int]], duration: float) -> List[int]:
        ents = []
        for pos, gem_type in cells:
            ents.append(self.world.create_entity(FadeAnimation(pos=pos, gem_type=gem_type), Duration(duration)))
        return ents

    def create_fall_group(self, moves: Iterable[GravityMove], duration: float) -> List[int]:
        ents = []
        for move in moves:
            ent = self.world.create_entity(
                FallAnimation(src=move.source, dst=move.target, gem_type=move.gem_type),
                Duration(duration),
            )
            ents.append(ent)
        return ents

    def create_refill_group(self, cells: Iterable[Tuple[Position, int]], duration: float) -> List[int]:
        ents = []
        for pos, gem_type in cells:
            ents.append(self.world.create_entity(RefillAnimation(pos=pos, gem_type=gem_type), Duration(duration)))
        return ents
