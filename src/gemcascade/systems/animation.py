from esper import World
from typing import List

from gemcascade.components.animation_swap import SwapAnimation
from gemcascade.components.animation_fade import FadeAnimation
from gemcascade.components.animation_fall import FallAnimation
from gemcascade.components.animation_refill import RefillAnimation
from gemcascade.components.duration import Duration
from gemcascade.constants import FRAME_DT

ANIMATION_KINDS = (SwapAnimation, FadeAnimation, FallAnimation, RefillAnimation)


class AnimationSystem:
    """Advances animation descriptors; each animation is its own entity.

    Phase sequencing belongs to the match engine. This system only moves
    ``progress`` toward 1.0 and never removes a descriptor on its own.
    """
    def __init__(self, world: World):
        self.world = world

    def advance(self, dt: float | None = None) -> bool:
        """Move every unfinished descriptor forward by ``dt`` seconds. Returns True if anything moved."""
        step = FRAME_DT if dt is None else float(dt)
        if step <= 0.0:
            return False
        moved = False
        for kind in ANIMATION_KINDS:
            for _, (anim, duration) in self.world.get_components(kind, Duration):
                if anim.progress >= 1.0:
                    continue
                if duration.value <= 0.0:
                    anim.progress = 1.0
                else:
                    anim.progress = min(1.0, anim.progress + step / duration.value)
                moved = True
        return moved

    def active(self) -> List[object]:
        items: List[object] = []
        for kind in ANIMATION_KINDS:
            items.extend(anim for _, anim in self.world.get_component(kind))
        return items

    def all_complete(self) -> bool:
        return all(anim.progress >= 1.0 for anim in self.active())

    def clear(self) -> int:
        """Delete every animation entity. Returns how many were removed."""
        ents = {ent for kind in ANIMATION_KINDS for ent, _ in self.world.get_component(kind)}
        for ent in ents:
            self.world.delete_entity(ent, immediate=True)
        return len(ents)
