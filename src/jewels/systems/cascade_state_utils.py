from esper import World

from jewels.components.animation_swap import SwapAnimation
from jewels.components.cascade_state import CascadeState
from jewels.components.tile_state import TilePhase, TileState


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


def board_busy(world: World) -> bool:
    """True while a swap, an animation or a cascade is in flight."""
    if get_or_create_cascade_state(world).active:
        return True
    if list(world.get_component(SwapAnimation)):
        return True
    return any(state.phase is not TilePhase.IDLE for _, state in world.get_component(TileState))
