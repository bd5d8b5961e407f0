import logging
from typing import Callable, List

from esper import World

from jewels.animation_factory import AnimationFactory, set_tile_phase
from jewels.components.animation_fade import FadeAnimation
from jewels.components.animation_fall import FallAnimation
from jewels.components.animation_refill import RefillAnimation
from jewels.components.animation_swap import SwapAnimation
from jewels.components.duration import Duration
from jewels.components.tile_state import TilePhase
from jewels.constants import SWAP_DURATION
from jewels.events.bus import (EVENT_TICK, EventBus, EVENT_ANIMATION_START, EVENT_ANIMATION_COMPLETE,
                               EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_DO, EVENT_TILE_SWAP_FINALIZE)

logger = logging.getLogger(__name__)

# Grace period after EVENT_TILE_SWAP_DO before the swap entity is dropped without a finalize.
FINALIZE_GRACE = 0.05


class AnimationSystem:
    """Drives timing of animations; each animation is its own component instance.

    Swaps always commit: the swap plays forward, asks the board to exchange the tiles
    and ends once the board confirms with EVENT_TILE_SWAP_FINALIZE. Fade, fall and
    refill animations run as groups and report EVENT_ANIMATION_COMPLETE once the
    slowest member of the group is done.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.swap_entity: int | None = None
        self.factory = AnimationFactory(world)
        self._finalize_wait_elapsed: float = 0.0
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)

    def _active_swap(self) -> SwapAnimation | None:
        if self.swap_entity is None:
            return None
        try:
            return self.world.component_for_entity(self.swap_entity, SwapAnimation)
        except KeyError:
            return None

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src'); dst = kwargs.get('dst')
        if not src or not dst:
            return
        if self._active_swap() is None:
            self.swap_entity = self.factory.create_swap(src, dst)

    def on_swap_finalize(self, sender, **kwargs):
        swap = self._active_swap()
        if swap and (swap.src, swap.dst) == (kwargs.get('src'), kwargs.get('dst')) and swap.phase == 'finalize_wait':
            self._end_swap()

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind'); items = kwargs.get('items', [])
        if not items:
            return
        if kind == 'fade':
            self.factory.create_fade_group(items)
        elif kind == 'fall':
            self.factory.create_fall_group(items)
        elif kind == 'refill':
            self.factory.create_refill_group(items)
        else:
            logger.warning("Unknown animation kind %r", kind)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self._advance_swap(dt)
        self._advance_group(
            FadeAnimation, dt, 'fade',
            step=self._step_fade,
            report=lambda fade: fade.pos,
            cells=lambda fade: fade.pos,
            phase=TilePhase.CLEARING,
        )
        self._advance_group(
            FallAnimation, dt, 'fall',
            step=self._step_linear,
            report=lambda fall: {'from': fall.src, 'to': fall.dst},
            cells=lambda fall: fall.dst,
            phase=TilePhase.FALLING,
        )
        self._advance_group(
            RefillAnimation, dt, 'refill',
            step=self._step_linear,
            report=lambda refill: refill.pos,
            cells=lambda refill: refill.pos,
            phase=TilePhase.FALLING,
        )

    @staticmethod
    def _step_fade(fade: FadeAnimation, amount: float) -> bool:
        fade.alpha = max(0.0, fade.alpha - amount)
        return fade.alpha <= 0.0

    @staticmethod
    def _step_linear(anim, amount: float) -> bool:
        anim.linear = min(1.0, anim.linear + amount)
        return anim.linear >= 1.0

    def _advance_group(self, component_type, dt: float, kind: str, *, step: Callable, report: Callable,
                       cells: Callable, phase: TilePhase) -> None:
        members = list(self.world.get_component(component_type))
        if not members:
            return
        finished = True
        for ent, anim in members:
            duration = self.world.component_for_entity(ent, Duration)
            finished = step(anim, dt / duration.value) and finished
        if not finished:
            return
        items: List = [report(anim) for _, anim in members]
        for ent, _ in members:
            self._delete_animation_entity(ent)
        set_tile_phase(self.world, [cells(anim) for _, anim in members], TilePhase.IDLE, only_from=phase)
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=items)

    def _advance_swap(self, dt: float) -> None:
        swap = self._active_swap()
        if not swap:
            return
        if swap.phase == 'forward':
            try:
                dur = self.world.component_for_entity(self.swap_entity, Duration)
            except KeyError:
                dur = Duration(SWAP_DURATION)
            swap.progress += dt / dur.value
            if swap.progress >= 1.0:
                swap.progress = 1.0
                swap.phase = 'finalize_wait'
                logger.debug("Swap animation finished %s <-> %s", swap.src, swap.dst)
                self.event_bus.emit(EVENT_TILE_SWAP_DO, src=swap.src, dst=swap.dst)
        elif swap.phase == 'finalize_wait':
            # Nobody confirmed the swap (no board system listening); drop it after a short grace.
            self._finalize_wait_elapsed += dt
            if self._finalize_wait_elapsed >= FINALIZE_GRACE:
                self._end_swap()

    def _end_swap(self):
        swap = self._active_swap()
        if swap is not None:
            set_tile_phase(self.world, (swap.src, swap.dst), TilePhase.IDLE, only_from=TilePhase.SWAPPING)
        if self.swap_entity is not None:
            self._delete_animation_entity(self.swap_entity)
        self.swap_entity = None
        self._finalize_wait_elapsed = 0.0

    def _delete_animation_entity(self, ent: int):
        """Remove every component of an animation entity; esper drops the emptied entity."""
        try:
            components = self.world.components_for_entity(ent)
        except KeyError:
            return
        for component in components:
            self.world.remove_component(ent, type(component))
