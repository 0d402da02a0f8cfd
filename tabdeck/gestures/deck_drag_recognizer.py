"""
Pointer semantics of the deck itself: press, drag, swipe, fling and tap.
"""

import logging
import time
from typing import Callable, Optional, Tuple

from ..config.settings import DeckConfig
from ..core.events import (Clicked, EventBus, PressEnded, PressStarted,
                           RevertOvershootEnd, RevertOvershootStart)
from ..core.types import DragState, Item, PointerEvent
from ..engine.fling import FlingController
from ..engine.position_engine import PositionStateEngine
from .touch_arbiter import GestureRecognizer

logger = logging.getLogger(__name__)


class DeckDragRecognizer(GestureRecognizer):
    """Drives a PositionStateEngine from the pointer stream.

    Registered at the lowest priority so that the more specific recognizers
    get the first chance at a gesture.
    """

    def __init__(self, engine: PositionStateEngine, events: Optional[EventBus] = None,
                 config: Optional[DeckConfig] = None,
                 clock: Callable[[], float] = time.monotonic,
                 priority: int = GestureRecognizer.MIN_PRIORITY):
        super().__init__(priority, None, config or engine.config)
        self.engine = engine
        self.events = events or engine.events
        self.fling = FlingController(engine, self.events, clock, on_finished=self._on_fling_done)
        self.pressed_item: Optional[Item] = None

    @property
    def deck(self):
        return self.engine.deck

    def get_touch_area(self):
        if self.engine.geometry is None:
            return None
        return self.engine.layout.touch_area()

    def is_dragging_allowed(self) -> bool:
        return (self.engine.geometry is not None and self.deck.shown and
                not self.deck.is_empty())

    def is_dragging(self) -> bool:
        return self.engine.is_dragging()

    def on_touch_event(self):
        self.fling.cancel()

    def on_down(self, event: PointerEvent):
        item = self.engine.focused_item(event.axis_position)
        if item is not None:
            self.pressed_item = item
            self.events.emit(PressStarted(item))

    def on_drag(self, event: PointerEvent):
        if self.pressed_item is not None and not self.is_inside_touch_area(event):
            self._end_press()
        self.engine.handle_drag(event.axis_position, event.orthogonal_position)

    def on_up(self, event: Optional[PointerEvent]):
        state = self.engine.drag_state
        fling = None

        if state is DragState.SWIPE:
            velocity = abs(self.compute_velocity()[1]) if event is not None else 0.0
            self.engine.swipe.end(velocity)
        elif state in (DragState.DRAG_TO_START, DragState.DRAG_TO_END):
            if event is not None and self.engine.drag_tracker.has_threshold_been_reached():
                fling = self._fling_parameters(state)
        elif state is DragState.OVERSHOOT_END:
            self.events.emit(RevertOvershootEnd())
        elif state is DragState.OVERSHOOT_START:
            self.events.emit(RevertOvershootStart())
        elif event is not None:
            item = self.engine.focused_item(event.axis_position)
            if item is not None:
                logger.debug(f"Tap on {item}")
                self.events.emit(Clicked(item))

        self._end_press()
        self.engine.reset_dragging()

        if fling is not None:
            self.fling.start(*fling)

    def _fling_parameters(self, state: DragState) -> Optional[Tuple[float, int]]:
        """Fling distance and duration for the release velocity, None when too slow."""
        velocity = abs(self.compute_velocity()[0])
        if velocity <= self.config.MIN_FLING_VELOCITY:
            return None

        distance = self.config.FLING_DISTANCE_FACTOR * velocity
        if state is DragState.DRAG_TO_START:
            distance = -distance
        duration = round(abs(distance) / velocity * 1000)
        return distance, duration

    def _end_press(self):
        if self.pressed_item is not None:
            self.events.emit(PressEnded(self.pressed_item))
            self.pressed_item = None

    def _on_fling_done(self):
        self.release(None)
