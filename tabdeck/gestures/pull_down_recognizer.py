"""
Pull down gesture revealing the hidden switcher.
"""

import logging
import time
from typing import Callable, Optional

from ..config.settings import DeckConfig
from ..core.deck import Deck
from ..core.events import EventBus, PulledDown
from ..core.types import PointerEvent, TouchArea
from .gesture_tracker import GestureTracker
from .touch_arbiter import GestureRecognizer

logger = logging.getLogger(__name__)


class PullDownRecognizer(GestureRecognizer):
    """Reports one PulledDown per gesture dragging toward the end of the axis."""

    def __init__(self, deck: Deck, events: EventBus, touch_area: Optional[TouchArea] = None,
                 config: Optional[DeckConfig] = None,
                 clock: Callable[[], float] = time.monotonic,
                 priority: int = GestureRecognizer.MAX_PRIORITY):
        super().__init__(priority, touch_area, config)
        self.deck = deck
        self.events = events
        self.tracker = GestureTracker(self.config.PULL_DOWN_THRESHOLD, clock)
        self.pulled = False

    def is_dragging_allowed(self) -> bool:
        return not self.deck.shown and self.deck.selected_index != -1

    def is_dragging(self) -> bool:
        return not self.tracker.is_reset and self.tracker.has_threshold_been_reached()

    def on_down(self, event: PointerEvent):
        self.tracker.update(event.axis_position)

    def on_drag(self, event: PointerEvent):
        self.tracker.update(event.axis_position)
        distance = self.tracker.distance
        if self.tracker.has_threshold_been_reached() and distance > 0 and not self.pulled:
            self.pulled = True
            logger.debug(f"Pulled down by {distance:.1f}px")
            self.events.emit(PulledDown(distance))

    def on_up(self, event: Optional[PointerEvent]):
        self.tracker.reset()
        self.pulled = False
