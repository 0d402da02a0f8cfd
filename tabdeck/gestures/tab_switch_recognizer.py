"""
Orthogonal swipe that switches to the neighbouring tab.
"""

import logging
import time
from typing import Callable, Optional

from ..config.settings import DeckConfig
from ..core.deck import Deck
from ..core.events import EventBus, SwitchingBetweenTabs, SwitchingBetweenTabsEnded
from ..core.types import PointerEvent, TouchArea
from .gesture_tracker import GestureTracker
from .touch_arbiter import GestureRecognizer

logger = logging.getLogger(__name__)


class TabSwitchRecognizer(GestureRecognizer):
    """Switches between tabs while the switcher is hidden, or always on wide decks."""

    def __init__(self, deck: Deck, events: EventBus, wide: bool = False,
                 touch_area: Optional[TouchArea] = None, config: Optional[DeckConfig] = None,
                 clock: Callable[[], float] = time.monotonic,
                 priority: int = GestureRecognizer.MAX_PRIORITY):
        super().__init__(priority, touch_area, config)
        self.deck = deck
        self.events = events
        self.wide = wide
        self.tracker = GestureTracker(self.config.TAB_SWITCH_THRESHOLD, clock)
        self.selected_index = -1

    def is_dragging_allowed(self) -> bool:
        return (self.wide or not self.deck.shown) and self.deck.selected_index != -1

    def is_dragging(self) -> bool:
        return not self.tracker.is_reset and self.tracker.has_threshold_been_reached()

    def on_down(self, event: PointerEvent):
        self.tracker.update(event.orthogonal_position)

    def on_drag(self, event: PointerEvent):
        self.tracker.update(event.orthogonal_position)
        if not self.tracker.has_threshold_been_reached():
            return

        if self.selected_index == -1:
            self.selected_index = self.deck.selected_index
        self.events.emit(SwitchingBetweenTabs(self.selected_index, self.tracker.distance))

    def on_up(self, event: Optional[PointerEvent]):
        if self.selected_index != -1:
            self._end_switch(event)
        self.tracker.reset()

    def _end_switch(self, event: Optional[PointerEvent]):
        previous = self.selected_index
        distance = self.tracker.distance
        velocity = abs(self.compute_velocity()[1]) if event is not None else 0.0
        min_velocity = self.config.MIN_SWIPE_VELOCITY
        threshold = self.config.TAB_SWITCH_THRESHOLD_FACTOR * self.config.SWIPED_TAB_DISTANCE

        index = previous
        if velocity >= min_velocity or abs(distance) > threshold:
            index = previous + 1 if distance > 0 else previous - 1
            index = max(0, min(self.deck.tab_count - 1, index))

        self.selected_index = -1
        logger.debug(f"Tab switch from {previous} to {index}")
        self.events.emit(SwitchingBetweenTabsEnded(
            index, previous, index != previous, velocity if velocity >= min_velocity else 0.0))
