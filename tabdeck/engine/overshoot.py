"""
Overshoot of the compact deck past its resting boundaries.
"""

import logging
import time
from typing import Callable, Optional

from ..config.settings import DeckConfig
from ..core.deck import Deck
from ..core.events import EventBus, OvershootStarted, TiltEnd, TiltStart
from ..gestures.gesture_tracker import GestureTracker
from .layouts import LayoutStrategy

logger = logging.getLogger(__name__)


def clamp_ratio(ratio: float) -> float:
    return max(0.0, min(1.0, ratio))


class OvershootHandler:
    """Measures overshoot-only distance and turns it into movement and tilt.

    Uses a secondary tracker with a zero threshold. Once the tilt saturates,
    the tracker distance is pinned and the returned drag threshold is moved
    so that further dragging leaves the angle capped.
    """

    def __init__(self, deck: Deck, layout: LayoutStrategy, events: EventBus,
                 config: Optional[DeckConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.deck = deck
        self.layout = layout
        self.events = events
        self.config = config or DeckConfig()
        self.tracker = GestureTracker(0, clock)

    @property
    def max_distance(self) -> float:
        return self.config.MAX_OVERSHOOT_DISTANCE

    def _start_distance(self) -> float:
        """Part of the start overshoot that moves item 0 before the deck tilts."""
        count = self.deck.count
        if count >= self.layout.require_geometry().stacked_item_count:
            return self.max_distance
        if count > 1:
            return self.max_distance / count
        return 0.0

    def on_overshoot_start(self, drag_position: float, threshold: float) -> float:
        """Handle a drag beyond the start boundary, returning the new start threshold."""
        self.tracker.update(drag_position)
        distance = self.tracker.get_drag_distance()
        if distance >= 0:
            return threshold

        start_distance = self._start_distance()
        overshoot = abs(distance)

        if overshoot <= start_distance:
            ratio = clamp_ratio(overshoot / start_distance)
            first = self.deck.item(0)
            position = first.tag.position - first.tag.position * ratio
            self.events.emit(OvershootStarted(position))
            return threshold

        ratio = (overshoot - start_distance) / self.max_distance
        if ratio >= 1:
            self.tracker.set_min_drag_distance(distance)
            threshold = drag_position + self.max_distance + start_distance
            logger.debug(f"Start overshoot saturated, threshold moved to {threshold}")
        self.events.emit(TiltStart(clamp_ratio(ratio) * self.config.MAX_START_OVERSHOOT_ANGLE))
        return threshold

    def on_overshoot_end(self, drag_position: float, threshold: float) -> float:
        """Handle a drag beyond the end boundary, returning the new end threshold."""
        self.tracker.update(drag_position)
        distance = self.tracker.get_drag_distance()
        ratio = distance / self.max_distance

        if ratio >= 1:
            self.tracker.set_max_drag_distance(distance)
            threshold = drag_position - self.max_distance
            logger.debug(f"End overshoot saturated, threshold moved to {threshold}")

        if self.deck.count > 1:
            max_angle = self.config.MAX_END_OVERSHOOT_ANGLE
        else:
            max_angle = self.config.MAX_START_OVERSHOOT_ANGLE
        self.events.emit(TiltEnd(clamp_ratio(ratio) * -max_angle))
        return threshold

    def revert(self):
        self.tracker.reset()

    def reset(self):
        self.tracker.reset()
