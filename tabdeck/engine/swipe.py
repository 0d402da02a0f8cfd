"""
Orthogonal swipe of a single item toward removal.
"""

import logging
import math
from typing import Optional

from ..config.settings import DeckConfig
from ..core.events import EventBus, SwipeEnded, Swiped
from ..core.types import Item
from .layouts import LayoutStrategy

logger = logging.getLogger(__name__)


class SwipeController:
    """Follows the swiped item and decides between removal and snapping back."""

    def __init__(self, layout: LayoutStrategy, events: EventBus,
                 config: Optional[DeckConfig] = None):
        self.layout = layout
        self.events = events
        self.config = config or DeckConfig()
        self.item: Optional[Item] = None
        self.offset = 0.0

    def damped_offset(self, item: Item, distance: float) -> float:
        """Non-closeable items resist the finger."""
        if item.closeable:
            return distance
        return math.copysign(abs(distance) ** self.config.NON_CLOSEABLE_SWIPE_EXPONENT, distance)

    def swipe(self, item: Item, distance: float):
        """Move the swiped item to an orthogonal distance from its origin."""
        if self.item is not item:
            self.item = item
            item.tag.closing = True
            logger.debug(f"Swiping {item}")

        self.offset = self.damped_offset(item, distance)
        self.events.emit(Swiped(item, self.offset))

    def is_threshold_reached(self) -> bool:
        return self.layout.swipe_threshold_reached(self.offset)

    def end(self, velocity: float) -> Optional[SwipeEnded]:
        """Release the swiped item with an absolute orthogonal velocity."""
        item = self.item
        if item is None:
            return None

        min_velocity = self.config.MIN_SWIPE_VELOCITY
        remove = item.closeable and (velocity >= min_velocity or self.is_threshold_reached())
        velocity = velocity if velocity >= min_velocity else 0.0
        direction = -1 if self.offset < 0 else 1

        duration = None
        if remove and velocity > 0:
            duration = round(self.layout.swipe_position() / velocity * 1000)

        item.tag.closing = remove
        event = SwipeEnded(item, remove, velocity, direction, duration)
        self.item = None
        self.offset = 0.0
        self.events.emit(event)
        return event

    def cancel(self):
        if self.item is not None:
            self.item.tag.closing = False
        self.item = None
        self.offset = 0.0
