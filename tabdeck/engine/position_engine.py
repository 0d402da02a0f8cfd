"""
Position and visual state engine of the deck.

Turns drag distances along the dragging axis into a (position, state) pair
for every item, handles overshoot past the deck boundaries and hands
orthogonal movement to the swipe controller.
"""

import logging
import math
import time
from typing import Callable, List, Optional, Tuple

from ..config.settings import DeckConfig
from ..core.deck import Deck
from ..core.events import EventBus, ItemChanged
from ..core.geometry import DeckGeometry
from ..core.types import DragState, Item, VisualState
from ..gestures.gesture_tracker import GestureTracker
from .layouts import LayoutStrategy, state_of
from .overshoot import OvershootHandler
from .swipe import SwipeController

logger = logging.getLogger(__name__)


class PositionStateEngine:
    """Recomputes the deck on every drag update.

    The layout strategy supplies the boundary and spacing formulas; the
    engine owns the traversal passes, the drag state machine and the
    ``first_visible_index`` cache. Only the engine writes item tags.
    """

    def __init__(self, deck: Deck, layout: LayoutStrategy, events: Optional[EventBus] = None,
                 config: Optional[DeckConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.deck = deck
        self.layout = layout
        self.events = events or EventBus()
        self.config = config or layout.config
        self.clock = clock

        self.drag_tracker = GestureTracker(self.config.DRAG_THRESHOLD, clock)
        self.swipe_tracker = GestureTracker(self.config.SWIPE_THRESHOLD, clock)
        self.overshoot = OvershootHandler(deck, layout, self.events, self.config, clock)
        self.swipe = SwipeController(layout, self.events, self.config)

        self.first_visible_index = -1
        self.drag_state = DragState.NONE
        self.drag_distance = 0.0
        self.start_overshoot_threshold = -math.inf
        self.end_overshoot_threshold = math.inf
        self.swiped_item: Optional[Item] = None

    @property
    def geometry(self) -> Optional[DeckGeometry]:
        return self.layout.geometry

    def set_geometry(self, geometry: DeckGeometry):
        self.layout.set_geometry(geometry)

    def _snapshot(self) -> List[Tuple[float, VisualState]]:
        return [item.tag.snapshot() for item in self.deck]

    def _emit_changes(self, before: List[Tuple[float, VisualState]]):
        for item, previous in zip(self.deck.items, before):
            if item.tag.snapshot() != previous:
                self.events.emit(ItemChanged(item, item.tag.position, item.tag.state))

    def relayout(self, first_visible_index: int = -1, first_visible_position: float = -1) -> int:
        """Place every item at rest and return the first visible index.

        Call after the geometry or the deck contents changed. Any gesture in
        progress is dropped.
        """
        self.layout.require_geometry()
        self.reset_dragging()
        self.swipe.cancel()

        before = self._snapshot()
        self.first_visible_index = self.layout.initial_layout(first_visible_index,
                                                              first_visible_position)
        self._emit_changes(before)
        return self.first_visible_index

    def update(self, drag_state: DragState, distance: float) -> Optional[DragState]:
        """Move the deck by a drag distance since the previous update.

        Returns OVERSHOOT_END or OVERSHOOT_START when the deck sits at the
        corresponding boundary afterwards, None otherwise.
        """
        self.layout.require_geometry()
        if drag_state not in (DragState.DRAG_TO_START, DragState.DRAG_TO_END):
            raise ValueError(f"Only drag states can update the deck, got {drag_state}")

        if self.deck.is_empty():
            return None

        before = self._snapshot()
        if distance != 0:
            if drag_state is DragState.DRAG_TO_END:
                self._drag_to_end(distance)
            else:
                self._drag_to_start(distance)
        self._emit_changes(before)

        if self.layout.is_overshooting_at_end():
            return DragState.OVERSHOOT_END
        if self.layout.is_overshooting_at_start():
            return DragState.OVERSHOOT_START
        return None

    def _apply_clipped(self, item: Item, position: float, predecessor: Optional[Item]):
        item.tag.position, item.tag.state = self.layout.clip(item.index, position,
                                                             state_of(predecessor))

    def _drag_to_end(self, distance: float):
        items = self.deck.items
        count = len(items)
        self.first_visible_index = -1

        for item in items:
            predecessor = items[item.index - 1] if item.index > 0 else None

            if count - item.index > 1:
                abort = self._drag_item_to_end(distance, item, predecessor)
                if self.first_visible_index == -1 and item.tag.state is VisualState.FLOATING:
                    self.first_visible_index = item.index
                if abort:
                    break
            else:
                self._apply_clipped(item, item.tag.position, predecessor)

    def _drag_item_to_end(self, distance: float, item: Item, predecessor: Optional[Item]) -> bool:
        state = item.tag.state
        max_end = self.layout.max_end_position(item.index)

        if predecessor is None or predecessor.tag.state is not VisualState.FLOATING:
            if ((state is VisualState.STACKED_START_ATOP and item.index == 0) or
                    state is VisualState.FLOATING):
                position = item.tag.position + distance
                if max_end is not None:
                    position = min(max_end, position)
                self._apply_clipped(item, position, predecessor)
            elif state is VisualState.STACKED_START_ATOP:
                return True
        else:
            position = self.layout.successor_position(item, predecessor)
            if max_end is not None:
                position = min(max_end, position)
            self._apply_clipped(item, position, predecessor)
        return False

    def _drag_to_start(self, distance: float):
        items = self.deck.items
        count = len(items)

        for item in items[max(0, self.first_visible_index):]:
            predecessor = items[item.index - 1] if item.index > 0 else None

            if count - item.index > 1:
                if self._drag_item_to_start(distance, item, predecessor):
                    break
            else:
                self._apply_clipped(item, item.tag.position, predecessor)

        if self.first_visible_index > 0:
            self._settle_before_first_visible()

    def _drag_item_to_start(self, distance: float, item: Item, predecessor: Optional[Item]) -> bool:
        state = item.tag.state
        attached = self.layout.attached_position()
        min_start = self.layout.min_start_position(item.index)

        if (predecessor is None or predecessor.tag.state is not VisualState.FLOATING or
                (attached is not None and predecessor.tag.position > attached)):
            if state is VisualState.FLOATING:
                position = item.tag.position + distance
                if min_start is not None:
                    position = max(min_start, position)
                self._apply_clipped(item, position, predecessor)
            elif state is VisualState.STACKED_START_ATOP:
                self._apply_clipped(item, item.tag.position, predecessor)
                return True
            elif state in (VisualState.HIDDEN, VisualState.STACKED_START):
                return True
        else:
            position = self.layout.successor_position(item, predecessor)
            if min_start is not None:
                position = max(min_start, position)
            self._apply_clipped(item, position, predecessor)
        return False

    def _settle_before_first_visible(self):
        """Walk from the first visible item toward index 0, pulling items out of the end stack."""
        items = self.deck.items
        start = self.first_visible_index - 1

        for index in range(start, -1, -1):
            item = items[index]
            successor = items[index + 1]

            if index < start:
                self._apply_clipped(successor, successor.tag.position, item)
                if successor.tag.state is VisualState.FLOATING:
                    self.first_visible_index = successor.index
                else:
                    break

            item.tag.position = self.layout.predecessor_position(item, successor)

            if index == 0:
                self._apply_clipped(item, item.tag.position, None)
                if item.tag.state is VisualState.FLOATING:
                    self.first_visible_index = item.index

    def handle_drag(self, drag_position: float, orthogonal_position: float = 0.0) -> bool:
        """Feed the absolute pointer position of the current gesture.

        Returns whether the deck was dragged.
        """
        self.layout.require_geometry()

        if drag_position <= self.start_overshoot_threshold:
            self._enter_overshoot()
            self.drag_state = DragState.OVERSHOOT_START
            self.start_overshoot_threshold = self.overshoot.on_overshoot_start(
                drag_position, self.start_overshoot_threshold)
        elif drag_position >= self.end_overshoot_threshold:
            self._enter_overshoot()
            self.drag_state = DragState.OVERSHOOT_END
            self.end_overshoot_threshold = self.overshoot.on_overshoot_end(
                drag_position, self.end_overshoot_threshold)
        else:
            self.overshoot.revert()
            previous_distance = 0.0 if self.drag_tracker.is_reset else self.drag_tracker.distance
            self.drag_tracker.update(drag_position)
            self._update_swipe(orthogonal_position)

            if (self.drag_state is not DragState.SWIPE and
                    self.drag_tracker.has_threshold_been_reached()):
                self._update_drag_state(previous_distance)

            if self.drag_state is DragState.SWIPE:
                self.swipe.swipe(self.swiped_item, self.swipe_tracker.distance)
            elif self.drag_state is not DragState.NONE:
                return self._drag(drag_position)
        return False

    def _enter_overshoot(self):
        if not self.drag_tracker.is_reset:
            self.drag_tracker.reset(0)
            self.drag_distance = 0.0

    def _update_swipe(self, orthogonal_position: float):
        self.swipe_tracker.update(orthogonal_position)
        if (self.drag_state is DragState.NONE and
                self.swipe_tracker.has_threshold_been_reached()):
            item = self.focused_item(self.drag_tracker.get_drag_start_position())
            if item is not None and not item.is_action_slot:
                self.drag_state = DragState.SWIPE
                self.swiped_item = item
                logger.debug(f"Swipe started on {item}")

    def _update_drag_state(self, previous_distance: float):
        if self.drag_state is DragState.OVERSHOOT_START:
            self.drag_state = DragState.DRAG_TO_END
        elif self.drag_state is DragState.OVERSHOOT_END:
            self.drag_state = DragState.DRAG_TO_START
        else:
            distance = self.drag_tracker.distance
            if distance == 0:
                self.drag_state = DragState.NONE
            elif previous_distance - distance < 0:
                self.drag_state = DragState.DRAG_TO_END
            else:
                self.drag_state = DragState.DRAG_TO_START

    def _drag(self, drag_position: float) -> bool:
        distance = self.drag_tracker.distance
        delta = distance - self.drag_distance
        self.drag_distance = distance
        overshoot = self.update(self.drag_state, delta)

        if (overshoot is DragState.OVERSHOOT_END and
                self.drag_state in (DragState.DRAG_TO_END, DragState.OVERSHOOT_END)):
            self.end_overshoot_threshold = drag_position
            self.drag_state = DragState.OVERSHOOT_END
        elif (overshoot is DragState.OVERSHOOT_START and
                self.drag_state in (DragState.DRAG_TO_START, DragState.OVERSHOOT_START)):
            self.start_overshoot_threshold = drag_position
            self.drag_state = DragState.OVERSHOOT_START
        return True

    def reset_dragging(self, threshold: Optional[float] = None):
        """Forget the current gesture; the next handle_drag starts a new one."""
        self.drag_state = DragState.NONE
        self.swiped_item = None
        self.drag_distance = 0.0
        self.start_overshoot_threshold = -math.inf
        self.end_overshoot_threshold = math.inf
        self.swipe_tracker.reset()
        self.drag_tracker.reset(self.config.DRAG_THRESHOLD if threshold is None else threshold)
        self.overshoot.reset()

    def is_dragging(self) -> bool:
        return ((not self.drag_tracker.is_reset and self.drag_tracker.has_threshold_been_reached()) or
                (not self.swipe_tracker.is_reset and self.swipe_tracker.has_threshold_been_reached()))

    def focused_item(self, position: float) -> Optional[Item]:
        """Item under a position along the dragging axis, None if there is none."""
        return self.layout.focused_item(position)
