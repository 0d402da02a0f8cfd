"""
Priority based routing of pointer events to competing gesture recognizers.
"""

import logging
import sys
from typing import Dict, Iterator, List, Optional, Tuple

from ..config.settings import DeckConfig
from ..core.types import PointerAction, PointerEvent, TouchArea
from ..utils.velocity import VelocityTracker

logger = logging.getLogger(__name__)


class GestureRecognizer:
    """Base class of the recognizers a TouchArbiter dispatches to.

    Tracks the pointer that started the gesture and its velocity. Subclasses
    implement the ``on_*`` hooks and ``is_dragging``.
    """

    MAX_PRIORITY = sys.maxsize
    MIN_PRIORITY = -sys.maxsize - 1

    def __init__(self, priority: int = 0, touch_area: Optional[TouchArea] = None,
                 config: Optional[DeckConfig] = None):
        if not self.MIN_PRIORITY <= priority <= self.MAX_PRIORITY:
            raise ValueError(f"The priority must be between {self.MIN_PRIORITY} and "
                             f"{self.MAX_PRIORITY}, got {priority}")
        self.priority = priority
        self.touch_area = touch_area
        self.config = config or DeckConfig()
        self.velocity_tracker = VelocityTracker(self.config.VELOCITY_SAMPLE_CAPACITY,
                                                self.config.VELOCITY_HORIZON_MS)
        self.pointer_id = -1

    def get_touch_area(self) -> Optional[TouchArea]:
        """Area the recognizer responds to, None for the whole surface."""
        return self.touch_area

    def is_inside_touch_area(self, event: PointerEvent) -> bool:
        area = self.get_touch_area()
        return area is None or area.contains(event)

    def handle_event(self, event: PointerEvent) -> bool:
        """Process an event, returning whether it was accepted."""
        if not self.is_inside_touch_area(event) or not self.is_dragging_allowed():
            return False

        self.on_touch_event()

        if event.action is PointerAction.DOWN:
            self._handle_down(event)
        elif event.action is PointerAction.MOVE:
            if event.pointer_id == self.pointer_id:
                self._track(event)
                self.on_drag(event)
            else:
                # Another pointer took over, end the current gesture first
                self.release(None)
                self._handle_down(event)
        elif event.action is PointerAction.UP:
            if event.pointer_id == self.pointer_id:
                self._track(event)
                self.release(event)
            else:
                logger.debug(f"{type(self).__name__}: ignoring up of unknown pointer {event.pointer_id}")
        return True

    def _handle_down(self, event: PointerEvent):
        self.pointer_id = event.pointer_id
        self.velocity_tracker.clear()
        self._track(event)
        self.on_down(event)

    def _track(self, event: PointerEvent):
        self.velocity_tracker.add(event.timestamp, event.axis_position, event.orthogonal_position)

    def compute_velocity(self) -> Tuple[float, float]:
        """(axis, orthogonal) pointer velocity in pixels per second."""
        return self.velocity_tracker.compute(self.config.MAX_FLING_VELOCITY)

    def release(self, event: Optional[PointerEvent] = None):
        """End the gesture. ``event`` is None for synthetic releases."""
        self.on_up(event)
        self.pointer_id = -1

    def is_dragging_allowed(self) -> bool:
        return True

    def is_dragging(self) -> bool:
        return False

    def on_touch_event(self):
        pass

    def on_down(self, event: PointerEvent):
        pass

    def on_drag(self, event: PointerEvent):
        pass

    def on_up(self, event: Optional[PointerEvent]):
        pass


class TouchArbiter:
    """Routes each pointer event so that at most one recognizer drags at a time.

    Recognizers are grouped by priority, higher first, keeping insertion
    order within a group. Recognizers accepting an event without dragging
    become candidates; the first candidate that starts dragging becomes the
    exclusive holder and every other candidate receives a synthetic release.
    """

    def __init__(self):
        self._groups: Dict[int, List[GestureRecognizer]] = {}
        self.dragging: Optional[GestureRecognizer] = None
        self.candidates: List[GestureRecognizer] = []

    def __iter__(self) -> Iterator[GestureRecognizer]:
        for priority in sorted(self._groups, reverse=True):
            yield from list(self._groups[priority])

    def __contains__(self, recognizer):
        return any(r is recognizer for r in self)

    def add(self, recognizer: GestureRecognizer):
        group = self._groups.setdefault(recognizer.priority, [])
        if recognizer not in group:
            group.append(recognizer)
            logger.debug(f"Added {type(recognizer).__name__} with priority {recognizer.priority}")

    def remove(self, recognizer: GestureRecognizer):
        """Unregister a recognizer, releasing it first if it is part of a gesture."""
        if recognizer is self.dragging or recognizer in self.candidates:
            recognizer.release(None)
        if recognizer is self.dragging:
            self.dragging = None
        if recognizer in self.candidates:
            self.candidates.remove(recognizer)

        group = self._groups.get(recognizer.priority, [])
        if recognizer in group:
            group.remove(recognizer)
            if not group:
                del self._groups[recognizer.priority]
            logger.debug(f"Removed {type(recognizer).__name__}")

    def _release_all(self):
        for recognizer in ([self.dragging] if self.dragging else []) + self.candidates:
            recognizer.release(None)
        self.dragging = None
        self.candidates = []

    def _promote(self, recognizer: GestureRecognizer):
        for other in self.candidates:
            if other is not recognizer:
                other.release(None)
        self.candidates = []
        self.dragging = recognizer
        logger.debug(f"{type(recognizer).__name__} started dragging")

    def _end_of_gesture(self, event: PointerEvent):
        if event.action is PointerAction.UP:
            self.dragging = None
            self.candidates = []

    def dispatch(self, event: PointerEvent) -> bool:
        """Route one event, returning whether any recognizer accepted it."""
        if event.action is PointerAction.DOWN and (self.dragging or self.candidates):
            logger.debug("New gesture while another one is active, releasing it")
            self._release_all()

        if self.dragging is not None:
            holder = self.dragging
            if not holder.is_inside_touch_area(event):
                handled = False
                holder.release(event)
            else:
                handled = holder.handle_event(event)
                if not handled:
                    holder.release(None)
            if not handled or not holder.is_dragging():
                self.dragging = None
            if handled:
                self._end_of_gesture(event)
                return True

        handled = False

        if self.candidates:
            for candidate in list(self.candidates):
                if candidate.handle_event(event):
                    handled = True
                if event.action is not PointerAction.UP and candidate.is_dragging():
                    self._promote(candidate)
                    break
            if handled:
                self._end_of_gesture(event)
                return True

        tried = list(self.candidates)
        for recognizer in self:
            if any(recognizer is c for c in tried):
                continue
            if recognizer.handle_event(event):
                handled = True
                if event.action is PointerAction.UP:
                    continue
                self.candidates.append(recognizer)
                if recognizer.is_dragging():
                    self._promote(recognizer)
                    break

        self._end_of_gesture(event)
        return handled
