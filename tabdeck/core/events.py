"""
Outbound events of the deck engine and the observer list delivering them.

Every notification the host receives is one of the event classes below.
Hosts subscribe a callable to an ``EventBus`` and dispatch on the event type
(or on its ``kind`` string).
"""

import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional

from .types import Item, VisualState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeckEvent:
    kind: ClassVar[str] = 'event'


@dataclass(frozen=True)
class ItemChanged(DeckEvent):
    """An item received a new position and/or state."""
    kind: ClassVar[str] = 'item_changed'
    item: Item
    position: float
    state: VisualState


@dataclass(frozen=True)
class OvershootStarted(DeckEvent):
    kind: ClassVar[str] = 'overshoot_start'
    position: float


@dataclass(frozen=True)
class TiltStart(DeckEvent):
    kind: ClassVar[str] = 'tilt_start'
    angle: float


@dataclass(frozen=True)
class TiltEnd(DeckEvent):
    kind: ClassVar[str] = 'tilt_end'
    angle: float


@dataclass(frozen=True)
class RevertOvershootStart(DeckEvent):
    kind: ClassVar[str] = 'revert_overshoot_start'


@dataclass(frozen=True)
class RevertOvershootEnd(DeckEvent):
    kind: ClassVar[str] = 'revert_overshoot_end'


@dataclass(frozen=True)
class FlingStarted(DeckEvent):
    kind: ClassVar[str] = 'fling_started'
    distance: float
    duration_ms: int


@dataclass(frozen=True)
class FlingCancelled(DeckEvent):
    kind: ClassVar[str] = 'fling_cancelled'


@dataclass(frozen=True)
class FlingFinished(DeckEvent):
    kind: ClassVar[str] = 'fling_finished'


@dataclass(frozen=True)
class Swiped(DeckEvent):
    kind: ClassVar[str] = 'swipe'
    item: Item
    distance: float


@dataclass(frozen=True)
class SwipeEnded(DeckEvent):
    """Release of a swiped item.

    ``direction`` is -1 when the item was swiped toward the orthogonal start
    and 1 otherwise. ``duration_ms`` is only set for removals released with
    a velocity.
    """
    kind: ClassVar[str] = 'swipe_ended'
    item: Item
    remove: bool
    velocity: float
    direction: int = 1
    duration_ms: Optional[int] = None


@dataclass(frozen=True)
class Clicked(DeckEvent):
    kind: ClassVar[str] = 'click'
    item: Item


@dataclass(frozen=True)
class PressStarted(DeckEvent):
    kind: ClassVar[str] = 'press_started'
    item: Item


@dataclass(frozen=True)
class PressEnded(DeckEvent):
    kind: ClassVar[str] = 'press_ended'
    item: Item


@dataclass(frozen=True)
class SwitchingBetweenTabs(DeckEvent):
    kind: ClassVar[str] = 'switching_between_tabs'
    selected_index: int
    distance: float


@dataclass(frozen=True)
class SwitchingBetweenTabsEnded(DeckEvent):
    kind: ClassVar[str] = 'switching_between_tabs_ended'
    selected_index: int
    previous_index: int
    selection_changed: bool
    velocity: float


@dataclass(frozen=True)
class PulledDown(DeckEvent):
    kind: ClassVar[str] = 'pulled_down'
    distance: float


Listener = Callable[[DeckEvent], None]


class EventBus:
    """Observer list for deck events, notified in subscription order."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: DeckEvent):
        logger.debug(f"Emitting {event.kind}: {event}")
        for listener in list(self._listeners):
            listener(event)


class EventRecorder:
    """Listener collecting every event, handy for hosts that poll."""

    def __init__(self):
        self.events: List[DeckEvent] = []

    def __call__(self, event: DeckEvent):
        self.events.append(event)

    def of_type(self, event_type) -> List[DeckEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self):
        self.events.clear()
