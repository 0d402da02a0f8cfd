"""
Core data types shared by the gesture recognizers and the position engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class VisualState(Enum):
    """Discrete visual state of an item within the deck."""
    FLOATING = 'floating'
    STACKED_START = 'stacked_start'
    STACKED_START_ATOP = 'stacked_start_atop'
    STACKED_END = 'stacked_end'
    HIDDEN = 'hidden'


class DragState(Enum):
    """State of the drag gesture currently applied to the deck."""
    NONE = 'none'
    DRAG_TO_START = 'drag_to_start'
    DRAG_TO_END = 'drag_to_end'
    OVERSHOOT_START = 'overshoot_start'
    OVERSHOOT_END = 'overshoot_end'
    SWIPE = 'swipe'


class ItemKind(Enum):
    CARD = 'card'
    ACTION_SLOT = 'action_slot'


class PointerAction(Enum):
    DOWN = 'down'
    MOVE = 'move'
    UP = 'up'


@dataclass(frozen=True)
class PointerEvent:
    """A single pointer sample, already projected onto the deck axes."""
    pointer_id: int
    action: PointerAction
    axis_position: float
    orthogonal_position: float
    timestamp: float


@dataclass(frozen=True)
class TouchArea:
    """Rectangle in (axis, orthogonal) coordinates a recognizer responds to."""
    axis_start: float
    axis_end: float
    orthogonal_start: float
    orthogonal_end: float

    def contains(self, event: PointerEvent) -> bool:
        """Check whether an event lies inside the area, edges included."""
        return (self.axis_start <= event.axis_position <= self.axis_end and
                self.orthogonal_start <= event.orthogonal_position <= self.orthogonal_end)


@dataclass
class Tag:
    """Mutable layout data of an item, written only by the position engine."""
    position: float = 0.0
    state: VisualState = VisualState.HIDDEN
    closing: bool = False

    def snapshot(self):
        return self.position, self.state


@dataclass
class Item:
    """One slot of the deck: a card or the action slot."""
    index: int
    kind: ItemKind = ItemKind.CARD
    closeable: bool = True
    tag: Tag = field(default_factory=Tag)
    title: Optional[str] = None

    @property
    def is_action_slot(self) -> bool:
        return self.kind is ItemKind.ACTION_SLOT

    @property
    def is_visible(self) -> bool:
        return self.tag.state is not VisualState.HIDDEN

    def __repr__(self):
        return (f"Item({self.index}, {self.kind.value}, "
                f"{self.tag.position:.1f}, {self.tag.state.value})")
