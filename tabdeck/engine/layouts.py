"""
Layout strategies supplying the stacking and spacing formulas of a deck.

Positions are measured along the dragging axis from the start edge. Item 0
is the front-most item and holds the largest position; higher indices move
toward the start edge.
"""

import logging
import math
from typing import List, Optional, Tuple

from ..config.settings import DeckConfig
from ..core.deck import Deck
from ..core.geometry import DeckGeometry
from ..core.types import Item, TouchArea, VisualState

logger = logging.getLogger(__name__)

PositionAndState = Tuple[float, VisualState]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def state_of(item: Optional[Item]) -> Optional[VisualState]:
    return item.tag.state if item is not None else None


class LayoutStrategy:
    """Boundary and spacing formulas shared by the position engine passes.

    Subclasses provide the start/end stack positions and the successor and
    predecessor spacing; optional bounds default to None (no bound).
    """

    name = 'layout'

    def __init__(self, deck: Deck, config: Optional[DeckConfig] = None):
        self.deck = deck
        self.config = config or DeckConfig()
        self.geometry: Optional[DeckGeometry] = None

    def set_geometry(self, geometry: DeckGeometry):
        geometry.validate()
        self.geometry = geometry

    def require_geometry(self) -> DeckGeometry:
        if self.geometry is None:
            raise RuntimeError(f"The {self.name} layout has no geometry, call set_geometry() first")
        return self.geometry

    # Stack boundaries

    def stack_start(self, count: int, index: int,
                    predecessor_state: Optional[VisualState]) -> PositionAndState:
        raise NotImplementedError

    def stack_end(self, index: int) -> PositionAndState:
        raise NotImplementedError

    def clip(self, index: int, position: float,
             predecessor_state: Optional[VisualState]) -> PositionAndState:
        """Clamp a raw position into the stacks of an item and derive its state."""
        start_position, start_state = self.stack_start(self.deck.count, index, predecessor_state)
        if position <= start_position:
            return start_position, start_state

        end_position, end_state = self.stack_end(index)
        if position >= end_position:
            return end_position, end_state

        return position, VisualState.FLOATING

    def min_start_position(self, index: int) -> Optional[float]:
        return None

    def max_end_position(self, index: int) -> Optional[float]:
        return None

    def attached_position(self) -> Optional[float]:
        return None

    # Spacing

    def successor_position(self, item: Item, predecessor: Item) -> float:
        raise NotImplementedError

    def predecessor_position(self, item: Item, successor: Item) -> float:
        raise NotImplementedError

    def is_overshooting_at_start(self) -> bool:
        return False

    def is_overshooting_at_end(self) -> bool:
        return False

    # Layout passes and hit testing

    def initial_layout(self, first_visible_index: int = -1,
                       first_visible_position: float = -1) -> int:
        raise NotImplementedError

    def focused_item(self, position: float) -> Optional[Item]:
        raise NotImplementedError

    def touch_area(self) -> Optional[TouchArea]:
        return None

    def swipe_threshold_reached(self, offset: float) -> bool:
        return False

    def swipe_position(self) -> float:
        """Orthogonal offset at which a swiped item has left the container."""
        return self.require_geometry().orthogonal_size

    def view_position(self, item: Item) -> float:
        """Position of an item in container coordinates, chrome and padding included."""
        geometry = self.require_geometry()
        return item.tag.position + geometry.chrome_size + geometry.padding_start

    @staticmethod
    def _apply(item: Item, pair: PositionAndState):
        item.tag.position, item.tag.state = pair


class CompactLayout(LayoutStrategy):
    """Single-axis phone style deck with non-linear spacing and overshoot."""

    name = 'compact'

    def __init__(self, deck: Deck, config: Optional[DeckConfig] = None):
        if deck.has_action_slot:
            raise ValueError("The compact layout does not support an action slot")
        super().__init__(deck, config)

    def max_spacing(self, item: Optional[Item] = None) -> float:
        """Maximum spacing between an item and its predecessor.

        The selected item gets more room once the deck is large enough.
        """
        geometry = self.require_geometry()
        count = self.deck.count

        if geometry.max_spacing is not None:
            spacing = geometry.max_spacing
        else:
            spacing = geometry.container_size * self.config.max_spacing_fraction(count)

        if (count >= self.config.SELECTED_SPACING_MIN_COUNT and item is not None and
                item.index == self.deck.selected_item_index):
            spacing *= self.config.SELECTED_SPACING_RATIO
        return spacing

    def min_spacing(self) -> float:
        geometry = self.require_geometry()
        if geometry.min_spacing is not None:
            return geometry.min_spacing
        return self.max_spacing(None) * self.config.MIN_SPACING_RATIO

    def attached_position(self) -> float:
        geometry = self.require_geometry()
        if geometry.attached_position is not None:
            return geometry.attached_position
        return geometry.container_size * self.config.attached_position_fraction(self.deck.count)

    def non_linear_position(self, predecessor_position: float, max_spacing: float) -> float:
        """Position behind a predecessor, compressed as the predecessor nears the start."""
        attached = self.attached_position()
        ratio = min(1.0, predecessor_position / attached) if attached > 0 else 1.0
        min_spacing = self.min_spacing()
        return predecessor_position - min_spacing - ratio * (max_spacing - min_spacing)

    def end_position(self, index: int) -> float:
        """Largest resting position of an item when the deck is fully spread."""
        count = self.deck.count
        default_spacing = self.max_spacing(None)
        selected = self.deck.selected_item_index

        if selected > index:
            selected_spacing = self.max_spacing(self.deck.item(selected))
            return (count - 2 - index) * default_spacing + selected_spacing
        return (count - 1 - index) * default_spacing

    def stack_start(self, count, index, predecessor_state):
        geometry = self.require_geometry()
        stacked = geometry.stacked_item_count
        atop = predecessor_state is None or predecessor_state is VisualState.FLOATING

        if count - index <= stacked:
            position = geometry.stacked_spacing * (count - (index + 1))
            return position, VisualState.STACKED_START_ATOP if atop else VisualState.STACKED_START

        position = geometry.stacked_spacing * stacked
        return position, VisualState.STACKED_START_ATOP if atop else VisualState.HIDDEN

    def stack_end(self, index):
        geometry = self.require_geometry()
        stacked = geometry.stacked_item_count
        edge = geometry.container_size - geometry.item_inset

        if index < stacked:
            return edge - geometry.stacked_spacing * (index + 1), VisualState.STACKED_END
        return edge - geometry.stacked_spacing * stacked, VisualState.HIDDEN

    def max_end_position(self, index):
        return self.end_position(index)

    def successor_position(self, item, predecessor):
        return self.non_linear_position(predecessor.tag.position, self.max_spacing(item))

    def predecessor_position(self, item, successor):
        return successor.tag.position + self.max_spacing(successor)

    def is_overshooting_at_start(self):
        if self.deck.count <= 1:
            return True
        return self.deck.item(0).tag.state is VisualState.STACKED_START_ATOP

    def is_overshooting_at_end(self):
        count = self.deck.count
        if count <= 1:
            return True
        last = self.deck.item(count - 1)
        predecessor = self.deck.item(count - 2)
        return (round_half_up(predecessor.tag.position) >=
                round_half_up(self.max_spacing(last)))

    def _assign_start_tags(self):
        """Give every item the tag it has when the whole deck is stacked at the start."""
        geometry = self.require_geometry()
        count = self.deck.count
        predecessor = None

        for item in self.deck:
            if item.index == 0:
                stacked = geometry.stacked_item_count
                position = geometry.stacked_spacing * (stacked if count > stacked else count - 1)
            else:
                position = -1
            self._apply(item, self.clip(item.index, position, state_of(predecessor)))
            item.tag.closing = False
            predecessor = item

    def initial_layout(self, first_visible_index=-1, first_visible_position=-1):
        """Spread the deck around the selected item (or a remembered first visible item).

        Returns the index of the first visible item, -1 for an empty deck.
        """
        if self.deck.is_empty():
            return -1

        items = self.deck.items
        count = len(items)
        self._assign_start_tags()

        selected = self.deck.selected_item_index
        attached = self.attached_position()
        if first_visible_index != -1 and first_visible_position != -1:
            reference_index, reference_position = first_visible_index, first_visible_position
        else:
            reference_index, reference_position = selected, attached
        self.deck.item(reference_index)
        reference_position = min(self.end_position(reference_index), reference_position)

        first_visible = -1

        for item in items[reference_index:]:
            predecessor = items[item.index - 1] if item.index > 0 else None
            if item.index == count - 1:
                position = 0.0
            elif item.index == reference_index:
                position = reference_position
            else:
                position = self.successor_position(item, predecessor)

            self._apply(item, self.clip(item.index, position, state_of(predecessor)))
            state = item.tag.state

            if first_visible == -1 and state not in (VisualState.STACKED_END, VisualState.HIDDEN):
                first_visible = item.index
            if state in (VisualState.STACKED_START, VisualState.STACKED_START_ATOP):
                break

        overshooting = reference_index == count - 1 or self.is_overshooting_at_end()
        min_spacing = self.min_spacing()
        default_spacing = self.max_spacing(None)
        selected_spacing = self.max_spacing(items[selected])
        current_reference = items[reference_index]

        for index in range(reference_index - 1, -1, -1):
            item = items[index]
            predecessor_state = state_of(items[index - 1]) if index > 0 else None
            current_spacing = self.max_spacing(current_reference)

            if overshooting:
                position = selected_spacing + (count - 1 - index - 1) * default_spacing
                pair = self.clip(index, position, predecessor_state)
            elif reference_position >= attached - current_spacing:
                if index < selected <= reference_index:
                    position = (reference_position + selected_spacing +
                                (reference_index - index - 1) * default_spacing)
                else:
                    position = reference_position + (reference_index - index) * default_spacing
                pair = self.clip(index, position, predecessor_state)
            else:
                successor_position = items[index + 1].tag.position
                denominator = min_spacing + attached - current_spacing
                if denominator > 0:
                    position = attached * (successor_position + min_spacing) / denominator
                else:
                    position = successor_position + current_spacing
                pair = self.clip(index, position, predecessor_state)
                if pair[0] >= attached - current_spacing:
                    current_reference = item
                    reference_position = pair[0]
                    reference_index = index

            self._apply(item, pair)
            if (first_visible == -1 or first_visible > index) and pair[1] is VisualState.FLOATING:
                first_visible = index

        logger.debug(f"Initial compact layout of {count} items, first visible {first_visible}")
        return first_visible

    def focused_item(self, position):
        for item in self.deck:
            if item.tag.state in (VisualState.FLOATING, VisualState.STACKED_START_ATOP):
                if self.view_position(item) <= position:
                    return item
        return None

    def swipe_threshold_reached(self, offset):
        geometry = self.require_geometry()
        return abs(offset) > geometry.orthogonal_size / self.config.SWIPE_REMOVE_DIVISOR


class WideLayout(LayoutStrategy):
    """Tablet style strip of items with an optional action slot at index 0."""

    name = 'wide'

    def item_spacing(self) -> float:
        geometry = self.require_geometry()
        return geometry.item_size - geometry.item_offset

    def action_slot_spacing(self) -> float:
        geometry = self.require_geometry()
        if not self.deck.has_action_slot:
            return 0.0
        return geometry.action_slot_size + geometry.action_slot_offset

    def _tab_offset(self, index: int) -> int:
        return index - 1 if self.deck.has_action_slot else index

    def stack_start(self, count, index, predecessor_state):
        geometry = self.require_geometry()
        stacked = geometry.stacked_item_count
        spacing = geometry.stacked_spacing
        selected = self.deck.selected_item_index
        atop = predecessor_state is None or predecessor_state is VisualState.FLOATING

        if index == 0 and self.deck.has_action_slot:
            position = (spacing * min(count - 2, stacked) + self.item_spacing() +
                        geometry.action_slot_offset)
            return position, VisualState.FLOATING

        if index == selected:
            return spacing * min(count - (index + 1), stacked), VisualState.STACKED_START_ATOP

        if index < selected:
            # Parked behind the pinned selected item, never atop it
            base = spacing * min(count - (selected + 1), stacked)
            if selected - index < stacked:
                return base + spacing * (selected - index), VisualState.STACKED_START
            return base + spacing * stacked, VisualState.HIDDEN

        if count - index <= stacked:
            position = spacing * (count - (index + 1))
            return position, VisualState.STACKED_START_ATOP if atop else VisualState.STACKED_START
        return spacing * stacked, VisualState.STACKED_START_ATOP if atop else VisualState.HIDDEN

    def stack_end(self, index):
        geometry = self.require_geometry()
        stacked = geometry.stacked_item_count
        spacing = geometry.stacked_spacing
        width = geometry.container_size
        selected = self.deck.selected_item_index
        i = self._tab_offset(index)
        front = width - self.action_slot_spacing() - self.item_spacing()

        if index == 0 and self.deck.has_action_slot:
            return width - geometry.action_slot_size, VisualState.STACKED_END

        if index == selected:
            return front - spacing * min(stacked, i), VisualState.STACKED_END

        if index < selected:
            if i < stacked:
                return front - spacing * i, VisualState.STACKED_END
            return front - spacing * stacked, VisualState.HIDDEN

        selected_position = front - spacing * min(stacked, self.deck.selected_index)
        if index <= selected + stacked:
            return selected_position - spacing * (index - selected), VisualState.STACKED_END
        return selected_position - spacing * stacked, VisualState.HIDDEN

    def min_start_position(self, index):
        geometry = self.require_geometry()
        width = geometry.container_size

        if (self.deck.count - 1) * self.item_spacing() < width:
            return self.max_end_position(index)

        if index == 0 and self.deck.has_action_slot:
            return width - geometry.action_slot_size

        i = index if self.deck.has_action_slot else index + 1
        return width - self.action_slot_spacing() - self.item_spacing() * i

    def max_end_position(self, index):
        geometry = self.require_geometry()
        if index == 0 and self.deck.has_action_slot:
            return self.deck.tab_count * self.item_spacing() + geometry.action_slot_offset

        i = index if self.deck.has_action_slot else index + 1
        return (self.deck.tab_count - i) * self.item_spacing()

    def successor_position(self, item, predecessor):
        position = predecessor.tag.position - self.item_spacing()
        if predecessor.is_action_slot:
            position -= self.require_geometry().action_slot_offset
        return position

    def predecessor_position(self, item, successor):
        return successor.tag.position + self.item_spacing()

    def initial_layout(self, first_visible_index=-1, first_visible_position=-1):
        """Place every item at its maximum end position, or around a remembered item."""
        if self.deck.count == 0:
            return -1

        items: List[Item] = self.deck.items
        has_reference = first_visible_index != -1 and first_visible_position != -1
        reference_index = first_visible_index if has_reference else 0
        if has_reference:
            self.deck.item(reference_index)

        first_visible = -1
        for item in items[reference_index:]:
            predecessor = items[item.index - 1] if item.index > 0 else None
            if has_reference and item.index == reference_index:
                position = first_visible_position
            else:
                position = self.max_end_position(item.index)
            self._apply(item, self.clip(item.index, position, state_of(predecessor)))
            item.tag.closing = False
            if first_visible == -1 and item.tag.state is VisualState.FLOATING:
                first_visible = item.index

        if has_reference and reference_index > 0:
            reference = items[reference_index]
            for index in range(reference_index - 1, -1, -1):
                item = items[index]
                predecessor_state = state_of(items[index - 1]) if index > 0 else None
                position = reference.tag.position + (reference_index - index) * self.item_spacing()
                self._apply(item, self.clip(index, position, predecessor_state))
                item.tag.closing = False
                if item.tag.state is VisualState.FLOATING:
                    first_visible = index

        logger.debug(f"Initial wide layout of {len(items)} items, first visible {first_visible}")
        return first_visible

    def _extent(self, item: Item) -> float:
        geometry = self.require_geometry()
        return geometry.action_slot_size if item.is_action_slot else geometry.item_size

    def focused_item(self, position):
        items = self.deck.items
        selected = self.deck.selected_item_index

        for item in items:
            successor = items[item.index + 1] if item.index + 1 < len(items) else None
            state = item.tag.state
            successor_floating = (successor is not None and
                                  successor.tag.state is VisualState.FLOATING)

            if (state in (VisualState.FLOATING, VisualState.STACKED_START_ATOP) or
                    (state is VisualState.STACKED_END and successor_floating)):
                if self.view_position(item) <= position:
                    if (successor is not None and
                            successor.tag.state is VisualState.STACKED_START_ATOP and
                            successor.index == selected and
                            self.view_position(successor) + self._extent(successor) >= position):
                        return successor
                    return item
        return None

    def touch_area(self):
        geometry = self.require_geometry()
        return TouchArea(geometry.padding_start,
                         geometry.padding_start + geometry.container_size,
                         geometry.orthogonal_padding_start,
                         geometry.orthogonal_padding_start + geometry.orthogonal_size)
