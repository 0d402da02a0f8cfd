"""
The deck: ordered sequence of items, selection and switcher visibility.
"""

import logging
from typing import Iterator, List, Optional, Sequence

from .types import Item, ItemKind

logger = logging.getLogger(__name__)


class Deck:
    """Owns the ordered items of a tab deck.

    Card indices are contiguous and start at 0, or at 1 when the deck shows
    an action slot, which is always the item at index 0. The selected index
    refers to cards only; ``selected_item_index`` translates it to an item
    index.
    """

    def __init__(self, count: int = 0, selected_index: Optional[int] = None,
                 action_slot: bool = False, closeable: Sequence[bool] = (),
                 titles: Sequence[str] = ()):
        if count < 0:
            raise ValueError(f"The item count must be at least 0, got {count}")

        self.items: List[Item] = []
        self.shown = True

        if action_slot:
            self.items.append(Item(0, ItemKind.ACTION_SLOT, closeable=False))

        for i in range(count):
            self.items.append(Item(
                len(self.items),
                ItemKind.CARD,
                closeable=closeable[i] if i < len(closeable) else True,
                title=titles[i] if i < len(titles) else f"Tab {i + 1}",
            ))

        self._selected_index = -1
        if count > 0:
            self.select(0 if selected_index is None else selected_index)

    def __len__(self):
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    @property
    def has_action_slot(self) -> bool:
        return bool(self.items) and self.items[0].is_action_slot

    @property
    def count(self) -> int:
        """Number of items, the action slot included."""
        return len(self.items)

    @property
    def tab_count(self) -> int:
        """Number of cards."""
        return len(self.items) - (1 if self.has_action_slot else 0)

    @property
    def selected_index(self) -> int:
        """Index of the selected card among the cards, -1 if there is none."""
        return self._selected_index

    @property
    def selected_item_index(self) -> int:
        """Item index of the selected card, -1 if there is none."""
        if self._selected_index == -1:
            return -1
        return self._selected_index + (1 if self.has_action_slot else 0)

    def is_empty(self) -> bool:
        return self.tab_count == 0

    def item(self, index: int) -> Item:
        """Return the item at an index, failing fast on stale indices."""
        if index < 0 or index >= len(self.items):
            raise IndexError(f"No item at index {index}, the deck holds {len(self.items)} items")
        return self.items[index]

    def select(self, tab_index: int):
        """Select a card by its card index."""
        if tab_index < 0 or tab_index >= self.tab_count:
            raise IndexError(f"No card at index {tab_index}, the deck holds {self.tab_count} cards")
        self._selected_index = tab_index
        logger.debug(f"Selected card {tab_index}")

    def add(self, closeable: bool = True, title: Optional[str] = None) -> Item:
        """Append a card at the end of the deck."""
        item = Item(len(self.items), ItemKind.CARD, closeable=closeable,
                    title=title or f"Tab {self.tab_count + 1}")
        self.items.append(item)
        if self._selected_index == -1:
            self._selected_index = 0
        return item

    def remove(self, index: int) -> Item:
        """Remove a card and re-index its successors.

        The selection stays on the same card where possible, otherwise it moves
        to the card before the removed one.
        """
        item = self.item(index)
        if item.is_action_slot:
            raise ValueError("The action slot cannot be removed")

        del self.items[index]
        for i, successor in enumerate(self.items[index:], start=index):
            successor.index = i

        offset = 1 if self.has_action_slot else 0
        removed_tab = index - offset
        if self.tab_count == 0:
            self._selected_index = -1
        elif removed_tab < self._selected_index or self._selected_index >= self.tab_count:
            self._selected_index -= 1

        logger.debug(f"Removed item {index}, {self.tab_count} cards left")
        return item
