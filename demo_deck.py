#!/usr/bin/env python3
"""Interactive tab deck demo with the mouse as pointer.

Drag the deck vertically, fling it, swipe cards sideways to close them and
click a card to select it. Keys: N adds a card, S shows the switcher,
W toggles the wide layout, R relayouts, Q quits.
"""

import os
import sys
import time
from typing import List

import pygame

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "."))

from tabdeck.config.settings import DeckConfig
from tabdeck.core import events as ev
from tabdeck.core.deck import Deck
from tabdeck.core.geometry import DeckGeometry
from tabdeck.core.types import PointerAction, PointerEvent, TouchArea, VisualState
from tabdeck.engine import CompactLayout, PositionStateEngine, WideLayout
from tabdeck.gestures import PullDownRecognizer, TabSwitchRecognizer, TouchArbiter
from tabdeck.gestures.deck_drag_recognizer import DeckDragRecognizer
from tabdeck.utils.logger import DeckLogger


class DeckDemo:
    """pygame window rendering a deck driven by the gesture engine."""

    WIDTH = 900
    HEIGHT = 1200
    CHROME = 60
    CARD_HEIGHT = 420

    STATE_COLORS = {
        VisualState.FLOATING: (70, 130, 180),
        VisualState.STACKED_START: (100, 100, 140),
        VisualState.STACKED_START_ATOP: (140, 100, 180),
        VisualState.STACKED_END: (90, 150, 110),
        VisualState.HIDDEN: (60, 60, 60),
    }

    def __init__(self, count: int = 8) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.WIDTH, self.HEIGHT))
        pygame.display.set_caption("Tab Deck Demo")

        self.config = DeckConfig()
        self.deck = Deck(count)
        self.events = ev.EventBus()
        self.pending: List[ev.DeckEvent] = []
        self.events.subscribe(self.pending.append)
        self.logger = DeckLogger(self.config.DEBUG_LOG_FILE)
        self.events.subscribe(self.logger)

        self.wide = False
        self.tilt = 0.0
        self.pointer_down = False

        # Colors
        self.BLACK = (0, 0, 0)
        self.WHITE = (255, 255, 255)
        self.GRAY = (128, 128, 128)

        # Fonts
        self.font = pygame.font.Font(None, 40)
        self.small_font = pygame.font.Font(None, 28)

        self.build_engine()

    def build_engine(self) -> None:
        """Create the layout, engine and recognizers for the current mode."""
        if self.wide:
            self.deck.shown = True
            layout = WideLayout(self.deck, self.config)
            geometry = DeckGeometry.from_config(
                self.config, self.HEIGHT - self.CHROME, self.WIDTH,
                chrome_size=self.CHROME, item_size=160, item_offset=20)
        else:
            layout = CompactLayout(self.deck, self.config)
            geometry = DeckGeometry.from_config(
                self.config, self.HEIGHT - self.CHROME, self.WIDTH, chrome_size=self.CHROME)

        self.engine = PositionStateEngine(self.deck, layout, self.events, self.config)
        self.engine.set_geometry(geometry)
        self.drag = DeckDragRecognizer(self.engine)

        self.arbiter = TouchArbiter()
        self.arbiter.add(TabSwitchRecognizer(self.deck, self.events, wide=self.wide,
                                             config=self.config))
        if not self.wide:
            toolbar = TouchArea(0, self.CHROME, 0, self.WIDTH)
            self.arbiter.add(PullDownRecognizer(self.deck, self.events, toolbar, self.config))
        self.arbiter.add(self.drag)

        self.relayout()

    def relayout(self) -> None:
        if not self.deck.is_empty():
            self.engine.relayout()

    def run(self) -> None:
        """Run the demo loop."""
        clock = pygame.time.Clock()
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.pointer_down = True
                    self.dispatch(PointerAction.DOWN, event.pos)
                elif event.type == pygame.MOUSEMOTION and self.pointer_down:
                    self.dispatch(PointerAction.MOVE, event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    self.pointer_down = False
                    self.dispatch(PointerAction.UP, event.pos)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_q:
                        return
                    self.handle_key(event.key)

            self.drag.fling.tick()
            self.handle_pending()
            self.draw()
            clock.tick(60)

    def dispatch(self, action: PointerAction, pos) -> None:
        x, y = pos
        self.arbiter.dispatch(PointerEvent(1, action, float(y), float(x), time.monotonic()))
        self.handle_pending()

    def handle_key(self, key) -> None:
        if key == pygame.K_n:
            self.deck.add()
            self.relayout()
        elif key == pygame.K_s:
            self.deck.shown = True
            self.relayout()
        elif key == pygame.K_w:
            self.wide = not self.wide
            self.build_engine()
        elif key == pygame.K_r:
            self.relayout()

    def handle_pending(self) -> None:
        """React to deck events once the gesture step that produced them is over."""
        events, self.pending[:] = list(self.pending), []
        for event in events:
            if isinstance(event, (ev.TiltStart, ev.TiltEnd)):
                self.tilt = event.angle
            elif isinstance(event, (ev.RevertOvershootStart, ev.RevertOvershootEnd)):
                self.tilt = 0.0
            elif isinstance(event, ev.SwipeEnded) and event.remove:
                self.deck.remove(event.item.index)
                self.relayout()
            elif isinstance(event, ev.Clicked) and not event.item.is_action_slot:
                offset = 1 if self.deck.has_action_slot else 0
                self.deck.select(event.item.index - offset)
                if not self.wide:
                    self.deck.shown = False
            elif isinstance(event, ev.SwitchingBetweenTabsEnded) and event.selection_changed:
                self.deck.select(event.selected_index)
                self.relayout()
            elif isinstance(event, ev.PulledDown):
                self.deck.shown = True
                self.relayout()

    def draw(self) -> None:
        self.screen.fill(self.BLACK)
        pygame.draw.rect(self.screen, self.GRAY, (0, 0, self.WIDTH, self.CHROME))

        if self.deck.shown:
            self.draw_deck()
        elif self.deck.selected_index != -1:
            title = self.deck.item(self.deck.selected_item_index).title
            text = self.font.render(f"{title} (pull the toolbar down)", True, self.WHITE)
            self.screen.blit(text, (40, self.HEIGHT // 2))

        mode = "wide" if self.wide else "compact"
        info = f"{mode} | {len(self.deck)} items | tilt {self.tilt:.1f} | {self.engine.drag_state.value}"
        self.screen.blit(self.small_font.render(info, True, self.BLACK), (20, 20))
        pygame.display.flip()

    def draw_deck(self) -> None:
        swipe = self.engine.swipe
        height = 160 if self.wide else self.CARD_HEIGHT
        for item in reversed(self.deck.items):
            if item.tag.state is VisualState.HIDDEN:
                continue
            top = int(self.engine.layout.view_position(item))
            left = 40
            if swipe.item is item:
                left += int(swipe.offset)
            rect = pygame.Rect(left, top, self.WIDTH - 80, height)
            pygame.draw.rect(self.screen, self.STATE_COLORS[item.tag.state], rect, border_radius=12)
            pygame.draw.rect(self.screen, self.WHITE, rect, 2, border_radius=12)

            label = item.title or "action"
            if item.index == self.deck.selected_item_index:
                label += " *"
            self.screen.blit(self.small_font.render(label, True, self.WHITE), (left + 16, top + 12))

    def close(self) -> None:
        self.logger.close()
        pygame.quit()


if __name__ == "__main__":
    demo = DeckDemo()
    try:
        demo.run()
    finally:
        demo.close()
