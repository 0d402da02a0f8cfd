#!/usr/bin/env python3
"""
Tab Deck - Main Entry Point
Drives a deck of tab cards from a touchscreen and logs what happens.
"""

import logging
import sys
import time

from tabdeck.config.settings import DeckConfig
from tabdeck.core.deck import Deck
from tabdeck.core.events import EventBus
from tabdeck.core.geometry import DeckGeometry
from tabdeck.core.listener import TouchListener
from tabdeck.engine import CompactLayout, PositionStateEngine
from tabdeck.gestures import TabSwitchRecognizer, TouchArbiter
from tabdeck.gestures.deck_drag_recognizer import DeckDragRecognizer
from tabdeck.utils.logger import DeckLogger


def main():
    """Main entry point for the tab deck listener."""
    logging.basicConfig(level=logging.INFO)
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 6

    config = DeckConfig()
    deck = Deck(count)
    events = EventBus()
    deck_logger = DeckLogger(config.DEBUG_LOG_FILE)
    events.subscribe(deck_logger)

    engine = PositionStateEngine(deck, CompactLayout(deck, config), events, config)
    drag = DeckDragRecognizer(engine)
    arbiter = TouchArbiter()
    arbiter.add(TabSwitchRecognizer(deck, events, config=config))
    arbiter.add(drag)

    listener = TouchListener(arbiter, config=config)
    listener.add_ticker(drag.fling.tick)

    if not listener.start():
        deck_logger.close()
        return

    info = listener.device_manager.get_device_info()
    if config.DRAG_AXIS == 'y':
        container, orthogonal = info['screen_height'], info['screen_width']
    else:
        container, orthogonal = info['screen_width'], info['screen_height']
    with listener.state_lock:
        engine.set_geometry(DeckGeometry.from_config(config, container, orthogonal))
        engine.relayout()

    try:
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("\n👋 Stopping...")
    finally:
        listener.stop()
        deck_logger.close()


if __name__ == "__main__":
    main()
