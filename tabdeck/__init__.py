"""
Tab Deck Package
Gesture recognition and position engine for a deck of tab cards.
"""

from .config.settings import DeckConfig
from .core.deck import Deck
from .core.geometry import DeckGeometry
from .core.events import EventBus
from .engine import CompactLayout, WideLayout, PositionStateEngine
from .gestures import TouchArbiter
from .gestures.deck_drag_recognizer import DeckDragRecognizer

__version__ = "1.0.0"
__all__ = ["DeckConfig", "Deck", "DeckGeometry", "EventBus", "CompactLayout", "WideLayout",
           "PositionStateEngine", "TouchArbiter", "DeckDragRecognizer"]
