"""
Gesture recognition for the deck.

This module provides the threshold based drag tracker, the arbiter routing
pointer events to competing recognizers, and the recognizers that work
without the position engine. The deck recognizer itself lives in
``deck_drag_recognizer``, which depends on the engine.
"""

from .gesture_tracker import GestureTracker
from .touch_arbiter import GestureRecognizer, TouchArbiter
from .tab_switch_recognizer import TabSwitchRecognizer
from .pull_down_recognizer import PullDownRecognizer

__all__ = [
    'GestureTracker',
    'GestureRecognizer',
    'TouchArbiter',
    'TabSwitchRecognizer',
    'PullDownRecognizer'
]
