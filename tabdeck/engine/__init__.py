"""
Deck position engine: layouts, drag state machine, overshoot, fling and swipe.
"""

from .layouts import LayoutStrategy, CompactLayout, WideLayout
from .position_engine import PositionStateEngine
from .overshoot import OvershootHandler
from .fling import DecelerateInterpolator, FlingController
from .swipe import SwipeController

__all__ = [
    'LayoutStrategy',
    'CompactLayout',
    'WideLayout',
    'PositionStateEngine',
    'OvershootHandler',
    'DecelerateInterpolator',
    'FlingController',
    'SwipeController',
]
