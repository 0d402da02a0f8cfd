"""
Utilities package for pointer velocity and event logging.
"""

from .velocity import VelocityTracker
from .logger import DeckLogger

__all__ = [
    'VelocityTracker',
    'DeckLogger'
]
