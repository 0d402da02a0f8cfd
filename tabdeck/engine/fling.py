"""
Fling playback: a decelerating synthetic drag after a fast release.
"""

import logging
import time
from typing import Callable, Optional

from ..core.events import EventBus, FlingCancelled, FlingFinished, FlingStarted
from .position_engine import PositionStateEngine

logger = logging.getLogger(__name__)


class DecelerateInterpolator:
    """Maps elapsed fraction t in [0, 1] to travelled fraction, fast then slow."""

    def __init__(self, factor: float = 1.0):
        self.factor = factor

    def __call__(self, t: float) -> float:
        t = max(0.0, min(1.0, t))
        if self.factor == 1.0:
            return 1.0 - (1.0 - t) * (1.0 - t)
        return 1.0 - (1.0 - t) ** (2 * self.factor)


class FlingController:
    """Feeds a fling through the drag state machine of the engine.

    The host drives the playback by calling ``tick()`` from its animation
    loop. Every tick is one absolute drag position, so overshoot applies
    during flings as it does while dragging.
    """

    def __init__(self, engine: PositionStateEngine, events: Optional[EventBus] = None,
                 clock: Callable[[], float] = time.monotonic,
                 on_finished: Optional[Callable[[], None]] = None,
                 interpolator: Optional[DecelerateInterpolator] = None):
        self.engine = engine
        self.events = events or engine.events
        self.clock = clock
        self.on_finished = on_finished
        self.interpolator = interpolator or DecelerateInterpolator()

        self.running = False
        self.distance = 0.0
        self.duration_ms = 0
        self.start_time = 0.0

    def start(self, distance: float, duration_ms: int):
        """Begin a fling over ``distance`` pixels lasting ``duration_ms``."""
        if duration_ms < 0:
            raise ValueError(f"The fling duration must be at least 0, got {duration_ms}")

        self.engine.reset_dragging(0)
        self.distance = distance
        self.duration_ms = duration_ms
        self.start_time = self.clock()
        self.running = True

        logger.debug(f"Fling of {distance:.1f}px over {duration_ms}ms")
        self.events.emit(FlingStarted(distance, duration_ms))
        self.engine.handle_drag(0.0, 0.0)

    def tick(self, now: Optional[float] = None) -> bool:
        """Advance the fling to ``now``; returns whether it is still running."""
        if not self.running:
            return False

        now = self.clock() if now is None else now
        elapsed = (now - self.start_time) * 1000
        fraction = 1.0 if self.duration_ms <= 0 else min(1.0, elapsed / self.duration_ms)

        self.engine.handle_drag(self.distance * self.interpolator(fraction), 0.0)

        if fraction >= 1.0:
            self.running = False
            logger.debug("Fling finished")
            self.events.emit(FlingFinished())
            self._release()
        return self.running

    def cancel(self):
        """Stop a running fling where it is."""
        if not self.running:
            return
        self.running = False
        logger.debug("Fling cancelled")
        self.events.emit(FlingCancelled())
        self._release()

    def _release(self):
        if self.on_finished is not None:
            self.on_finished()
        else:
            self.engine.reset_dragging()
