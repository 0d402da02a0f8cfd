"""
Threshold based one-dimensional drag tracking.
"""

import time
from typing import Callable, Optional


class GestureTracker:
    """Turns successive positions along one axis into a drag distance.

    The drag only counts once the distance from the start position reaches
    the threshold; from then on the distance is measured from the position
    where the threshold was reached. ``reset()`` is lazy: it only arms a
    flag, so the values of the gesture that just ended stay readable until
    the next ``update()`` begins a new gesture.
    """

    def __init__(self, threshold: float, clock: Callable[[], float] = time.monotonic):
        if threshold < 0:
            raise ValueError(f"The threshold must be at least 0, got {threshold}")

        self.threshold = threshold
        self.clock = clock
        self.pending_reset = False
        self.start_position: float = -1
        self.threshold_reached_position: float = -1
        self.distance: float = 0.0
        self.start_time: Optional[float] = None
        self.reached = False
        self.min_drag_distance: Optional[float] = None
        self.max_drag_distance: Optional[float] = None
        self.reset()

    @property
    def is_reset(self) -> bool:
        return self.pending_reset

    def reset(self, threshold: Optional[float] = None):
        """Arm a reset, applied by the next update. Optionally change the threshold."""
        if threshold is not None:
            if threshold < 0:
                raise ValueError(f"The threshold must be at least 0, got {threshold}")
            self.threshold = threshold
        self.pending_reset = True

    def update(self, position: float):
        """Feed the current position along the tracked axis."""
        if self.pending_reset:
            self.pending_reset = False
            self.distance = 0.0
            self.threshold_reached_position = -1
            self.start_time = None
            self.start_position = position
            self.reached = False
            self.min_drag_distance = None
            self.max_drag_distance = None

        if not self.reached:
            if abs(position - self.start_position) >= self.threshold:
                self.start_time = self.clock()
                self.reached = True
                self.threshold_reached_position = position
        else:
            distance = position - self.threshold_reached_position
            if self.min_drag_distance is not None:
                distance = max(self.min_drag_distance, distance)
            if self.max_drag_distance is not None:
                distance = min(self.max_drag_distance, distance)
            self.distance = distance

    def set_min_drag_distance(self, distance: float):
        """Bound the reported distance from below until the next reset."""
        self.min_drag_distance = distance
        self.distance = max(distance, self.distance)

    def set_max_drag_distance(self, distance: float):
        """Bound the reported distance from above until the next reset."""
        self.max_drag_distance = distance
        self.distance = min(distance, self.distance)

    def has_threshold_been_reached(self) -> bool:
        return self.reached

    def get_drag_distance(self) -> float:
        return self.distance

    def get_drag_start_position(self) -> float:
        return self.start_position

    def get_drag_speed(self) -> float:
        """Absolute distance per millisecond since the threshold was reached, -1 before."""
        if not self.reached:
            return -1
        elapsed = (self.clock() - self.start_time) * 1000
        return abs(self.distance) / max(elapsed, 1.0)
