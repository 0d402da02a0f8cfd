"""
Pointer velocity estimation over a ring buffer of recent samples.
"""

from typing import Optional, Tuple

import numpy as np


class VelocityTracker:
    """Keeps the most recent (time, axis, orthogonal) samples of one gesture.

    Velocities are the least-squares slope of position over time for the
    samples that fall within the horizon before the newest sample, in pixels
    per second.
    """

    def __init__(self, capacity: int = 20, horizon_ms: float = 100):
        if capacity < 2:
            raise ValueError(f"The capacity must be at least 2, got {capacity}")
        self.capacity = capacity
        self.horizon = horizon_ms / 1000.0
        self.samples = np.zeros((capacity, 3), dtype=float)
        self.size = 0
        self.head = 0

    def clear(self):
        self.size = 0
        self.head = 0

    def add(self, timestamp: float, axis_position: float, orthogonal_position: float):
        """Record a sample; the oldest one is dropped once the buffer is full."""
        self.samples[self.head] = (timestamp, axis_position, orthogonal_position)
        self.head = (self.head + 1) % self.capacity
        self.size = min(self.size + 1, self.capacity)

    def _recent(self) -> np.ndarray:
        if self.size < self.capacity:
            window = self.samples[:self.size]
        else:
            window = np.roll(self.samples, -self.head, axis=0)
        newest = window[-1, 0]
        return window[window[:, 0] >= newest - self.horizon]

    def compute(self, max_velocity: Optional[float] = None) -> Tuple[float, float]:
        """Return (axis, orthogonal) velocity, clamped to +-max_velocity."""
        if self.size < 2:
            return 0.0, 0.0

        window = self._recent()
        if len(window) < 2:
            return 0.0, 0.0

        times = window[:, 0] - window[0, 0]
        if np.ptp(times) <= 0:
            return 0.0, 0.0

        axis_velocity = float(np.polyfit(times, window[:, 1], 1)[0])
        orthogonal_velocity = float(np.polyfit(times, window[:, 2], 1)[0])

        if max_velocity is not None:
            axis_velocity = float(np.clip(axis_velocity, -max_velocity, max_velocity))
            orthogonal_velocity = float(np.clip(orthogonal_velocity, -max_velocity, max_velocity))

        return axis_velocity, orthogonal_velocity
