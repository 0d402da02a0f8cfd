"""
Configuration settings for the tab deck engine.
"""

class DeckConfig:
    """Configuration constants for deck gestures, stacking and animation."""

    # Gesture thresholds (in pixels)
    DRAG_THRESHOLD = 12
    SWIPE_THRESHOLD = 12
    PULL_DOWN_THRESHOLD = 12
    TAB_SWITCH_THRESHOLD = 12
    SWIPED_TAB_DISTANCE = 16
    TAB_SWITCH_THRESHOLD_FACTOR = 4

    # Velocities (in pixels per second)
    MIN_FLING_VELOCITY = 50
    MAX_FLING_VELOCITY = 8000
    MIN_SWIPE_VELOCITY = 600
    FLING_DISTANCE_FACTOR = 0.25

    # Stacks
    STACKED_ITEM_COUNT = 3
    STACKED_SPACING = 10
    ITEM_INSET = 0

    # Non-linear spacing (compact layout)
    SELECTED_SPACING_RATIO = 1.5
    SELECTED_SPACING_MIN_COUNT = 5
    MIN_SPACING_RATIO = 0.375
    MAX_SPACING_FRACTIONS = {1: 0.66, 2: 0.66, 3: 0.33, 4: 0.3}
    DEFAULT_MAX_SPACING_FRACTION = 0.25
    ATTACHED_POSITION_FRACTIONS = {3: 0.66, 4: 0.6}
    DEFAULT_ATTACHED_POSITION_FRACTION = 0.5

    # Overshoot
    MAX_OVERSHOOT_DISTANCE = 48
    MAX_START_OVERSHOOT_ANGLE = 3.0
    MAX_END_OVERSHOOT_ANGLE = 2.0

    # Swipe to remove
    SWIPE_REMOVE_DIVISOR = 6
    NON_CLOSEABLE_SWIPE_EXPONENT = 0.75

    # Velocity tracking
    VELOCITY_SAMPLE_CAPACITY = 20
    VELOCITY_HORIZON_MS = 100

    # Input mapping: which screen axis items are dragged along
    DRAG_AXIS = 'y'

    # Fling playback tick (in milliseconds)
    FLING_TICK_INTERVAL = 16

    DEBUG_LOG_FILE = 'deck_debug.log'

    def __init__(self, **overrides):
        for name, value in overrides.items():
            if not name.isupper() or not hasattr(type(self), name):
                raise ValueError(f"Unknown configuration setting: {name}")
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
                raise ValueError(f"{name} must be at least 0, got {value}")
            setattr(self, name, value)

        if self.DRAG_AXIS not in ('x', 'y'):
            raise ValueError(f"DRAG_AXIS must be 'x' or 'y', got {self.DRAG_AXIS!r}")

    def max_spacing_fraction(self, count: int) -> float:
        """Fraction of the container size used as maximum item spacing."""
        return self.MAX_SPACING_FRACTIONS.get(max(count, 1), self.DEFAULT_MAX_SPACING_FRACTION)

    def attached_position_fraction(self, count: int) -> float:
        """Fraction of the container size at which spacing saturates."""
        return self.ATTACHED_POSITION_FRACTIONS.get(count, self.DEFAULT_ATTACHED_POSITION_FRACTION)
