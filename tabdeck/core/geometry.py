"""
Container geometry supplied by the host for each layout pass.
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple


@dataclass(frozen=True)
class DeckGeometry:
    """Snapshot of the deck container along the dragging and orthogonal axes.

    ``container_size`` and ``orthogonal_size`` exclude padding. ``chrome_size``
    is the space taken by a toolbar in front of the items. The optional
    ``max_spacing``, ``min_spacing`` and ``attached_position`` replace the
    values the compact layout otherwise derives from the container size.
    ``item_size``, ``item_offset``, ``action_slot_size`` and
    ``action_slot_offset`` are only read by the wide layout.
    """
    container_size: float
    orthogonal_size: float
    padding_start: float = 0.0
    padding_end: float = 0.0
    orthogonal_padding_start: float = 0.0
    orthogonal_padding_end: float = 0.0
    stacked_item_count: int = 3
    stacked_spacing: float = 10.0
    item_inset: float = 0.0
    chrome_size: float = 0.0
    max_spacing: Optional[float] = None
    min_spacing: Optional[float] = None
    attached_position: Optional[float] = None
    item_size: float = 0.0
    item_offset: float = 0.0
    action_slot_size: float = 0.0
    action_slot_offset: float = 0.0
    right_to_left: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject negative sizes and spacings."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or value is None:
                continue
            if value < 0:
                raise ValueError(f"Geometry field {f.name} must be at least 0, got {value}")

    @classmethod
    def from_config(cls, config, container_size: float, orthogonal_size: float, **kwargs):
        """Build a geometry using the stack settings of a DeckConfig."""
        kwargs.setdefault('stacked_item_count', config.STACKED_ITEM_COUNT)
        kwargs.setdefault('stacked_spacing', config.STACKED_SPACING)
        kwargs.setdefault('item_inset', config.ITEM_INSET)
        return cls(container_size, orthogonal_size, **kwargs)

    def project(self, x: float, y: float, drag_axis: str = 'y') -> Tuple[float, float]:
        """Map screen coordinates to (axis, orthogonal) coordinates.

        Right-to-left containers mirror the horizontal coordinate.
        """
        if self.right_to_left:
            width = self.container_size if drag_axis == 'x' else self.orthogonal_size
            if drag_axis == 'x':
                width += self.padding_start + self.padding_end
            else:
                width += self.orthogonal_padding_start + self.orthogonal_padding_end
            x = width - x

        if drag_axis == 'x':
            return x, y
        return y, x
