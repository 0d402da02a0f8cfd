"""Shared fixtures for the tab deck tests."""

import sys

import pytest

sys.path.insert(0, '.')

from tabdeck.config.settings import DeckConfig
from tabdeck.core.deck import Deck
from tabdeck.core.events import EventBus, EventRecorder
from tabdeck.core.geometry import DeckGeometry
from tabdeck.core.types import PointerAction, PointerEvent, VisualState
from tabdeck.engine import CompactLayout, PositionStateEngine


class ManualClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def pointer(action: str, axis: float, orthogonal: float = 0.0, t: float = 0.0,
            pointer_id: int = 1) -> PointerEvent:
    return PointerEvent(pointer_id, PointerAction[action.upper()], axis, orthogonal, t)


def positions(deck: Deck):
    return [item.tag.position for item in deck]


def states(deck: Deck):
    return [item.tag.state for item in deck]


def assert_stacks_consistent(deck: Deck):
    """No end-stacked item before a floating one, at most one item atop the start stack."""
    floating = [i.tag.position for i in deck if i.tag.state is VisualState.FLOATING]
    end_stacked = [i.tag.position for i in deck if i.tag.state is VisualState.STACKED_END]
    if floating and end_stacked:
        assert min(end_stacked) >= max(floating)
    atop = [i for i in deck if i.tag.state is VisualState.STACKED_START_ATOP]
    assert len(atop) <= 1


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def compact(recorder, clock):
    """Five card compact deck in a 1000x600 container, first card selected."""
    config = DeckConfig()
    deck = Deck(5)
    events = EventBus()
    events.subscribe(recorder)
    engine = PositionStateEngine(deck, CompactLayout(deck, config), events, config, clock)
    engine.set_geometry(DeckGeometry.from_config(config, 1000, 600))
    engine.relayout()
    recorder.clear()
    return engine
