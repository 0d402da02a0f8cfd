#!/usr/bin/env python3
"""Tests for routing pointer events between competing recognizers."""

import sys

import pytest

from conftest import pointer
from tabdeck.core.types import TouchArea
from tabdeck.gestures.touch_arbiter import GestureRecognizer, TouchArbiter


class FakeRecognizer(GestureRecognizer):
    """Records its hooks and starts dragging after a number of moves."""

    def __init__(self, name, priority=0, drag_after=None, touch_area=None, allowed=True):
        super().__init__(priority, touch_area)
        self.name = name
        self.drag_after = drag_after
        self.allowed = allowed
        self.calls = []
        self.moves = 0
        self.dragging = False

    def is_dragging_allowed(self):
        return self.allowed

    def is_dragging(self):
        return self.dragging

    def on_down(self, event):
        self.moves = 0
        self.calls.append(('down', event.axis_position))

    def on_drag(self, event):
        self.moves += 1
        self.calls.append(('drag', event.axis_position))
        if self.drag_after is not None and self.moves >= self.drag_after:
            self.dragging = True

    def on_up(self, event):
        self.calls.append(('up', None if event is None else event.axis_position))
        self.dragging = False


def test_iteration_by_descending_priority_then_insertion():
    arbiter = TouchArbiter()
    low = FakeRecognizer('low', 0)
    high = FakeRecognizer('high', 10)
    mid_a = FakeRecognizer('mid_a', 5)
    mid_b = FakeRecognizer('mid_b', 5)
    for recognizer in (low, high, mid_a, mid_b):
        arbiter.add(recognizer)
    arbiter.add(low)

    assert [r.name for r in arbiter] == ['high', 'mid_a', 'mid_b', 'low']


def test_priority_range_checked():
    with pytest.raises(ValueError):
        FakeRecognizer('bad', sys.maxsize + 1)
    FakeRecognizer('max', GestureRecognizer.MAX_PRIORITY)
    FakeRecognizer('min', GestureRecognizer.MIN_PRIORITY)


def test_first_dragging_candidate_wins_and_others_are_released():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', 10, drag_after=2)
    b = FakeRecognizer('b', 0, drag_after=5)
    arbiter.add(a)
    arbiter.add(b)

    assert arbiter.dispatch(pointer('down', 0))
    assert arbiter.dispatch(pointer('move', 10))
    assert arbiter.dispatch(pointer('move', 20))
    assert arbiter.dragging is a
    assert arbiter.dispatch(pointer('move', 30))
    assert arbiter.dispatch(pointer('up', 40))

    assert b.calls == [('down', 0), ('drag', 10), ('up', None)]
    assert a.calls == [('down', 0), ('drag', 10), ('drag', 20), ('drag', 30), ('up', 40)]
    assert arbiter.dragging is None
    assert arbiter.candidates == []


def test_recognizer_outside_touch_area_is_skipped():
    arbiter = TouchArbiter()
    toolbar = FakeRecognizer('toolbar', touch_area=TouchArea(0, 100, 0, 100))
    arbiter.add(toolbar)

    assert not arbiter.dispatch(pointer('down', 200, 50))
    assert toolbar.calls == []


def test_holder_leaving_touch_area_is_released():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', drag_after=1, touch_area=TouchArea(0, 100, 0, 100))
    arbiter.add(a)

    arbiter.dispatch(pointer('down', 50, 50))
    arbiter.dispatch(pointer('move', 60, 50))
    assert arbiter.dragging is a

    assert not arbiter.dispatch(pointer('move', 150, 50))
    assert arbiter.dragging is None
    assert a.calls[-1] == ('up', 150)


def test_disallowed_recognizer_never_sees_events():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', allowed=False)
    arbiter.add(a)

    assert not arbiter.dispatch(pointer('down', 0))
    assert a.calls == []


def test_new_down_releases_active_gesture():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', drag_after=1)
    arbiter.add(a)

    arbiter.dispatch(pointer('down', 0))
    arbiter.dispatch(pointer('move', 10))
    arbiter.dispatch(pointer('down', 50, pointer_id=2))

    assert a.calls[-2:] == [('up', None), ('down', 50)]
    assert a.pointer_id == 2


def test_remove_releases_holder():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', drag_after=1)
    arbiter.add(a)
    arbiter.dispatch(pointer('down', 0))
    arbiter.dispatch(pointer('move', 10))

    arbiter.remove(a)

    assert a.calls[-1] == ('up', None)
    assert a not in arbiter
    assert arbiter.dragging is None


def test_up_of_unknown_pointer_is_ignored():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a')
    arbiter.add(a)

    arbiter.dispatch(pointer('down', 0))
    arbiter.dispatch(pointer('up', 5, pointer_id=7))

    assert a.calls == [('down', 0)]


def test_remove_releases_candidate():
    arbiter = TouchArbiter()
    a = FakeRecognizer('a', 10)
    b = FakeRecognizer('b', 0)
    arbiter.add(a)
    arbiter.add(b)

    arbiter.dispatch(pointer('down', 0))
    assert arbiter.candidates == [a, b]

    arbiter.remove(b)

    assert b.calls == [('down', 0), ('up', None)]
    assert arbiter.candidates == [a]
    assert a.calls == [('down', 0)]
