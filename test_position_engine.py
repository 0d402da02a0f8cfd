#!/usr/bin/env python3
"""Tests for the deck position engine, overshoot, fling and swipe."""

import pytest

from conftest import ManualClock, assert_stacks_consistent, positions, states
from tabdeck.config.settings import DeckConfig
from tabdeck.core.deck import Deck
from tabdeck.core.events import (EventBus, EventRecorder, FlingCancelled, FlingFinished,
                                 FlingStarted, ItemChanged, OvershootStarted, SwipeEnded,
                                 Swiped, TiltEnd, TiltStart)
from tabdeck.core.geometry import DeckGeometry
from tabdeck.core.types import DragState, VisualState
from tabdeck.engine import (CompactLayout, DecelerateInterpolator, FlingController,
                            PositionStateEngine, SwipeController, WideLayout)

F = VisualState.FLOATING
ATOP = VisualState.STACKED_START_ATOP
START = VisualState.STACKED_START
END = VisualState.STACKED_END
HIDDEN = VisualState.HIDDEN

REST = [500, 250, 78.125, 10, 0]


def test_engine_without_geometry_fails_fast():
    deck = Deck(3)
    engine = PositionStateEngine(deck, CompactLayout(deck))
    with pytest.raises(RuntimeError):
        engine.update(DragState.DRAG_TO_END, 10)
    with pytest.raises(RuntimeError):
        engine.handle_drag(10)
    with pytest.raises(RuntimeError):
        engine.relayout()


def test_update_rejects_non_drag_states(compact):
    with pytest.raises(ValueError):
        compact.update(DragState.SWIPE, 10)


def test_empty_deck_is_a_no_op(recorder):
    deck = Deck(0)
    events = EventBus()
    events.subscribe(recorder)
    engine = PositionStateEngine(deck, CompactLayout(deck), events)
    engine.set_geometry(DeckGeometry(1000, 600))

    assert engine.update(DragState.DRAG_TO_END, 10) is None
    assert recorder.events == []


def test_relayout_reports_every_changed_item():
    deck = Deck(5)
    recorder = EventRecorder()
    events = EventBus()
    events.subscribe(recorder)
    engine = PositionStateEngine(deck, CompactLayout(deck), events)
    engine.set_geometry(DeckGeometry(1000, 600))

    assert engine.relayout() == 0
    changed = recorder.of_type(ItemChanged)
    assert [e.item.index for e in changed] == [0, 1, 2, 3, 4]
    assert changed[0].position == 500 and changed[0].state is F


def test_zero_distance_changes_nothing(compact, recorder):
    before = [item.tag.snapshot() for item in compact.deck]
    assert compact.update(DragState.DRAG_TO_END, 0) is None
    assert compact.update(DragState.DRAG_TO_START, 0) is None
    assert [item.tag.snapshot() for item in compact.deck] == before
    assert recorder.events == []


def test_drag_to_end_moves_floating_items(compact, recorder):
    assert compact.update(DragState.DRAG_TO_END, 10) is None

    assert positions(compact.deck) == pytest.approx([510, 260, 85, 10, 0])
    assert states(compact.deck) == [F, F, F, ATOP, START]
    assert [e.item.index for e in recorder.of_type(ItemChanged)] == [0, 1, 2]
    assert compact.first_visible_index == 0


def test_drag_round_trip(compact):
    compact.update(DragState.DRAG_TO_END, 10)
    compact.update(DragState.DRAG_TO_START, -10)

    assert positions(compact.deck) == pytest.approx(REST)
    assert states(compact.deck) == [F, F, F, ATOP, START]


def test_drag_to_end_boundary_reports_overshoot(compact):
    assert compact.update(DragState.DRAG_TO_END, 600) is DragState.OVERSHOOT_END

    assert positions(compact.deck) == pytest.approx([990, 750, 500, 250, 0])
    assert states(compact.deck) == [END, F, F, F, ATOP]
    assert compact.first_visible_index == 1


def test_drag_sequence_keeps_stacks_consistent(compact):
    compact.update(DragState.DRAG_TO_END, 600)
    assert_stacks_consistent(compact.deck)

    assert compact.update(DragState.DRAG_TO_START, -600) is None
    assert positions(compact.deck) == pytest.approx([400, 150, 20, 10, 0])
    assert states(compact.deck) == [F, F, ATOP, START, START]
    assert compact.first_visible_index == 0
    assert_stacks_consistent(compact.deck)

    compact.update(DragState.DRAG_TO_START, -300)
    assert positions(compact.deck) == pytest.approx([100, 30, 20, 10, 0])
    assert states(compact.deck) == [F, ATOP, START, START, START]
    assert_stacks_consistent(compact.deck)

    assert compact.update(DragState.DRAG_TO_START, -200) is DragState.OVERSHOOT_START
    assert positions(compact.deck) == pytest.approx([30, 30, 20, 10, 0])
    assert states(compact.deck) == [ATOP, HIDDEN, START, START, START]
    assert_stacks_consistent(compact.deck)

    assert compact.update(DragState.DRAG_TO_END, 50) is None
    assert positions(compact.deck) == pytest.approx([80, 30, 20, 10, 0])
    assert states(compact.deck) == [F, ATOP, START, START, START]
    assert_stacks_consistent(compact.deck)


def test_handle_drag_picks_direction_after_threshold(compact):
    assert not compact.handle_drag(300)
    assert not compact.handle_drag(312)
    assert compact.drag_state is DragState.NONE
    assert compact.is_dragging()

    assert compact.handle_drag(322)
    assert compact.drag_state is DragState.DRAG_TO_END
    assert compact.deck.item(0).tag.position == pytest.approx(510)

    assert compact.handle_drag(302)
    assert compact.drag_state is DragState.DRAG_TO_START
    assert compact.deck.item(0).tag.position == pytest.approx(490)


def test_end_overshoot_tilt_is_capped(compact, recorder):
    compact.handle_drag(0)
    compact.handle_drag(12)
    compact.handle_drag(612)
    assert compact.drag_state is DragState.OVERSHOOT_END
    assert compact.end_overshoot_threshold == 612

    for position in (640, 664, 700, 800):
        compact.handle_drag(position)

    angles = [e.angle for e in recorder.of_type(TiltEnd)]
    assert angles == pytest.approx([0, -1.0, -2.0, -2.0])
    assert compact.end_overshoot_threshold == 752


def test_start_overshoot_moves_first_item_then_tilts(compact, recorder):
    compact.handle_drag(500)
    compact.handle_drag(488)
    compact.handle_drag(400)
    assert compact.drag_state is DragState.DRAG_TO_START

    compact.handle_drag(0)
    assert compact.drag_state is DragState.OVERSHOOT_START
    assert compact.start_overshoot_threshold == 0
    assert states(compact.deck)[0] is ATOP

    for position in (-10, -34, -82, -130, -200):
        compact.handle_drag(position)

    assert [e.position for e in recorder.of_type(OvershootStarted)] == pytest.approx([15])
    assert [e.angle for e in recorder.of_type(TiltStart)] == pytest.approx([1.5, 3.0, 3.0])
    assert compact.start_overshoot_threshold == -104


def test_leaving_overshoot_resumes_opposite_drag(compact):
    for position in (0, 12, 612, 640, 700, 800):
        compact.handle_drag(position)

    assert compact.handle_drag(700)
    assert compact.drag_state is DragState.DRAG_TO_START


def test_reset_dragging_clears_gesture(compact):
    for position in (0, 12, 612):
        compact.handle_drag(position)
    compact.reset_dragging()

    assert compact.drag_state is DragState.NONE
    assert compact.end_overshoot_threshold == float('inf')
    assert compact.drag_distance == 0
    assert not compact.is_dragging()


def test_orthogonal_drag_swipes_focused_item(compact, recorder):
    compact.handle_drag(600, 0)
    compact.handle_drag(600, 20)
    assert compact.drag_state is DragState.SWIPE
    assert compact.swiped_item is compact.deck.item(0)

    compact.handle_drag(600, 120)
    swipes = recorder.of_type(Swiped)
    assert [e.distance for e in swipes] == [0, 100]
    assert compact.deck.item(0).tag.closing
    # The deck does not move while swiping
    assert positions(compact.deck) == pytest.approx(REST)


def test_wide_deck_does_not_move_when_everything_fits():
    deck = Deck(3, action_slot=True)
    engine = PositionStateEngine(deck, WideLayout(deck))
    engine.set_geometry(DeckGeometry(1000, 200, item_size=200, item_offset=20,
                                     action_slot_size=50, action_slot_offset=10))
    engine.relayout()

    assert engine.update(DragState.DRAG_TO_END, 50) is None
    assert positions(deck) == [550, 360, 180, 0]
    assert engine.update(DragState.DRAG_TO_START, -50) is None
    assert positions(deck) == [550, 360, 180, 0]


def test_decelerate_interpolator():
    interpolate = DecelerateInterpolator()
    assert interpolate(0) == 0
    assert interpolate(0.5) == pytest.approx(0.75)
    assert interpolate(1) == 1
    assert interpolate(2) == 1
    assert DecelerateInterpolator(2.0)(0.5) == pytest.approx(0.9375)


def test_fling_plays_back_through_engine(compact, recorder, clock):
    fling = FlingController(compact, clock=clock)
    fling.start(100, 200)
    assert recorder.of_type(FlingStarted) == [FlingStarted(100, 200)]

    clock.advance(0.1)
    assert fling.tick()
    assert compact.deck.item(0).tag.position == pytest.approx(575)

    clock.advance(0.1)
    assert not fling.tick()
    assert compact.deck.item(0).tag.position == pytest.approx(600)
    assert len(recorder.of_type(FlingFinished)) == 1
    assert compact.drag_state is DragState.NONE
    assert not fling.tick()


def test_fling_cancel(compact, recorder, clock):
    released = []
    fling = FlingController(compact, clock=clock, on_finished=lambda: released.append(True))
    fling.start(-100, 200)
    fling.cancel()
    fling.cancel()

    assert len(recorder.of_type(FlingCancelled)) == 1
    assert released == [True]
    assert not fling.running
    with pytest.raises(ValueError):
        fling.start(10, -1)


def swipe_controller(closeable=True):
    deck = Deck(3, closeable=[closeable])
    layout = CompactLayout(deck)
    layout.set_geometry(DeckGeometry(1000, 600))
    recorder = EventRecorder()
    events = EventBus()
    events.subscribe(recorder)
    return SwipeController(layout, events, DeckConfig()), deck.item(0), recorder


def test_fast_swipe_removes_closeable_item():
    swipe, item, recorder = swipe_controller()
    swipe.swipe(item, 50)
    assert item.tag.closing

    ended = swipe.end(700)
    assert ended == SwipeEnded(item, True, 700, 1, 857)
    assert recorder.events[-1] is ended
    assert item.tag.closing


def test_slow_short_swipe_snaps_back():
    swipe, item, _ = swipe_controller()
    swipe.swipe(item, 30)

    ended = swipe.end(100)
    assert not ended.remove
    assert ended.velocity == 0
    assert ended.duration_ms is None
    assert not item.tag.closing


def test_slow_long_swipe_removes():
    swipe, item, _ = swipe_controller()
    swipe.swipe(item, -150)

    ended = swipe.end(100)
    assert ended.remove
    assert ended.direction == -1
    assert ended.duration_ms is None


def test_non_closeable_item_resists_and_stays():
    swipe, item, recorder = swipe_controller(closeable=False)
    swipe.swipe(item, 16)
    assert recorder.of_type(Swiped)[-1].distance == pytest.approx(8)
    swipe.swipe(item, -16)
    assert swipe.offset == pytest.approx(-8)

    assert not swipe.end(5000).remove


def test_swipe_end_without_item():
    swipe, _, recorder = swipe_controller()
    assert swipe.end(1000) is None
    assert recorder.events == []


def test_single_item_end_tilt_uses_start_angle():
    deck = Deck(1)
    recorder = EventRecorder()
    events = EventBus()
    events.subscribe(recorder)
    engine = PositionStateEngine(deck, CompactLayout(deck), events, clock=ManualClock())
    engine.set_geometry(DeckGeometry(1000, 600))
    engine.relayout()

    engine.overshoot.on_overshoot_end(0, float('inf'))
    engine.overshoot.on_overshoot_end(96, float('inf'))
    assert recorder.of_type(TiltEnd)[-1].angle == pytest.approx(-3.0)


def test_wide_drag_keeps_stacks_consistent():
    deck = Deck(8, 7)
    engine = PositionStateEngine(deck, WideLayout(deck))
    engine.set_geometry(DeckGeometry(1000, 200, item_size=200, item_offset=20))

    assert engine.relayout() == 3
    assert positions(deck) == [820, 810, 800, 720, 540, 360, 180, 0]
    assert states(deck) == [END, END, END, F, F, F, F, ATOP]
    assert_stacks_consistent(deck)

    assert engine.update(DragState.DRAG_TO_START, -300) is None
    assert positions(deck) == [820, 780, 600, 420, 240, 60, 10, 0]
    assert states(deck) == [END, F, F, F, F, F, START, ATOP]
    assert engine.first_visible_index == 1
    assert_stacks_consistent(deck)

    engine.update(DragState.DRAG_TO_START, -200)
    assert positions(deck) == [820, 640, 460, 280, 100, 20, 10, 0]
    assert states(deck) == [END, F, F, F, F, START, START, ATOP]
    assert_stacks_consistent(deck)

    engine.update(DragState.DRAG_TO_END, 250)
    assert positions(deck) == [820, 810, 710, 530, 350, 170, 10, 0]
    assert states(deck) == [END, END, F, F, F, F, START, ATOP]
    assert engine.first_visible_index == 2
    assert_stacks_consistent(deck)
