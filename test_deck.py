#!/usr/bin/env python3
"""Tests for the deck model, container geometry, event bus and console logger."""

import pytest

from tabdeck.config.settings import DeckConfig
from tabdeck.core.deck import Deck
from tabdeck.core.events import Clicked, EventBus, EventRecorder, ItemChanged, SwipeEnded
from tabdeck.core.geometry import DeckGeometry
from tabdeck.core.types import VisualState
from tabdeck.utils.logger import DeckLogger


def test_new_deck_selects_first_card():
    deck = Deck(3)
    assert deck.count == 3
    assert deck.tab_count == 3
    assert deck.selected_index == 0
    assert deck.shown
    assert [item.title for item in deck] == ['Tab 1', 'Tab 2', 'Tab 3']


def test_action_slot_shifts_card_indices():
    deck = Deck(2, selected_index=1, action_slot=True)
    assert deck.has_action_slot
    assert deck.count == 3
    assert deck.tab_count == 2
    assert deck.selected_item_index == 2
    assert not deck.item(0).closeable


def test_empty_deck_has_no_selection():
    deck = Deck()
    assert deck.is_empty()
    assert deck.selected_index == -1
    assert deck.selected_item_index == -1

    deck.add()
    assert deck.selected_index == 0


def test_stale_indices_fail_fast():
    deck = Deck(2)
    with pytest.raises(IndexError):
        deck.item(2)
    with pytest.raises(IndexError):
        deck.select(5)
    with pytest.raises(ValueError):
        Deck(-1)


@pytest.mark.parametrize('selected, removed, expected', [
    (1, 0, 0),
    (1, 2, 1),
    (2, 2, 1),
    (0, 0, 0),
])
def test_remove_keeps_selection_on_a_card(selected, removed, expected):
    deck = Deck(3, selected)
    deck.remove(removed)

    assert deck.selected_index == expected
    assert [item.index for item in deck] == [0, 1]


def test_removing_last_card_clears_selection():
    deck = Deck(1)
    deck.remove(0)
    assert deck.selected_index == -1


def test_action_slot_cannot_be_removed():
    deck = Deck(1, action_slot=True)
    with pytest.raises(ValueError):
        deck.remove(0)


def test_geometry_rejects_negative_sizes():
    with pytest.raises(ValueError):
        DeckGeometry(-1, 600)
    with pytest.raises(ValueError):
        DeckGeometry(1000, 600, stacked_spacing=-2)


def test_geometry_from_config_uses_stack_settings():
    config = DeckConfig()
    geometry = DeckGeometry.from_config(config, 1000, 600)
    assert geometry.stacked_item_count == config.STACKED_ITEM_COUNT
    assert geometry.stacked_spacing == config.STACKED_SPACING


def test_projection_onto_drag_axis():
    geometry = DeckGeometry(1000, 600)
    assert geometry.project(100, 300) == (300, 100)
    assert geometry.project(100, 300, drag_axis='x') == (100, 300)

    mirrored = DeckGeometry(1000, 600, right_to_left=True)
    assert mirrored.project(100, 300) == (300, 500)


def test_event_bus_notifies_in_subscription_order():
    bus = EventBus()
    seen = []
    first = lambda e: seen.append(('first', e.kind))
    second = lambda e: seen.append(('second', e.kind))
    bus.subscribe(first)
    bus.subscribe(second)
    bus.subscribe(first)

    bus.emit(Clicked(Deck(1).item(0)))
    bus.unsubscribe(second)
    bus.emit(Clicked(Deck(1).item(0)))

    assert seen == [('first', 'click'), ('second', 'click'), ('first', 'click')]


def test_recorder_filters_by_type():
    recorder = EventRecorder()
    item = Deck(1).item(0)
    recorder(Clicked(item))
    recorder(ItemChanged(item, 10, VisualState.FLOATING))

    assert recorder.of_type(Clicked) == [Clicked(item)]
    recorder.clear()
    assert recorder.events == []


def test_logger_prints_and_writes_debug_file(tmp_path, capsys):
    path = tmp_path / 'deck.log'
    log = DeckLogger(str(path))
    item = Deck(1).item(0)

    log(SwipeEnded(item, True, 900.0))
    log(ItemChanged(item, 10, VisualState.FLOATING))
    log.close()

    out = capsys.readouterr().out
    assert 'REMOVE: Tab 1 [900px/s]' in out
    assert 'Tab 1: 10.0px' not in out
    assert 'ItemChanged' in path.read_text()


def test_verbose_logger_shows_item_changes(capsys):
    log = DeckLogger(None, verbose=True)
    log(ItemChanged(Deck(1).item(0), 10, VisualState.FLOATING))
    assert 'Tab 1: 10.0px' in capsys.readouterr().out


def test_config_overrides_are_checked():
    config = DeckConfig(DRAG_THRESHOLD=0)
    assert config.DRAG_THRESHOLD == 0
    assert DeckConfig().DRAG_THRESHOLD == 12

    with pytest.raises(ValueError):
        DeckConfig(NOT_A_SETTING=1)
    with pytest.raises(ValueError):
        DeckConfig(MIN_FLING_VELOCITY=-1)
    with pytest.raises(ValueError):
        DeckConfig(DRAG_AXIS='z')


def test_spacing_fractions_by_deck_size():
    config = DeckConfig()
    assert config.max_spacing_fraction(0) == 0.66
    assert config.max_spacing_fraction(4) == 0.3
    assert config.max_spacing_fraction(12) == 0.25
    assert config.attached_position_fraction(3) == 0.66
    assert config.attached_position_fraction(7) == 0.5
