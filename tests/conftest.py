"""
Pytest configuration for tests at the root level.

This module contains fixtures shared by every test package: a fresh event
bus per test and factories for building cards and stacked shoes.
"""

import random

import pytest

from tablejack.common.card import Card, Rank, Suit
from tablejack.common.deck import build_deck
from tablejack.events import EventBus
from tablejack.state import GameState

SUIT_CODES = {"H": Suit.HEARTS, "S": Suit.SPADES, "C": Suit.CLUBS, "D": Suit.DIAMONDS}
RANK_CODES = {rank.value: rank for rank in Rank}


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


def _card(code, face_up=True):
    return Card(SUIT_CODES[code[-1]], RANK_CODES[code[:-1]], face_up)


@pytest.fixture
def make_hand():
    """
    Build a tuple of cards from short codes such as ``"AS"`` or ``"10H"``.

    ``make_hand("AS", "KD", face_up=False)`` gives a hidden ace and king.
    """

    def factory(*codes, face_up=True):
        return tuple(_card(code, face_up) for code in codes)

    return factory


@pytest.fixture
def stacked_state():
    """
    Build a state whose shoe starts with the given cards.

    The stacked cards are followed by two shuffled packs so that dealing past
    them never triggers a reshuffle.
    """

    def factory(*codes, filler=2, **kwargs):
        top = tuple(_card(code, face_up=False) for code in codes)
        rest = build_deck(filler, random.Random(7)) if filler else ()
        return GameState(deck=top + rest, **kwargs)

    return factory


@pytest.fixture
def recorded_events(reset_event_bus):
    """Record every event emitted on the bus as ``(event_type, data)`` pairs."""
    events = []
    EventBus.get_instance().on_any(events.append)
    return events
