"""
Deck construction and card movement.

A deck is a plain tuple of `Card` values consumed from the front. All
functions here return new tuples and never modify their inputs.

>>> deck = build_deck(1)
>>> len(deck)
52
>>> drawn, rest = draw(deck, 2)
>>> len(drawn), len(rest)
(2, 50)
"""

import random
from typing import Iterable, Optional, Sequence, Tuple

from tablejack.common.card import Card, Rank, Suit
from tablejack.errors import InsufficientCards, InvalidArgument

Deck = Tuple[Card, ...]

CARDS_PER_PACK = 52

# Precompute one pack in suit-major order
_default_pack: Deck = tuple(Card(suit, rank) for suit in Suit for rank in Rank)


def standard_pack() -> Deck:
    """Return one unshuffled 52-card pack, all cards face down."""
    return _default_pack


def shuffle_together(
    *piles: Iterable[Card], rng: Optional[random.Random] = None
) -> Deck:
    """
    Combine piles of cards into one shuffled, face-down deck.

    :param piles: Any number of card sequences to combine.
    :param rng: Optional random generator; the module generator is used if omitted.
    :return: A new deck.
    """
    cards = [card.turned(False) for pile in piles for card in pile]
    (rng or random).shuffle(cards)
    return tuple(cards)


def build_deck(n: int, rng: Optional[random.Random] = None) -> Deck:
    """
    Build a shoe of ``n`` standard packs shuffled together.

    :param n: Number of packs, a positive integer.
    :param rng: Optional random generator for reproducible shuffles.
    :raises InvalidArgument: If ``n`` is not a positive integer.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgument(f"Deck count must be a positive integer, got {n!r}")
    return shuffle_together(*([_default_pack] * n), rng=rng)


def draw(deck: Sequence[Card], count: int) -> Tuple[Deck, Deck]:
    """
    Take ``count`` cards from the front of the deck.

    :return: A ``(drawn, remaining)`` pair of tuples.
    :raises InsufficientCards: If the deck holds fewer than ``count`` cards.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidArgument(f"Draw count must be a non-negative integer, got {count!r}")
    if count > len(deck):
        raise InsufficientCards(
            f"Cannot draw {count} cards from a deck of {len(deck)}"
        )
    deck = tuple(deck)
    return deck[:count], deck[count:]


def set_face_up(cards: Iterable[Card], value: bool) -> Deck:
    """
    Return a copy of ``cards`` with every card's visibility set to ``value``.

    >>> hand = set_face_up(standard_pack()[:2], True)
    >>> all(card.face_up for card in hand)
    True
    """
    if not isinstance(value, bool):
        raise InvalidArgument(f"Invalid visibility flag: {value!r}")
    return tuple(card.turned(value) for card in cards)
