"""
Hand scoring for blackjack.

A hand is any sequence of `Card` values. Scores are returned as the set of
possible totals: the hard total with every ace counted as one, plus the soft
total when the hand holds an ace. Only one ace can ever count as eleven, since
two would already be 22.
"""

from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from tablejack.blackjack.constants import (
    DEALER_STAND_TOTAL,
    SOFT_ACE_BONUS,
    TWENTY_ONE,
    get_blackjack_value,
)
from tablejack.common.card import Card, Rank

Hand = Tuple[Card, ...]


def score_hand(hand: Iterable[Card]) -> FrozenSet[int]:
    """
    Return every total the hand can be counted as.

    >>> from tablejack.common.card import Suit
    >>> sorted(score_hand([Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.ACE)]))
    [2, 12]
    """
    total = 0
    has_ace = False
    for card in hand:
        total += get_blackjack_value(card.rank)
        if card.rank == Rank.ACE:
            has_ace = True
    if has_ace:
        return frozenset((total, total + SOFT_ACE_BONUS))
    return frozenset((total,))


def qualifying_scores(hand: Iterable[Card]) -> Tuple[int, ...]:
    """Totals of 21 or less, lowest first."""
    return tuple(sorted(s for s in score_hand(hand) if s <= TWENTY_ONE))


def top_score(hand: Iterable[Card]) -> Optional[int]:
    """The best total of 21 or less, or None if the hand is bust."""
    scores = qualifying_scores(hand)
    return scores[-1] if scores else None


def busted(hand: Iterable[Card]) -> bool:
    """True when every total exceeds 21."""
    return all(s > TWENTY_ONE for s in score_hand(hand))


def dealer_stands(hand: Iterable[Card]) -> bool:
    """
    True when every total is at least 17.

    The dealer keeps drawing on a soft 17 (ace plus six) because its hard
    total is only 7.
    """
    return all(s >= DEALER_STAND_TOTAL for s in score_hand(hand))


def is_twenty_one(hand: Iterable[Card]) -> bool:
    return TWENTY_ONE in score_hand(hand)


def is_natural(hand: Sequence[Card]) -> bool:
    """A two-card twenty-one."""
    return len(hand) == 2 and is_twenty_one(hand)


def push(hand_a: Iterable[Card], hand_b: Iterable[Card]) -> bool:
    """
    True when both hands have the same best score.

    Two busted hands both score None and therefore push.
    """
    return top_score(hand_a) == top_score(hand_b)


def beats(hand_a: Iterable[Card], hand_b: Iterable[Card]) -> bool:
    """True when ``hand_a`` is live and scores higher than ``hand_b``."""
    hand_a = tuple(hand_a)
    if busted(hand_a):
        return False
    score_b = top_score(hand_b)
    return score_b is None or top_score(hand_a) > score_b


def visible_cards(hand: Iterable[Card]) -> Hand:
    """Only the cards that are face up."""
    return tuple(card for card in hand if card.face_up)


def score_str(hand: Iterable[Card]) -> Optional[str]:
    """
    Human readable score such as ``"11/21"``, or None when the hand is bust.

    An empty hand scores ``"0"``.
    """
    scores = qualifying_scores(hand)
    if not scores:
        return None
    return "/".join(str(s) for s in scores)
