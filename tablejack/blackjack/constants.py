"""Blackjack-specific constants and value mappings."""

from tablejack.common.card import Rank

# Aces count 1 here; the soft alternative is added when a hand is scored
BLACKJACK_VALUES = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 10,
}

SOFT_ACE_BONUS = 10
TWENTY_ONE = 21
DEALER_STAND_TOTAL = 17


def get_blackjack_value(rank: Rank) -> int:
    """Get the base blackjack value for a given rank."""
    return BLACKJACK_VALUES[rank]
