"""
Monte Carlo odds for the initial deal.

Fresh packs are shuffled and dealt out in pairs, 26 two-card hands per pack,
and each hand is scored with its best total.
"""

from typing import Optional, Union

import numpy as np

from tablejack.blackjack.constants import SOFT_ACE_BONUS, TWENTY_ONE, get_blackjack_value
from tablejack.common.deck import CARDS_PER_PACK, standard_pack
from tablejack.errors import InvalidArgument

HANDS_PER_PACK = CARDS_PER_PACK // 2

# Blackjack value of every card in one pack, aces counted as 1
_PACK_VALUES = np.array(
    [get_blackjack_value(card.rank) for card in standard_pack()], dtype=np.int64
)


def deal_pair_scores(
    n: int, rng: Optional[Union[int, np.random.Generator]] = None
) -> np.ndarray:
    """
    Deal ``n`` shuffled packs in pairs and return the best total of each pair.

    Args:
        n: Number of packs to deal
        rng: Seed or numpy Generator for the shuffles

    Returns:
        Array of ``n * 26`` totals
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgument(f"Number of packs must be a positive integer, got {n!r}")

    rng = np.random.default_rng(rng)
    packs = rng.permuted(np.tile(_PACK_VALUES, (n, 1)), axis=1)
    pairs = packs.reshape(n * HANDS_PER_PACK, 2)

    low = pairs.sum(axis=1)
    soft = (pairs == 1).any(axis=1) & (low + SOFT_ACE_BONUS <= TWENTY_ONE)
    return np.where(soft, low + SOFT_ACE_BONUS, low)


def percent_chance(
    score: int, n: int, rng: Optional[Union[int, np.random.Generator]] = None
) -> float:
    """
    Estimate how often a two-card deal has ``score`` as its best total.

    Args:
        score: Total to look for
        n: Number of packs to sample
        rng: Seed or numpy Generator for the shuffles

    Returns:
        Fraction of the ``n * 26`` sampled hands with that total, in [0, 1]
    """
    scores = deal_pair_scores(n, rng)
    return float(np.count_nonzero(scores == score)) / scores.size
