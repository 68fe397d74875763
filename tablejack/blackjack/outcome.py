"""Round outcomes and the payout multiplier each one applies to the current bet."""

import math
from enum import Enum
from fractions import Fraction


class Outcome(Enum):
    """
    Result of a round from the player's point of view.

    The multiplier is applied to the stake to get the total returned to the
    player, so 0 loses the stake and 1 returns it unchanged.
    """

    SURRENDER = "surrender"
    BLACKJACK = "blackjack"
    PUSH = "push"
    WIN = "win"
    LOSE = "lose"

    @property
    def payout_multiplier(self) -> Fraction:
        return _PAYOUT_MULTIPLIERS[self]

    def payout(self, bet: int) -> int:
        """Chips returned for ``bet``, rounded down to a whole chip."""
        return math.floor(bet * self.payout_multiplier)

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_PAYOUT_MULTIPLIERS = {
    Outcome.SURRENDER: Fraction(1, 2),
    Outcome.BLACKJACK: Fraction(5, 2),
    Outcome.PUSH: Fraction(1),
    Outcome.WIN: Fraction(2),
    Outcome.LOSE: Fraction(0),
}

_MESSAGES = {
    Outcome.SURRENDER: "Surrendered.",
    Outcome.BLACKJACK: "Blackjack!",
    Outcome.PUSH: "Push!",
    Outcome.WIN: "Player wins.",
    Outcome.LOSE: "Dealer wins.",
}
