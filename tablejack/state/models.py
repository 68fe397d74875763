"""
Immutable state models for the tablejack engine.

This module provides the dataclass that represents a blackjack session at a
single point in time. It is designed to be used with the pure transition
functions in `tablejack.state.transitions`, which build new state instances
rather than modifying existing ones. Because nothing is mutated in place,
callers may keep old snapshots around for undo or replay.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum, auto
import uuid

from tablejack.blackjack.hand import Hand, busted, score_str, top_score, visible_cards
from tablejack.blackjack.outcome import Outcome
from tablejack.blackjack.rules import (
    DEFAULT_BET_LIMIT,
    DEFAULT_DECK_COUNT,
    DEFAULT_RESHUFFLE_THRESHOLD,
    DEFAULT_STARTING_CHIPS,
)
from tablejack.common.deck import Deck
from tablejack.errors import InvalidArgument

BUST_MARKER = "bust"


class GameStage(Enum):
    """
    Possible stages of a blackjack round.
    """

    AWAITING_BET = auto()
    INITIAL_DEAL = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    ROUND_RESOLVED = auto()
    SESSION_ENDED = auto()


class Holder(Enum):
    """The two seats that can hold a hand."""

    PLAYER = "player"
    DEALER = "dealer"


def _card_tuples(hand: Hand) -> List[Tuple[str, str, bool]]:
    return [(str(card.rank), str(card.suit), card.face_up) for card in hand]


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of a blackjack session.

    Attributes:
        id: Unique identifier for this session
        deck: Cards still in the shoe, dealt from the front
        discard: Cards from finished rounds
        player: The player's hand
        dealer: The dealer's hand
        chips: Chips the player holds, excluding the outstanding bet
        bet_limit: Largest bet the table accepts
        current_bet: Chips staked on the round in progress
        turns_taken: Player actions taken this round
        stage: Current stage of the round
        outcome: Result of the round once it is resolved
        round_number: Number of rounds started this session
        deck_count: Packs in a freshly built shoe
        reshuffle_threshold: Deck size below which discards are shuffled back in
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    deck: Deck = ()
    discard: Deck = ()
    player: Hand = ()
    dealer: Hand = ()
    chips: int = DEFAULT_STARTING_CHIPS
    bet_limit: int = DEFAULT_BET_LIMIT
    current_bet: int = 0
    turns_taken: int = 0
    stage: GameStage = GameStage.AWAITING_BET
    outcome: Optional[Outcome] = None
    round_number: int = 0
    deck_count: int = DEFAULT_DECK_COUNT
    reshuffle_threshold: int = DEFAULT_RESHUFFLE_THRESHOLD

    def __post_init__(self):
        if self.chips < 0:
            raise InvalidArgument(f"chips cannot be negative, got {self.chips}")
        if self.bet_limit <= 0:
            raise InvalidArgument(f"bet_limit must be positive, got {self.bet_limit}")
        if self.current_bet < 0:
            raise InvalidArgument(
                f"current_bet cannot be negative, got {self.current_bet}"
            )
        if self.current_bet > self.bet_limit:
            raise InvalidArgument(
                f"current_bet {self.current_bet} exceeds bet_limit {self.bet_limit}"
            )
        if self.turns_taken < 0:
            raise InvalidArgument(
                f"turns_taken cannot be negative, got {self.turns_taken}"
            )

    def hand(self, holder: Holder) -> Hand:
        """Return the hand held by ``holder``."""
        if holder == Holder.PLAYER:
            return self.player
        return self.dealer

    @property
    def is_broke(self) -> bool:
        """True when the player has no chips and nothing staked."""
        return self.chips + self.current_bet == 0

    @property
    def is_over(self) -> bool:
        return self.stage == GameStage.SESSION_ENDED

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "stage": self.stage.name,
            "round_number": self.round_number,
            "chips": self.chips,
            "bet_limit": self.bet_limit,
            "current_bet": self.current_bet,
            "turns_taken": self.turns_taken,
            "outcome": self.outcome.value if self.outcome else None,
            "deck_count": self.deck_count,
            "reshuffle_threshold": self.reshuffle_threshold,
            "cards_remaining": len(self.deck),
            "discard_size": len(self.discard),
            "player": {
                "cards": _card_tuples(self.player),
                "value": top_score(self.player),
                "is_bust": busted(self.player),
            },
            "dealer": {
                "cards": _card_tuples(self.dealer),
                "value": top_score(self.dealer),
                "is_bust": busted(self.dealer),
            },
        }

    def to_adapter_format(self) -> Dict[str, Any]:
        """
        Convert the game state to the display model handed to adapters.

        Each holder lists its cards as ``(rank, suit, face_up)`` tuples and a
        score string. The dealer is scored over face-up cards only, so a
        hidden hole card never leaks through the score.

        Returns:
            Dictionary in adapter-friendly format
        """
        dealer_score = score_str(visible_cards(self.dealer))
        player_score = score_str(self.player)
        return {
            "dealer": {
                "cards": _card_tuples(self.dealer),
                "score": dealer_score if dealer_score is not None else BUST_MARKER,
            },
            "player": {
                "cards": _card_tuples(self.player),
                "score": player_score if player_score is not None else BUST_MARKER,
            },
            "chips": self.chips,
            "current_bet": self.current_bet,
            "bet_limit": self.bet_limit,
            "stage": self.stage.name,
            "outcome": self.outcome.value if self.outcome else None,
            "round_number": self.round_number,
        }
