"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Spades, Clubs, and Diamonds.

- `Rank`: An enum representing the thirteen ranks of a standard deck of playing
cards: Ace, Two through Ten, Jack, Queen, and King.

- `Card`: An immutable playing card. A card has a suit, a rank and a face-up
flag. Turning a card over produces a new card rather than changing this one.
"""

from dataclasses import dataclass, replace
from enum import Enum, unique

from tablejack.errors import InvalidArgument


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    SPADES = "♠"
    CLUBS = "♣"
    DIAMONDS = "♦"

    def __str__(self) -> str:
        return self.name.lower()


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck.

    The value is the short label printed on the card. Point values live in
    `tablejack.blackjack.constants` so that scoring rules stay with the game.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        return self.value

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Card:
    """
    Immutable playing card.

    >>> card = Card(Suit.HEARTS, Rank.TWO, face_up=True)
    >>> print(card)
    two of hearts
    >>> card.turned(False).face_up
    False
    """

    suit: Suit
    rank: Rank
    face_up: bool = False

    def __post_init__(self):
        if not isinstance(self.suit, Suit):
            raise InvalidArgument(f"Invalid suit: {self.suit!r}")
        if not isinstance(self.rank, Rank):
            raise InvalidArgument(f"Invalid rank: {self.rank!r}")
        if not isinstance(self.face_up, bool):
            raise InvalidArgument(f"Invalid visibility flag: {self.face_up!r}")

    def turned(self, face_up: bool) -> "Card":
        """Return a copy of this card with the given visibility."""
        if not isinstance(face_up, bool):
            raise InvalidArgument(f"Invalid visibility flag: {face_up!r}")
        if face_up == self.face_up:
            return self
        return replace(self, face_up=face_up)

    @property
    def short(self) -> str:
        """Compact label such as ``A♠`` used by terminal renderers."""
        return f"{self.rank.rank_str}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name}, face_up={self.face_up})"

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit}"
