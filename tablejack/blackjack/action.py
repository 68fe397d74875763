"""Defines the Move enum for the choices a player can make during their turn."""
from enum import Enum


class Move(Enum):
    """Enum for the moves a player can make in a round of blackjack."""

    HIT = "hit"
    STAY = "stay"
    SURRENDER = "surrender"
    DOUBLE_DOWN = "double-down"
    EXIT = "exit"

    @property
    def label(self) -> str:
        return self.value
