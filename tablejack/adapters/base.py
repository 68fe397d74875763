"""
Base adapter interface for the tablejack engine.

This module defines the interface that platform-specific adapters must implement
to interact with the tablejack engine.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Union
from enum import Enum

from tablejack.blackjack.action import Move


class PlatformAdapter(ABC):
    """
    Base interface for platform-specific adapters.

    This abstract class defines the methods that platform-specific adapters
    must implement to interact with the engine. These methods handle
    rendering the game state, asking for bets and moves, and notifying of
    game events.

    Adapters own all input validation: ``request_bet`` only ever returns a
    legal bet or the exit signal, and ``request_move`` only ever returns one
    of the moves it was offered. Any pacing between dealer draws also
    belongs here rather than in the engine.
    """

    @abstractmethod
    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current game state to the platform.

        Args:
            state: The display model produced by ``GameState.to_adapter_format``
        """
        pass

    @abstractmethod
    async def request_bet(self, chips: int, bet_limit: int) -> Optional[int]:
        """
        Ask the player for a bet.

        Args:
            chips: Chips the player holds
            bet_limit: Largest bet the table accepts

        Returns:
            A positive integer no larger than ``min(chips, bet_limit)``, or
            None when the player wants to leave the table
        """
        pass

    @abstractmethod
    async def request_move(self, eligible_moves: Sequence[Move]) -> Move:
        """
        Ask the player for a move.

        Args:
            eligible_moves: Moves the player may choose, in display order

        Returns:
            One of ``eligible_moves``
        """
        pass

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a game event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    # The following methods have default implementations but can be overridden

    async def round_finished(self, state: Dict[str, Any]) -> None:
        """
        Called once a round has been paid out, before the next bet is requested.

        Args:
            state: Display model of the table after the payout
        """
        pass

    async def initialize(self) -> None:
        """
        Initialize the adapter.

        This method is called when the adapter is first connected to the engine.
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the adapter.

        This method is called when the engine is shutting down.
        """
        pass
