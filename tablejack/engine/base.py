"""
Base engine class for tablejack.

This module provides the abstract base class for game engines. It defines the
interface the command line and tests use to drive a session through an
adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from tablejack.adapters import PlatformAdapter
from tablejack.blackjack.action import Move
from tablejack.events import EventBus


class TableEngine(ABC):
    """
    Abstract base class for game engines.

    This class defines the common interface that game engines implement,
    providing methods for starting games, handling player actions, and
    managing the game state.
    """

    def __init__(self, adapter: PlatformAdapter, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the game
        """
        self.adapter = adapter
        self.config = config or {}
        self.event_bus = EventBus.get_instance()
        self.state = None

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a game.
        """
        await self.adapter.initialize()

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        await self.adapter.shutdown()

    @abstractmethod
    async def start_game(self) -> None:
        """
        Start a new game.
        """
        pass

    @abstractmethod
    async def place_bet(self, amount: int) -> None:
        """
        Place a bet for the player.

        Args:
            amount: Amount to bet
        """
        pass

    @abstractmethod
    async def execute_player_action(self, move: Move) -> None:
        """
        Execute a player move.

        Args:
            move: Move to perform
        """
        pass

    @abstractmethod
    async def render_state(self) -> None:
        """
        Render the current game state.
        """
        pass
