"""
Dummy adapter for the tablejack engine, used for testing and simulation.

This module provides a non-interactive adapter that can be used for automated
testing and simulations where no user interaction is needed.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union
from enum import Enum

from tablejack.adapters.base import PlatformAdapter
from tablejack.blackjack.action import Move


class DummyAdapter(PlatformAdapter):
    """
    Dummy adapter for testing and simulation.

    Bets and moves are taken from scripted lists. When the bets run out the
    adapter signals exit; when the moves run out it stays. A scripted move
    that is not eligible is replaced by the strategy function's choice, or
    by stay (exit when stay is not offered).
    """

    def __init__(
        self,
        bets: Optional[List[int]] = None,
        moves: Optional[List[Move]] = None,
        strategy_function: Optional[Callable[[Sequence[Move]], Move]] = None,
        verbose: bool = False,
    ):
        """
        Initialize the dummy adapter.

        Args:
            bets: Bets to place, one per round
            moves: Moves to take in sequence across all rounds
            strategy_function: Optional function that takes the eligible moves
                              and returns one of them
            verbose: Whether to print events to stdout (useful for debugging)
        """
        self.bets = list(bets or [])
        self.moves = list(moves or [])
        self.strategy_function = strategy_function
        self.verbose = verbose

        # Track everything for later inspection
        self.events: List[Tuple[str, Dict[str, Any]]] = []
        self.rendered_states: List[Dict[str, Any]] = []
        self.move_requests: List[Tuple[Move, ...]] = []
        self.finished_rounds: List[Dict[str, Any]] = []

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """Store the game state for later inspection."""
        self.rendered_states.append(state)

        if self.verbose:
            print(
                f"Dealer: {state['dealer']['score']} | Player: {state['player']['score']}"
                f" | Chips: {state['chips']} Bet: {state['current_bet']}"
            )

    async def request_bet(self, chips: int, bet_limit: int) -> Optional[int]:
        """Return the next scripted bet, or None when there are none left."""
        if not self.bets:
            return None
        return self.bets.pop(0)

    async def request_move(self, eligible_moves: Sequence[Move]) -> Move:
        """Return a scripted move, falling back to the strategy function or stay."""
        eligible_moves = tuple(eligible_moves)
        self.move_requests.append(eligible_moves)

        selected = self.moves.pop(0) if self.moves else None

        if selected not in eligible_moves and self.strategy_function:
            selected = self.strategy_function(eligible_moves)

        if selected not in eligible_moves:
            selected = Move.STAY if Move.STAY in eligible_moves else Move.EXIT

        if self.verbose:
            print(f"Player selects {selected.label}")

        return selected

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """Store the event for later inspection."""
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        self.events.append((event_type_str, data))

        if self.verbose:
            print(f"Event: {event_type_str} {data}")

    async def round_finished(self, state: Dict[str, Any]) -> None:
        self.finished_rounds.append(state)

    def get_events_by_type(self, event_type: Union[str, Enum]) -> List[Dict[str, Any]]:
        """
        Get all events of a specific type.

        Args:
            event_type: The type of events to retrieve

        Returns:
            A list of event data dictionaries
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        return [data for typ, data in self.events if typ == event_type_str]
