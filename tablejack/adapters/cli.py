"""
Command-line interface adapter for the tablejack engine.

This module provides an adapter for console-based play. All text goes through
an IOInterface so the same adapter drives a terminal, scripted tests or a
transcript file.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from enum import Enum

from tablejack.adapters.base import PlatformAdapter
from tablejack.blackjack.action import Move
from tablejack.blackjack.outcome import Outcome
from tablejack.common.io_interface import ConsoleIOInterface, IOInterface
from tablejack.state.models import BUST_MARKER

logger = logging.getLogger(__name__)

_EXIT_WORDS = {"", "exit", "quit", "q"}


class CLIAdapter(PlatformAdapter):
    """
    Command-line interface adapter for the tablejack engine.

    This adapter uses an IOInterface (the console by default) for input and
    output, providing a simple text-based interface to the game.
    """

    def __init__(
        self, io_interface: Optional[IOInterface] = None, dealer_delay: float = 0.0
    ):
        """
        Initialize the CLI adapter.

        Args:
            io_interface: Optional IOInterface to use for I/O. If None, a default
                          console IOInterface will be created.
            dealer_delay: Seconds to pause after each render during the dealer's
                          turn, so the player can follow the draws.
        """
        self.io_interface = io_interface or ConsoleIOInterface()
        self.dealer_delay = dealer_delay

    async def _say(self, message: str) -> None:
        await self.io_interface.output_async(message)

    async def _ask(self, prompt: str) -> Optional[str]:
        """Read a line, returning None when input is closed or interrupted."""
        try:
            return await self.io_interface.input_async(prompt)
        except (EOFError, KeyboardInterrupt):
            return None

    @staticmethod
    def _hand_lines(cards: List[tuple]) -> List[str]:
        lines = []
        for rank, suit, face_up in cards:
            lines.append(f"{rank} of {suit}" if face_up else "Hidden card.")
        return lines

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current game state to the console.

        Args:
            state: The display model of the table
        """
        lines = []
        for title, key in (("Dealer's hand", "dealer"), ("Your hand", "player")):
            hand = state.get(key, {})
            score = hand.get("score", BUST_MARKER)
            if score == BUST_MARKER:
                lines.append(f"{title} (a bust!)")
            else:
                lines.append(f"{title}, showing {score} points:")
            lines.extend(self._hand_lines(hand.get("cards", [])))
            lines.append("")

        lines.append(
            f"You have {state.get('chips', 0)} chips left. "
            f"Your current bet is {state.get('current_bet', 0)}."
        )
        await self._say("\n".join(lines) + "\n")

        if state.get("stage") == "DEALER_TURN" and self.dealer_delay > 0:
            await asyncio.sleep(self.dealer_delay)

    async def request_bet(self, chips: int, bet_limit: int) -> Optional[int]:
        """
        Ask for a bet until a valid one is entered.

        An empty line, ``exit``/``quit`` or closed input is the exit signal.
        """
        limit = min(chips, bet_limit)
        if limit <= 0:
            return None

        while True:
            answer = await self._ask(
                f"How many chips (up to {limit}) would you like to bet? "
            )
            if answer is None or answer.strip().lower() in _EXIT_WORDS:
                return None
            try:
                bet = int(answer.strip())
            except ValueError:
                logger.debug("Rejected bet input %r", answer)
                await self._say("Sorry, that's not a valid bet.")
                continue
            if 0 < bet <= limit:
                return bet
            await self._say(f"Sorry, bets must be between 1 and {limit}.")

    async def request_move(self, eligible_moves: Sequence[Move]) -> Move:
        """
        Ask for a move until one of ``eligible_moves`` is chosen.

        Moves can be entered by name or by their number in the list. Closed
        input chooses exit.
        """
        choices = {str(i + 1): move for i, move in enumerate(eligible_moves)}
        for move in eligible_moves:
            choices[move.label] = move
            choices[move.name.lower()] = move

        names = [move.label for move in eligible_moves]
        if len(names) > 1:
            listing = ", ".join(names[:-1]) + f", or {names[-1]}"
        else:
            listing = names[0]

        while True:
            answer = await self._ask(
                f"What is your move? Your choices are {listing}. "
            )
            if answer is None:
                return Move.EXIT
            choice = choices.get(answer.strip().lower())
            if choice is not None:
                return choice
            await self._say("Hmm, sorry, I didn't get that. Let's try again.")

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the user of a game event via the console.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        message = self._format_event_message(event_type, data)
        if message:
            await self._say(message)

    def _format_event_message(
        self, event_type: str, data: Dict[str, Any]
    ) -> Optional[str]:
        """
        Format an event message based on the event type.

        Returns:
            Formatted message string or None if no message needed
        """
        if event_type == "HAND_RESULT":
            return Outcome(data["outcome"]).message

        elif event_type == "PAYOUT":
            payout = data.get("payout", 0)
            bet = data.get("bet", 0)
            if payout > bet:
                return f"You win {payout - bet} chips."
            elif payout == bet:
                return f"Your {bet} chips are returned."
            elif payout > 0:
                return f"You get back {payout} of your {bet} chips."
            else:
                return f"You lose {bet} chips."

        elif event_type == "SHUFFLE":
            return "Shuffling the discards back into the shoe."

        elif event_type == "ERROR":
            return data.get("message")

        elif event_type == "GAME_ENDED":
            if data.get("reason") == "broke":
                return "You're out of chips. Goodbye!"
            return "Goodbye!"

        return None

    async def round_finished(self, state: Dict[str, Any]) -> None:
        """Wait for the player before starting the next round."""
        if state.get("stage") == "AWAITING_BET":
            await self._ask("Please hit enter to play again.")
