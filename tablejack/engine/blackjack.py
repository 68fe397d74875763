"""
Blackjack engine implementation.

This module provides the BlackjackEngine class, which runs a session of
single-player blackjack by asking an adapter for bets and moves and applying
them with the pure functions of `StateTransitionEngine`.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging
import random
import time

from tablejack.adapters import PlatformAdapter
from tablejack.blackjack.action import Move
from tablejack.blackjack.rules import Rules
from tablejack.engine.base import TableEngine
from tablejack.errors import InsufficientFunds, InvalidBet, InvalidMove
from tablejack.events import EngineEventType
from tablejack.state import GameStage, GameState, StateTransitionEngine

logger = logging.getLogger(__name__)

# Events passed on to the adapter so it can tell the player what happened
FORWARDED_EVENTS = (
    EngineEventType.HAND_RESULT,
    EngineEventType.PAYOUT,
    EngineEventType.SHUFFLE,
    EngineEventType.GAME_ENDED,
    EngineEventType.ERROR,
)


class BlackjackEngine(TableEngine):
    """
    Engine implementation for blackjack.

    The engine owns the current `GameState` and replaces it with the result
    of each transition. Errors caused by player input (a rejected bet or an
    ineligible move) are reported to the adapter and the player is asked
    again; every other error propagates to the caller.
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the blackjack engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the game; see `Rules.from_config`.
                    A ``"seed"`` key makes the shoe reproducible.
            rng: Random generator for shuffles; overrides ``"seed"``
        """
        super().__init__(adapter, config)
        self.rules = Rules.from_config(self.config)
        self.rng = rng or random.Random(self.config.get("seed"))
        self.state: Optional[GameState] = None

        self._pending_events: List[Tuple[str, Dict[str, Any]]] = []
        self._unsubscribers = []

    def _queue_event(self, event_type: EngineEventType):
        def handler(data):
            self._pending_events.append((event_type.name, data))

        return handler

    async def _flush_events(self) -> None:
        pending, self._pending_events = self._pending_events, []
        for event_type, data in pending:
            await self.adapter.notify_game_event(event_type, data)

    async def _flush_unless_resolved(self) -> None:
        # A resolved round is announced after its final table is rendered
        if self.state.stage != GameStage.ROUND_RESOLVED:
            await self._flush_events()

    async def initialize(self) -> None:
        """
        Initialize the engine and subscribe to the events the adapter shows.
        """
        await super().initialize()

        for event_type in FORWARDED_EVENTS:
            self._unsubscribers.append(
                self.event_bus.on(event_type, self._queue_event(event_type))
            )

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "blackjack",
                "rules": self.rules.to_dict(),
                "timestamp": time.time(),
            },
        )

    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        await self._flush_events()
        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        await super().shutdown()

    async def start_game(self) -> None:
        """
        Start a new session with a freshly shuffled shoe.
        """
        self.state = StateTransitionEngine.new_game(self.rules, self.rng)
        logger.info(
            "New session: %d decks, %d chips, limit %d",
            self.rules.deck_count,
            self.rules.starting_chips,
            self.rules.bet_limit,
        )
        await self._flush_events()

    async def place_bet(self, amount: int) -> None:
        """
        Place a bet and deal the opening hands.

        Raises:
            InvalidBet: If the amount is not allowed; the state is unchanged
        """
        state = StateTransitionEngine.place_bet(self.state, amount)
        self.state = StateTransitionEngine.initial_deal(state, self.rng)
        await self._flush_unless_resolved()

    async def execute_player_action(self, move: Move) -> None:
        """
        Execute a player move, playing out the dealer's turn if it follows.

        Raises:
            InvalidMove: If the move is not currently eligible
        """
        self.state = StateTransitionEngine.apply_move(self.state, move, self.rng)
        await self._flush_unless_resolved()

        if self.state.stage == GameStage.DEALER_TURN:
            await self._play_dealer_turn()

    async def render_state(self) -> None:
        """
        Render the current game state.
        """
        await self.adapter.render_game_state(
            StateTransitionEngine.render(self.state)
        )

    async def _reject(self, error: Exception) -> None:
        logger.info("Rejected input: %s", error)
        self.event_bus.emit(EngineEventType.ERROR, {"message": str(error)})
        await self._flush_events()

    async def _play_dealer_turn(self) -> None:
        """
        Play the dealer's turn one draw at a time, rendering after each step.
        """
        while self.state.stage == GameStage.DEALER_TURN:
            await self.render_state()
            self.state = StateTransitionEngine.dealer_step(self.state, self.rng)

    async def _take_bet(self) -> bool:
        """
        Ask for bets until one is accepted.

        Returns:
            False if the player chose to leave instead
        """
        while True:
            bet = await self.adapter.request_bet(self.state.chips, self.state.bet_limit)
            if bet is None:
                return False
            try:
                await self.place_bet(bet)
                return True
            except InvalidBet as e:
                await self._reject(e)

    async def play_round(self) -> GameState:
        """
        Play one round from the bet to the payout.

        Returns:
            The state after the round, either awaiting the next bet or ended
        """
        if self.state is None:
            await self.start_game()
        if self.state.stage != GameStage.AWAITING_BET:
            raise InvalidMove(f"Cannot start a round during {self.state.stage.name}")

        await self.render_state()
        if not await self._take_bet():
            self.state = StateTransitionEngine.exit_session(self.state)
            await self._flush_events()
            return self.state

        while self.state.stage == GameStage.PLAYER_TURN:
            await self.render_state()
            move = await self.adapter.request_move(
                StateTransitionEngine.eligible_moves(self.state)
            )
            try:
                await self.execute_player_action(move)
            except (InvalidMove, InsufficientFunds) as e:
                await self._reject(e)

        if self.state.stage == GameStage.ROUND_RESOLVED:
            await self.render_state()
            await self._flush_events()
            self.state = StateTransitionEngine.finish_round(self.state, self.rng)
            await self._flush_events()
            await self.adapter.round_finished(StateTransitionEngine.render(self.state))

        return self.state

    async def run(self) -> GameState:
        """
        Play rounds until the player leaves or runs out of chips.

        Returns:
            The final state of the session
        """
        if self.state is None:
            await self.start_game()
        while self.state.stage != GameStage.SESSION_ENDED:
            await self.play_round()
        return self.state
