"""
State transition functions for the tablejack engine.

This module provides pure functions for moving a blackjack session from one
state to the next without modifying the original state objects. Every
function validates its input before building the new state and raises a
typed error from `tablejack.errors` when the request is not allowed, so a
failed call leaves the caller holding exactly the state it passed in.

Functions that may need to reshuffle accept an optional ``rng`` so tests and
replays can make the shoe deterministic.
"""

import logging
import math
import random
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

from tablejack.blackjack.action import Move
from tablejack.blackjack.hand import (
    beats,
    busted,
    dealer_stands,
    is_natural,
    is_twenty_one,
    push,
    top_score,
)
from tablejack.blackjack.outcome import Outcome
from tablejack.blackjack.rules import Rules
from tablejack.common.card import Card
from tablejack.common.deck import Deck, build_deck, draw, set_face_up, shuffle_together
from tablejack.errors import (
    InsufficientCards,
    InsufficientFunds,
    InvalidArgument,
    InvalidBet,
    InvalidMove,
)
from tablejack.events import EventBus, EngineEventType
from tablejack.state.models import GameStage, GameState, Holder

logger = logging.getLogger(__name__)


def _emit(event_type: EngineEventType, state: GameState, **data: Any) -> None:
    event_bus = EventBus.get_instance()
    event_bus.emit(
        event_type,
        {"game_id": state.id, "round_number": state.round_number, **data},
    )


def _card_label(card: Card) -> str:
    return str(card) if card.face_up else "hidden card"


class StateTransitionEngine:
    """
    Pure functions for state transitions.

    This class contains static methods that implement the betting engine and
    the turn state machine. Each method takes a state and returns a new
    state, without modifying the original.
    """

    # Session

    @staticmethod
    def new_game(
        rules: Optional[Rules] = None, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Create the state for a new session.

        Args:
            rules: Table settings; defaults to a six-deck, 500-chip table
            rng: Optional random generator for the initial shuffle

        Returns:
            A state awaiting the first bet
        """
        rules = rules or Rules()
        state = GameState(
            deck=build_deck(rules.deck_count, rng),
            chips=rules.starting_chips,
            bet_limit=rules.bet_limit,
            deck_count=rules.deck_count,
            reshuffle_threshold=rules.reshuffle_threshold,
        )
        _emit(EngineEventType.GAME_CREATED, state, rules=rules.to_dict())
        return state

    @staticmethod
    def render(state: GameState) -> Dict[str, Any]:
        """Return the display model for ``state``."""
        return state.to_adapter_format()

    # Betting engine

    @staticmethod
    def place_bet(state: GameState, amount: int) -> GameState:
        """
        Stake ``amount`` chips on a new round.

        Args:
            state: A state awaiting a bet
            amount: Whole number of chips, at most the table limit and the chips held

        Returns:
            New state with the chips deducted, ready for the initial deal

        Raises:
            InvalidMove: If the round is not waiting for a bet
            InvalidBet: If the amount is not allowed
        """
        if state.stage != GameStage.AWAITING_BET:
            raise InvalidMove(f"Cannot place a bet during {state.stage.name}")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBet(f"Bet must be a whole number of chips, got {amount!r}")
        if amount <= 0:
            raise InvalidBet("Bet must be positive")
        if amount > state.bet_limit:
            raise InvalidBet(f"Bet exceeds the table limit of {state.bet_limit}")
        if amount > state.chips:
            raise InvalidBet(f"Bet exceeds your {state.chips} chips")

        new_state = replace(
            state,
            chips=state.chips - amount,
            current_bet=amount,
            stage=GameStage.INITIAL_DEAL,
            outcome=None,
            turns_taken=0,
            round_number=state.round_number + 1,
        )

        _emit(EngineEventType.ROUND_STARTED, new_state, chips=state.chips)
        _emit(
            EngineEventType.PLAYER_BET,
            new_state,
            amount=amount,
            chips=new_state.chips,
        )
        return new_state

    @staticmethod
    def scale_bet(state: GameState, factor) -> GameState:
        """
        Multiply the current bet, paying the increase from the player's chips.

        The new bet is rounded down to a whole chip and must stay within the
        table limit.

        Raises:
            InvalidArgument: If ``factor`` is below 1
            InvalidBet: If the new bet would exceed the table limit
            InsufficientFunds: If the chips held cannot cover the increase
        """
        if factor < 1:
            raise InvalidArgument(f"Bet can only be scaled up, got factor {factor}")

        new_bet = math.floor(state.current_bet * factor)
        if new_bet > state.bet_limit:
            raise InvalidBet(
                f"Bet of {new_bet} exceeds the table limit of {state.bet_limit}"
            )
        increase = new_bet - state.current_bet
        if increase > state.chips:
            raise InsufficientFunds(
                f"Need {increase} more chips to raise the bet to {new_bet}, "
                f"only {state.chips} left"
            )

        new_state = replace(
            state, chips=state.chips - increase, current_bet=new_bet
        )
        _emit(
            EngineEventType.PLAYER_BET,
            new_state,
            amount=new_bet,
            increase=increase,
            chips=new_state.chips,
        )
        return new_state

    @staticmethod
    def resolve_bet(state: GameState, outcome: Outcome) -> GameState:
        """
        Pay out the current bet for ``outcome`` and clear it.

        Returns:
            New state with the payout added to the chips and no bet outstanding
        """
        bet = state.current_bet
        payout = outcome.payout(bet)
        new_state = replace(state, chips=state.chips + payout, current_bet=0)
        _emit(
            EngineEventType.PAYOUT,
            new_state,
            outcome=outcome.value,
            bet=bet,
            payout=payout,
            chips=new_state.chips,
        )
        return new_state

    @staticmethod
    def is_broke(state: GameState) -> bool:
        return state.is_broke

    # Cards

    @staticmethod
    def reshuffle(state: GameState, rng: Optional[random.Random] = None) -> GameState:
        """
        Shuffle the discard pile back into the deck.

        Returns:
            New state with an empty discard pile
        """
        deck = shuffle_together(state.deck, state.discard, rng=rng)
        new_state = replace(state, deck=deck, discard=())
        logger.debug(
            "Reshuffled %d discards into the shoe, %d cards available",
            len(state.discard),
            len(deck),
        )
        _emit(
            EngineEventType.SHUFFLE,
            new_state,
            cards_remaining=len(deck),
        )
        return new_state

    @staticmethod
    def _ensure_available(state: GameState, count: int) -> None:
        available = len(state.deck) + len(state.discard)
        if count > available:
            raise InsufficientCards(
                f"Cannot deal {count} cards, only {available} left in the shoe"
            )

    @staticmethod
    def _draw(
        state: GameState, count: int, rng: Optional[random.Random] = None
    ) -> Tuple[Deck, GameState]:
        """Draw from the deck, reshuffling the discards in once if it runs short."""
        if count > len(state.deck):
            StateTransitionEngine._ensure_available(state, count)
            state = StateTransitionEngine.reshuffle(state, rng)
        cards, deck = draw(state.deck, count)
        return cards, replace(state, deck=deck)

    @staticmethod
    def deal_cards(
        state: GameState,
        count: int,
        holder: Holder,
        face_up: bool = True,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """
        Deal ``count`` cards from the front of the deck to ``holder``.

        Args:
            state: Current game state
            count: Number of cards to deal
            holder: Who receives the cards
            face_up: Whether the dealt cards are visible
            rng: Random generator used if a reshuffle is needed

        Returns:
            New game state with the cards dealt

        Raises:
            InsufficientCards: If the shoe cannot supply the cards even after a reshuffle
        """
        cards, new_state = StateTransitionEngine._draw(state, count, rng)
        cards = set_face_up(cards, face_up)

        if holder == Holder.PLAYER:
            new_state = replace(new_state, player=new_state.player + cards)
        else:
            new_state = replace(new_state, dealer=new_state.dealer + cards)

        for card in cards:
            logger.debug("Dealt %s to %s", _card_label(card), holder.value)
            _emit(
                EngineEventType.CARD_DEALT,
                new_state,
                holder=holder.value,
                card=_card_label(card),
                face_up=card.face_up,
            )
        return new_state

    @staticmethod
    def reveal_dealer(state: GameState) -> GameState:
        """Turn every dealer card face up."""
        hidden = [card for card in state.dealer if not card.face_up]
        new_state = replace(state, dealer=set_face_up(state.dealer, True))
        for card in hidden:
            _emit(
                EngineEventType.CARD_REVEALED,
                new_state,
                holder=Holder.DEALER.value,
                card=str(card.turned(True)),
            )
        return new_state

    # Turn state machine

    @staticmethod
    def initial_deal(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Deal two face-up cards to the player and one up, one down to the dealer.

        A natural twenty-one ends the round at once: the dealer's hole card is
        turned over and the round is resolved without further draws.

        Raises:
            InvalidMove: If no bet has been placed for this round
        """
        if state.stage != GameStage.INITIAL_DEAL:
            raise InvalidMove(f"Cannot deal during {state.stage.name}")
        StateTransitionEngine._ensure_available(state, 4)

        new_state = StateTransitionEngine.deal_cards(state, 2, Holder.PLAYER, True, rng)
        new_state = StateTransitionEngine.deal_cards(new_state, 1, Holder.DEALER, True, rng)
        new_state = StateTransitionEngine.deal_cards(
            new_state, 1, Holder.DEALER, False, rng
        )
        new_state = replace(new_state, stage=GameStage.PLAYER_TURN)

        if is_natural(new_state.player):
            new_state = StateTransitionEngine.reveal_dealer(new_state)
            outcome = StateTransitionEngine.determine_outcome(new_state, False)
            return StateTransitionEngine.settle(new_state, outcome)
        return new_state

    @staticmethod
    def eligible_moves(state: GameState) -> Tuple[Move, ...]:
        """
        Moves the player may choose right now, in display order.

        Surrender and double down are only offered before the player's first
        action. Doubling also needs enough chips to match the bet, and the
        doubled bet must stay within the table limit. Exit is always available.
        """
        if state.stage != GameStage.PLAYER_TURN:
            return (Move.EXIT,)

        moves = [Move.HIT, Move.STAY]
        if state.turns_taken == 0:
            moves.append(Move.SURRENDER)
            doubled = 2 * state.current_bet
            if state.chips >= state.current_bet and doubled <= state.bet_limit:
                moves.append(Move.DOUBLE_DOWN)
        moves.append(Move.EXIT)
        return tuple(moves)

    @staticmethod
    def _require_move(state: GameState, move: Move) -> None:
        if move not in StateTransitionEngine.eligible_moves(state):
            raise InvalidMove(f"{move.label} is not allowed during {state.stage.name}")

    @staticmethod
    def _begin_dealer_turn(state: GameState) -> GameState:
        new_state = replace(state, stage=GameStage.DEALER_TURN)
        return StateTransitionEngine.reveal_dealer(new_state)

    @staticmethod
    def hit(state: GameState, rng: Optional[random.Random] = None) -> GameState:
        """
        Deal the player one more card.

        The turn passes to the dealer when the player busts or reaches 21.
        """
        StateTransitionEngine._require_move(state, Move.HIT)

        new_state = StateTransitionEngine.deal_cards(state, 1, Holder.PLAYER, True, rng)
        new_state = replace(new_state, turns_taken=state.turns_taken + 1)
        _emit(EngineEventType.PLAYER_ACTION, new_state, action=Move.HIT.value)

        if busted(new_state.player) or is_twenty_one(new_state.player):
            return StateTransitionEngine._begin_dealer_turn(new_state)
        return new_state

    @staticmethod
    def stay(state: GameState) -> GameState:
        StateTransitionEngine._require_move(state, Move.STAY)
        _emit(EngineEventType.PLAYER_ACTION, state, action=Move.STAY.value)
        return StateTransitionEngine._begin_dealer_turn(state)

    @staticmethod
    def surrender(state: GameState) -> GameState:
        """Give up the hand for half the bet back; the dealer does not play."""
        StateTransitionEngine._require_move(state, Move.SURRENDER)
        _emit(EngineEventType.PLAYER_ACTION, state, action=Move.SURRENDER.value)
        new_state = StateTransitionEngine.reveal_dealer(state)
        outcome = StateTransitionEngine.determine_outcome(new_state, True)
        return StateTransitionEngine.settle(new_state, outcome)

    @staticmethod
    def double_down(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """Double the bet, take exactly one card and hand the turn to the dealer."""
        StateTransitionEngine._require_move(state, Move.DOUBLE_DOWN)
        StateTransitionEngine._ensure_available(state, 1)

        new_state = StateTransitionEngine.scale_bet(state, 2)
        new_state = StateTransitionEngine.deal_cards(
            new_state, 1, Holder.PLAYER, True, rng
        )
        new_state = replace(new_state, turns_taken=state.turns_taken + 1)
        _emit(EngineEventType.PLAYER_ACTION, new_state, action=Move.DOUBLE_DOWN.value)
        return StateTransitionEngine._begin_dealer_turn(new_state)

    @staticmethod
    def exit_session(state: GameState) -> GameState:
        """End the session from any stage."""
        new_state = replace(state, stage=GameStage.SESSION_ENDED)
        _emit(
            EngineEventType.GAME_ENDED,
            new_state,
            reason="exit",
            chips=new_state.chips,
        )
        return new_state

    @staticmethod
    def apply_move(
        state: GameState, move: Move, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Apply a player move.

        Raises:
            InvalidMove: If ``move`` is not one of ``eligible_moves(state)``
        """
        if not isinstance(move, Move):
            raise InvalidMove(f"Unknown move: {move!r}")
        StateTransitionEngine._require_move(state, move)

        if move == Move.HIT:
            return StateTransitionEngine.hit(state, rng)
        if move == Move.STAY:
            return StateTransitionEngine.stay(state)
        if move == Move.SURRENDER:
            return StateTransitionEngine.surrender(state)
        if move == Move.DOUBLE_DOWN:
            return StateTransitionEngine.double_down(state, rng)
        return StateTransitionEngine.exit_session(state)

    @staticmethod
    def dealer_step(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Take one discrete step of the dealer's turn.

        The dealer stops once every total is 17 or more, or when the player
        has already busted; stopping resolves the round. Otherwise one
        face-up card is drawn.

        Raises:
            InvalidMove: If it is not the dealer's turn
        """
        if state.stage != GameStage.DEALER_TURN:
            raise InvalidMove(f"Dealer cannot play during {state.stage.name}")

        if busted(state.player) or dealer_stands(state.dealer):
            if not busted(state.player):
                _emit(EngineEventType.DEALER_ACTION, state, action="stand")
            outcome = StateTransitionEngine.determine_outcome(state, False)
            return StateTransitionEngine.settle(state, outcome)

        new_state = StateTransitionEngine.deal_cards(state, 1, Holder.DEALER, True, rng)
        _emit(EngineEventType.DEALER_ACTION, new_state, action="hit")
        return new_state

    @staticmethod
    def play_dealer(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """Run the dealer's turn to completion."""
        while state.stage == GameStage.DEALER_TURN:
            state = StateTransitionEngine.dealer_step(state, rng)
        return state

    @staticmethod
    def determine_outcome(state: GameState, surrendered: bool = False) -> Outcome:
        """
        Decide the result of the round.

        Checks run in a fixed order: surrender, dealer bust, push, player
        beats dealer, then loss. A dealer bust therefore wins for the player
        even if the player has also busted.
        """
        player, dealer = state.player, state.dealer
        if surrendered:
            return Outcome.SURRENDER
        if busted(dealer):
            return Outcome.WIN
        if push(dealer, player):
            return Outcome.PUSH
        if beats(player, dealer):
            if state.turns_taken == 0 and is_natural(player):
                return Outcome.BLACKJACK
            return Outcome.WIN
        return Outcome.LOSE

    @staticmethod
    def settle(state: GameState, outcome: Outcome) -> GameState:
        """Record ``outcome`` and mark the round resolved."""
        new_state = replace(state, stage=GameStage.ROUND_RESOLVED, outcome=outcome)
        _emit(
            EngineEventType.HAND_RESULT,
            new_state,
            outcome=outcome.value,
            player_score=top_score(state.player),
            dealer_score=top_score(state.dealer),
            player_busted=busted(state.player),
            dealer_busted=busted(state.dealer),
            is_blackjack=outcome == Outcome.BLACKJACK,
        )
        return new_state

    @staticmethod
    def finish_round(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Pay the resolved round and clear the table.

        Both hands go to the discard pile, the discards are shuffled back in
        when the deck has dropped below the reshuffle threshold, and the
        session either waits for the next bet or ends because the player is
        broke.

        Raises:
            InvalidMove: If the round has not been resolved
        """
        if state.stage != GameStage.ROUND_RESOLVED or state.outcome is None:
            raise InvalidMove(f"Cannot finish a round during {state.stage.name}")

        outcome = state.outcome
        bet = state.current_bet
        new_state = StateTransitionEngine.resolve_bet(state, outcome)
        new_state = replace(
            new_state,
            discard=new_state.discard
            + set_face_up(new_state.player + new_state.dealer, False),
            player=(),
            dealer=(),
            turns_taken=0,
        )
        if len(new_state.deck) < new_state.reshuffle_threshold:
            new_state = StateTransitionEngine.reshuffle(new_state, rng)

        broke = new_state.is_broke
        new_state = replace(
            new_state,
            stage=GameStage.SESSION_ENDED if broke else GameStage.AWAITING_BET,
        )

        logger.info(
            "Round %d: %s, bet %d, chips now %d",
            new_state.round_number,
            outcome.value,
            bet,
            new_state.chips,
        )
        _emit(
            EngineEventType.ROUND_ENDED,
            new_state,
            outcome=outcome.value,
            bet=bet,
            net=outcome.payout(bet) - bet,
            chips=new_state.chips,
        )
        if broke:
            _emit(EngineEventType.GAME_ENDED, new_state, reason="broke", chips=0)
        return new_state
