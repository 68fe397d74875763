"""
Tests for the BlackjackEngine class.

This module contains tests for the BlackjackEngine class to ensure it drives
rounds through an adapter and correctly implements the TableEngine interface.
"""

import pytest

from tablejack.adapters import CLIAdapter, DummyAdapter
from tablejack.blackjack.action import Move
from tablejack.blackjack.stats import SessionStats
from tablejack.common.io_interface import TestIOInterface
from tablejack.engine import BlackjackEngine, TableEngine
from tablejack.errors import InvalidMove
from tablejack.events import EngineEventType
from tablejack.state import GameStage


@pytest.fixture
def adapter():
    return DummyAdapter(bets=[20], moves=[Move.STAY])


@pytest.fixture
def blackjack_engine(adapter):
    """Create a BlackjackEngine instance for testing."""
    config = {"rules": {"deck_count": 4, "starting_chips": 500, "bet_limit": 100}}
    return BlackjackEngine(adapter, config)


async def stacked_engine(engine, stacked_state, *codes, **kwargs):
    await engine.initialize()
    engine.state = stacked_state(*codes, **kwargs)
    return engine


def event_types(adapter):
    return [event_type for event_type, _ in adapter.events]


def test_initialization(blackjack_engine, adapter):
    """Test that the engine initializes correctly."""
    assert isinstance(blackjack_engine, TableEngine)
    assert blackjack_engine.adapter is adapter
    assert blackjack_engine.event_bus is not None
    assert blackjack_engine.state is None
    assert blackjack_engine.rules.deck_count == 4


@pytest.mark.asyncio
async def test_initialize_and_shutdown(blackjack_engine, recorded_events):
    await blackjack_engine.initialize()
    assert recorded_events[-1][0] == "ENGINE_INIT"
    assert recorded_events[-1][1]["rules"]["deck_count"] == 4

    await blackjack_engine.shutdown()
    assert recorded_events[-1][0] == "ENGINE_SHUTDOWN"


@pytest.mark.asyncio
async def test_shutdown_stops_forwarding(blackjack_engine, adapter):
    await blackjack_engine.initialize()
    await blackjack_engine.shutdown()

    blackjack_engine.event_bus.emit(EngineEventType.HAND_RESULT, {"outcome": "win"})
    await blackjack_engine._flush_events()
    assert adapter.events == []


@pytest.mark.asyncio
async def test_start_game(blackjack_engine, recorded_events):
    await blackjack_engine.initialize()
    await blackjack_engine.start_game()

    state = blackjack_engine.state
    assert state.stage == GameStage.AWAITING_BET
    assert len(state.deck) == 4 * 52
    assert state.chips == 500
    assert "GAME_CREATED" in [event_type for event_type, _ in recorded_events]


@pytest.mark.asyncio
async def test_play_round_stay_and_lose(blackjack_engine, adapter, stacked_state):
    engine = await stacked_engine(blackjack_engine, stacked_state, "10S", "7H", "KC", "9D")
    state = await engine.play_round()

    assert state.stage == GameStage.AWAITING_BET
    assert state.chips == 480
    assert event_types(adapter) == ["HAND_RESULT", "PAYOUT"]
    assert adapter.get_events_by_type("HAND_RESULT")[0]["outcome"] == "lose"
    assert [view["stage"] for view in adapter.rendered_states] == [
        "AWAITING_BET",
        "PLAYER_TURN",
        "DEALER_TURN",
        "ROUND_RESOLVED",
    ]
    assert adapter.finished_rounds[0]["stage"] == "AWAITING_BET"


@pytest.mark.asyncio
async def test_render_hides_hole_card_during_player_turn(
    blackjack_engine, adapter, stacked_state
):
    engine = await stacked_engine(blackjack_engine, stacked_state, "10S", "7H", "KC", "9D")
    await engine.play_round()

    player_turn = adapter.rendered_states[1]
    assert player_turn["dealer"]["cards"][1][2] is False
    assert player_turn["dealer"]["score"] == "10"
    resolved = adapter.rendered_states[-1]
    assert resolved["dealer"]["score"] == "19"


@pytest.mark.asyncio
async def test_natural_skips_player_turn(stacked_state):
    adapter = DummyAdapter(bets=[20])
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "AS", "KH", "7C", "9D"
    )
    state = await engine.play_round()

    assert adapter.move_requests == []
    assert state.chips == 530
    assert adapter.get_events_by_type("HAND_RESULT")[0]["is_blackjack"] is True


def first_index(messages, text):
    return next(i for i, message in enumerate(messages) if text in message)


@pytest.mark.asyncio
async def test_natural_result_follows_revealed_table(stacked_state):
    io = TestIOInterface(["20"])
    engine = await stacked_engine(
        BlackjackEngine(CLIAdapter(io)), stacked_state, "AS", "10H", "7C", "9D"
    )
    await engine.play_round()

    messages = io.sent_messages
    assert first_index(messages, "nine of diamonds") < messages.index("Blackjack!")
    assert messages.index("Blackjack!") < messages.index("You win 30 chips.")


@pytest.mark.asyncio
async def test_surrender_result_follows_revealed_table(stacked_state):
    io = TestIOInterface(["20", "surrender"])
    engine = await stacked_engine(
        BlackjackEngine(CLIAdapter(io)), stacked_state, "10S", "6H", "10C", "KD"
    )
    state = await engine.play_round()

    messages = io.sent_messages
    assert state.chips == 490
    assert first_index(messages, "king of diamonds") < messages.index("Surrendered.")
    assert "Hidden card." not in messages[messages.index("Surrendered.") - 1]


@pytest.mark.asyncio
async def test_rejected_bet_is_reported_and_asked_again(stacked_state):
    adapter = DummyAdapter(bets=[500, 20], moves=[Move.STAY])
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "10S", "7H", "KC", "9D"
    )
    state = await engine.play_round()

    errors = adapter.get_events_by_type("ERROR")
    assert errors == [{"message": "Bet exceeds the table limit of 100"}]
    assert state.round_number == 1
    assert state.chips == 480


@pytest.mark.asyncio
async def test_ineligible_move_is_reported_and_asked_again(mocker, stacked_state):
    adapter = DummyAdapter(bets=[20])
    mocker.patch.object(
        adapter, "request_move", side_effect=[Move.HIT, Move.SURRENDER, Move.STAY]
    )
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "2S", "3H", "KC", "9D", "4C"
    )
    state = await engine.play_round()

    errors = adapter.get_events_by_type("ERROR")
    assert errors == [{"message": "surrender is not allowed during PLAYER_TURN"}]
    assert len(state.discard) == 5
    assert state.chips == 480


@pytest.mark.asyncio
async def test_double_down_plays_dealer(stacked_state):
    adapter = DummyAdapter(bets=[20], moves=[Move.DOUBLE_DOWN])
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "5S", "6H", "10C", "6D", "10H", "2C"
    )
    state = await engine.play_round()

    assert adapter.get_events_by_type("PAYOUT") == [
        {
            "game_id": state.id,
            "round_number": 1,
            "outcome": "win",
            "bet": 40,
            "payout": 80,
            "chips": 540,
        }
    ]
    dealer_turns = [v for v in adapter.rendered_states if v["stage"] == "DEALER_TURN"]
    assert len(dealer_turns) == 2


@pytest.mark.asyncio
async def test_exit_at_bet_prompt(blackjack_engine, adapter):
    adapter.bets = []
    await blackjack_engine.initialize()
    state = await blackjack_engine.run()

    assert state.stage == GameStage.SESSION_ENDED
    assert state.chips == 500
    assert adapter.get_events_by_type("GAME_ENDED")[0]["reason"] == "exit"


@pytest.mark.asyncio
async def test_exit_mid_round_keeps_bet_outstanding(stacked_state):
    adapter = DummyAdapter(bets=[20], moves=[Move.EXIT])
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "10S", "7H", "KC", "9D"
    )
    state = await engine.run()

    assert state.is_over
    assert state.chips == 480
    assert state.current_bet == 20
    assert adapter.finished_rounds == []


@pytest.mark.asyncio
async def test_run_until_broke(stacked_state):
    adapter = DummyAdapter(bets=[20, 20], moves=[Move.STAY])
    engine = await stacked_engine(
        BlackjackEngine(adapter), stacked_state, "10S", "7H", "KC", "9D", chips=20
    )
    state = await engine.run()

    assert state.stage == GameStage.SESSION_ENDED
    assert state.is_broke
    assert adapter.get_events_by_type("GAME_ENDED")[0]["reason"] == "broke"
    assert adapter.finished_rounds[0]["stage"] == "SESSION_ENDED"
    # the second bet was never requested
    assert adapter.bets == [20]


@pytest.mark.asyncio
async def test_play_round_outside_betting_stage(blackjack_engine, stacked_state):
    engine = await stacked_engine(
        blackjack_engine, stacked_state, stage=GameStage.PLAYER_TURN, current_bet=10
    )
    with pytest.raises(InvalidMove, match="Cannot start a round during PLAYER_TURN"):
        await engine.play_round()


def doubling_strategy(moves):
    return Move.DOUBLE_DOWN if Move.DOUBLE_DOWN in moves else Move.STAY


async def seeded_session(seed):
    adapter = DummyAdapter(bets=[10] * 20, strategy_function=doubling_strategy)
    engine = BlackjackEngine(
        adapter, {"deck_count": 4, "reshuffle_threshold": 150, "seed": seed}
    )
    stats = SessionStats(starting_chips=500).attach(engine.event_bus)
    await engine.initialize()
    state = await engine.run()
    await engine.shutdown()
    return state, stats, adapter


@pytest.mark.asyncio
async def test_seeded_session_accounting():
    state, stats, adapter = await seeded_session(42)

    assert stats.rounds_played == 20
    assert state.chips == 500 + stats.net_chips
    assert state.current_bet == 0
    assert len(state.deck) + len(state.discard) == 4 * 52
    assert adapter.get_events_by_type("SHUFFLE")


@pytest.mark.asyncio
async def test_seeded_sessions_repeat():
    first, _, _ = await seeded_session(7)
    second, _, _ = await seeded_session(7)
    assert first.chips == second.chips
    assert first.deck == second.deck
