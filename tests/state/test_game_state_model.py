"""
Tests for the immutable GameState model.
"""

import pytest

from tablejack.blackjack.outcome import Outcome
from tablejack.errors import InvalidArgument
from tablejack.state import GameStage, GameState, Holder


def test_defaults():
    state = GameState()
    assert state.chips == 500
    assert state.bet_limit == 100
    assert state.current_bet == 0
    assert state.stage == GameStage.AWAITING_BET
    assert state.outcome is None
    assert state.deck == () and state.discard == ()
    assert state.id != GameState().id


def test_state_is_immutable():
    state = GameState()
    with pytest.raises(AttributeError):
        state.chips = 10


@pytest.mark.parametrize(
    "kwargs",
    [
        {"chips": -1},
        {"bet_limit": 0},
        {"current_bet": -5},
        {"current_bet": 101, "bet_limit": 100},
        {"turns_taken": -1},
    ],
)
def test_invalid_state(kwargs):
    with pytest.raises(InvalidArgument):
        GameState(**kwargs)


def test_broke():
    assert GameState(chips=0, current_bet=0).is_broke
    assert not GameState(chips=0, current_bet=50).is_broke
    assert not GameState(chips=10).is_broke


def test_hand_lookup(make_hand):
    state = GameState(player=make_hand("AS"), dealer=make_hand("KH"))
    assert state.hand(Holder.PLAYER) == make_hand("AS")
    assert state.hand(Holder.DEALER) == make_hand("KH")


def test_adapter_format_hides_hole_card(make_hand):
    state = GameState(
        player=make_hand("AS", "9D"),
        dealer=make_hand("7C") + make_hand("KH", face_up=False),
        chips=480,
        current_bet=20,
        stage=GameStage.PLAYER_TURN,
    )
    view = state.to_adapter_format()

    assert view["player"] == {
        "cards": [("ace", "spades", True), ("nine", "diamonds", True)],
        "score": "10/20",
    }
    assert view["dealer"]["cards"] == [("seven", "clubs", True), ("king", "hearts", False)]
    assert view["dealer"]["score"] == "7"
    assert view["chips"] == 480
    assert view["current_bet"] == 20
    assert view["stage"] == "PLAYER_TURN"
    assert view["outcome"] is None


def test_adapter_format_bust_marker(make_hand):
    state = GameState(
        player=make_hand("KS", "QD", "5C"),
        dealer=make_hand("7C", "KH"),
        outcome=Outcome.LOSE,
        stage=GameStage.ROUND_RESOLVED,
    )
    view = state.to_adapter_format()
    assert view["player"]["score"] == "bust"
    assert view["dealer"]["score"] == "17"
    assert view["outcome"] == "lose"


def test_to_dict(make_hand, stacked_state):
    state = stacked_state("AS", filler=1, player=make_hand("KS", "QD", "5C"))
    data = state.to_dict()
    assert data["cards_remaining"] == 53
    assert data["player"]["is_bust"] is True
    assert data["player"]["value"] is None
    assert data["stage"] == "AWAITING_BET"
