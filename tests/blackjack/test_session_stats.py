from tablejack.blackjack.stats import SessionStats
from tablejack.events import EventBus, EngineEventType


def test_initial_stats():
    stats = SessionStats(starting_chips=500)
    report = stats.report()
    assert report["rounds_played"] == 0
    assert report["wins"] == 0
    assert report["final_chips"] == 500
    assert stats.summary() == "No rounds played."


def test_update_counts_outcomes():
    stats = SessionStats(starting_chips=500)
    stats.update({"outcome": "blackjack", "bet": 20, "net": 30, "chips": 530})
    stats.update({"outcome": "lose", "bet": 50, "net": -50, "chips": 480})
    stats.update({"outcome": "push", "bet": 10, "net": 0, "chips": 480})
    stats.update({"outcome": "surrender", "bet": 10, "net": -5, "chips": 475})

    report = stats.report()
    assert report["rounds_played"] == 4
    assert report["wins"] == 1
    assert report["blackjacks"] == 1
    assert report["losses"] == 2
    assert report["surrenders"] == 1
    assert report["pushes"] == 1
    assert report["net_chips"] == -25
    assert report["total_wagered"] == 90
    assert report["final_chips"] == 475
    assert report["high_chips"] == 530
    assert report["low_chips"] == 475


def test_summary_text():
    stats = SessionStats(starting_chips=100)
    stats.update({"outcome": "win", "bet": 10, "net": 10, "chips": 110})
    summary = stats.summary()
    assert "Rounds played: 1" in summary
    assert "Won 1, lost 0, pushed 0" in summary
    assert "Net result: +10 chips" in summary
    assert "Chips: 110 (high 110, low 100)" in summary


def test_attach_listens_for_round_ended():
    bus = EventBus.get_instance()
    stats = SessionStats().attach(bus)

    bus.emit(EngineEventType.ROUND_ENDED, {"outcome": "win", "bet": 5, "net": 5, "chips": 505})
    bus.emit(EngineEventType.HAND_RESULT, {"outcome": "win"})
    assert stats.rounds_played == 1
    assert stats.low_chips == 505

    stats.detach()
    bus.emit(EngineEventType.ROUND_ENDED, {"outcome": "lose", "bet": 5, "net": -5, "chips": 500})
    assert stats.rounds_played == 1
