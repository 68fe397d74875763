"""
This module contains the SessionStats class which is responsible for
tracking the results of a blackjack session as rounds are paid out.
"""

from tablejack.blackjack.outcome import Outcome
from tablejack.events import EventBus, EngineEventType


class SessionStats:
    """
    A class that holds the statistics of a session.

    Call `attach` to update the statistics from ``ROUND_ENDED`` events, or
    feed event data to `update` directly.
    """

    def __init__(self, starting_chips=None):
        """
        Initializes the SessionStats with default values.
        """
        self.rounds_played = 0
        self.outcomes = {outcome: 0 for outcome in Outcome}
        self.net_chips = 0
        self.total_wagered = 0
        self.final_chips = starting_chips
        self.high_chips = starting_chips
        self.low_chips = starting_chips
        self._unsubscribe = None

    def attach(self, event_bus=None):
        """Start counting rounds reported on ``event_bus``."""
        event_bus = event_bus or EventBus.get_instance()
        self.detach()
        self._unsubscribe = event_bus.on(EngineEventType.ROUND_ENDED, self.update)
        return self

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def update(self, data):
        """Updates the statistics from the data of a finished round."""
        self.rounds_played += 1
        self.outcomes[Outcome(data["outcome"])] += 1
        self.net_chips += data.get("net", 0)
        self.total_wagered += data.get("bet", 0)

        chips = data.get("chips")
        if chips is not None:
            self.final_chips = chips
            self.high_chips = chips if self.high_chips is None else max(self.high_chips, chips)
            self.low_chips = chips if self.low_chips is None else min(self.low_chips, chips)

    @property
    def wins(self):
        return self.outcomes[Outcome.WIN] + self.outcomes[Outcome.BLACKJACK]

    @property
    def losses(self):
        return self.outcomes[Outcome.LOSE] + self.outcomes[Outcome.SURRENDER]

    def report(self):
        """
        Returns a dictionary containing the current statistics.
        """
        return {
            "rounds_played": self.rounds_played,
            "wins": self.wins,
            "losses": self.losses,
            "pushes": self.outcomes[Outcome.PUSH],
            "blackjacks": self.outcomes[Outcome.BLACKJACK],
            "surrenders": self.outcomes[Outcome.SURRENDER],
            "net_chips": self.net_chips,
            "total_wagered": self.total_wagered,
            "final_chips": self.final_chips,
            "high_chips": self.high_chips,
            "low_chips": self.low_chips,
        }

    def summary(self):
        """Returns a short text summary for the end of a session."""
        if self.rounds_played == 0:
            return "No rounds played."

        sign = "+" if self.net_chips >= 0 else ""
        lines = [
            f"Rounds played: {self.rounds_played}",
            f"Won {self.wins}, lost {self.losses}, pushed {self.outcomes[Outcome.PUSH]}"
            f" ({self.outcomes[Outcome.BLACKJACK]} blackjacks,"
            f" {self.outcomes[Outcome.SURRENDER]} surrenders)",
            f"Net result: {sign}{self.net_chips} chips",
        ]
        if self.final_chips is not None:
            lines.append(
                f"Chips: {self.final_chips} (high {self.high_chips}, low {self.low_chips})"
            )
        return "\n".join(lines)
