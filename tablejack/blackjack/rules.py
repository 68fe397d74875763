"""House rules and table configuration."""

from typing import Any, Dict, Optional

from tablejack.errors import InvalidArgument

DEFAULT_DECK_COUNT = 6
DEFAULT_STARTING_CHIPS = 500
DEFAULT_BET_LIMIT = 100
DEFAULT_RESHUFFLE_THRESHOLD = 52

# Shoe depths offered at the table
MIN_TABLE_DECKS = 4
MAX_TABLE_DECKS = 8


def _require_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgument(f"{name} must be at least {minimum}, got {value}")
    return value


class Rules:
    """
    Table settings for a blackjack session.

    The dealer's stand rule and the payout table are fixed and not part of
    the configuration.
    """

    def __init__(
        self,
        deck_count: int = DEFAULT_DECK_COUNT,
        starting_chips: int = DEFAULT_STARTING_CHIPS,
        bet_limit: int = DEFAULT_BET_LIMIT,
        reshuffle_threshold: int = DEFAULT_RESHUFFLE_THRESHOLD,
    ):
        self.deck_count = _require_int("deck_count", deck_count, 1)
        self.starting_chips = _require_int("starting_chips", starting_chips, 0)
        self.bet_limit = _require_int("bet_limit", bet_limit, 1)
        self.reshuffle_threshold = _require_int(
            "reshuffle_threshold", reshuffle_threshold, 0
        )

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "Rules":
        """
        Build rules from an engine config dict.

        Settings may sit under a ``"rules"`` key or at the top level; nested
        values win. Unknown keys are ignored.
        """
        config = dict(config or {})
        merged = {**config, **config.get("rules", {})}
        known = ("deck_count", "starting_chips", "bet_limit", "reshuffle_threshold")
        return cls(**{key: merged[key] for key in known if key in merged})

    def to_dict(self) -> dict:
        """Convert rules to a dictionary for serialization."""
        return {
            "deck_count": self.deck_count,
            "starting_chips": self.starting_chips,
            "bet_limit": self.bet_limit,
            "reshuffle_threshold": self.reshuffle_threshold,
        }

    def __eq__(self, other):
        if isinstance(other, Rules):
            return self.to_dict() == other.to_dict()
        return NotImplemented

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"Rules({fields})"
