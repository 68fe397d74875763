"""
Command line entry point for an interactive blackjack session.
"""

import argparse
import asyncio
import logging

from tablejack.adapters import CLIAdapter
from tablejack.blackjack.odds import percent_chance
from tablejack.blackjack.rules import (
    DEFAULT_BET_LIMIT,
    DEFAULT_DECK_COUNT,
    DEFAULT_STARTING_CHIPS,
    MAX_TABLE_DECKS,
    MIN_TABLE_DECKS,
)
from tablejack.blackjack.stats import SessionStats
from tablejack.common.io_interface import ConsoleIOInterface, LoggingIOInterface
from tablejack.engine import BlackjackEngine


def _bounded_int(minimum):
    def parse(value):
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
        if number < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {number}")
        return number

    return parse


_non_negative_int = _bounded_int(0)
_positive_int = _bounded_int(1)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play blackjack against the dealer.")
    parser.add_argument(
        "--decks",
        type=int,
        choices=range(MIN_TABLE_DECKS, MAX_TABLE_DECKS + 1),
        default=DEFAULT_DECK_COUNT,
        metavar=f"{{{MIN_TABLE_DECKS}-{MAX_TABLE_DECKS}}}",
        help=f"number of decks in the shoe (default: {DEFAULT_DECK_COUNT})",
    )
    parser.add_argument(
        "--chips",
        type=_non_negative_int,
        default=DEFAULT_STARTING_CHIPS,
        help=f"chips to start with (default: {DEFAULT_STARTING_CHIPS})",
    )
    parser.add_argument(
        "--bet-limit",
        type=_positive_int,
        default=DEFAULT_BET_LIMIT,
        help=f"largest bet the table accepts (default: {DEFAULT_BET_LIMIT})",
    )
    parser.add_argument(
        "--dealer-delay",
        type=float,
        default=0.6,
        help="seconds to pause between dealer draws (default: 0.6)",
    )
    parser.add_argument("--seed", type=int, help="seed the shuffle for a repeatable shoe")
    parser.add_argument(
        "--transcript", type=str, help="append a transcript of the session to this file"
    )
    parser.add_argument(
        "--odds",
        type=int,
        metavar="SCORE",
        help="print the chance of being dealt SCORE in two cards, then exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


async def play(args, io_interface=None):
    """
    Run a session with the given arguments.

    Returns:
        The `SessionStats` collected while playing
    """
    io_interface = io_interface or ConsoleIOInterface()
    if args.transcript:
        io_interface = LoggingIOInterface(args.transcript, inner=io_interface)

    adapter = CLIAdapter(io_interface, dealer_delay=args.dealer_delay)
    engine = BlackjackEngine(
        adapter,
        {
            "rules": {
                "deck_count": args.decks,
                "starting_chips": args.chips,
                "bet_limit": args.bet_limit,
            },
            "seed": args.seed,
        },
    )
    stats = SessionStats(starting_chips=args.chips).attach(engine.event_bus)

    await engine.initialize()
    try:
        await engine.run()
    finally:
        await engine.shutdown()
        stats.detach()
    return stats


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.odds is not None:
        chance = percent_chance(args.odds, 1000, rng=args.seed)
        print(f"Chance of a two-card {args.odds}: {chance:.2%}")
        return 0

    stats = asyncio.run(play(args))
    print(stats.summary())
    return 0
