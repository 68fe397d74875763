"""
Game engines for tablejack.

Engines sit between a platform adapter and the pure state transitions,
asking the adapter for input and handing it each new state to display.
"""

from tablejack.engine.base import TableEngine
from tablejack.engine.blackjack import BlackjackEngine

__all__ = ["TableEngine", "BlackjackEngine"]
