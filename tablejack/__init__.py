"""
tablejack: a single-player blackjack table.

The engine is built from immutable game states moved along by pure
transition functions, with platform adapters handling input and display.
"""

__version__ = "0.1.0"
