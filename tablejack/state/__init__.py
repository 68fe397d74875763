"""
Immutable state management for the tablejack engine.

This package provides the immutable game state and the pure transition
functions that move it through a round.
"""

from tablejack.state.models import GameState, GameStage, Holder

from tablejack.state.transitions import StateTransitionEngine

__all__ = [
    "GameState",
    "GameStage",
    "Holder",
    "StateTransitionEngine",
]
