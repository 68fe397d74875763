"""
Platform adapters for the tablejack engine.

This package provides adapters that translate between the core game engine
and the surfaces it is played on.
"""

from tablejack.adapters.base import PlatformAdapter
from tablejack.adapters.cli import CLIAdapter
from tablejack.adapters.dummy import DummyAdapter

__all__ = ["PlatformAdapter", "CLIAdapter", "DummyAdapter"]
