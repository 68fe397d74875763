"""
Event system for the tablejack engine.

This package provides the event bus that transitions publish to and adapters
listen on.
"""

from tablejack.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
