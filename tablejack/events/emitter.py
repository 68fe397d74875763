"""
Event system for the tablejack engine.

State transitions announce what happened through a process-wide event bus.
Adapters, statistics collectors and tests subscribe to the events they care
about without the transitions knowing who is listening.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Union
import threading
import logging
from enum import Enum

logger = logging.getLogger("tablejack.events")


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


def _event_name(event_type: Union[str, Enum]) -> str:
    return event_type.name if isinstance(event_type, Enum) else event_type


class EventEmitter:
    """
    Event emitter with priority-ordered subscriptions.

    Handlers with a higher priority run first; handlers of equal priority run
    in subscription order. Handlers registered with `on_any` receive an
    ``(event_type, data)`` pair and run after the specific handlers. A
    failing handler is logged and does not stop the others.
    """

    def __init__(self):
        self._listeners = defaultdict(list)
        self._global_listeners = []
        self._listener_lock = threading.RLock()

    def _subscribe(
        self, handlers: List[Dict[str, Any]], callback: Callable, priority: EventPriority
    ) -> Callable:
        """Insert ``callback`` into ``handlers`` by priority and return its remover."""
        handler = {"callback": callback, "priority": priority.value}

        with self._listener_lock:
            position = next(
                (i for i, h in enumerate(handlers) if h["priority"] < priority.value),
                len(handlers),
            )
            handlers.insert(position, handler)

        def unsubscribe():
            with self._listener_lock:
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: Event name or `EngineEventType` member
            callback: Called as ``callback(data)``
            priority: Priority level for this handler

        Returns:
            Function that removes this subscription
        """
        return self._subscribe(self._listeners[_event_name(event_type)], callback, priority)

    def once(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """Subscribe for the next occurrence of ``event_type`` only."""
        unsubscribe_ref = []

        def one_time_handler(event_data):
            try:
                callback(event_data)
            finally:
                unsubscribe_ref[0]()

        unsubscribe_ref.append(self.on(event_type, one_time_handler, priority))
        return unsubscribe_ref[0]

    def on_any(
        self, callback: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """Subscribe to every event; ``callback`` receives ``(event_type, data)``."""
        return self._subscribe(self._global_listeners, callback, priority)

    def emit(self, event_type: Union[str, Enum], data: Dict[str, Any]) -> None:
        """
        Call every handler subscribed to ``event_type``, then the global ones.

        Args:
            event_type: Event name or `EngineEventType` member
            data: Payload passed to the handlers
        """
        event_type = _event_name(event_type)

        with self._listener_lock:
            calls = [(h["callback"], data) for h in self._listeners.get(event_type, [])]
            calls += [(h["callback"], (event_type, data)) for h in self._global_listeners]

        # Handlers run outside the lock so they may subscribe or emit themselves
        for callback, args in calls:
            try:
                callback(args)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event_type}: {e}", exc_info=True
                )

    def remove_all_listeners(
        self, event_type: Optional[Union[str, Enum]] = None
    ) -> None:
        """
        Remove the listeners for one event type, or every listener when None.
        """
        with self._listener_lock:
            if event_type is None:
                self._listeners.clear()
                self._global_listeners.clear()
            else:
                self._listeners[_event_name(event_type)].clear()


class EventBus:
    """
    Global event bus for the application.

    This singleton class provides a centralized event bus that can be accessed
    from anywhere in the application.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        """
        Get the singleton instance of the EventBus.

        Returns:
            EventEmitter instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Event types for the tablejack engine.

    These cover the game flow and give adapters hooks to respond to state
    changes.
    """

    # Core lifecycle events
    ENGINE_INIT = "engine_init"
    ENGINE_SHUTDOWN = "engine_shutdown"

    # Game lifecycle
    GAME_CREATED = "game_created"
    GAME_ENDED = "game_ended"
    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"

    # Player events
    PLAYER_BET = "player_bet"
    PLAYER_ACTION = "player_action"

    # Card events
    CARD_DEALT = "card_dealt"
    CARD_REVEALED = "card_revealed"
    SHUFFLE = "shuffle"

    # Hand events
    HAND_RESULT = "hand_result"
    PAYOUT = "payout"

    # Dealer events
    DEALER_ACTION = "dealer_action"

    # Rejected input
    ERROR = "error"
