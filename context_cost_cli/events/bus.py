"""Event bus for context mutation and model selection events."""

import logging
from collections.abc import Callable
from typing import Any

from context_cost_cli.events.schemas import ContextEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[ContextEvent, Any], None]


class EventBus:
    """Simple event bus for publishing and subscribing to context events.

    Subscribers are called synchronously, in subscription order, before
    publish() returns. Errors in handlers are isolated and logged to
    prevent one failing handler from breaking others.
    """

    def __init__(self, config: Any = None) -> None:
        self._subscribers: list[EventHandler] = []
        self._config = config

    def subscribe(self, handler: EventHandler) -> None:
        """Subscribe a handler to receive all context events.

        Args:
            handler: Callable that takes a ContextEvent and config
        """
        self._subscribers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove one subscription of a handler. Unknown handlers are ignored."""
        try:
            self._subscribers.remove(handler)
        except ValueError:
            logger.debug(f"Handler {handler!r} was not subscribed")

    def publish(self, event: ContextEvent) -> None:
        """Publish an event to all subscribers.

        Errors in handlers are caught and logged to prevent cascading failures.

        Args:
            event: ContextEvent to publish
        """
        # Snapshot so handlers may unsubscribe while being notified
        for handler in list(self._subscribers):
            try:
                handler(event, self._config)
            except Exception:
                logger.exception(f"Error in event handler {getattr(handler, '__name__', handler)!r}")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
