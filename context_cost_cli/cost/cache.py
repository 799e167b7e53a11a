"""Cached cost of the context portion of a request.

Counting context files means file I/O, so the aggregate context cost is
cached and recomputed eagerly on the few events that can change it:
entries added or removed, and model or backend changes. The cost of the
live document or selection is cheap and always computed fresh by callers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from typing import Any

from ..events.bus import EventBus
from ..events.schemas import ContextEvent
from .estimator import estimate
from .pricing import PricingLookup
from .words import WordCounter

if TYPE_CHECKING:
    from ..context.entries import ContextEntrySet

logger = logging.getLogger(__name__)


class ContextCostCache:
    """One nullable cell holding the dollar cost of all context entries.

    Contract:
    - Init: value is None
    - Any subscribed event: synchronous recompute from the current entries,
      model and pricing; None when pricing is unavailable or a file cannot
      be read
    - read(): current value, no side effects
    """

    def __init__(
        self,
        entries: ContextEntrySet,
        pricing: PricingLookup,
        word_counter: WordCounter,
        model: Callable[[], str | None],
        tokens_per_word: Callable[[], float],
    ):
        """Initialize an empty cache.

        Args:
            entries: Live context entry set to price
            pricing: Pricing registry
            word_counter: Counter used for each entry
            model: Returns the currently selected model
            tokens_per_word: Returns the current word-to-token factor
        """
        self._entries = entries
        self._pricing = pricing
        self._counter = word_counter
        self._model = model
        self._tokens_per_word = tokens_per_word
        self._value: float | None = None
        self._bus: EventBus | None = None
        self.recompute_count = 0

    def read(self) -> float | None:
        return self._value

    def attach(self, bus: EventBus) -> None:
        """Subscribe to mutation events (session start)."""
        if self._bus is not None:
            self.detach()
        bus.subscribe(self.handle_event)
        self._bus = bus

    def detach(self) -> None:
        """Unsubscribe from mutation events (session end)."""
        if self._bus is not None:
            self._bus.unsubscribe(self.handle_event)
            self._bus = None

    def handle_event(self, event: ContextEvent, config: Any) -> None:
        logger.debug(f"Recomputing context cost after {event.type}")
        self.recompute()

    def recompute(self) -> float | None:
        """Recompute the cached value from scratch and return it.

        Never raises for unreadable or undecodable entries: the value becomes
        None instead, so the cache is never left holding a stale number.
        """
        self.recompute_count += 1
        rates = self._pricing.rates(self._model())
        if rates is None:
            self._value = None
            return None

        try:
            words = self._counter.count_entries(self._entries)
        except (OSError, ValueError) as e:
            # ValueError covers UnicodeDecodeError from buffer text
            logger.warning(f"Context cost unavailable, failed to read context entry: {e}")
            self._value = None
            return None

        self._value = estimate(words, self._tokens_per_word(), rates.input)
        logger.debug(f"Context cost recomputed: {words} words -> {self._value}")
        return self._value
