"""
Chat session wiring for one document.

A ChatSession owns the event bus, the live context entries, the context
cost cache and the persistence store for a single document, and exposes
the query and command operations the CLI (or any other presentation
layer) uses. It holds no rendering logic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from types import TracebackType

from .config import CostConfig
from .context.entries import ContextEntrySet
from .context.models import DisplayRow
from .context.registry import ContextFileRegistry
from .cost.cache import ContextCostCache
from .cost.estimator import estimate
from .cost.estimator import estimate_output
from .cost.estimator import estimate_total
from .cost.pricing import ModelRates
from .cost.pricing import PricingLookup
from .cost.words import WordCounter
from .document.host import Document
from .document.host import file_size
from .document.persistence import ContextPersistenceStore
from .events.bus import EventBus
from .events.schemas import BackendChanged
from .events.schemas import ModelChanged

logger = logging.getLogger(__name__)


def _decline(prompt: str) -> bool:
    logger.debug(f"No confirmation handler, declining: {prompt}")
    return False


class ChatSession:
    """Cost, context and persistence operations for one chat document."""

    def __init__(
        self,
        document: Document,
        config: CostConfig | None = None,
        *,
        pricing: PricingLookup | None = None,
        word_counter: WordCounter | None = None,
        confirm: Callable[[str], bool] | None = None,
        size_of: Callable[[Path], int] = file_size,
    ):
        """Start a session and subscribe the cost cache.

        Args:
            document: The chat document
            config: Cost settings (defaults if None)
            pricing: Pricing registry (built from config overrides if None)
            word_counter: Word counter (file-backed if None)
            confirm: Blocking yes/no prompt; confirmations are declined if None
            size_of: File size lookup for the context file listing
        """
        self.document = document
        self.config = config or CostConfig()
        self.bus = EventBus(self.config)
        self.entries = ContextEntrySet(self.bus)
        self.pricing = pricing or PricingLookup(self.config.pricing)
        self.word_counter = word_counter or WordCounter()
        self.store = ContextPersistenceStore(confirm or _decline)

        self._model = self.config.model
        self._backend = self.config.backend
        self._size_of = size_of
        self._registry: ContextFileRegistry | None = None

        self.cache = ContextCostCache(
            self.entries,
            self.pricing,
            self.word_counter,
            model=lambda: self._model,
            tokens_per_word=lambda: self.config.tokens_per_word,
        )
        self.cache.attach(self.bus)
        self.cache.recompute()

    def close(self) -> None:
        """End the session, unsubscribing the cost cache."""
        self.cache.detach()

    def __enter__(self) -> ChatSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # Model and backend selection

    @property
    def model(self) -> str | None:
        return self._model

    @property
    def backend(self) -> str | None:
        return self._backend

    def set_model(self, model: str | None) -> None:
        self._model = model
        self.bus.publish(ModelChanged(model=model))

    def set_backend(self, backend: str | None) -> None:
        self._backend = backend
        self.bus.publish(BackendChanged(backend=backend))

    def rates(self) -> ModelRates | None:
        return self.pricing.rates(self._model)

    # Cost queries

    def get_cached_context_cost(self) -> float | None:
        return self.cache.read()

    def get_input_cost(self, start: int | None = None, end: int | None = None) -> float | None:
        """Cost of the document text (or the start:end selection), computed fresh."""
        rates = self.rates()
        words = self.word_counter.count_range(self.document, start, end)
        return estimate(words, self.config.tokens_per_word, rates.input if rates else None)

    def get_output_cost(self) -> float | None:
        rates = self.rates()
        return estimate_output(self.config.output_tokens, rates.output if rates else None)

    def get_total_cost(self, start: int | None = None, end: int | None = None) -> float | None:
        """Input plus cached context plus assumed output cost, or None if any is unavailable."""
        return estimate_total(self.get_input_cost(start, end), self.cache.read(), self.get_output_cost())

    # Context file listing

    @property
    def registry(self) -> ContextFileRegistry:
        if self._registry is None:
            self._registry = ContextFileRegistry(self.entries, self._size_of)
        return self._registry

    def list_display_rows(self) -> list[DisplayRow]:
        return self.registry.rows()

    def refresh_display_rows(self) -> list[DisplayRow]:
        """Rebuild the listing from the live context, clearing all flags."""
        return self.registry.refresh()

    def toggle_flag(self, row_id: str | Path) -> bool:
        return self.registry.toggle(row_id)

    def commit_removal(self) -> list[str]:
        return self.registry.commit_removal()

    # Persistence

    def load_context(self) -> list[str] | None:
        return self.store.load(self.document)

    def save_context(self, *, force: bool = False) -> list[str]:
        return self.store.save(self.document, self.entries, force=force)

    def restore_context(self, *, force: bool = False) -> bool:
        restored = self.store.restore(self.document, self.entries, force=force)
        if restored and self._registry is not None:
            self._registry.refresh()
        return restored
