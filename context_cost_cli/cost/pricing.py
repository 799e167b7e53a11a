"""Pricing registry lookup.

Rates are dollars per million tokens. A model without a registered rate is
"unavailable" and never defaults to zero, which would understate cost.
"""

import logging

from pydantic import BaseModel
from pydantic import Field

from ..errors import PricingUnavailableError

logger = logging.getLogger(__name__)


class ModelRates(BaseModel):
    """Input and output rates for a model, in dollars per million tokens."""

    input: float = Field(ge=0, description="Input rate per million tokens")
    output: float = Field(ge=0, description="Output rate per million tokens")


DEFAULT_RATES: dict[str, ModelRates] = {
    "claude-3-5-haiku": ModelRates(input=0.80, output=4.00),
    "claude-haiku-4-5": ModelRates(input=1.00, output=5.00),
    "claude-sonnet-4": ModelRates(input=3.00, output=15.00),
    "claude-sonnet-4-5": ModelRates(input=3.00, output=15.00),
    "claude-opus-4-1": ModelRates(input=15.00, output=75.00),
    "gpt-4o": ModelRates(input=2.50, output=10.00),
    "gpt-4o-mini": ModelRates(input=0.15, output=0.60),
    "gpt-4.1": ModelRates(input=2.00, output=8.00),
    "gpt-4.1-mini": ModelRates(input=0.40, output=1.60),
    "gpt-5": ModelRates(input=1.25, output=10.00),
    "gpt-5-mini": ModelRates(input=0.25, output=2.00),
    "gemini-2.5-pro": ModelRates(input=1.25, output=10.00),
    "gemini-2.5-flash": ModelRates(input=0.30, output=2.50),
}


class PricingLookup:
    """Read-only adapter over the pricing registry."""

    def __init__(self, overrides: dict[str, ModelRates] | None = None, *, include_defaults: bool = True):
        """Initialize the registry.

        Args:
            overrides: Configured rates; these win over built-in defaults
            include_defaults: Whether to start from the built-in rate table
        """
        self._rates: dict[str, ModelRates] = dict(DEFAULT_RATES) if include_defaults else {}
        if overrides:
            self._rates.update(overrides)

    def rates(self, model: str | None) -> ModelRates | None:
        """Return the rates for a model, or None when unavailable."""
        if model is None:
            return None
        found = self._rates.get(model)
        if found is None:
            logger.debug(f"No pricing registered for model '{model}'")
        return found

    def require(self, model: str | None) -> ModelRates:
        """Return the rates for a model.

        Raises:
            PricingUnavailableError: If no rates are registered
        """
        found = self.rates(model)
        if found is None:
            raise PricingUnavailableError(model)
        return found

    def known_models(self) -> list[str]:
        return sorted(self._rates)
