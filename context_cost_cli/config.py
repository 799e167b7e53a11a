"""Cost configuration model."""

from pydantic import BaseModel
from pydantic import Field

from .cost.pricing import ModelRates

# Word-to-token conversion factor; English prose averages roughly 1.3-1.5
DEFAULT_TOKENS_PER_WORD = 1.5

# Assumed response length, in tokens, used to price the output side
DEFAULT_OUTPUT_TOKENS = 1000


class CostConfig(BaseModel):
    """User-overridable cost estimation settings.

    Attributes:
        tokens_per_word: Conversion factor from words to tokens
        output_tokens: Fixed assumption for the response size
        model: Selected model identifier
        backend: Selected backend identifier
        pricing: Rate overrides/additions in dollars per million tokens
    """

    tokens_per_word: float = Field(default=DEFAULT_TOKENS_PER_WORD)
    output_tokens: int = Field(default=DEFAULT_OUTPUT_TOKENS, ge=0)
    model: str | None = None
    backend: str | None = None
    pricing: dict[str, ModelRates] = Field(default_factory=dict)
