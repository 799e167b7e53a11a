"""Cost estimation: pricing lookup, word counting, the estimator and the context cost cache."""

from context_cost_cli.cost.cache import ContextCostCache
from context_cost_cli.cost.estimator import estimate
from context_cost_cli.cost.estimator import estimate_output
from context_cost_cli.cost.estimator import estimate_total
from context_cost_cli.cost.pricing import ModelRates
from context_cost_cli.cost.pricing import PricingLookup
from context_cost_cli.cost.words import WordCounter

__all__ = [
    "ContextCostCache",
    "ModelRates",
    "PricingLookup",
    "WordCounter",
    "estimate",
    "estimate_output",
    "estimate_total",
]
