"""Cost formula.

Every function returns None ("unavailable") instead of a number when an
input is missing or invalid. No rounding happens here; formatting for
display is the presentation layer's job.
"""

TOKENS_PER_MILLION = 1_000_000


def estimate(word_count: int, tokens_per_word: float, rate_per_million: float | None) -> float | None:
    """Estimate the cost of a word count at a per-million-token rate.

    Args:
        word_count: Number of words (zero is valid)
        tokens_per_word: Word-to-token conversion factor; must be positive
        rate_per_million: Dollars per million tokens, or None if unavailable

    Returns:
        Dollar cost, or None if pricing is unavailable or the factor is not positive
    """
    if rate_per_million is None or tokens_per_word <= 0:
        return None
    return rate_per_million * tokens_per_word * word_count / TOKENS_PER_MILLION


def estimate_output(output_tokens: int, rate_per_million: float | None) -> float | None:
    """Estimate the cost of the assumed response length.

    output_tokens is already a token count, so no conversion factor applies.
    """
    if rate_per_million is None:
        return None
    return rate_per_million * output_tokens / TOKENS_PER_MILLION


def estimate_total(
    input_cost: float | None, context_cost: float | None, output_cost: float | None
) -> float | None:
    """Sum the three cost components, or None if any of them is unavailable."""
    if input_cost is None or context_cost is None or output_cost is None:
        return None
    return input_cost + context_cost + output_cost
