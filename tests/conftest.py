"""Pytest configuration and shared fixtures for context-cost tests."""

from pathlib import Path

import pytest
from context_cost_cli.config import CostConfig
from context_cost_cli.cost.pricing import ModelRates
from context_cost_cli.cost.pricing import PricingLookup

TEST_MODEL = "test-model"


@pytest.fixture
def make_file(tmp_path):
    """Create a text file with an exact word count, optionally padded to a byte size."""

    def _make(name: str, words: int, size: int | None = None) -> Path:
        content = "w " * words
        if size is not None:
            assert size >= len(content), "size too small for word count"
            content += " " * (size - len(content))
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def pricing():
    """Registry with only the test model at $3 in / $15 out per million tokens."""
    return PricingLookup({TEST_MODEL: ModelRates(input=3.0, output=15.0)}, include_defaults=False)


@pytest.fixture
def config():
    return CostConfig(model=TEST_MODEL, tokens_per_word=1.5, output_tokens=1000)
