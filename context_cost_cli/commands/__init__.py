"""CLI commands for context-cost."""

__all__ = [
    "context",
    "cost",
]
