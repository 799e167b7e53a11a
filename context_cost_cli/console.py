"""Shared Rich console instance for CLI output."""

from rich.console import Console

console = Console()

__all__ = ["console"]
