"""Formatting utilities for CLI display."""

from pathlib import Path


def abbreviate_home(path: Path | str) -> str:
    """Replace the user's home directory prefix with ``~``.

    Display only; identity and removal always use the full path.
    """
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    if text.startswith(home.rstrip("/") + "/"):
        return "~" + text[len(home.rstrip("/")) :]
    return text


def format_size(size_bytes: int) -> str:
    """Format bytes as human-readable size."""
    size_float = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size_float < 1024:
            return f"{size_float:.1f} {unit}"
        size_float /= 1024
    return f"{size_float:.1f} TB"


def format_cost(cost: float | None, digits: int = 4) -> str:
    """Format a dollar cost, or "unavailable" when it cannot be computed."""
    if cost is None:
        return "unavailable"
    return f"${cost:.{digits}f}"
