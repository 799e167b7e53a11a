"""Shared helpers for CLI commands."""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any
from typing import TypeVar

import click

from ..config import CostConfig
from ..console import console
from ..document.host import Document
from ..errors import ContextCostError
from ..errors import UnsupportedDocumentError
from ..errors import UserDeclinedConfirmationError
from ..session import ChatSession
from ..settings import SettingsManager
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Report context cost errors at the command boundary.

    Declined confirmations abort cleanly with status 0; other errors print
    a message and exit with status 1.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UserDeclinedConfirmationError as e:
            logger.info(f"Aborted: {e.action}")
            console.print("[yellow]Aborted.[/yellow]")
            return None
        except (ContextCostError, OSError) as e:
            logger.error(f"{func.__name__} failed: {e}")
            console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
            sys.exit(1)

    return wrapper  # type: ignore[return-value]


def load_config(ctx: click.Context | None = None, **overrides: Any) -> CostConfig:
    """Load settings and apply command-line overrides that were given."""
    settings = SettingsManager()
    if ctx is not None and ctx.obj and "settings" in ctx.obj:
        settings = ctx.obj["settings"]
    config = settings.load_cost_config()
    updates = {key: value for key, value in overrides.items() if value is not None}
    return config.model_copy(update=updates) if updates else config


def open_session(
    document_path: Path,
    config: CostConfig,
    *,
    assume_yes: bool = False,
    seed: bool = True,
) -> ChatSession:
    """Open a session for a document, seeding the live context from its saved context.

    Args:
        document_path: Chat document path
        config: Cost settings
        assume_yes: Answer every confirmation with yes
        seed: Restore the document's saved context into the session
    """
    confirm = (lambda prompt: True) if assume_yes else (lambda prompt: click.confirm(prompt, default=False))
    session = ChatSession(Document(document_path), config, confirm=confirm)
    if seed:
        try:
            session.restore_context(force=True)
        except UnsupportedDocumentError:
            logger.debug(f"{document_path} cannot hold a saved context")
    return session
