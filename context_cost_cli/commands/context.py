"""Context persistence and pruning commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..context.models import DisplayRow
from ..context.registry import ContextFileRegistry
from ..display.formatters import format_cost
from ..display.formatters import format_size
from ..session import ChatSession
from ..utils.error_format import escape_markup
from .common import handle_errors
from .common import load_config
from .common import open_session

DOCUMENT_ARG = click.argument("document", type=click.Path(dir_okay=False, path_type=Path))


def _render_rows(rows: list[DisplayRow], title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Flag")
    table.add_column("Size", justify="right", style="yellow")
    table.add_column("Path", style="green")
    for index, row in enumerate(rows, start=1):
        flag = "[red]D[/red]" if row.flagged else ""
        table.add_row(
            str(index), flag, format_size(row.size), escape_markup(ContextFileRegistry.display_path(row))
        )
    console.print(table)


def _print_context_cost(session: ChatSession) -> None:
    console.print(f"Context cost: [bold]{format_cost(session.get_cached_context_cost())}[/bold]")


@click.group(invoke_without_command=True)
@click.pass_context
def context(ctx: click.Context):
    """Save, restore and prune the context files of a chat document."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@context.command(name="list")
@DOCUMENT_ARG
@click.pass_context
@handle_errors
def context_list(ctx: click.Context, document: Path):
    """List the saved context files of DOCUMENT, largest first."""
    with open_session(document, load_config(ctx), seed=False) as session:
        if not session.restore_context(force=True):
            console.print(f"[yellow]No saved context in {escape_markup(document.name)}.[/yellow]")
            return
        _render_rows(session.refresh_display_rows(), f"Context files: {escape_markup(document.name)}")
        _print_context_cost(session)


@context.command(name="save")
@DOCUMENT_ARG
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Overwrite an existing saved context without asking")
@click.pass_context
@handle_errors
def context_save(ctx: click.Context, document: Path, paths: tuple[Path, ...], yes: bool):
    """Save PATHS as the context of DOCUMENT."""
    with open_session(document, load_config(ctx), assume_yes=yes, seed=False) as session:
        for path in paths:
            session.entries.add_file(path)
        saved = session.save_context()
        console.print(f"[green]✓ Saved {len(saved)} context file(s) to {escape_markup(document.name)}[/green]")
        _print_context_cost(session)


@context.command(name="restore")
@DOCUMENT_ARG
@click.pass_context
@handle_errors
def context_restore(ctx: click.Context, document: Path):
    """Restore the saved context of DOCUMENT and show its cost."""
    with open_session(document, load_config(ctx), seed=False) as session:
        if not session.restore_context():
            console.print(f"[yellow]No saved context in {escape_markup(document.name)}.[/yellow]")
            return
        console.print(f"[green]✓ Restored {len(session.entries)} context file(s)[/green]")
        for entry in session.entries.files():
            console.print(f"  {escape_markup(entry.path)}")
        _print_context_cost(session)


@context.command(name="prune")
@DOCUMENT_ARG
@click.option(
    "--flag",
    "-f",
    "flags",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Context file to remove (repeatable); prompts for row numbers if omitted",
)
@click.option("--yes", "-y", is_flag=True, help="Save the pruned context without asking")
@click.pass_context
@handle_errors
def context_prune(ctx: click.Context, document: Path, flags: tuple[Path, ...], yes: bool):
    """Remove files from the saved context of DOCUMENT."""
    with open_session(document, load_config(ctx), assume_yes=yes, seed=False) as session:
        if not session.restore_context(force=True):
            console.print(f"[yellow]No saved context in {escape_markup(document.name)}.[/yellow]")
            return

        rows = session.refresh_display_rows()
        if flags:
            for path in flags:
                try:
                    session.toggle_flag(path)
                except KeyError:
                    console.print(f"[yellow]Not in context: {escape_markup(path)}[/yellow]")
        else:
            _render_rows(rows, f"Context files: {escape_markup(document.name)}")
            answer = click.prompt("Rows to remove (space separated)", default="", show_default=False)
            for token in answer.split():
                if not token.isdigit() or not 1 <= int(token) <= len(rows):
                    raise click.BadParameter(f"'{token}' is not a row number between 1 and {len(rows)}")
                session.toggle_flag(rows[int(token) - 1].entry.identity)

        removed = session.commit_removal()
        if not removed:
            console.print("[dim]Nothing to do.[/dim]")
            return

        session.save_context(force=yes)
        console.print(f"[green]✓ Removed {len(removed)} context file(s)[/green]")
        for identity in removed:
            console.print(f"  [dim]{escape_markup(identity)}[/dim]")
        _print_context_cost(session)


@context.command(name="clear")
@DOCUMENT_ARG
@click.option("--yes", "-y", is_flag=True, help="Clear without asking")
@click.pass_context
@handle_errors
def context_clear(ctx: click.Context, document: Path, yes: bool):
    """Clear the saved context of DOCUMENT."""
    with open_session(document, load_config(ctx), assume_yes=yes, seed=False) as session:
        session.save_context()
        console.print(f"[green]✓ Cleared saved context in {escape_markup(document.name)}[/green]")
