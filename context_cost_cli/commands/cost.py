"""Cost estimation commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..cost.pricing import PricingLookup
from ..display.formatters import format_cost
from ..utils.error_format import escape_markup
from .common import handle_errors
from .common import load_config
from .common import open_session


@click.command(name="cost")
@click.argument("document", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--model", "-m", help="Model to price with (overrides settings)")
@click.option("--backend", "-b", help="Backend serving the model (overrides settings)")
@click.option("--tokens-per-word", type=float, help="Word-to-token conversion factor")
@click.option("--output-tokens", type=click.IntRange(min=0), help="Assumed response length in tokens")
@click.option("--start", type=click.IntRange(min=0), help="Selection start offset (characters)")
@click.option("--end", type=click.IntRange(min=0), help="Selection end offset (characters)")
@click.option(
    "--context",
    "-c",
    "context_paths",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Extra file to attach to the context (repeatable)",
)
@click.pass_context
@handle_errors
def cost_cmd(
    ctx: click.Context,
    document: Path,
    model: str | None,
    backend: str | None,
    tokens_per_word: float | None,
    output_tokens: int | None,
    start: int | None,
    end: int | None,
    context_paths: tuple[Path, ...],
):
    """Estimate the cost of sending DOCUMENT with its context."""
    config = load_config(
        ctx, model=model, backend=backend, tokens_per_word=tokens_per_word, output_tokens=output_tokens
    )
    with open_session(document, config) as session:
        for path in context_paths:
            session.entries.add_file(path)

        if session.rates() is None:
            console.print(f"[yellow]No pricing for model '{escape_markup(session.model)}'; cost unavailable.[/yellow]")

        table = Table(title=f"Cost estimate: {escape_markup(document.name)}", show_header=True, header_style="bold cyan")
        table.add_column("Component", style="green")
        table.add_column("Cost", justify="right")
        table.add_row("Input", format_cost(session.get_input_cost(start, end)))
        table.add_row(f"Context ({len(session.entries)} entries)", format_cost(session.get_cached_context_cost()))
        table.add_row(f"Output ({config.output_tokens} tokens)", format_cost(session.get_output_cost()))
        table.add_row("[bold]Total[/bold]", f"[bold]{format_cost(session.get_total_cost(start, end))}[/bold]")
        console.print(table)
        console.print(f"[dim]Model: {escape_markup(session.model)}  Backend: {escape_markup(session.backend)}[/dim]")


@click.command(name="models")
@click.pass_context
def models_cmd(ctx: click.Context):
    """List models with known pricing."""
    config = load_config(ctx)
    pricing = PricingLookup(config.pricing)

    table = Table(title="Model Pricing ($ per million tokens)", show_header=True, header_style="bold cyan")
    table.add_column("Model", style="green")
    table.add_column("Input", justify="right")
    table.add_column("Output", justify="right")
    for model in pricing.known_models():
        rates = pricing.require(model)
        marker = " [cyan]*[/cyan]" if model == config.model else ""
        table.add_row(f"{model}{marker}", f"{rates.input:.2f}", f"{rates.output:.2f}")
    console.print(table)
