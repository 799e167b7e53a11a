"""Context Cost CLI - cost estimates and context management for LLM chat documents."""

import logging
from pathlib import Path

import click

from .commands.context import context as context_group
from .commands.cost import cost_cmd
from .commands.cost import models_cmd
from .logging_setup import init_json_logging
from .settings import SettingsManager

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="context-cost-cli")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log file",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="JSONL log file path")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding project settings (default: ./.context-cost)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, config_dir: Path | None):
    """Context Cost - estimate and manage the cost of LLM chat context."""
    init_json_logging(log_file, log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = SettingsManager(config_dir)
    logger.debug(f"Invoked {ctx.invoked_subcommand}")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(cost_cmd)
cli.add_command(models_cmd)
cli.add_command(context_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
