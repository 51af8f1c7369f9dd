"""solarvars CLI entry point."""

import logging

import click


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level for library diagnostics.",
)
def cli(log_level: str):
    """solarvars: custom variable expressions for solar proposals."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


# Register subcommand groups
from solarvars.cli.expr_cmd import expr  # noqa: E402
from solarvars.cli.variables_cmd import variables  # noqa: E402

cli.add_command(expr)
cli.add_command(variables)
