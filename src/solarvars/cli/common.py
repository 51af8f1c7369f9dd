"""Helpers shared by CLI commands."""

from pathlib import Path

import click

from solarvars.config import EngineConfig
from solarvars.variables.custom import format_number
from solarvars.variables.loader import DefinitionLoadError, load_context


def parse_var(ctx, param, values: tuple[str, ...]) -> dict[str, float]:
    """Click callback turning repeated NAME=VALUE options into a context."""
    context: dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", param=param)
        try:
            context[name] = float(raw)
        except ValueError:
            raise click.BadParameter(f"value for '{name}' is not a number: {raw!r}", param=param)
    return context


def build_context(context_file: Path | None, overrides: dict[str, float]) -> dict[str, float]:
    """Merge a YAML context file with --var overrides (overrides win)."""
    context: dict[str, float] = {}
    if context_file is not None:
        try:
            context.update(load_context(context_file))
        except DefinitionLoadError as e:
            fail(str(e))
    context.update(overrides)
    return context


def load_config() -> EngineConfig:
    """Read EngineConfig from the environment, failing cleanly on bad values."""
    try:
        return EngineConfig.from_env()
    except ValueError as e:
        fail(str(e))


def echo_warning(message: str) -> None:
    click.echo(click.style(f"Warning: {message}", fg="yellow"), err=True)


def fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    raise SystemExit(1)


def format_value(value: float | None) -> str:
    if value is None:
        return "null"
    return format_number(value)


var_option = click.option(
    "--var",
    "overrides",
    multiple=True,
    callback=parse_var,
    metavar="NAME=VALUE",
    help="Variable value (repeatable).",
)

context_option = click.option(
    "--context",
    "context_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file mapping variable names to values.",
)
