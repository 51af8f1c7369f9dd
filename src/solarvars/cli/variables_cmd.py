"""Variable CLI commands: catalog, resolve, test."""

from pathlib import Path

import click

from solarvars.cli.common import (
    build_context,
    context_option,
    echo_warning,
    fail,
    format_value,
    load_config,
    var_option,
)
from solarvars.variables import (
    DefinitionLoadError,
    default_catalog,
    dry_run_expression,
    load_custom_variables,
    resolve_custom_variables,
    unknown_references,
)


@click.group()
def variables():
    """Proposal variable commands."""
    pass


@variables.command()
def catalog():
    """List the built-in proposal variables."""
    for definition in default_catalog().list_all():
        unit = f" ({definition.unit})" if definition.unit else ""
        click.echo(
            f"{definition.reference:<24} {definition.category.value:<11} "
            f"{definition.description}{unit}"
        )


@variables.command()
@click.argument("definitions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@var_option
@context_option
def resolve(definitions_file: Path, overrides: dict[str, float], context_file: Path | None):
    """Evaluate the custom variables in DEFINITIONS_FILE."""
    try:
        definitions = load_custom_variables(definitions_file)
    except DefinitionLoadError as e:
        fail(str(e))

    context = build_context(context_file, overrides)
    results = resolve_custom_variables(
        definitions,
        context,
        on_warning=echo_warning,
        config=load_config(),
    )

    for name, value in results.items():
        click.echo(f"{name} = {format_value(value)}")


@variables.command("test")
@click.argument("expression")
@click.option(
    "--sample-value",
    type=float,
    default=None,
    help="Value given to every catalog variable (default from SOLARVARS_SAMPLE_VALUE).",
)
def test_cmd(expression: str, sample_value: float | None):
    """Run EXPRESSION against sample values, as the template editor does."""
    if sample_value is None:
        sample_value = load_config().sample_value

    catalog = default_catalog()
    result = dry_run_expression(expression, catalog, sample_value)

    if not result.valid:
        click.echo(click.style(result.message, fg="red"))
        raise SystemExit(1)

    unknown = unknown_references(expression, catalog)
    if unknown:
        echo_warning("not in catalog: " + ", ".join(f"[{name}]" for name in unknown))

    click.echo(result.message)
