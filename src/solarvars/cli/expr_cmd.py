"""Expression CLI commands: eval, validate, vars."""

from pathlib import Path

import click

from solarvars.cli.common import (
    build_context,
    context_option,
    echo_warning,
    format_value,
    load_config,
    var_option,
)
from solarvars.expressions import evaluate, extract_variables, validate_expression


@click.group()
def expr():
    """Expression commands."""
    pass


@expr.command("eval")
@click.argument("expression")
@var_option
@context_option
def eval_cmd(expression: str, overrides: dict[str, float], context_file: Path | None):
    """Evaluate EXPRESSION and print the result (or null)."""
    context = build_context(context_file, overrides)
    result = evaluate(
        expression,
        context,
        on_warning=echo_warning,
        config=load_config(),
    )
    click.echo(format_value(result))


@expr.command()
@click.argument("expression")
def validate(expression: str):
    """Check that EXPRESSION is well-formed."""
    result = validate_expression(expression, config=load_config())
    if not result.valid:
        click.echo(click.style(f"invalid: {result.error}", fg="red"))
        raise SystemExit(1)
    click.echo(click.style("valid", fg="green"))


@expr.command("vars")
@click.argument("expression")
def vars_cmd(expression: str):
    """List the variables referenced by EXPRESSION."""
    for name in sorted(extract_variables(expression)):
        click.echo(name)
