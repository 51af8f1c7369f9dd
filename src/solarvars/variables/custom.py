"""Tenant-defined custom variables (``vc_*``) for proposal templates.

A custom variable names an expression over the catalog variables (and
over other custom variables with a lower ``ordem``). Definitions are
validated on construction; evaluation never raises.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, field_validator

from solarvars.config import EngineConfig
from solarvars.expressions import ExpressionContext, WarningHook, evaluate, validate_expression
from solarvars.variables.catalog import VariableCatalog, VariableCategory, default_catalog

logger = logging.getLogger(__name__)

CUSTOM_PREFIX = "vc_"


class ResultType(str, Enum):
    """How the template formats a custom variable's value."""

    NUMBER = "number"
    CURRENCY = "currency"
    PERCENT = "percent"
    TEXT = "text"


class CustomVariable(BaseModel):
    """A custom variable definition."""

    model_config = ConfigDict(frozen=True)

    nome: str
    label: str
    expressao: str
    tipo_resultado: ResultType = ResultType.NUMBER
    categoria: VariableCategory = VariableCategory.GERAL
    ordem: int = 0
    ativo: bool = True
    descricao: str | None = None

    @field_validator("nome")
    @classmethod
    def validate_nome(cls, v: str) -> str:
        """Names must carry the vc_ prefix and something after it."""
        v = v.strip()
        if not v.startswith(CUSTOM_PREFIX) or len(v) == len(CUSTOM_PREFIX):
            raise ValueError(f"nome must start with '{CUSTOM_PREFIX}'")
        return v

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("label must not be empty")
        return v

    @field_validator("expressao")
    @classmethod
    def validate_expressao(cls, v: str) -> str:
        result = validate_expression(v)
        if not result.valid:
            raise ValueError(f"invalid expression: {result.error}")
        return v

    @property
    def reference(self) -> str:
        return f"[{self.nome}]"


def format_number(value: float) -> str:
    """Render integral values without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class DryRunResult:
    """Outcome of running an expression against sample values.

    Attributes:
        valid: Whether the expression passed validation
        value: Computed value, or None
        error: Validation error when invalid
        message: Summary line for the editor
    """

    valid: bool
    value: float | None = None
    error: str | None = None
    message: str = ""


def dry_run_expression(
    expression: str,
    catalog: VariableCatalog | None = None,
    sample_value: float | None = None,
) -> DryRunResult:
    """Validate an expression, then evaluate it with every catalog variable
    set to the same sample value.
    """
    validation = validate_expression(expression)
    if not validation.valid:
        return DryRunResult(False, error=validation.error, message=f"Erro: {validation.error}")

    if sample_value is None:
        sample_value = EngineConfig.from_env().sample_value

    if catalog is None:
        catalog = default_catalog()
    value = evaluate(expression, catalog.sample_context(sample_value))

    if value is None:
        return DryRunResult(True, message="Resultado nulo")

    return DryRunResult(
        True,
        value=value,
        message=(
            f"Resultado (com valores de teste = {format_number(sample_value)}): "
            f"{format_number(value)}"
        ),
    )


def resolve_custom_variables(
    definitions: Iterable[CustomVariable],
    context: ExpressionContext,
    *,
    on_warning: WarningHook | None = None,
    config: EngineConfig | None = None,
) -> dict[str, float | None]:
    """Evaluate active custom variables in ``(ordem, nome)`` order.

    Each computed value is added to a copy of the context so later
    definitions can reference earlier ones. The caller's context is not
    modified.

    Returns:
        Mapping of custom variable name to its value (None when it could
        not be computed)
    """
    layered = dict(context)
    results: dict[str, float | None] = {}

    for definition in sorted(definitions, key=lambda d: (d.ordem, d.nome)):
        if not definition.ativo:
            continue

        value = evaluate(definition.expressao, layered, on_warning=on_warning, config=config)
        results[definition.nome] = value
        logger.debug("Resolved %s = %r", definition.nome, value)

        if value is not None:
            layered[definition.nome] = value

    return results
