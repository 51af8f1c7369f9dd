"""Authoring-time syntax check for expressions."""

from dataclasses import dataclass
from typing import Any

from solarvars.config import EngineConfig
from solarvars.expressions.evaluator import compute, silent
from solarvars.expressions.lexer import ExpressionError


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one expression.

    Attributes:
        valid: True when the expression tokenizes and parses completely
        error: Human-readable reason when invalid
    """

    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


def validate_expression(
    expression: str,
    *,
    config: EngineConfig | None = None,
) -> ValidationResult:
    """Check that an expression is well-formed.

    Runs a full evaluation against an empty context, so every variable
    resolves to 0 without warnings. Variable availability is not checked.
    """
    if not expression or not expression.strip():
        return ValidationResult(False, "empty expression")

    try:
        compute(expression, {}, silent, config)
    except ExpressionError as e:
        return ValidationResult(False, str(e))
    except RecursionError:
        return ValidationResult(False, "expression nesting too deep")

    return ValidationResult(True)
