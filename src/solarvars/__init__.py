"""solarvars: safe arithmetic expressions for solar proposal custom variables."""

from solarvars.expressions import (
    ExpressionError,
    LexError,
    ParseError,
    ValidationResult,
    evaluate,
    extract_variables,
    validate_expression,
)

__version__ = "0.1.0"

__all__ = [
    "ExpressionError",
    "LexError",
    "ParseError",
    "ValidationResult",
    "evaluate",
    "extract_variables",
    "validate_expression",
]
