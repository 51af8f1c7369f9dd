"""Safe arithmetic expressions for proposal custom variables.

This module provides:
- Lexer: Tokenizes expression strings
- evaluate: Computes an expression against a context of numeric values
- extract_variables: Lists the ``[name]`` references in an expression
- validate_expression: Checks an expression is well-formed
"""

from solarvars.expressions.evaluator import (
    ExpressionContext,
    ParseError,
    WarningHook,
    evaluate,
)
from solarvars.expressions.extractor import extract_variables
from solarvars.expressions.lexer import (
    ExpressionError,
    LexError,
    Lexer,
    Token,
    TokenType,
    tokenize,
)
from solarvars.expressions.validator import ValidationResult, validate_expression

__all__ = [
    # Evaluator
    "ExpressionContext",
    "ParseError",
    "WarningHook",
    "evaluate",
    # Extractor
    "extract_variables",
    # Lexer
    "ExpressionError",
    "LexError",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Validator
    "ValidationResult",
    "validate_expression",
]
