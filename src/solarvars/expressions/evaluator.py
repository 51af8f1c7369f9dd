"""Recursive-descent evaluator for custom-variable expressions.

Grammar (lowest to highest precedence, left-associative):

    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := "-" factor | "(" expression ")" | number | variable

Each grammar rule computes its value directly while consuming tokens; no
syntax tree is kept. Unresolved variables and division by zero are soft
failures that yield 0. ``evaluate`` never raises: lexing and parsing
failures are reported through the warning hook and turn into ``None``.
"""

import logging
import math
from decimal import Decimal
from typing import Any, Callable, Mapping

from solarvars.config import EngineConfig
from solarvars.expressions.lexer import ExpressionError, Token, TokenType, tokenize

logger = logging.getLogger(__name__)

ExpressionContext = Mapping[str, Any]
WarningHook = Callable[[str], None]

_DEFAULT_CONFIG = EngineConfig()


class ParseError(ExpressionError):
    """Error during parsing."""
    pass


def log_warning(message: str) -> None:
    """Default warning hook: log through the module logger."""
    logger.warning(message)


def silent(message: str) -> None:
    """Warning hook that discards every message."""


class _Cursor:
    """Read position over one call's token list."""

    def __init__(self, tokens: list[Token], source_length: int):
        self.tokens = tokens
        self.position = 0
        self.source_length = source_length

    def current(self) -> Token | None:
        if self.position >= len(self.tokens):
            return None
        return self.tokens[self.position]

    def advance(self) -> Token:
        token = self.tokens[self.position]
        self.position += 1
        return token

    def match(self, token_type: TokenType, *values: str) -> bool:
        """Check if current token has the given type and one of the values."""
        token = self.current()
        return token is not None and token.type == token_type and token.value in values

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def end_position(self) -> int:
        return self.source_length


def _describe(token: Token) -> str:
    if token.type == TokenType.NUMBER:
        return f"{token.value:g}"
    if token.type == TokenType.VARIABLE:
        return f"[{token.value}]"
    return str(token.value)


class _Evaluator:
    """Computes the value of one token stream against a context."""

    def __init__(
        self,
        cursor: _Cursor,
        context: ExpressionContext,
        on_warning: WarningHook,
        max_depth: int,
    ):
        self.cursor = cursor
        self.context = context
        self.on_warning = on_warning
        self.max_depth = max_depth
        self.depth = 0

    def run(self) -> float:
        value = self._expression()

        if not self.cursor.at_end():
            token = self.cursor.current()
            raise ParseError(
                f"unexpected token '{_describe(token)}' at position {token.position}",
                token.position,
            )

        return value

    def _expression(self) -> float:
        """Parse additive expression (+, -)."""
        value = self._term()

        while self.cursor.match(TokenType.OP, "+", "-"):
            op = self.cursor.advance().value
            right = self._term()
            value = value + right if op == "+" else value - right

        return value

    def _term(self) -> float:
        """Parse multiplicative expression (*, /)."""
        value = self._factor()

        while self.cursor.match(TokenType.OP, "*", "/"):
            op = self.cursor.advance().value
            right = self._factor()
            if op == "*":
                value = value * right
            else:
                value = 0.0 if right == 0 else value / right

        return value

    def _factor(self) -> float:
        """Parse unary minus, grouped expression, number or variable."""
        token = self.cursor.current()

        if token is None:
            raise ParseError("incomplete expression", self.cursor.end_position())

        if self.cursor.match(TokenType.OP, "-"):
            self.cursor.advance()
            self._enter(token)
            try:
                return -self._factor()
            finally:
                self.depth -= 1

        if self.cursor.match(TokenType.PAREN, "("):
            self.cursor.advance()
            self._enter(token)
            try:
                value = self._expression()
            finally:
                self.depth -= 1

            if not self.cursor.match(TokenType.PAREN, ")"):
                closing = self.cursor.current()
                position = closing.position if closing else self.cursor.end_position()
                raise ParseError(f"expected ')' at position {position}", position)
            self.cursor.advance()
            return value

        if token.type == TokenType.NUMBER:
            self.cursor.advance()
            return float(token.value)

        if token.type == TokenType.VARIABLE:
            self.cursor.advance()
            return self._resolve(str(token.value))

        raise ParseError(
            f"unexpected token '{_describe(token)}' at position {token.position}",
            token.position,
        )

    def _enter(self, token: Token) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            self.depth -= 1
            raise ParseError(
                f"maximum nesting depth exceeded at position {token.position}",
                token.position,
            )

    def _resolve(self, name: str) -> float:
        """Look up a variable; missing or non-numeric values resolve to 0."""
        if name not in self.context:
            self.on_warning(f"variable [{name}] not found in context, using 0")
            return 0.0

        value = self.context[name]
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            self.on_warning(
                f"variable [{name}] is not numeric ({type(value).__name__}), using 0"
            )
            return 0.0

        try:
            return float(value)
        except (OverflowError, ValueError):
            self.on_warning(f"variable [{name}] is not a finite number, using 0")
            return 0.0


def compute(
    expression: str,
    context: ExpressionContext,
    on_warning: WarningHook = log_warning,
    config: EngineConfig | None = None,
) -> float:
    """Tokenize and evaluate an expression, raising on malformed input.

    Returns the raw (unrounded) value, which may be non-finite.

    Raises:
        LexError: If the expression cannot be tokenized
        ParseError: If the tokens do not form a complete expression
    """
    config = config or _DEFAULT_CONFIG

    limit = config.max_expression_length
    if limit is not None and len(expression) > limit:
        raise ParseError(f"expression too long ({len(expression)} > {limit} characters)")

    tokens = tokenize(expression)
    cursor = _Cursor(tokens, len(expression))
    return _Evaluator(cursor, context, on_warning, config.max_nesting_depth).run()


def round_result(value: float) -> float | None:
    """Round half-up to 4 decimal places; non-finite values become None."""
    if not math.isfinite(value):
        return None

    scaled = value * 10000
    if not math.isfinite(scaled):
        return None

    return math.floor(scaled + 0.5) / 10000


def evaluate(
    expression: str,
    context: ExpressionContext | None = None,
    *,
    on_warning: WarningHook | None = None,
    config: EngineConfig | None = None,
) -> float | None:
    """Evaluate an expression string against a context of numeric values.

    This is the main entry point for custom-variable evaluation.

    Args:
        expression: The expression string to evaluate
        context: Variable name to numeric value; never mutated
        on_warning: Receives diagnostic messages (defaults to logging)
        config: Length and nesting limits

    Returns:
        The result rounded to 4 decimals, or None when the expression is
        empty, malformed, or its result is not finite

    Example:
        result = evaluate(
            "[economia_anual]/[valor_total]*100",
            {"economia_anual": 6000, "valor_total": 30000},
        )
        # result = 20.0
    """
    if not expression or not expression.strip():
        return None

    hook = on_warning or log_warning

    try:
        value = compute(expression, context or {}, hook, config)
    except ExpressionError as e:
        hook(f"could not evaluate expression {expression!r}: {e}")
        return None
    except RecursionError:
        hook(f"could not evaluate expression {expression!r}: nesting too deep")
        return None

    return round_result(value)
