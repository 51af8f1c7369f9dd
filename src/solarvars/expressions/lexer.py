"""Lexer/tokenizer for proposal custom-variable expressions.

Converts expression strings such as ``[economia_anual]/[valor_total]*100``
into a stream of tokens for the evaluator.

Token types:
- NUMBER: numeric literal (always carried as float)
- VARIABLE: ``[name]`` reference, name trimmed of surrounding whitespace
- OP: one of ``+ - * /``
- PAREN: ``(`` or ``)``
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

OPERATORS = frozenset("+-*/")
PARENS = frozenset("()")
NUMBER_CHARS = frozenset("0123456789.")


class TokenType(Enum):
    """Types of tokens in the expression language."""

    NUMBER = auto()
    VARIABLE = auto()
    OP = auto()
    PAREN = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: Float for numbers, variable name, or the operator/paren character
        position: Character position in the source string
    """

    type: TokenType
    value: str | float
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


class ExpressionError(Exception):
    """Base class for lexing and parsing failures."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        super().__init__(message)


class LexError(ExpressionError):
    """Error during lexical analysis."""
    pass


class Lexer:
    """Tokenizer for the expression language.

    Usage:
        lexer = Lexer("[economia_anual] / [valor_total] * 100")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            if token is None:
                break
            yield token

    def next_token(self) -> Token | None:
        """Get the next token from the source, or None at end of input."""
        self._skip_whitespace()

        if self.position >= len(self.source):
            return None

        start = self.position
        char = self.source[start]

        if char == "[":
            return self._read_variable(start)

        if char in NUMBER_CHARS:
            return self._read_number(start)

        if char in OPERATORS:
            self.position += 1
            return Token(TokenType.OP, char, start)

        if char in PARENS:
            self.position += 1
            return Token(TokenType.PAREN, char, start)

        raise LexError(f"unexpected character '{char}' at position {start}", start)

    def _skip_whitespace(self) -> None:
        while self.position < len(self.source) and self.source[self.position].isspace():
            self.position += 1

    def _read_variable(self, start: int) -> Token:
        """Read a ``[name]`` reference up to the first closing bracket."""
        end = self.source.find("]", start + 1)
        if end == -1:
            raise LexError(f"variable not closed at position {start}", start)

        self.position = end + 1
        return Token(TokenType.VARIABLE, self.source[start + 1:end].strip(), start)

    def _read_number(self, start: int) -> Token:
        """Read a run of digits and dots.

        The run is not checked for repeated dots here; ``float()`` rejects
        text such as ``1.2.3`` or a lone ``.``.
        """
        end = start
        while end < len(self.source) and self.source[end] in NUMBER_CHARS:
            end += 1

        text = self.source[start:end]
        self.position = end

        try:
            value = float(text)
        except ValueError:
            raise LexError(f"invalid number: {text}", start) from None

        # float() overflows to inf on very long digit runs
        if not math.isfinite(value):
            raise LexError(f"invalid number: {text}", start)

        return Token(TokenType.NUMBER, value, start)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)


def tokenize(expression: str) -> list[Token]:
    """Convenience function to tokenize an expression string.

    Args:
        expression: The expression string

    Returns:
        The tokens in source order
    """
    return Lexer(expression).tokenize()
