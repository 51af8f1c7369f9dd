"""Tests for the custom-variable expression engine.

Tests cover:
- Lexer: Tokenization of expression strings
- Evaluator: Precedence, variables, soft failures, rounding
- Extractor: Variable reference scanning
- Validator: Authoring-time syntax checks
"""

import logging
from decimal import Decimal

import pytest

from solarvars.config import EngineConfig
from solarvars.expressions import (
    LexError,
    Lexer,
    ParseError,
    Token,
    TokenType,
    ValidationResult,
    evaluate,
    extract_variables,
    tokenize,
    validate_expression,
)
from solarvars.expressions.evaluator import compute, round_result


# =============================================================================
# Lexer Tests
# =============================================================================


class TestLexer:
    """Tests for the expression lexer."""

    def test_tokenize_numbers(self):
        tokens = tokenize("42 3.14 .5")

        assert tokens == [
            Token(TokenType.NUMBER, 42.0, 0),
            Token(TokenType.NUMBER, 3.14, 3),
            Token(TokenType.NUMBER, 0.5, 8),
        ]

    def test_numbers_are_floats(self):
        tokens = tokenize("7")
        assert isinstance(tokens[0].value, float)

    def test_tokenize_variable(self):
        tokens = tokenize("[economia_anual]")
        assert tokens == [Token(TokenType.VARIABLE, "economia_anual", 0)]

    def test_variable_name_is_trimmed(self):
        tokens = tokenize("[  valor total ]")
        assert tokens[0].value == "valor total"

    def test_empty_variable_name(self):
        tokens = tokenize("[]")
        assert tokens == [Token(TokenType.VARIABLE, "", 0)]

    def test_nested_bracket_reads_up_to_first_close(self):
        tokens = tokenize("[a[b]")
        assert tokens == [Token(TokenType.VARIABLE, "a[b", 0)]

    def test_tokenize_operators_and_parens(self):
        tokens = tokenize("( + - * / )")

        assert [(t.type, t.value) for t in tokens] == [
            (TokenType.PAREN, "("),
            (TokenType.OP, "+"),
            (TokenType.OP, "-"),
            (TokenType.OP, "*"),
            (TokenType.OP, "/"),
            (TokenType.PAREN, ")"),
        ]

    def test_tokenize_complex_expression(self):
        tokens = tokenize("[economia_anual]/[valor_total]*100")

        types = [t.type for t in tokens]
        assert types == [
            TokenType.VARIABLE,  # [economia_anual]
            TokenType.OP,        # /
            TokenType.VARIABLE,  # [valor_total]
            TokenType.OP,        # *
            TokenType.NUMBER,    # 100
        ]
        assert tokens[2].position == 17

    def test_whitespace_only_yields_no_tokens(self):
        assert tokenize(" \t\n ") == []

    def test_lexer_is_iterable(self):
        assert len(list(Lexer("1 + [a]"))) == 3

    def test_unclosed_variable(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("2 + [a")
        assert str(exc_info.value) == "variable not closed at position 4"
        assert exc_info.value.position == 4

    def test_unexpected_character(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("2 @ 3")
        assert str(exc_info.value) == "unexpected character '@' at position 2"

    def test_letters_outside_brackets_are_rejected(self):
        with pytest.raises(LexError):
            tokenize("valor_total * 2")

    def test_multiple_dots_rejected(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("1.2.3")
        assert str(exc_info.value) == "invalid number: 1.2.3"

    def test_lone_dot_rejected(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("2 * .")
        assert str(exc_info.value) == "invalid number: ."

    def test_overflowing_number_rejected(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("9" * 400)
        assert "invalid number" in str(exc_info.value)


# =============================================================================
# Evaluator Tests
# =============================================================================


class TestEvaluator:
    """Tests for expression evaluation."""

    def test_precedence(self):
        assert evaluate("2+3*4", {}) == 14
        assert evaluate("(2+3)*4", {}) == 20

    def test_left_associativity(self):
        assert evaluate("10-4-3", {}) == 3
        assert evaluate("100/10/2", {}) == 5

    def test_variable_substitution(self):
        assert evaluate("[a]+[b]", {"a": 2, "b": 3}) == 5

    def test_proposal_percentage(self):
        context = {"economia_anual": 6000, "valor_total": 30000}
        assert evaluate("[economia_anual]/[valor_total]*100", context) == 20

    def test_variable_names_are_case_sensitive(self):
        assert evaluate("[A]", {"a": 4}) == 0

    def test_missing_variable_defaults_to_zero(self):
        assert evaluate("[x]+5", {}) == 5

    def test_non_numeric_variable_defaults_to_zero(self):
        assert evaluate("[a]+1", {"a": "10"}) == 1
        assert evaluate("[a]+1", {"a": None}) == 1
        assert evaluate("[a]+1", {"a": True}) == 1

    def test_decimal_variable(self):
        assert evaluate("[a]*2", {"a": Decimal("2.5")}) == 5

    def test_unconvertible_numeric_variable_defaults_to_zero(self):
        messages = []
        assert evaluate("[a]+1", {"a": 10**400}, on_warning=messages.append) == 1
        assert evaluate("[a]+1", {"a": Decimal("sNaN")}, on_warning=messages.append) == 1
        assert len(messages) == 2
        assert all("[a]" in m for m in messages)

    def test_division_by_zero_is_zero(self):
        assert evaluate("10/0", {}) == 0
        assert evaluate("10/(5-5)", {}) == 0
        assert evaluate("0/0", {}) == 0
        assert evaluate("[a]/[b]", {"a": 1}) == 0

    def test_unary_minus(self):
        assert evaluate("-5+3", {}) == -2
        assert evaluate("2*-3", {}) == -6
        assert evaluate("-(2+3)", {}) == -5

    def test_nested_unary_minus(self):
        assert evaluate("--5", {}) == 5
        assert evaluate("---5", {}) == -5

    def test_unary_plus_not_supported(self):
        assert evaluate("+5", {}) is None

    def test_rounding(self):
        assert evaluate("1/3", {}) == 0.3333
        assert evaluate("2/3", {}) == 0.6667
        assert evaluate("-1/3", {}) == -0.3333

    def test_round_result(self):
        assert round_result(-2 / 3) == -0.6667
        assert round_result(12.0) == 12
        assert round_result(float("nan")) is None
        assert round_result(float("inf")) is None

    def test_non_finite_result_is_none(self):
        assert evaluate("[a]*[a]", {"a": 1e200}) is None
        assert evaluate("[a]+1", {"a": float("nan")}) is None

    def test_empty_expression(self):
        assert evaluate("", {}) is None
        assert evaluate("   ", {}) is None

    def test_context_is_optional(self):
        assert evaluate("1+1") == 2

    def test_unterminated_variable(self):
        assert evaluate("[a", {}) is None

    def test_malformed_expressions_return_none(self):
        for expression in ["(2+3", "2+3)", "2+", "*2", "()", "2 3", "1.2.3", "2 & 3"]:
            assert evaluate(expression, {}) is None, expression

    def test_context_not_mutated(self):
        context = {"a": 1}
        evaluate("[a]+[b]", context)
        assert context == {"a": 1}

    def test_idempotent(self):
        context = {"a": 7, "b": 3}
        results = {evaluate("[a]/[b]*(2+[c])", context) for _ in range(5)}
        assert results == {4.6667}

    def test_deep_nesting_within_limit(self):
        assert evaluate("(" * 150 + "1" + ")" * 150, {}) == 1

    def test_nesting_limit(self):
        assert evaluate("(" * 300 + "1" + ")" * 300, {}) is None
        assert evaluate("-" * 300 + "1", {}) is None

    def test_configured_nesting_limit(self):
        config = EngineConfig(max_nesting_depth=2)
        assert evaluate("((1))", {}, config=config) == 1
        assert evaluate("(((1)))", {}, config=config) is None

    def test_configured_length_limit(self):
        config = EngineConfig(max_expression_length=5)
        assert evaluate("1+2", {}, config=config) == 3
        assert evaluate("1+2+3+4", {}, config=config) is None


class TestCompute:
    """Tests for the raising evaluation pipeline."""

    def test_incomplete_expression(self):
        with pytest.raises(ParseError) as exc_info:
            compute("2+", {})
        assert str(exc_info.value) == "incomplete expression"

    def test_unclosed_group(self):
        with pytest.raises(ParseError) as exc_info:
            compute("(2+3", {})
        assert str(exc_info.value) == "expected ')' at position 4"

    def test_stray_closing_paren(self):
        with pytest.raises(ParseError) as exc_info:
            compute("2+3)", {})
        assert str(exc_info.value) == "unexpected token ')' at position 3"

    def test_trailing_tokens(self):
        with pytest.raises(ParseError) as exc_info:
            compute("2 [a]", {})
        assert str(exc_info.value) == "unexpected token '[a]' at position 2"

    def test_returns_unrounded_value(self):
        assert compute("1/3", {}) == pytest.approx(1 / 3)


class TestWarnings:
    """Tests for the diagnostic hook."""

    def test_missing_variable_reported(self):
        messages = []
        assert evaluate("[x]+5", {}, on_warning=messages.append) == 5
        assert len(messages) == 1
        assert "[x]" in messages[0]

    def test_non_numeric_variable_reported(self):
        messages = []
        evaluate("[a]", {"a": "abc"}, on_warning=messages.append)
        assert "not numeric" in messages[0]

    def test_parse_failure_reported(self):
        messages = []
        assert evaluate("(2+3", {}, on_warning=messages.append) is None
        assert "expected ')'" in messages[0]

    def test_resolved_variables_are_silent(self):
        messages = []
        evaluate("[a]*2", {"a": 1}, on_warning=messages.append)
        assert messages == []

    def test_default_hook_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="solarvars.expressions.evaluator"):
            evaluate("[ausente]", {})
        assert "[ausente]" in caplog.text


# =============================================================================
# Extractor Tests
# =============================================================================


class TestExtractVariables:
    """Tests for variable reference extraction."""

    def test_deduplicates(self):
        assert extract_variables("[a]+[a]*[b]") == {"a", "b"}

    def test_trims_names(self):
        assert extract_variables("[ economia_anual ]/[valor_total]") == {
            "economia_anual",
            "valor_total",
        }

    def test_no_variables(self):
        assert extract_variables("2+3") == set()
        assert extract_variables("") == set()

    def test_blank_references_ignored(self):
        assert extract_variables("[]+[  ]+[a]") == {"a"}

    def test_unterminated_tail_ignored(self):
        assert extract_variables("[a]+[b") == {"a"}

    def test_works_on_malformed_expression(self):
        assert extract_variables("[a] @ [b]") == {"a", "b"}

    def test_nested_bracket(self):
        assert extract_variables("[a[b]") == {"a[b"}

    def test_non_string_input(self):
        assert extract_variables(None) == set()


# =============================================================================
# Validator Tests
# =============================================================================


class TestValidateExpression:
    """Tests for expression validation."""

    def test_valid_expression(self):
        assert validate_expression("[economia_anual]/[valor_total]*100") == ValidationResult(True)

    def test_empty_expression(self):
        result = validate_expression("")
        assert result == ValidationResult(False, "empty expression")
        assert validate_expression("  ").error == "empty expression"

    def test_unknown_variables_are_still_valid(self):
        assert validate_expression("[nunca_fornecida] * 2").valid is True

    def test_unmatched_parenthesis(self):
        result = validate_expression("(2+3")
        assert result.valid is False
        assert result.error == "expected ')' at position 4"

    def test_lex_error_message(self):
        result = validate_expression("[a")
        assert result.valid is False
        assert result.error == "variable not closed at position 0"

    def test_division_by_zero_is_valid(self):
        assert validate_expression("1/0").valid is True

    def test_nesting_limit(self):
        result = validate_expression("(" * 300 + "1" + ")" * 300)
        assert result.valid is False
        assert result.error == "maximum nesting depth exceeded at position 200"

    def test_length_limit(self):
        result = validate_expression("1+2+3", config=EngineConfig(max_expression_length=3))
        assert result.error == "expression too long (5 > 3 characters)"

    def test_validation_does_not_log(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_expression("[a]+[b]")
        assert caplog.records == []

    def test_to_dict(self):
        assert validate_expression("1+1").to_dict() == {"valid": True}
        assert validate_expression("").to_dict() == {
            "valid": False,
            "error": "empty expression",
        }
