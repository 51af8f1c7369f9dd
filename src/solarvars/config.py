"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_NESTING_DEPTH = 200
DEFAULT_SAMPLE_VALUE = 1000.0


@dataclass(frozen=True)
class EngineConfig:
    """Limits and defaults for expression evaluation.

    Attributes:
        max_expression_length: Longest accepted expression, or None for no limit
        max_nesting_depth: Deepest accepted nesting of groups and unary minus
        sample_value: Value given to every catalog variable in editor test runs
    """

    max_expression_length: int | None = None
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    sample_value: float = DEFAULT_SAMPLE_VALUE

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        Reads:
        1. SOLARVARS_MAX_EXPRESSION_LENGTH (unset or 0 disables the limit)
        2. SOLARVARS_MAX_NESTING_DEPTH (default 200)
        3. SOLARVARS_SAMPLE_VALUE (default 1000)
        """
        max_length = _int_from_env("SOLARVARS_MAX_EXPRESSION_LENGTH", 0)
        max_depth = _int_from_env("SOLARVARS_MAX_NESTING_DEPTH", DEFAULT_MAX_NESTING_DEPTH)

        raw_sample = os.environ.get("SOLARVARS_SAMPLE_VALUE")
        sample_value = DEFAULT_SAMPLE_VALUE
        if raw_sample:
            try:
                sample_value = float(raw_sample)
            except ValueError:
                raise ValueError(
                    f"SOLARVARS_SAMPLE_VALUE must be a number, got {raw_sample!r}"
                ) from None

        if max_depth < 1:
            raise ValueError("SOLARVARS_MAX_NESTING_DEPTH must be at least 1")

        return cls(
            max_expression_length=max_length or None,
            max_nesting_depth=max_depth,
            sample_value=sample_value,
        )


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value
