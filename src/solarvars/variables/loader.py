"""Load custom variable definitions and sample contexts from YAML files."""

from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from solarvars.variables.custom import CustomVariable


class DefinitionLoadError(Exception):
    """A definitions or context file could not be loaded."""

    def __init__(self, message: str, path: Path, index: int | None = None):
        self.path = path
        self.index = index
        location = f"{path}" if index is None else f"{path} (entry {index})"
        super().__init__(f"{location}: {message}")


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DefinitionLoadError(f"invalid YAML: {e}", path) from e
    except OSError as e:
        raise DefinitionLoadError(str(e), path) from e


def load_custom_variables(path: Path) -> list[CustomVariable]:
    """Load custom variable definitions from a YAML file.

    The file holds either a list of definitions or a mapping with a
    ``variables`` list:

        variables:
          - nome: vc_economia_pct
            label: Economia sobre investimento
            expressao: "[economia_anual]/[valor_total]*100"
            tipo_resultado: percent
    """
    path = Path(path)
    data = _read_yaml(path)

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("variables") or []
    if not isinstance(data, list):
        raise DefinitionLoadError("expected a list of variable definitions", path)

    definitions: list[CustomVariable] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise DefinitionLoadError("definition must be a mapping", path, index)
        try:
            definition = CustomVariable.model_validate(entry)
        except ValidationError as e:
            raise DefinitionLoadError(str(e), path, index) from e
        if definition.nome in seen:
            raise DefinitionLoadError(f"duplicate variable '{definition.nome}'", path, index)
        seen.add(definition.nome)
        definitions.append(definition)

    return definitions


def load_context(path: Path) -> dict[str, float]:
    """Load a mapping of variable name to numeric value from a YAML file."""
    path = Path(path)
    data = _read_yaml(path)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DefinitionLoadError("expected a mapping of variable values", path)

    context: dict[str, float] = {}
    for name, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise DefinitionLoadError(f"value for '{name}' is not numeric", path)
        try:
            context[str(name)] = float(value)
        except (OverflowError, ValueError):
            raise DefinitionLoadError(f"value for '{name}' is not numeric", path) from None

    return context
