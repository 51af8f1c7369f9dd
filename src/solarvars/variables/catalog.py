"""Catalog of the proposal variables custom expressions may reference.

Values for these names are supplied by the proposal calculators at render
time. The catalog documents them for the template editor and provides
sample contexts for test runs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from solarvars.expressions import extract_variables


class VariableCategory(Enum):
    """Categories for organizing variables in the editor."""

    GERAL = "geral"
    FINANCEIRO = "financeiro"
    TECNICO = "tecnico"
    COMERCIAL = "comercial"


@dataclass(frozen=True)
class VariableDefinition:
    """A variable available to custom expressions.

    Attributes:
        name: Name as written between brackets in expressions
        description: Human-readable description
        category: Category for editor organization
        unit: Display unit ("R$", "%", "kWh", ...), or None
    """

    name: str
    description: str
    category: VariableCategory = VariableCategory.GERAL
    unit: str | None = None

    @property
    def reference(self) -> str:
        return f"[{self.name}]"

    def to_dict(self) -> dict[str, Any]:
        """Export for the editor's variable picker."""
        return {
            "name": self.name,
            "reference": self.reference,
            "description": self.description,
            "category": self.category.value,
            "unit": self.unit,
        }


class VariableCatalog:
    """Registry of variable definitions.

    Example:
        catalog = VariableCatalog()
        catalog.register(VariableDefinition("vpl", "VPL (R$)", unit="R$"))

        catalog.get("vpl").reference  # "[vpl]"
    """

    def __init__(self, definitions: Iterable[VariableDefinition] = ()):
        self._variables: dict[str, VariableDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def register(self, definition: VariableDefinition) -> None:
        """Register a variable definition, replacing any with the same name."""
        self._variables[definition.name] = definition

    def get(self, name: str) -> VariableDefinition:
        """Get a variable definition by name.

        Raises:
            ValueError: If the variable is not registered
        """
        if name not in self._variables:
            raise ValueError(f"Unknown variable: {name}")
        return self._variables[name]

    def is_registered(self, name: str) -> bool:
        """Check if a variable is registered."""
        return name in self._variables

    def list_all(self) -> list[VariableDefinition]:
        """List all registered variables in registration order."""
        return list(self._variables.values())

    def list_by_category(self, category: VariableCategory) -> list[VariableDefinition]:
        """List variables in a specific category."""
        return [v for v in self._variables.values() if v.category == category]

    def sample_context(self, value: float) -> dict[str, float]:
        """Build a context giving every registered variable the same value."""
        return {name: value for name in self._variables}

    def export_documentation(self) -> dict[str, Any]:
        """Export the catalog grouped by category."""
        by_category: dict[str, list[dict[str, Any]]] = {}
        for definition in self._variables.values():
            by_category.setdefault(definition.category.value, []).append(definition.to_dict())

        return {
            "variables": {name: v.to_dict() for name, v in self._variables.items()},
            "byCategory": by_category,
        }


BUILTIN_VARIABLES = [
    VariableDefinition("valor_total", "Investimento total (R$)", VariableCategory.FINANCEIRO, "R$"),
    VariableDefinition("economia_mensal", "Economia mensal (R$)", VariableCategory.FINANCEIRO, "R$"),
    VariableDefinition("economia_anual", "Economia anual (R$)", VariableCategory.FINANCEIRO, "R$"),
    VariableDefinition("payback_meses", "Payback em meses", VariableCategory.FINANCEIRO, "meses"),
    VariableDefinition("payback_anos", "Payback em anos", VariableCategory.FINANCEIRO, "anos"),
    VariableDefinition("potencia_kwp", "Potência do sistema (kWp)", VariableCategory.TECNICO, "kWp"),
    VariableDefinition("consumo_total", "Consumo total mensal (kWh)", VariableCategory.TECNICO, "kWh"),
    VariableDefinition("geracao_estimada", "Geração estimada mensal (kWh)", VariableCategory.TECNICO, "kWh"),
    VariableDefinition("custo_kit", "Custo do kit (R$)", VariableCategory.COMERCIAL, "R$"),
    VariableDefinition("margem_percentual", "Margem (%)", VariableCategory.COMERCIAL, "%"),
    VariableDefinition("desconto_percentual", "Desconto (%)", VariableCategory.COMERCIAL, "%"),
    VariableDefinition("vpl", "VPL (R$)", VariableCategory.FINANCEIRO, "R$"),
    VariableDefinition("tir", "TIR (%)", VariableCategory.FINANCEIRO, "%"),
    VariableDefinition("roi_25_anos", "ROI em 25 anos (R$)", VariableCategory.FINANCEIRO, "R$"),
    VariableDefinition("num_modulos", "Quantidade de módulos", VariableCategory.TECNICO),
    VariableDefinition("num_ucs", "Quantidade de UCs", VariableCategory.TECNICO),
]


def default_catalog() -> VariableCatalog:
    """Build a new catalog holding the built-in proposal variables."""
    return VariableCatalog(BUILTIN_VARIABLES)


def unknown_references(
    expression: str,
    catalog: VariableCatalog,
    extra: Iterable[str] = (),
) -> list[str]:
    """List referenced names defined neither in the catalog nor in ``extra``.

    Only an authoring hint: evaluation still resolves such names to 0.
    """
    known = set(extra)
    return sorted(
        name for name in extract_variables(expression)
        if name not in known and not catalog.is_registered(name)
    )
