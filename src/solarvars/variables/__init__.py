"""Proposal variables: built-in catalog and tenant-defined custom variables."""

from solarvars.variables.catalog import (
    BUILTIN_VARIABLES,
    VariableCatalog,
    VariableCategory,
    VariableDefinition,
    default_catalog,
    unknown_references,
)
from solarvars.variables.custom import (
    CustomVariable,
    DryRunResult,
    ResultType,
    dry_run_expression,
    format_number,
    resolve_custom_variables,
)
from solarvars.variables.loader import DefinitionLoadError, load_context, load_custom_variables

__all__ = [
    # Catalog
    "BUILTIN_VARIABLES",
    "VariableCatalog",
    "VariableCategory",
    "VariableDefinition",
    "default_catalog",
    "unknown_references",
    # Custom variables
    "CustomVariable",
    "DryRunResult",
    "ResultType",
    "dry_run_expression",
    "format_number",
    "resolve_custom_variables",
    # Loader
    "DefinitionLoadError",
    "load_context",
    "load_custom_variables",
]
