"""Diagnostics, error taxonomy and typo suggestions."""

from .errors import (
    CompilerError,
    ConfigurationError,
    CycleError,
    Diagnostic,
    EmissionError,
    ForbiddenFieldError,
    ParseError,
    SchemaError,
    ValidationResult,
)
from .suggest import levenshtein_distance, rank_suggestions, suggest_typos

__all__ = [
    "CompilerError",
    "ConfigurationError",
    "CycleError",
    "Diagnostic",
    "EmissionError",
    "ForbiddenFieldError",
    "ParseError",
    "SchemaError",
    "ValidationResult",
    "levenshtein_distance",
    "rank_suggestions",
    "suggest_typos",
]
