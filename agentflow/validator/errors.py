# agentflow/validator/errors.py
"""Compiler error taxonomy, positioned diagnostics and batch result collection."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from agentflow.validator.suggest import did_you_mean

# Error message template: [FAIL] TYPE: location problem -> Fix: action
ERROR_TEMPLATE = "[FAIL] {error_type}: {location} {problem}\n  Fix: {fix_action}"

# Number of source lines shown above the offending line in positioned output
CONTEXT_LINES = 2


# ============================================================================
# Exceptions
# ============================================================================


class CompilerError(Exception):
    """Base class for every failure surfaced by the compile pipeline.

    Errors that originate in source text carry ``file_path``, ``line`` and
    ``column`` (1-based) plus the full ``source`` so that :meth:`format` can
    print context lines with a caret under the offending column.
    """

    error_type = "COMPILE"
    default_kind = "CompileError"

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[str] = None,
        file_path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        hint: str = "",
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind
        self.file_path = file_path
        self.line = line
        self.column = column
        self.hint = hint
        self.source = source

    def __str__(self) -> str:
        return self.message

    @property
    def location(self) -> str:
        """``path:line:col`` with whatever parts are known."""
        parts = [self.file_path or "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def context_lines(self) -> List[str]:
        """Source lines around the error with a caret marker."""
        if self.source is None or self.line is None:
            return []
        lines = self.source.splitlines()
        if not 1 <= self.line <= len(lines):
            return []

        rendered: List[str] = []
        first = max(1, self.line - CONTEXT_LINES)
        width = len(str(self.line))
        for number in range(first, self.line + 1):
            rendered.append(f"{number:>{width}} | {lines[number - 1]}")
        caret_col = max(1, self.column or 1)
        rendered.append(f"{' ' * width} | {' ' * (caret_col - 1)}^")
        return rendered

    def format(self) -> str:
        """Render as a compiler-style diagnostic."""
        out = [f"{self.location}: error: {self.message}"]
        out.extend(self.context_lines())
        if self.hint:
            out.append(f"  Fix: {self.hint}")
        return "\n".join(out)

    def to_diagnostic(self) -> "Diagnostic":
        return Diagnostic(
            error_type=self.error_type,
            location=self.location,
            problem=self.message,
            fix_action=self.hint or "See the error message above",
            line_number=self.line,
            file_path=self.file_path,
            kind=self.kind,
        )


class ParseError(CompilerError):
    """The document structure could not be read (bad delimiters, bad YAML)."""

    error_type = "PARSE"
    default_kind = "MalformedFrontmatter"


class SchemaError(CompilerError):
    """A frontmatter field is present but has the wrong shape or value."""

    error_type = "SCHEMA"
    default_kind = "InvalidField"

    def __init__(self, message: str, *, field_path: Sequence[Any] = (), **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field_path: Tuple[Any, ...] = tuple(field_path)

    @property
    def dotted_path(self) -> str:
        return ".".join(str(p) for p in self.field_path)


class CycleError(CompilerError):
    """The import graph contains a cycle."""

    error_type = "CYCLE"
    default_kind = "ImportCycle"

    def __init__(self, cycle: Sequence[str], **kwargs: Any):
        self.cycle: Tuple[str, ...] = tuple(cycle)
        kwargs.setdefault("hint", "Remove one of the imports so the chain no longer loops")
        super().__init__(f"import cycle detected: {' → '.join(self.cycle)}", **kwargs)


class ForbiddenFieldError(CompilerError):
    """A fragment declares a field that only a top-level workflow may set."""

    error_type = "FORBIDDEN"
    default_kind = "ForbiddenField"

    def __init__(self, field: str, fragment: str, **kwargs: Any):
        self.field = field
        self.fragment = fragment
        kwargs.setdefault("file_path", fragment)
        kwargs.setdefault(
            "hint", f"Move '{field}' into the main workflow that imports {fragment}"
        )
        super().__init__(
            f"field '{field}' is not allowed in imported fragment {fragment}", **kwargs
        )


class ConfigurationError(CompilerError):
    """Cross-field inconsistency, such as an unknown engine or permission scope."""

    error_type = "CONFIG"
    default_kind = "InvalidConfiguration"

    def __init__(self, message: str, *, suggestions: Sequence[str] = (), **kwargs: Any):
        self.suggestions: Tuple[str, ...] = tuple(suggestions)
        if self.suggestions:
            message = f"{message}.{did_you_mean(self.suggestions)}"
        super().__init__(message, **kwargs)


class EmissionError(CompilerError):
    """Writing the lock file failed."""

    error_type = "EMIT"
    default_kind = "WriteFailed"


# ============================================================================
# Batch reporting
# ============================================================================


class Diagnostic:
    """Structured, serializable form of a compile failure."""

    def __init__(
        self,
        error_type: str,
        location: str,
        problem: str,
        fix_action: str,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
        kind: Optional[str] = None,
    ):
        self.error_type = error_type
        self.location = location
        self.problem = problem
        self.fix_action = fix_action
        self.line_number = line_number
        self.file_path = file_path or location.split(":")[0]
        self.kind = kind or error_type

    def format(self) -> str:
        """Format error message."""
        return ERROR_TEMPLATE.format(
            error_type=self.error_type,
            location=self.location,
            problem=self.problem,
            fix_action=self.fix_action,
        )

    def sort_key(self) -> Tuple[str, int]:
        """Sort key for deterministic ordering."""
        return (self.file_path, self.line_number or 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.error_type,
            "kind": self.kind,
            "location": self.location,
            "problem": self.problem,
            "fix_action": self.fix_action,
            "line_number": self.line_number,
            "file_path": self.file_path,
        }


class ValidationResult:
    """Collects diagnostics across a batch of compiled documents."""

    def __init__(self):
        self.errors: List[Diagnostic] = []
        self.warnings: List[Diagnostic] = []

    def add_error(self, error: CompilerError) -> None:
        self.errors.append(error.to_diagnostic())

    def add_warning(
        self,
        error_type: str,
        location: str,
        problem: str,
        fix_action: str,
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ) -> None:
        """Add a warning (the document still compiles)."""
        self.warnings.append(
            Diagnostic(error_type, location, problem, fix_action, line_number, file_path)
        )

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def sorted_errors(self) -> List[Diagnostic]:
        """Get errors in deterministic order."""
        return sorted(self.errors, key=lambda e: e.sort_key())

    def sorted_warnings(self) -> List[Diagnostic]:
        return sorted(self.warnings, key=lambda e: e.sort_key())

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "errors": [e.to_dict() for e in self.sorted_errors()],
            "warnings": [w.to_dict() for w in self.sorted_warnings()],
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "status": "FAIL" if self.has_errors() else "PASS",
        }
