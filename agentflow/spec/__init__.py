"""
agentflow/spec - Markdown workflow model and the compile pipeline.

This package turns a markdown workflow (YAML frontmatter + prompt body) into
a GitHub Actions lock file:
- types: WorkflowDocument, EffectiveFrontmatter, engine and network types
- permissions: the permission model (shorthand, explicit map, blanket)
- parser: frontmatter split, YAML load and schema validation
- imports / merger: import graph resolution and frontmatter merging
- compiler: the staged pipeline and the generated jobs
- batch: concurrent compilation of a directory of workflows

Usage:
    from agentflow.spec import parse_document, parse_permissions

    doc = parse_document(text, ".github/workflows/triage.md")
    perms = parse_permissions(doc.frontmatter.get("permissions"))

The compiler lives in ``agentflow.spec.compiler`` and is not re-exported
here; it depends on ``agentflow.engines``, which itself imports these types.
"""

from .parser import known_fields, parse_document, split_frontmatter, validate_frontmatter
from .permissions import (
    ALL_SCOPES,
    PermissionLevel,
    Permissions,
    merge_all,
    parse_permissions,
    parse_rendered,
)
from .types import (
    EffectiveFrontmatter,
    EngineConfig,
    EngineSelection,
    ImportSpec,
    NetworkPolicy,
    WorkflowDocument,
)

__all__ = [
    # Types
    "EffectiveFrontmatter",
    "EngineConfig",
    "EngineSelection",
    "ImportSpec",
    "NetworkPolicy",
    "WorkflowDocument",
    # Permissions
    "ALL_SCOPES",
    "PermissionLevel",
    "Permissions",
    "merge_all",
    "parse_permissions",
    "parse_rendered",
    # Parser
    "known_fields",
    "parse_document",
    "split_frontmatter",
    "validate_frontmatter",
]
