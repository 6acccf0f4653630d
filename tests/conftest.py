"""
Shared fixtures for compiler tests.

Provides a fixed clock, a temporary workflows directory, compilers over the
real file system or an in-memory file map, and a FastAPI test client.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from agentflow.api.server import create_app
from agentflow.config.compiler_config import reset_config
from agentflow.engines import build_default_registry
from agentflow.spec.compiler import CompileOptions, Compiler
from agentflow.spec.imports import VirtualFileSource

FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)

MINIMAL_WORKFLOW = """---
on:
  issues:
    types: [opened]
permissions:
  contents: read
  issues: read
---

# Issue Triage

Read the new issue and summarize it.
"""

_ENV_OVERRIDES = (
    "AGENTFLOW_DEFAULT_ENGINE",
    "AGENTFLOW_RUNS_ON",
    "AGENTFLOW_TIMEOUT_MINUTES",
    "AGENTFLOW_COPILOT_VERSION",
    "AGENTFLOW_CLAUDE_VERSION",
)


# ============================================================================
# Configuration isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear AGENTFLOW_* overrides and the config cache around every test."""
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Files
# ============================================================================


@pytest.fixture
def workflow_dir(tmp_path: Path) -> Path:
    """An empty .github/workflows directory."""
    directory = tmp_path / ".github" / "workflows"
    directory.mkdir(parents=True)
    return directory


def write_workflow(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ============================================================================
# Compilers
# ============================================================================


@pytest.fixture
def make_compiler():
    """Factory: ``make_compiler(files=None, **options)``.

    With ``files`` the compiler reads from an in-memory map; otherwise from disk.
    """

    def _make(files: Optional[Dict[str, str]] = None, **options) -> Compiler:
        source = VirtualFileSource(files) if files is not None else None
        return Compiler(
            build_default_registry(),
            CompileOptions(**options),
            files=source,
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture
def compiler(make_compiler) -> Compiler:
    """Disk-backed compiler with default options and a fixed clock."""
    return make_compiler()


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())
