"""Compiler configuration registry.

Provides defaults for generated workflows: the default engine, runner label,
agent timeout, pinned action references, engine CLI versions and network
ecosystem domain lists. Environment variables take precedence over YAML config.

Usage:
    from agentflow.config.compiler_config import get_default_engine, get_action_ref

    engine = get_default_engine()        # "copilot"
    checkout = get_action_ref("checkout")  # "actions/checkout@v5"

Environment overrides:
    AGENTFLOW_DEFAULT_ENGINE      default engine id
    AGENTFLOW_RUNS_ON             default runner label
    AGENTFLOW_TIMEOUT_MINUTES     default agent job timeout
    AGENTFLOW_<ENGINE>_VERSION    engine CLI version (e.g. AGENTFLOW_CLAUDE_VERSION)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "compiler.yaml"
_cached_config: Optional[Dict[str, Any]] = None


def _load_config() -> Dict[str, Any]:
    """Load compiler.yaml configuration, with caching."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            _cached_config = yaml.safe_load(f) or {}
    else:
        logger.warning("Compiler config %s not found, using built-in defaults", _CONFIG_PATH)
        _cached_config = _default_config()

    return _cached_config


def _default_config() -> Dict[str, Any]:
    """Return default configuration if compiler.yaml doesn't exist."""
    return {
        "version": "1.0",
        "defaults": {
            "engine": "copilot",
            "runs_on": "ubuntu-latest",
            "timeout_minutes": 20,
            "roles": ["admin", "maintainer", "write"],
        },
        "node_version": "24",
        "actions": {
            "checkout": "actions/checkout@v5",
            "setup_node": "actions/setup-node@v4",
            "upload_artifact": "actions/upload-artifact@v4",
            "download_artifact": "actions/download-artifact@v5",
            "github_script": "actions/github-script@v8",
        },
        "engines": {},
        "network": {"ecosystems": {}},
    }


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None


def _defaults() -> Dict[str, Any]:
    return _load_config().get("defaults", {})


def get_default_engine() -> str:
    """Default engine id.

    Precedence: AGENTFLOW_DEFAULT_ENGINE, then ``defaults.engine``, then ``copilot``.
    """
    return os.environ.get("AGENTFLOW_DEFAULT_ENGINE") or _defaults().get("engine", "copilot")


def get_runs_on() -> str:
    return os.environ.get("AGENTFLOW_RUNS_ON") or _defaults().get("runs_on", "ubuntu-latest")


def get_timeout_minutes() -> int:
    """Default agent job timeout in minutes."""
    configured = int(_defaults().get("timeout_minutes", 20))
    raw = os.environ.get("AGENTFLOW_TIMEOUT_MINUTES")
    if raw is None:
        return configured
    try:
        value = int(raw)
    except ValueError:
        logger.warning(
            "AGENTFLOW_TIMEOUT_MINUTES=%r is not an integer, using %d", raw, configured
        )
        return configured
    if value < 1:
        logger.warning("AGENTFLOW_TIMEOUT_MINUTES=%d must be positive, using %d", value, configured)
        return configured
    return value


def get_default_roles() -> List[str]:
    return list(_defaults().get("roles", ["admin", "maintainer", "write"]))


def get_node_version() -> str:
    return str(_load_config().get("node_version", "24"))


def get_action_ref(name: str) -> str:
    """Pinned ``uses:`` reference for a named action.

    Raises:
        KeyError: If the action is not configured.
    """
    actions = _load_config().get("actions", {})
    if name not in actions:
        raise KeyError(f"No pinned action configured for '{name}'")
    return actions[name]


def _engine_section(engine_id: str) -> Dict[str, Any]:
    return _load_config().get("engines", {}).get(engine_id, {})


def get_engine_version(engine_id: str) -> Optional[str]:
    """CLI version to install for an engine, honoring AGENTFLOW_<ENGINE>_VERSION."""
    env_var = f"AGENTFLOW_{engine_id.upper().replace('-', '_')}_VERSION"
    override = os.environ.get(env_var)
    if override:
        return override
    version = _engine_section(engine_id).get("version")
    return str(version) if version is not None else None


def get_engine_package(engine_id: str) -> Optional[str]:
    return _engine_section(engine_id).get("package")


def get_engine_secrets(engine_id: str) -> List[str]:
    return list(_engine_section(engine_id).get("secrets", []))


def get_ecosystem_domains(name: str) -> Optional[List[str]]:
    """Domains for an ecosystem identifier, or None if ``name`` is not one."""
    ecosystems = _load_config().get("network", {}).get("ecosystems", {})
    if name not in ecosystems:
        return None
    return list(ecosystems[name])
