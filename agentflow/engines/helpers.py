"""
helpers.py - Step builders shared by engine adapters.
"""

from __future__ import annotations

import shlex
from typing import Any, Dict, List, Optional, Sequence

from agentflow.config.compiler_config import get_action_ref, get_node_version
from agentflow.engines.base import EngineContext, Step
from agentflow.spec.constants import ACTIONS_SCRIPTS_DIR, SAFE_OUTPUTS_PATH

# Commands allowed when ``tools.bash`` is enabled without a list
DEFAULT_BASH_COMMANDS: List[str] = [
    "cat", "date", "echo", "grep", "head", "ls", "pwd", "sort", "tail", "uniq", "wc", "yq",
]

BASH_WILDCARDS = ("*", ":*")


def shell_join(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(a)) for a in args)


def secret_validation_step(secret_names: Sequence[str], engine_name: str, docs_url: str) -> Step:
    """Fail early when none of the engine's secrets is configured."""
    names = list(secret_names)
    return {
        "name": f"Validate {' or '.join(names)} secret",
        "id": "validate-secret",
        "run": f"{ACTIONS_SCRIPTS_DIR}/validate_multi_secret.sh "
        + shell_join(names + [engine_name, docs_url]),
        "env": {name: f"${{{{ secrets.{name} }}}}" for name in names},
    }


def setup_node_step() -> Step:
    return {
        "name": "Setup Node.js",
        "uses": get_action_ref("setup_node"),
        "with": {"node-version": get_node_version(), "package-manager-cache": False},
    }


def npm_install_step(package: str, version: Optional[str], display_name: str) -> Step:
    spec = f"{package}@{version}" if version else package
    return {
        "name": f"Install {display_name}",
        "run": f"npm install -g --silent {spec}",
    }


def bash_commands(tools: Dict[str, Any]) -> Optional[List[str]]:
    """Allowed bash commands, ``["*"]`` for unrestricted, None when disabled."""
    if "bash" not in tools:
        return None
    value = tools["bash"]
    if value is False:
        return None
    if value is None or value is True:
        return list(DEFAULT_BASH_COMMANDS)
    commands = [str(c) for c in value]
    if any(c in BASH_WILDCARDS for c in commands):
        return ["*"]
    return commands


def runtime_env(ctx: EngineContext) -> Dict[str, str]:
    """Environment common to every engine execution step."""
    env: Dict[str, str] = {"GH_AW_PROMPT": ctx.prompt_path}
    if ctx.mcp_config_path:
        env["GH_AW_MCP_CONFIG"] = ctx.mcp_config_path
    if ctx.safe_outputs_enabled:
        env["GH_AW_SAFE_OUTPUTS"] = SAFE_OUTPUTS_PATH
    if ctx.allowed_domains:
        env["GH_AW_ALLOWED_DOMAINS"] = ",".join(ctx.allowed_domains)
    if ctx.config.max_turns is not None:
        env["GH_AW_MAX_TURNS"] = str(ctx.config.max_turns)
    return env


def model_variable_env(ctx: EngineContext) -> Dict[str, str]:
    """Expose the repository-level model variable when no model is pinned."""
    if ctx.selection.model:
        return {}
    key = ctx.selection.settings.get("model_variable")
    if not key:
        return {}
    return {key: f"${{{{ vars.{key} || '' }}}}"}


def finalize_env(env: Dict[str, str], ctx: EngineContext) -> Dict[str, str]:
    """Overlay user ``engine.env`` and sort keys."""
    merged = dict(env)
    merged.update(ctx.config.env)
    return {key: merged[key] for key in sorted(merged)}


def tee_to_log(command: str, log_file: str) -> str:
    return f"set -o pipefail\n{command} 2>&1 | tee -a {log_file}"
