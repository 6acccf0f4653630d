"""
copilot.py - Hosted Copilot CLI engine (the default engine).
"""

from __future__ import annotations

from typing import List

from agentflow.config.compiler_config import get_engine_package, get_engine_secrets, get_engine_version
from agentflow.engines.base import EngineAdapter, EngineContext, Step
from agentflow.engines.helpers import (
    bash_commands,
    finalize_env,
    model_variable_env,
    npm_install_step,
    runtime_env,
    secret_validation_step,
    setup_node_step,
    shell_join,
    tee_to_log,
)
from agentflow.spec.constants import AGENT_LOG_DIR
from agentflow.spec.mcp import mcp_server_names

DOCS_URL = "https://github.github.com/gh-aw/reference/engines/#github-copilot-default"


class CopilotEngine(EngineAdapter):
    """GitHub Copilot CLI in non-interactive prompt mode."""

    @property
    def engine_id(self) -> str:
        return "copilot"

    @property
    def display_name(self) -> str:
        return "GitHub Copilot CLI"

    @property
    def description(self) -> str:
        return "Uses GitHub Copilot CLI with MCP server support"

    def secret_names(self) -> List[str]:
        return get_engine_secrets("copilot") or ["COPILOT_GITHUB_TOKEN"]

    def installation_steps(self, ctx: EngineContext) -> List[Step]:
        version = ctx.config.version or get_engine_version("copilot")
        package = get_engine_package("copilot") or "@github/copilot"
        return [
            secret_validation_step(self.secret_names(), self.display_name, DOCS_URL),
            setup_node_step(),
            npm_install_step(package, version, self.display_name),
        ]

    def allow_tool_args(self, ctx: EngineContext) -> List[str]:
        """``--allow-tool`` flags derived from tools and MCP servers."""
        tools = ctx.tools
        allowed: List[str] = []
        commands = bash_commands(tools)
        if commands == ["*"]:
            allowed.append("shell")
        elif commands:
            allowed.extend(f"shell({c})" for c in commands)
        if "edit" in tools:
            allowed.append("write")
        if "web-fetch" in tools:
            allowed.append("web-fetch")
        allowed.extend(mcp_server_names(ctx.frontmatter, ctx.safe_outputs_enabled))

        args: List[str] = []
        for tool in sorted(set(allowed)):
            args.extend(["--allow-tool", tool])
        return args

    def cli_args(self, ctx: EngineContext) -> List[str]:
        args = [
            "--add-dir", "/tmp/gh-aw/",
            "--log-level", "all",
            "--log-dir", AGENT_LOG_DIR,
            "--disable-builtin-mcps",
        ]
        if ctx.selection.model:
            args.extend(["--model", ctx.selection.model])
        if ctx.mcp_config_path:
            args.extend(["--additional-mcp-config", f"@{ctx.mcp_config_path}"])
        args.extend(self.allow_tool_args(ctx))
        args.extend(ctx.config.args)
        return args

    def command(self, ctx: EngineContext) -> str:
        command = "copilot " + shell_join(self.cli_args(ctx))
        model_key = ctx.selection.settings.get("model_variable")
        if not ctx.selection.model and model_key:
            command += f' ${{{model_key}:+ --model "${model_key}"}}'
        return command + f' --prompt "$(cat {ctx.prompt_path})"'

    def execution_steps(self, ctx: EngineContext) -> List[Step]:
        env = runtime_env(ctx)
        env.update(model_variable_env(ctx))
        env["COPILOT_GITHUB_TOKEN"] = "${{ secrets.COPILOT_GITHUB_TOKEN }}"
        env["GITHUB_STEP_SUMMARY"] = "${{ env.GITHUB_STEP_SUMMARY }}"
        env["XDG_CONFIG_HOME"] = "/home/runner"
        return [
            {
                "name": "Execute GitHub Copilot CLI",
                "id": "agentic_execution",
                "run": tee_to_log(self.command(ctx), ctx.log_file),
                "env": finalize_env(env, ctx),
            }
        ]
