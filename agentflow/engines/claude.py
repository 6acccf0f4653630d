"""
claude.py - Claude Code CLI engine.
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
from agentflow.spec.mcp import mcp_server_names

DOCS_URL = "https://github.github.com/gh-aw/reference/engines/#anthropic-claude-code"

READ_ONLY_TOOLS = ("ExitPlanMode", "Glob", "Grep", "LS", "NotebookRead", "Read", "Task", "TodoWrite")
EDIT_TOOLS = ("Edit", "MultiEdit", "NotebookEdit", "Write")


class ClaudeEngine(EngineAdapter):
    """Anthropic Claude Code in print mode with stream-json output."""

    @property
    def engine_id(self) -> str:
        return "claude"

    @property
    def display_name(self) -> str:
        return "Claude Code"

    @property
    def description(self) -> str:
        return "Uses Claude Code with full MCP tool support and allow-listing"

    def secret_names(self) -> List[str]:
        return get_engine_secrets("claude") or ["CLAUDE_CODE_OAUTH_TOKEN", "ANTHROPIC_API_KEY"]

    def installation_steps(self, ctx: EngineContext) -> List[Step]:
        version = ctx.config.version or get_engine_version("claude")
        package = get_engine_package("claude") or "@anthropic-ai/claude-code"
        return [
            secret_validation_step(self.secret_names(), self.display_name, DOCS_URL),
            setup_node_step(),
            npm_install_step(package, version, self.display_name),
        ]

    def allowed_tools(self, ctx: EngineContext) -> List[str]:
        """Claude tool names for ``--allowed-tools``, sorted."""
        tools = ctx.tools
        allowed = set(READ_ONLY_TOOLS)
        if "edit" in tools:
            allowed.update(EDIT_TOOLS)
        commands = bash_commands(tools)
        if commands == ["*"]:
            allowed.add("Bash")
        elif commands:
            allowed.update(f"Bash({c})" for c in commands)
        if "web-fetch" in tools:
            allowed.add("WebFetch")
        if "web-search" in tools:
            allowed.add("WebSearch")
        for server in mcp_server_names(ctx.frontmatter, ctx.safe_outputs_enabled):
            allowed.add(f"mcp__{server}")
        return sorted(allowed)

    def cli_args(self, ctx: EngineContext) -> List[str]:
        args = ["--print", "--disable-slash-commands", "--no-chrome"]
        if ctx.selection.model:
            args.extend(["--model", ctx.selection.model])
        if ctx.config.max_turns is not None:
            args.extend(["--max-turns", str(ctx.config.max_turns)])
        if ctx.mcp_config_path:
            args.extend(["--mcp-config", ctx.mcp_config_path])
        args.extend(["--allowed-tools", ",".join(self.allowed_tools(ctx))])
        args.extend([
            "--debug-file", ctx.log_file,
            "--verbose",
            "--permission-mode", "bypassPermissions",
            "--output-format", "stream-json",
        ])
        args.extend(ctx.config.args)
        return args

    def execution_steps(self, ctx: EngineContext) -> List[Step]:
        command = "claude " + shell_join(self.cli_args(ctx))
        command += f' "$(cat {ctx.prompt_path})"'

        env = runtime_env(ctx)
        model_env = model_variable_env(ctx)
        if model_env:
            # Claude Code reads its default model from ANTHROPIC_MODEL
            key = ctx.selection.settings["model_variable"]
            env["ANTHROPIC_MODEL"] = model_env[key]
        env["ANTHROPIC_API_KEY"] = "${{ secrets.ANTHROPIC_API_KEY }}"
        env["CLAUDE_CODE_OAUTH_TOKEN"] = "${{ secrets.CLAUDE_CODE_OAUTH_TOKEN }}"
        env["DISABLE_BUG_COMMAND"] = "1"
        env["DISABLE_ERROR_REPORTING"] = "1"
        env["DISABLE_TELEMETRY"] = "1"
        env["MCP_TIMEOUT"] = "120000"
        if ctx.config.user_agent:
            env["CLAUDE_CODE_USER_AGENT"] = ctx.config.user_agent

        return [
            {
                "name": "Execute Claude Code CLI",
                "id": "agentic_execution",
                "run": tee_to_log(command, ctx.log_file),
                "env": finalize_env(env, ctx),
            }
        ]
