"""
copilot_sdk.py - Copilot engine driven through the SDK client.

The CLI is started in headless mode on a local port and a Node.js client
drives the session. Installation is shared with the CLI engine.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from agentflow.engines.base import EngineContext, Step
from agentflow.engines.copilot import CopilotEngine
from agentflow.engines.helpers import finalize_env, model_variable_env, runtime_env

SDK_PORT = 10002
EVENT_LOG = "/tmp/gh-aw/copilot-sdk/event-log.jsonl"
CLIENT_SCRIPT = "/opt/gh-aw/copilot/copilot-client.js"


class CopilotSDKEngine(CopilotEngine):
    """GitHub Copilot through the SDK client (headless CLI)."""

    experimental = True

    @property
    def engine_id(self) -> str:
        return "copilot-sdk"

    @property
    def display_name(self) -> str:
        return "GitHub Copilot SDK"

    @property
    def description(self) -> str:
        return "Uses GitHub Copilot SDK with headless mode"

    def client_config(self, ctx: EngineContext) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "cliUrl": f"http://host.docker.internal:{SDK_PORT}",
            "eventLogFile": EVENT_LOG,
            "githubToken": "${{ secrets.COPILOT_GITHUB_TOKEN }}",
            "logLevel": "info",
            "promptFile": ctx.prompt_path,
        }
        if ctx.selection.model:
            config["session"] = {"model": ctx.selection.model}
        if ctx.mcp_config_path:
            config["mcpConfigFile"] = ctx.mcp_config_path
        return config

    def execution_steps(self, ctx: EngineContext) -> List[Step]:
        headless = (
            f"copilot --headless --port {SDK_PORT} &\n"
            "COPILOT_PID=$!\n"
            'echo "COPILOT_PID=${COPILOT_PID}" >> "$GITHUB_ENV"\n'
            "sleep 5\n"
            'if ! kill -0 "${COPILOT_PID}" 2>/dev/null; then\n'
            '  echo "::error::Copilot CLI failed to start"\n'
            "  exit 1\n"
            "fi\n"
        )
        config_json = json.dumps(self.client_config(ctx), sort_keys=True, separators=(",", ":"))

        env = runtime_env(ctx)
        env.update(model_variable_env(ctx))
        env["GH_AW_COPILOT_CONFIG"] = config_json

        return [
            {
                "name": "Start Copilot CLI in headless mode",
                "run": headless,
                "env": {"COPILOT_GITHUB_TOKEN": "${{ secrets.COPILOT_GITHUB_TOKEN }}"},
            },
            {
                "name": "Execute Copilot SDK client",
                "id": "agentic_execution",
                "run": f"mkdir -p {EVENT_LOG.rsplit('/', 1)[0]}\n"
                f"node {CLIENT_SCRIPT} 2>&1 | tee -a {ctx.log_file}\n",
                "env": finalize_env(env, ctx),
            },
        ]
