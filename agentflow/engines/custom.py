"""
custom.py - Engine that runs user-provided steps verbatim.
"""

from __future__ import annotations

import logging
from typing import List

from agentflow.engines.base import EngineAdapter, EngineContext, Step
from agentflow.engines.helpers import runtime_env

logger = logging.getLogger(__name__)


class CustomEngine(EngineAdapter):
    """Emits ``engine.steps`` as written, with no install or secret scaffolding.

    Each step that runs a command receives the prompt, MCP config and
    safe-outputs locations as environment variables; keys the user already
    set on the step are left alone.
    """

    @property
    def engine_id(self) -> str:
        return "custom"

    @property
    def display_name(self) -> str:
        return "Custom Steps"

    @property
    def description(self) -> str:
        return "Runs user-defined GitHub Actions steps"

    def execution_steps(self, ctx: EngineContext) -> List[Step]:
        if not ctx.config.steps:
            logger.debug("Custom engine for %s declares no steps", ctx.frontmatter.name)
            return []

        injected = runtime_env(ctx)
        if ctx.config.args:
            injected["GH_AW_ARGS"] = " ".join(ctx.config.args)
        injected.update(ctx.config.env)

        steps: List[Step] = []
        for user_step in ctx.config.steps:
            step = dict(user_step)
            if "run" in step or "uses" in step:
                env = dict(injected)
                env.update(step.get("env") or {})
                step["env"] = env
            steps.append(step)
        return steps
