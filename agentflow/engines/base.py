"""
base.py - Abstract base class for engine adapters.

An adapter turns an ``EngineSelection`` plus the effective configuration into
the job steps that install, configure and invoke one AI engine. Adapters are
stateless; step generation is a pure function of the ``EngineContext``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from agentflow.spec.constants import AGENT_LOG_PATH, PROMPT_PATH
from agentflow.spec.types import EffectiveFrontmatter, EngineConfig, EngineSelection

Step = Dict[str, Any]


@dataclass(frozen=True)
class EngineContext:
    """Everything an adapter may read while generating steps."""

    selection: EngineSelection
    frontmatter: EffectiveFrontmatter
    mcp_config_path: Optional[str] = None  # set when MCP servers are configured
    allowed_domains: Tuple[str, ...] = ()
    safe_outputs_enabled: bool = False
    prompt_path: str = PROMPT_PATH
    log_file: str = AGENT_LOG_PATH

    @property
    def config(self) -> EngineConfig:
        return self.selection.config

    @property
    def tools(self) -> Dict[str, Any]:
        return self.frontmatter.tools


class EngineAdapter(ABC):
    """Abstract base class for AI engine backends.

    Adapters are responsible for:
    - Naming the secrets the engine needs
    - Emitting installation steps (pinned CLI versions)
    - Emitting the execution step(s) with log capture

    Adapters do NOT own:
    - Prompt assembly (the compiler writes the prompt file)
    - MCP configuration contents (the compiler writes the config file)
    - Safe-output processing (separate job)
    """

    experimental = False

    @property
    @abstractmethod
    def engine_id(self) -> str:
        """Registry key, e.g. 'copilot'."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    @property
    def description(self) -> str:
        return ""

    @property
    def model_setting_key(self) -> str:
        """Repository variable consulted when no model is configured."""
        return f"GH_AW_MODEL_AGENT_{self.engine_id.upper().replace('-', '_')}"

    def select(self, config: EngineConfig) -> EngineSelection:
        """Bind a configuration to this adapter."""
        return EngineSelection(
            engine_id=self.engine_id,
            config=config,
            model=config.model,
            settings={"model_variable": self.model_setting_key},
        )

    def secret_names(self) -> List[str]:
        return []

    def installation_steps(self, ctx: EngineContext) -> List[Step]:
        return []

    @abstractmethod
    def execution_steps(self, ctx: EngineContext) -> List[Step]:
        """Steps that run the agent against the prompt file.

        Args:
            ctx: Engine context for the compiled document.

        Returns:
            Steps in execution order. Output must be deterministic.
        """
        ...

    def steps(self, ctx: EngineContext) -> List[Step]:
        return self.installation_steps(ctx) + self.execution_steps(ctx)

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.engine_id,
            "label": self.display_name,
            "description": self.description,
            "experimental": self.experimental,
        }
