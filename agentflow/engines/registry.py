"""
registry.py - Engine registry.

The registry is an explicit value: build one with ``build_default_registry()``
at process start and pass it to every compiler that needs engine lookup.

Usage:
    from agentflow.engines import build_default_registry

    registry = build_default_registry()
    registry.is_valid_engine("claude")   # True
    adapter = registry.get("copilot")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from agentflow.config.compiler_config import get_default_engine
from agentflow.engines.base import EngineAdapter
from agentflow.engines.claude import ClaudeEngine
from agentflow.engines.copilot import CopilotEngine
from agentflow.engines.copilot_sdk import CopilotSDKEngine
from agentflow.engines.custom import CustomEngine
from agentflow.spec.types import EngineConfig, EngineSelection
from agentflow.validator.errors import ConfigurationError
from agentflow.validator.suggest import rank_suggestions

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Maps engine ids to adapters."""

    def __init__(self, default_engine: str = "copilot"):
        self._adapters: Dict[str, EngineAdapter] = {}
        self._default_engine = default_engine

    def register(self, adapter: EngineAdapter) -> None:
        if adapter.engine_id in self._adapters:
            raise ValueError(f"Engine '{adapter.engine_id}' is already registered")
        logger.debug("Registering engine: id=%s, name=%s", adapter.engine_id, adapter.display_name)
        self._adapters[adapter.engine_id] = adapter

    def is_valid_engine(self, engine_id: str) -> bool:
        return engine_id in self._adapters

    def supported_engines(self) -> List[str]:
        return sorted(self._adapters)

    def suggestions(self, engine_id: str) -> List[str]:
        """Registered ids ranked by edit distance to ``engine_id``."""
        return rank_suggestions(engine_id, self._adapters)

    def get(self, engine_id: str) -> EngineAdapter:
        """Look up an adapter by exact id.

        Raises:
            ConfigurationError: With ranked suggestions, if the id is unknown.
        """
        adapter = self._adapters.get(engine_id)
        if adapter is None:
            raise ConfigurationError(
                f"unknown engine '{engine_id}'",
                kind="UnknownEngine",
                suggestions=self.suggestions(engine_id),
                hint=f"Supported engines: {', '.join(self.supported_engines())}",
            )
        return adapter

    def get_by_prefix(self, name: str) -> Optional[EngineAdapter]:
        """Longest registered id that ``name`` starts with (``claude-beta`` -> claude)."""
        matches = [eid for eid in self._adapters if name.startswith(eid)]
        if not matches:
            return None
        return self._adapters[max(matches, key=len)]

    @property
    def default_engine(self) -> str:
        return self._default_engine

    def select(self, config: EngineConfig, override: Optional[str] = None) -> EngineSelection:
        """Resolve the engine for a document; ``override`` replaces the configured id."""
        engine_id = override or config.id or self._default_engine
        adapter = self._adapters.get(engine_id)
        if adapter is None:
            adapter = self.get_by_prefix(engine_id)
            if adapter is None:
                self.get(engine_id)  # raises with suggestions
            logger.debug("Engine '%s' matched by prefix to '%s'", engine_id, adapter.engine_id)
        return adapter.select(config)

    def list_engines(self) -> List[Dict[str, Any]]:
        """Describe registered engines, sorted by id."""
        return [self._adapters[eid].describe() for eid in self.supported_engines()]


def build_default_registry(default_engine: Optional[str] = None) -> EngineRegistry:
    """Registry with the built-in copilot, copilot-sdk, claude and custom engines."""
    if default_engine is None:
        default_engine = get_default_engine()
    registry = EngineRegistry(default_engine=default_engine)
    for adapter in (CopilotEngine(), CopilotSDKEngine(), ClaudeEngine(), CustomEngine()):
        registry.register(adapter)
    return registry
