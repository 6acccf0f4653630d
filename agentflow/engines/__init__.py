"""
agentflow/engines - Pluggable AI engine adapters.

- EngineAdapter: base interface (install + execution steps)
- EngineRegistry: explicit id -> adapter mapping with typo suggestions
- build_default_registry(): copilot, copilot-sdk, claude, custom
"""

from .base import EngineAdapter, EngineContext
from .registry import EngineRegistry, build_default_registry

__all__ = [
    "EngineAdapter",
    "EngineContext",
    "EngineRegistry",
    "build_default_registry",
]
