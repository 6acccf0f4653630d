"""
Routes package for the agentflow API.

- compile: in-memory workflow compilation and engine listing
"""

from .compile import router as compile_router

__all__ = ["compile_router"]
