"""
agentflow API - FastAPI binding for in-memory compilation.

    POST /api/compile           - Compile a workflow
    GET  /api/compile/engines   - List engines
    GET  /api/health            - Health check
"""

from .routes import compile_router
from .server import create_app

__all__ = ["create_app", "compile_router"]
