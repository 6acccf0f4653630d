"""
Compile endpoints for the agentflow API.

Provides REST endpoints for:
- Compiling an in-memory workflow (plus its imported fragments) to YAML
- Listing the registered engines

Nothing is written to disk: every request compiles with ``no_emit`` against
a virtual file source built from the request body.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from agentflow.engines import EngineRegistry
from agentflow.spec.compiler import CompileOptions, Compiler
from agentflow.spec.imports import VirtualFileSource
from agentflow.validator.errors import CompilerError, ValidationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compile", tags=["compile"])


# =============================================================================
# Pydantic Models
# =============================================================================


class CompileOptionsModel(BaseModel):
    """Subset of compiler options a caller may set."""

    strict: bool = False
    engine: Optional[str] = Field(default=None, description="Engine id overriding the frontmatter")
    inline_prompt: bool = False
    skip_validation: bool = False
    workflow_identifier: Optional[str] = None
    trial_mode: bool = False
    trial_logical_repo: Optional[str] = Field(default=None, description="owner/repo")


class CompileRequest(BaseModel):
    """Request for the compile endpoint."""

    content: str = Field(..., description="Markdown workflow text")
    filename: str = Field(
        default=".github/workflows/workflow.md",
        description="Path the workflow is compiled as; imports resolve relative to it",
    )
    files: Dict[str, str] = Field(
        default_factory=dict,
        description="Importable fragments keyed by path",
    )
    options: CompileOptionsModel = Field(default_factory=CompileOptionsModel)


class DiagnosticModel(BaseModel):
    type: str
    kind: str
    location: str
    problem: str
    fix_action: str
    line_number: Optional[int] = None
    file_path: Optional[str] = None


class CompileResponse(BaseModel):
    """Response from the compile endpoint."""

    status: str
    yaml: Optional[str] = None
    errors: List[DiagnosticModel] = Field(default_factory=list)


class EngineListResponse(BaseModel):
    engines: List[Dict[str, Any]]
    default: str
    count: int


# =============================================================================
# Helper Functions
# =============================================================================


def get_registry(request: Request) -> EngineRegistry:
    """Engine registry built once by ``create_app``."""
    return request.app.state.registry


def _build_compiler(request: CompileRequest, registry: EngineRegistry) -> Compiler:
    opts = request.options
    options = CompileOptions(
        no_emit=True,
        skip_validation=opts.skip_validation,
        workflow_identifier=opts.workflow_identifier,
        inline_prompt=opts.inline_prompt,
        strict=opts.strict,
        engine_override=opts.engine,
        trial_mode=opts.trial_mode,
        trial_logical_repo=opts.trial_logical_repo,
    )
    files = dict(request.files)
    files[request.filename] = request.content
    return Compiler(registry, options, files=VirtualFileSource(files))


def compile_request(request: CompileRequest, registry: EngineRegistry) -> CompileResponse:
    """Compile a request body; compile failures become diagnostics, not exceptions."""
    compiler = _build_compiler(request, registry)
    result = ValidationResult()
    try:
        document = compiler.parse_workflow_string(request.content, request.filename)
        text = compiler.compile_to_yaml(document, request.filename)
    except CompilerError as e:
        logger.debug("Compile failed for %s: %s", request.filename, e)
        result.add_error(e)
        data = result.to_dict()
        return CompileResponse(status=data["status"], errors=data["errors"])
    return CompileResponse(status=result.to_dict()["status"], yaml=text)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=CompileResponse)
def compile_workflow(
    body: CompileRequest,
    registry: EngineRegistry = Depends(get_registry),
):
    """Compile a workflow held in the request body.

    Returns ``status: PASS`` with the lock-file text, or ``status: FAIL``
    with the diagnostics. Unexpected failures are reported as 500.
    """
    try:
        return compile_request(body, registry)
    except Exception as e:
        logger.error("Compilation crashed: %s", e, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={
                "error": "internal_error",
                "message": f"Compilation failed: {str(e)}",
                "details": {"filename": body.filename},
            },
        )


@router.get("/engines", response_model=EngineListResponse)
def list_engines(registry: EngineRegistry = Depends(get_registry)):
    """List the engines a workflow may select."""
    engines = registry.list_engines()
    return EngineListResponse(engines=engines, default=registry.default_engine, count=len(engines))
