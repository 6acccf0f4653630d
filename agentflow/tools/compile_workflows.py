#!/usr/bin/env python3
"""
compile_workflows.py - Compile markdown agent workflows to GitHub Actions lock files.

Each ``<name>.md`` workflow is compiled to ``<name>.lock.yml`` beside it.
Files without an ``on:`` trigger are shared fragments: they are only ever
imported, so they are skipped rather than reported as failures.

## CLI Usage

Compile every workflow in .github/workflows:
  agentflow-compile

Compile specific files, validating only:
  agentflow-compile .github/workflows/triage.md --no-emit

Machine-readable report:
  agentflow-compile --json

## Exit Codes

0 - All workflows compiled
1 - At least one workflow failed to compile
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from agentflow import __version__
from agentflow.engines import build_default_registry
from agentflow.spec.batch import BatchReport, compile_batch, discover_workflows
from agentflow.spec.compiler import CompileOptions, Compiler
from agentflow.validator.errors import CompilerError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_COMPILE_FAILED = 1

DEFAULT_WORKFLOW_DIR = ".github/workflows"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentflow-compile",
        description="Compile markdown agent workflows into GitHub Actions YAML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0 - All workflows compiled
  1 - One or more workflows failed

Examples:
  agentflow-compile
  agentflow-compile .github/workflows/triage.md --strict
  agentflow-compile --dir workflows --no-emit --json
        """,
    )
    parser.add_argument("paths", nargs="*", help="Workflow files to compile")
    parser.add_argument(
        "--dir",
        default=None,
        help=f"Compile every *.md in this directory (default: {DEFAULT_WORKFLOW_DIR} when no paths are given)",
    )
    parser.add_argument("--no-emit", action="store_true", help="Validate only; do not write lock files")
    parser.add_argument("--strict", action="store_true", help="Reject write permissions and unrestricted network")
    parser.add_argument("--engine", default=None, help="Override the engine of every workflow")
    parser.add_argument(
        "--inline-prompt",
        action="store_true",
        help="Inline imported fragment bodies instead of runtime-import macros",
    )
    parser.add_argument(
        "--refresh-stop-time",
        action="store_true",
        help="Recompute relative stop-after deadlines instead of keeping the existing ones",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failure")
    parser.add_argument("--jobs", "-j", type=int, default=None, help="Number of parallel workers")
    parser.add_argument("--trial-repo", default=None, help="Compile in trial mode against owner/repo")
    parser.add_argument("--json", action="store_true", help="Output a machine-readable JSON report")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"agentflow-compile {__version__}")
    return parser


def collect_paths(args: argparse.Namespace) -> List[str]:
    paths = list(args.paths)
    if args.dir or not paths:
        paths.extend(discover_workflows(args.dir or DEFAULT_WORKFLOW_DIR))
    return paths


def options_from_args(args: argparse.Namespace) -> CompileOptions:
    return CompileOptions(
        no_emit=args.no_emit,
        strict=args.strict,
        engine_override=args.engine,
        inline_prompt=args.inline_prompt,
        refresh_stop_time=args.refresh_stop_time,
        trial_mode=args.trial_repo is not None,
        trial_logical_repo=args.trial_repo,
    )


# ============================================================================
# Reporting
# ============================================================================


def print_success(report: BatchReport) -> None:
    print(f"Compiled {len(report.results)} workflow(s).")
    for result in report.results:
        target = result.lock_path if result.written else f"{result.lock_path} (not written)"
        print(f"  [PASS] {result.source_path} -> {target}")
    for path in report.skipped:
        print(f"  [SKIP] {path} (shared fragment)")


def print_errors(report: BatchReport) -> None:
    """Print failures to stderr grouped by error type, in path order."""
    by_type: Dict[str, List[CompilerError]] = defaultdict(list)
    for path in sorted(report.failures):
        error = report.failures[path]
        by_type[error.error_type].append(error)

    for error_type in sorted(by_type):
        errors = by_type[error_type]
        print(f"\n{error_type} Errors ({len(errors)}):", file=sys.stderr)
        print("=" * 70, file=sys.stderr)
        for error in errors:
            print(error.format(), file=sys.stderr)

    if report.cancelled:
        print(f"\nCancelled ({len(report.cancelled)}): {', '.join(report.cancelled)}", file=sys.stderr)
    print(f"\nCompilation FAILED ({len(report.failures)} of "
          f"{len(report.failures) + len(report.results)} workflows).", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    paths = collect_paths(args)
    if not paths:
        logger.warning("No workflows found")

    compiler = Compiler(build_default_registry(), options_from_args(args))
    report = compile_batch(paths, compiler, max_workers=args.jobs, fail_fast=args.fail_fast)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    elif report.ok:
        print_success(report)
    else:
        print_errors(report)

    return EXIT_SUCCESS if report.ok else EXIT_COMPILE_FAILED


if __name__ == "__main__":
    sys.exit(main())
