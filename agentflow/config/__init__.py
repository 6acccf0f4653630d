"""Compiler configuration (compiler.yaml with AGENTFLOW_* environment overrides)."""
