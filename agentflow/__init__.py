"""agentflow - compile markdown agent workflows into GitHub Actions lock files."""

__version__ = "0.4.0"

GENERATOR_NAME = "agentflow"
