"""Devcontainer bootstrapper: scaffolds sandboxed workspaces for a coding agent."""

__version__ = "0.1.0"
