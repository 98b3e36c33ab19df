"""Devcontainer workspace scaffolder.

This package renders a project tree for an AI-assisted coding agent: a
``devcontainer.json`` whose ``features`` toggles drive build-time
installation, an ``.mcp.json`` assembled from the same toggles, and a
``postCreateCommand`` that runs exactly the matching runtime scripts.

Quick usage::

    from bootstrapper.scaffolder import ProjectGenerator

    result = ProjectGenerator().generate("api-service", "/tmp/work")
    print(result.mcp_servers)
"""

from bootstrapper.scaffolder.generator import ProjectGenerator, ScaffoldResult
from bootstrapper.scaffolder.mcp import McpAssembler
from bootstrapper.scaffolder.templates import TemplateRenderer, TemplateStore
from bootstrapper.scaffolder.toggles import resolve_toggles

__all__ = [
    "McpAssembler",
    "ProjectGenerator",
    "ScaffoldResult",
    "TemplateRenderer",
    "TemplateStore",
    "resolve_toggles",
]
