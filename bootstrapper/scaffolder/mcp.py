"""MCP server manifest assembly.

The MCP template keeps every server the scaffolder knows about in a single
file, grouped into placeholder-keyed *buckets*::

    {
      "mcpServers": {
        "__CONDITIONAL_TASKMASTER__": {"task-master-ai": {...}},
        "__SUPERCLAUDE_CORE__": {"context7": {...}, "sequential-thinking": {...}},
        ...
      }
    }

``McpAssembler`` merges the buckets whose toggle is set into a flat
``{"mcpServers": {<id>: <server>}}`` manifest.  Output key order depends only
on the toggle vector and the template, so scaffolding is byte-reproducible.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from bootstrapper.errors import TemplateConflict, TemplateInvalid, TemplateMissingBucket
from bootstrapper.models import ToggleVector
from bootstrapper.scaffolder.templates import MCP_TEMPLATE
from bootstrapper.utils import dump_json


TASKMASTER_BUCKET = "__CONDITIONAL_TASKMASTER__"
SUPERCLAUDE_CORE_BUCKET = "__SUPERCLAUDE_CORE__"
SUPERCLAUDE_UI_BUCKET = "__SUPERCLAUDE_UI__"
SUPERCLAUDE_CODEOPS_BUCKET = "__SUPERCLAUDE_CODEOPS__"

# Merge order is significant: it fixes the key order of the manifest.
BUCKETS: tuple[tuple[str, Callable[[ToggleVector], bool]], ...] = (
    (TASKMASTER_BUCKET, lambda t: t.install_task_master),
    (SUPERCLAUDE_CORE_BUCKET, lambda t: t.install_super_claude.core),
    (SUPERCLAUDE_UI_BUCKET, lambda t: t.install_super_claude.ui),
    (SUPERCLAUDE_CODEOPS_BUCKET, lambda t: t.install_super_claude.code_ops),
)

# Server ids each bucket is expected to provide.
SERVER_GROUPS: dict[str, tuple[str, ...]] = {
    TASKMASTER_BUCKET: ("task-master-ai",),
    SUPERCLAUDE_CORE_BUCKET: ("context7", "sequential-thinking"),
    SUPERCLAUDE_UI_BUCKET: ("magic", "playwright"),
    SUPERCLAUDE_CODEOPS_BUCKET: ("morphllm-fast-apply", "serena"),
}


def is_placeholder(key: str) -> bool:
    """Return ``True`` for bucket marker keys such as ``__SUPERCLAUDE_UI__``."""
    return key.startswith("__") and key.endswith("__")


class McpAssembler:
    """Builds the MCP manifest from the bucketed MCP template."""

    def __init__(self, template: Mapping[str, Any]) -> None:
        servers = template.get("mcpServers")
        if not isinstance(servers, Mapping):
            raise TemplateInvalid(MCP_TEMPLATE, "missing top-level 'mcpServers' object")
        self.buckets: Mapping[str, Any] = servers

    @classmethod
    def from_text(cls, text: str) -> "McpAssembler":
        """Parse the MCP template JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TemplateInvalid(MCP_TEMPLATE, str(exc)) from exc
        if not isinstance(data, dict):
            raise TemplateInvalid(MCP_TEMPLATE, "expected a JSON object")
        return cls(data)

    def assemble(self, toggles: ToggleVector) -> dict[str, Any]:
        """Return the server map for *toggles*.

        Starts empty and merges every enabled bucket in ``BUCKETS`` order;
        within a bucket the template's own order is kept.

        Raises:
            TemplateMissingBucket: If an enabled bucket is not in the template.
            TemplateConflict: If a server id is provided by two buckets.
        """
        servers: dict[str, Any] = {}
        for bucket, enabled in BUCKETS:
            if not enabled(toggles):
                continue
            if bucket not in self.buckets:
                raise TemplateMissingBucket(bucket)
            entries = self.buckets[bucket]
            if not isinstance(entries, Mapping):
                raise TemplateInvalid(MCP_TEMPLATE, f"bucket {bucket} is not an object")
            for server_id, server in entries.items():
                if server_id in servers or is_placeholder(server_id):
                    raise TemplateConflict(server_id, bucket)
                servers[server_id] = server
        return servers

    def manifest(self, toggles: ToggleVector) -> dict[str, Any]:
        """Return the full ``{"mcpServers": ...}`` manifest for *toggles*."""
        return {"mcpServers": self.assemble(toggles)}

    def render(self, toggles: ToggleVector) -> str:
        """Return the serialised manifest (stable bytes for identical input)."""
        return dump_json(self.manifest(toggles))
