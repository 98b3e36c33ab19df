"""Main scaffolding orchestrator.

Takes a project name and optional work directory and produces a
devcontainer workspace: container definition, runtime scripts, build-time
feature tree, MCP server manifest, environment file, and onboarding docs.

The steps run strictly in sequence because later artefacts are derived from
earlier ones: the toggle vector is read back from the rendered
``devcontainer.json``, and both ``.mcp.json`` and ``postCreateCommand`` are
computed from that one vector.
"""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict
from rich.markup import escape
from rich.panel import Panel

from bootstrapper.config import BootstrapConfig, ScaffoldContext, resolve_workdir
from bootstrapper.errors import DestinationExists, UsageError
from bootstrapper.models import ToggleVector
from bootstrapper.utils import (
    console,
    copy_file,
    ensure_dir,
    format_duration,
    is_empty_dir,
    load_json,
    make_executable,
    print_step,
    print_success,
    print_summary_table,
    save_json,
    write_text,
)

from .certificates import CertificateProbe
from .devcontainer import dump_devcontainer, parse_devcontainer, render_devcontainer
from .lifecycle import apply_lifecycle
from .mcp import McpAssembler
from .templates import (
    ALLOWLIST_TEMPLATE,
    DEVCONTAINER_TEMPLATE,
    ENV_TEMPLATE,
    MCP_TEMPLATE,
    ONBOARDING_TEMPLATE,
    REPORT_TEMPLATE,
    RUNTIME_SCRIPTS,
    TemplateRenderer,
    TemplateStore,
)
from .toggles import apply_toggle_overrides, resolve_toggles


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class ScaffoldResult(BaseModel):
    """What a scaffolding run produced."""

    model_config = ConfigDict(frozen=True)

    context: ScaffoldContext
    mcp_servers: list[str]
    post_create_command: str
    toggles: ToggleVector
    certificate: Path | None = None
    elapsed: float = 0.0

    @property
    def project_root(self) -> Path:
        return self.context.project_root


# ---------------------------------------------------------------------------
# Context construction
# ---------------------------------------------------------------------------


def build_context(
    project: str, workdir: str | Path | None, config: BootstrapConfig
) -> ScaffoldContext:
    """Validate the arguments and resolve the destination paths.

    Raises:
        UsageError: If *project* is empty or has no usable basename.
    """
    if not project or not project.strip():
        raise UsageError("project_name is required")
    name = Path(project).name
    if not name or name in (".", ".."):
        raise UsageError(f"Invalid project name: {project!r}")

    # The project always nests under the work directory, even when given as
    # an absolute path.
    relative = Path(project)
    if relative.is_absolute():
        relative = Path(*relative.parts[1:])
    root = resolve_workdir(workdir, config.install_dir) / relative
    return ScaffoldContext(project_name=name, project_root=root)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffolding orchestrator.

    Given a ``BootstrapConfig``, generates a project tree containing:
    - ``.devcontainer/devcontainer.json`` with the ``features`` toggles
    - ``.devcontainer/scripts/`` runtime scripts (executable)
    - ``.devcontainer/features/`` build-time feature tree
    - ``.devcontainer/certs/`` with the host certificate, when one is found
    - ``.mcp.json`` assembled from the same toggles
    - ``.env`` and the ``docs/`` onboarding files

    Args:
        config: Installation-level configuration.  Defaults to
            ``BootstrapConfig.from_env()``.
        store: Template store; defaults to the config's template directories.
        overrides: Feature option values (on-disk form) written into the
            rendered container definition before toggles are resolved.
    """

    def __init__(
        self,
        config: BootstrapConfig | None = None,
        store: TemplateStore | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self.config = config or BootstrapConfig.from_env()
        self.store = store or TemplateStore(self.config.template_dir, self.config.features_dir)
        self.renderer = TemplateRenderer(self.store)
        self.overrides = dict(overrides or {})

    # -- Public API --------------------------------------------------------

    def generate(self, project: str, workdir: str | Path | None = None) -> ScaffoldResult:
        """Generate the complete project tree.

        Args:
            project: Project name or path; its basename becomes the container
                ``name``.
            workdir: Parent directory.  ``None`` means the current directory;
                relative paths resolve against the installation directory.

        Returns:
            A ``ScaffoldResult`` describing the produced tree.
        """
        started = time.monotonic()

        # 1. Validate arguments and resolve paths
        ctx = build_context(project, workdir, self.config)
        console.print(
            Panel(
                f"[bold]Creating new project: {escape(ctx.project_name)}[/bold]\n"
                f"{escape(str(ctx.project_root))}",
                style="cyan",
            )
        )

        # 2. Create the directory skeleton
        self._create_directories(ctx)

        # 3. Copy the build-time feature tree
        self._copy_features(ctx)

        # 4. Copy static templates and runtime scripts
        self._copy_static_templates(ctx)

        # 5. Render the container definition
        self._render_devcontainer(ctx)

        # 6. Resolve toggles from the rendered file
        toggles = self._resolve_toggles(ctx)
        ctx = ctx.with_toggles(toggles)

        # 7. Assemble the MCP manifest
        servers = self._write_mcp_manifest(ctx)

        # 8. Compose the lifecycle command into the container definition
        command = self._write_lifecycle(ctx)

        # 9. Probe the host for a corporate certificate
        certificate = self._probe_certificate(ctx)

        result = ScaffoldResult(
            context=ctx,
            mcp_servers=servers,
            post_create_command=command,
            toggles=toggles,
            certificate=certificate,
            elapsed=time.monotonic() - started,
        )

        # 10. Completion report
        self._report(result)
        return result

    # -- Steps -------------------------------------------------------------

    def _create_directories(self, ctx: ScaffoldContext) -> None:
        """Create the project root and the fixed sub-directories."""
        root = ctx.project_root
        if root.exists() and not self.config.allow_existing and not is_empty_dir(root):
            raise DestinationExists(root)
        for directory in ctx.directories():
            ensure_dir(directory)

    def _copy_features(self, ctx: ScaffoldContext) -> None:
        """Copy the feature tree into ``.devcontainer/features/``."""
        source = self.store.features_root()
        shutil.copytree(source, ctx.features_dest, dirs_exist_ok=True)
        for script in sorted(ctx.features_dest.rglob("*.sh")):
            make_executable(script)
        print_step("Added build-time features")

    def _copy_static_templates(self, ctx: ScaffoldContext) -> None:
        """Copy env template, onboarding doc, allowlist, and runtime scripts."""
        copy_file(self.store.path(ENV_TEMPLATE), ctx.env_file)
        print_step("Created .env from template")

        onboarding = self.renderer.render(
            ONBOARDING_TEMPLATE, {"project_name": ctx.project_name}
        )
        write_text(ctx.docs_dir / "claude-setup-prompts.md", onboarding)
        copy_file(self.store.path(ALLOWLIST_TEMPLATE), ctx.docs_dir / "firewall-allowlist.txt")
        print_step("Added onboarding docs and firewall allowlist")

        for script in RUNTIME_SCRIPTS:
            out = copy_file(self.store.script_path(script), ctx.scripts_dir / script)
            make_executable(out)
        print_step(f"Added runtime scripts: {', '.join(RUNTIME_SCRIPTS)}")

    def _render_devcontainer(self, ctx: ScaffoldContext) -> None:
        """Render ``devcontainer.json`` with the project name, comments stripped."""
        rendered = render_devcontainer(
            self.store.load_text(DEVCONTAINER_TEMPLATE), ctx.project_name
        )
        if self.overrides:
            definition = apply_toggle_overrides(
                parse_devcontainer(rendered), self.overrides, self.config.toggle_feature
            )
            rendered = dump_devcontainer(definition)
        write_text(ctx.devcontainer_json, rendered)
        print_step(f"Set container name to '{ctx.project_name}'")

    def _resolve_toggles(self, ctx: ScaffoldContext) -> ToggleVector:
        """Read the toggle vector back from the rendered container definition."""
        definition = load_json(ctx.devcontainer_json)
        return resolve_toggles(
            definition, self.config.toggle_feature, strict=self.config.strict_toggles
        )

    def _write_mcp_manifest(self, ctx: ScaffoldContext) -> list[str]:
        """Assemble ``.mcp.json`` and return the server ids it contains."""
        assembler = McpAssembler.from_text(self.store.load_text(MCP_TEMPLATE))
        manifest = assembler.manifest(ctx.toggles)
        save_json(manifest, ctx.mcp_json)
        servers = list(manifest["mcpServers"])
        print_step(f"Configured MCP servers: {', '.join(servers) or '(none)'}")
        return servers

    def _write_lifecycle(self, ctx: ScaffoldContext) -> str:
        """Write ``postCreateCommand`` back into the container definition."""
        definition = apply_lifecycle(load_json(ctx.devcontainer_json), ctx.toggles)
        write_text(ctx.devcontainer_json, dump_devcontainer(definition))
        print_step("Updated postCreateCommand")
        return definition["postCreateCommand"]

    def _probe_certificate(self, ctx: ScaffoldContext) -> Path | None:
        """Copy a host corporate certificate into ``.devcontainer/certs/``."""
        probe = CertificateProbe(self.config.certificate_probe_paths)
        return probe.install(ctx.certificate_dest)

    def _report(self, result: ScaffoldResult) -> None:
        """Print the completion report and next steps."""
        ctx = result.context
        toggles = result.toggles
        next_steps = self.renderer.render(
            REPORT_TEMPLATE,
            {
                "project_name": ctx.project_name,
                "project_root": str(ctx.project_root),
                "mcp_servers": result.mcp_servers,
                "task_master": toggles.install_task_master,
                "superclaude_categories": toggles.install_super_claude.enabled_names(),
                "certificate_installed": result.certificate is not None,
            },
        )
        print_summary_table(
            {
                "Project": ctx.project_name,
                "Location": str(ctx.project_root),
                "MCP servers": ", ".join(result.mcp_servers) or "(none)",
                "postCreateCommand": result.post_create_command,
                "Certificate": str(result.certificate) if result.certificate else "not found",
                "Elapsed": format_duration(result.elapsed),
            },
            title="Scaffold summary",
        )
        console.print(Panel(escape(next_steps.rstrip()), title="Next steps", style="green"))
        print_success(f"Initial setup complete for: {ctx.project_name}")
