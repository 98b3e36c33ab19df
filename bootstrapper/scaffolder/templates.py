"""Template store and Jinja2 rendering for project scaffolding.

``TemplateStore`` gives read-only access to the files bundled under
``bootstrapper/templates/`` (container definition, MCP template, runtime
scripts, onboarding documents) and ``bootstrapper/features/`` (the
build-time feature tree).  ``TemplateRenderer`` renders the few ``.j2``
templates that need project-specific context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from bootstrapper.errors import TemplateMissing


# ---------------------------------------------------------------------------
# Well-known template names
# ---------------------------------------------------------------------------

DEVCONTAINER_TEMPLATE = "devcontainer.json"
MCP_TEMPLATE = "mcp-servers.json"
ENV_TEMPLATE = "env.example"
ONBOARDING_TEMPLATE = "claude-setup-prompts.md.j2"
ALLOWLIST_TEMPLATE = "firewall-allowlist.txt"
REPORT_TEMPLATE = "next-steps.txt.j2"

RUNTIME_SCRIPTS: tuple[str, ...] = (
    "setup-certificates.sh",
    "init-firewall.sh",
    "setup-superclaude.sh",
)


# ---------------------------------------------------------------------------
# TemplateStore
# ---------------------------------------------------------------------------


class TemplateStore:
    """Read-only holder of on-disk template fragments keyed by name.

    Names are paths relative to the template directory, e.g.
    ``"devcontainer.json"`` or ``"scripts/init-firewall.sh"``.  Nothing is
    cached; every call reads the file again.
    """

    def __init__(self, template_dir: str | Path, features_dir: str | Path) -> None:
        self.template_dir = Path(template_dir)
        self.features_dir = Path(features_dir)

    def path(self, name: str) -> Path:
        """Return the on-disk path of template *name*.

        Raises:
            TemplateMissing: If the file does not exist.
        """
        candidate = self.template_dir / name
        if not candidate.is_file():
            raise TemplateMissing(name, candidate)
        return candidate

    def load(self, name: str) -> bytes:
        """Return the raw bytes of template *name*."""
        return self.path(name).read_bytes()

    def load_text(self, name: str) -> str:
        """Return template *name* decoded as UTF-8."""
        return self.load(name).decode("utf-8")

    def script_path(self, script: str) -> Path:
        """Return the path of runtime script *script* (``scripts/<script>``)."""
        return self.path(f"scripts/{script}")

    def features_root(self) -> Path:
        """Return the root of the build-time feature tree.

        Raises:
            TemplateMissing: If the feature directory is absent.
        """
        if not self.features_dir.is_dir():
            raise TemplateMissing("features/", self.features_dir)
        return self.features_dir


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates from the store's template directory.

    Undefined variables are errors rather than empty strings, so a template
    that drifts from the context it is given fails loudly.
    """

    def __init__(self, store: TemplateStore) -> None:
        self.store = store
        self.env = Environment(
            loader=FileSystemLoader(str(store.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_name: Path relative to the template directory (e.g.
                ``"claude-setup-prompts.md.j2"``).
            context: Dictionary of variables available inside the template.

        Raises:
            TemplateMissing: If the template does not exist.
        """
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as exc:
            raise TemplateMissing(template_name, self.store.template_dir / template_name) from exc
        return template.render(**context)
