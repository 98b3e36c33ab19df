"""Devcontainer bootstrapper configuration.

Typed configuration for a scaffolding run.  ``BootstrapConfig`` holds the
installation-level settings (where templates live, which host paths to probe),
and ``ScaffoldContext`` is the immutable per-run value that carries the
destination paths and, once resolved, the toggle vector through the pipeline.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bootstrapper.models import ToggleVector


INSTALL_DIR = Path(__file__).resolve().parent

CERTIFICATE_FILENAME = "zscaler.crt"

# Probed in order; the first readable file wins.
HOME_CERTIFICATE_PATHS: tuple[str, ...] = (
    ".ssl/certs/zscaler.crt",
    "Downloads/zscaler-root-ca.crt",
    "Downloads/ZScaler Root CA.crt",
)
SYSTEM_CERTIFICATE_PATHS: tuple[str, ...] = (
    "/usr/local/share/ca-certificates/zscaler.crt",
)


class BootstrapConfig(BaseModel):
    """Installation-level configuration.

    Instances are usually created once by the CLI entry point (via
    :meth:`from_env`) and handed to ``ProjectGenerator``.
    """

    install_dir: Path = Field(default=INSTALL_DIR)
    template_dir: Path | None = Field(default=None)
    features_dir: Path | None = Field(default=None)
    home: Path | None = Field(default=None, description="Host HOME, used by the certificate probe")

    toggle_feature: str = Field(
        default="core-devtools",
        description="Local feature whose options carry the toggle vector",
    )
    strict_toggles: bool = Field(default=False, description="Reject unknown feature option keys")
    allow_existing: bool = Field(
        default=False, description="Scaffold into a non-empty existing project directory"
    )

    @model_validator(mode="after")
    def _default_dirs(self) -> "BootstrapConfig":
        if self.template_dir is None:
            self.template_dir = self.install_dir / "templates"
        if self.features_dir is None:
            self.features_dir = self.install_dir / "features"
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def certificate_probe_paths(self) -> list[Path]:
        """Host paths probed for the corporate root certificate, in order.

        HOME-relative entries are skipped when ``home`` is unknown.
        """
        paths: list[Path] = []
        if self.home is not None:
            paths.extend(self.home / rel for rel in HOME_CERTIFICATE_PATHS)
        paths.extend(Path(p) for p in SYSTEM_CERTIFICATE_PATHS)
        return paths

    @classmethod
    def from_env(cls, **overrides: Any) -> "BootstrapConfig":
        """Build a ``BootstrapConfig`` from the process environment.

        Only ``HOME`` is consulted.
        """
        home = os.environ.get("HOME")
        kwargs: dict[str, Any] = {"home": Path(home) if home else None}
        kwargs.update(overrides)
        return cls(**kwargs)


def resolve_workdir(workdir: str | Path | None, install_dir: Path) -> Path:
    """Resolve the work directory argument.

    ``None`` means the caller's current directory.  Absolute paths are used
    as given; relative paths resolve against the scaffolder's installation
    directory, not the caller's cwd.
    """
    if workdir is None or str(workdir) == "":
        return Path.cwd()
    path = Path(workdir).expanduser()
    if path.is_absolute():
        return path
    return install_dir / path


class ScaffoldContext(BaseModel):
    """Immutable per-run context passed through every scaffolding step."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    project_root: Path
    toggles: ToggleVector | None = None

    @property
    def devcontainer_dir(self) -> Path:
        return self.project_root / ".devcontainer"

    @property
    def scripts_dir(self) -> Path:
        return self.devcontainer_dir / "scripts"

    @property
    def certs_dir(self) -> Path:
        return self.devcontainer_dir / "certs"

    @property
    def features_dest(self) -> Path:
        return self.devcontainer_dir / "features"

    @property
    def docs_dir(self) -> Path:
        return self.project_root / "docs"

    @property
    def devcontainer_json(self) -> Path:
        return self.devcontainer_dir / "devcontainer.json"

    @property
    def mcp_json(self) -> Path:
        return self.project_root / ".mcp.json"

    @property
    def env_file(self) -> Path:
        return self.project_root / ".env"

    @property
    def certificate_dest(self) -> Path:
        return self.certs_dir / CERTIFICATE_FILENAME

    def directories(self) -> list[Path]:
        """Directories created before any file is written."""
        return [self.project_root, self.docs_dir, self.certs_dir, self.scripts_dir]

    def with_toggles(self, toggles: ToggleVector) -> "ScaffoldContext":
        """Return a copy of this context carrying the resolved toggle vector."""
        return self.model_copy(update={"toggles": toggles})
