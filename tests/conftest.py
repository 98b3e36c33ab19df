"""Shared pytest fixtures for the devcontainer bootstrapper test suite.

Provides reusable fixtures for:
- An isolated ``BootstrapConfig`` (temporary HOME, no system certificate paths)
- The bundled template store and renderer
- Parsed container definitions with adjustable feature options
- A fake corporate certificate
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable

import pytest

import bootstrapper.config as config_module
from bootstrapper.config import BootstrapConfig
from bootstrapper.scaffolder.devcontainer import parse_devcontainer, render_devcontainer
from bootstrapper.scaffolder.templates import (
    DEVCONTAINER_TEMPLATE,
    MCP_TEMPLATE,
    TemplateRenderer,
    TemplateStore,
)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_home(tmp_path: Path) -> Path:
    """An empty HOME directory for the certificate probe."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def no_system_certificates(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide the system-wide certificate location so host state cannot leak in."""
    monkeypatch.setattr(config_module, "SYSTEM_CERTIFICATE_PATHS", ())


@pytest.fixture
def bootstrap_config(fake_home: Path, no_system_certificates: None) -> BootstrapConfig:
    """BootstrapConfig pointing at the bundled templates and a temp HOME."""
    return BootstrapConfig(home=fake_home)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty parent directory for generated projects."""
    path = tmp_path / "work"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@pytest.fixture
def template_store(bootstrap_config: BootstrapConfig) -> TemplateStore:
    return TemplateStore(bootstrap_config.template_dir, bootstrap_config.features_dir)


@pytest.fixture
def template_renderer(template_store: TemplateStore) -> TemplateRenderer:
    return TemplateRenderer(template_store)


@pytest.fixture
def mcp_template(template_store: TemplateStore) -> dict[str, Any]:
    """The bundled bucketed MCP template, parsed."""
    return json.loads(template_store.load_text(MCP_TEMPLATE))


@pytest.fixture
def rendered_definition(template_store: TemplateStore) -> dict[str, Any]:
    """The bundled container definition rendered for ``api-service``."""
    text = render_devcontainer(template_store.load_text(DEVCONTAINER_TEMPLATE), "api-service")
    return parse_devcontainer(text)


@pytest.fixture
def make_definition() -> Callable[..., dict[str, Any]]:
    """Factory for minimal container definitions with given feature options.

    Usage::

        definition = make_definition(installTaskMaster=True)
        definition = make_definition(feature=None)  # no core-devtools entry
    """
    base: dict[str, Any] = {
        "name": "api-service",
        "features": {},
        "forwardPorts": [54545],
        "postCreateCommand": "",
    }

    def _factory(feature: str | None = "core-devtools", **options: Any) -> dict[str, Any]:
        definition = copy.deepcopy(base)
        if feature is not None:
            definition["features"][f"./features/{feature}"] = options
        return definition

    return _factory


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------


@pytest.fixture
def certificate_bytes() -> bytes:
    return (
        b"-----BEGIN CERTIFICATE-----\n"
        b"MIIBszCCAVmgAwIBAgIUFakeZscalerRootCAForTests0123456789wCgYIKoZI\n"
        b"-----END CERTIFICATE-----\n"
    )


@pytest.fixture
def home_certificate(fake_home: Path, certificate_bytes: bytes) -> Path:
    """A certificate at the first probed location (``~/.ssl/certs/zscaler.crt``)."""
    path = fake_home / ".ssl" / "certs" / "zscaler.crt"
    path.parent.mkdir(parents=True)
    path.write_bytes(certificate_bytes)
    return path
