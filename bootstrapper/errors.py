"""Exception hierarchy for the devcontainer bootstrapper.

Every failure the scaffolder can hit while producing a project tree is a
``BootstrapError``.  Messages always repeat the offending path, template name,
or option key verbatim so the operator can fix the installation by hand.
File-system failures are left as the built-in ``OSError`` and reported by the
CLI together with ``exc.filename``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


class BootstrapError(Exception):
    """Base class for all scaffolder failures (process exits with code 1)."""


class UsageError(BootstrapError):
    """Raised when the command line is missing or has an invalid argument."""


# ---------------------------------------------------------------------------
# Template problems -- the installation itself is broken
# ---------------------------------------------------------------------------


class TemplateError(BootstrapError):
    """Base class for problems with the bundled templates."""


class TemplateMissing(TemplateError):
    """Raised when a template file is absent from the template directory."""

    def __init__(self, name: str, path: Path | None = None) -> None:
        self.name = name
        self.path = path
        where = f" (looked for {path})" if path is not None else ""
        super().__init__(f"Template not found: {name}{where}")


class TemplateInvalid(TemplateError):
    """Raised when a template exists but cannot be used as structured data."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Template {name} is invalid: {detail}")


class TemplateMissingBucket(TemplateError):
    """Raised when an enabled MCP bucket is absent from the MCP template."""

    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        super().__init__(f"MCP template has no bucket {bucket}")


class TemplateConflict(TemplateError):
    """Raised when two MCP buckets declare the same server id."""

    def __init__(self, server_id: str, bucket: str) -> None:
        self.server_id = server_id
        self.bucket = bucket
        super().__init__(
            f"MCP server id {server_id!r} from bucket {bucket} is already defined"
        )


# ---------------------------------------------------------------------------
# Rendering / resolution
# ---------------------------------------------------------------------------


class RenderInvalid(BootstrapError):
    """Raised when the comment-stripped container definition is not valid JSON."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Rendered devcontainer.json is invalid: {detail}")


class ToggleParse(BootstrapError):
    """Raised when a feature option cannot be decoded into the toggle vector."""

    def __init__(self, key: str, value: Any, detail: str) -> None:
        self.key = key
        self.value = value
        self.detail = detail
        super().__init__(f"Cannot parse feature option {key}={value!r}: {detail}")


class DestinationExists(BootstrapError):
    """Raised when the project directory already exists and is not empty."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Destination already exists and is not empty: {path} "
            "(remove it first or pass --force)"
        )


class ProbeMiss(BootstrapError):
    """No corporate root certificate was found on the host.

    Advisory only: the certificate probe catches it and carries on, because
    the runtime certificate script handles both cases.
    """

    def __init__(self, candidates: Sequence[Path]) -> None:
        self.candidates = list(candidates)
        listed = ", ".join(str(p) for p in self.candidates) or "(no candidates)"
        super().__init__(f"No corporate certificate found; probed: {listed}")
