"""Pydantic v2 models for the toggle vector.

The toggle vector is the set of feature options read from the
``./features/core-devtools`` entry of the rendered ``devcontainer.json``.  It
parameterises both MCP manifest assembly and the post-create lifecycle
command, so both artefacts are derived from one immutable value.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bootstrapper.errors import ToggleParse


SUPERCLAUDE_OPTION = "installSuperClaude"


# ---------------------------------------------------------------------------
# SuperClaude categories
# ---------------------------------------------------------------------------


class SuperClaudeCategories(BaseModel):
    """Which SuperClaude MCP categories are enabled.

    On disk this record is a JSON *string* option value, because devcontainer
    feature options only accept scalars.  :meth:`decode` and :meth:`encode`
    convert between the two forms.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    core: bool = True
    ui: bool = True
    code_ops: bool = Field(default=True, alias="codeOps")

    @property
    def any_enabled(self) -> bool:
        return self.core or self.ui or self.code_ops

    def enabled_names(self) -> list[str]:
        """Return the enabled category names in on-disk spelling."""
        flags = {"core": self.core, "ui": self.ui, "codeOps": self.code_ops}
        return [name for name, on in flags.items() if on]

    def encode(self) -> str:
        """Return the compact JSON string stored in the feature option."""
        return json.dumps(
            {"core": self.core, "ui": self.ui, "codeOps": self.code_ops},
            separators=(",", ":"),
        )

    @classmethod
    def decode(cls, raw: Any) -> "SuperClaudeCategories":
        """Decode the on-disk JSON string form.

        Categories missing from the string are treated as disabled, matching
        the build-time installer which reads ``.core // false``.

        Raises:
            ToggleParse: If *raw* is not a string holding a JSON object of
                booleans.
        """
        if not isinstance(raw, str):
            raise ToggleParse(SUPERCLAUDE_OPTION, raw, "expected a JSON string")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ToggleParse(SUPERCLAUDE_OPTION, raw, str(exc)) from exc
        if not isinstance(data, dict):
            raise ToggleParse(SUPERCLAUDE_OPTION, raw, "expected a JSON object")

        values: dict[str, Any] = {"core": False, "ui": False, "codeOps": False}
        for key in values:
            if key not in data:
                continue
            if not isinstance(data[key], bool):
                raise ToggleParse(
                    SUPERCLAUDE_OPTION, raw, f"category {key!r} must be true or false"
                )
            values[key] = data[key]
        return cls.model_validate(values)


# ---------------------------------------------------------------------------
# Toggle vector
# ---------------------------------------------------------------------------


class ToggleVector(BaseModel):
    """Effective feature toggles, constructed once per scaffolding run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    install_task_master: bool = Field(default=False, alias="installTaskMaster")
    install_devcontainers_cli: bool = Field(default=True, alias="installDevcontainersCLI")
    install_git_delta: bool = Field(default=True, alias="installGitDelta")
    install_super_claude: SuperClaudeCategories = Field(
        default_factory=SuperClaudeCategories, alias=SUPERCLAUDE_OPTION
    )
    add_ll_alias: bool = Field(default=False, alias="addLLAlias")
    extra_npm_packages: tuple[str, ...] = Field(default=(), alias="extraNpmPackages")

    @field_validator(
        "install_task_master",
        "install_devcontainers_cli",
        "install_git_delta",
        "add_ll_alias",
        mode="before",
    )
    @classmethod
    def _strict_bool(cls, value: Any) -> Any:
        # install.sh only acts on the exact string "true".
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value in ("true", "false"):
            return value == "true"
        raise ValueError("expected true or false")

    @field_validator("extra_npm_packages", mode="before")
    @classmethod
    def _split_packages(cls, value: Any) -> Any:
        # The feature schema carries this as one space-separated string.
        if isinstance(value, str):
            return tuple(value.split())
        return value

    @classmethod
    def option_names(cls) -> set[str]:
        """Feature option keys understood by the toggle vector."""
        return {field.alias or name for name, field in cls.model_fields.items()}

    def to_feature_options(self) -> dict[str, Any]:
        """Return the on-disk feature option form (SuperClaude re-encoded)."""
        return {
            "installTaskMaster": self.install_task_master,
            "installDevcontainersCLI": self.install_devcontainers_cli,
            "installGitDelta": self.install_git_delta,
            SUPERCLAUDE_OPTION: self.install_super_claude.encode(),
            "addLLAlias": self.add_ll_alias,
            "extraNpmPackages": " ".join(self.extra_npm_packages),
        }
