"""Post-create lifecycle command composition.

The container runtime runs ``postCreateCommand`` once the workspace is
mounted.  Runtime scripts run in a fixed order: certificates, then the
firewall, then SuperClaude configuration when any category is enabled.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Mapping

from bootstrapper.models import ToggleVector


SCRIPTS_PREFIX = ".devcontainer/scripts"


@dataclass(frozen=True)
class LifecycleStep:
    """One shell invocation in the post-create command."""

    script: str
    elevated: bool = False

    def command(self) -> str:
        invocation = f"bash {SCRIPTS_PREFIX}/{self.script}"
        return f"sudo {invocation}" if self.elevated else invocation


CERTIFICATES = LifecycleStep("setup-certificates.sh")
FIREWALL = LifecycleStep("init-firewall.sh", elevated=True)  # needs NET_ADMIN
SUPERCLAUDE = LifecycleStep("setup-superclaude.sh")


def lifecycle_steps(toggles: ToggleVector) -> list[LifecycleStep]:
    """Return the steps the post-create command runs for *toggles*."""
    steps = [CERTIFICATES, FIREWALL]
    if toggles.install_super_claude.any_enabled:
        steps.append(SUPERCLAUDE)
    return steps


def compose_post_create_command(toggles: ToggleVector) -> str:
    """Return the ``&&``-joined post-create command for *toggles*."""
    return " && ".join(step.command() for step in lifecycle_steps(toggles))


def apply_lifecycle(definition: Mapping[str, Any], toggles: ToggleVector) -> dict[str, Any]:
    """Return a copy of *definition* with ``postCreateCommand`` set.

    An existing key keeps its position; otherwise it is appended.
    """
    updated = copy.deepcopy(dict(definition))
    updated["postCreateCommand"] = compose_post_create_command(toggles)
    return updated
