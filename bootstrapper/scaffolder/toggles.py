"""Toggle resolution from the rendered container definition.

The ``features`` map of ``devcontainer.json`` is the single source of truth
for what gets installed.  This module extracts the options of the
``./features/<name>`` selector, normalises them into a ``ToggleVector``, and
can write overridden options back in their on-disk form.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from pydantic import ValidationError

from bootstrapper.errors import ToggleParse
from bootstrapper.models import SUPERCLAUDE_OPTION, SuperClaudeCategories, ToggleVector


DEFAULT_FEATURE = "core-devtools"


def feature_selector(feature: str) -> str:
    """Return the ``features`` map key for local feature *feature*."""
    return f"./features/{feature}"


def feature_options(definition: Mapping[str, Any], feature: str = DEFAULT_FEATURE) -> dict[str, Any]:
    """Return the raw option record of *feature*, or ``{}`` when absent."""
    features = definition.get("features") or {}
    if not isinstance(features, Mapping):
        raise ToggleParse("features", features, "expected an object")
    options = features.get(feature_selector(feature))
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise ToggleParse(feature_selector(feature), options, "expected an object of options")
    return dict(options)


def resolve_toggles(
    definition: Mapping[str, Any],
    feature: str = DEFAULT_FEATURE,
    *,
    strict: bool = False,
) -> ToggleVector:
    """Build the toggle vector from a parsed container definition.

    Missing fields take their defaults.  The SuperClaude option is decoded
    from its JSON string form.  Unknown option keys are ignored unless
    *strict* is set.

    Args:
        definition: The parsed ``devcontainer.json``.
        feature: Name of the local feature carrying the toggles.
        strict: Reject option keys the toggle vector does not know.

    Raises:
        ToggleParse: If an option value cannot be normalised.
    """
    options = feature_options(definition, feature)

    known = ToggleVector.option_names()
    if strict:
        unknown = sorted(set(options) - known)
        if unknown:
            raise ToggleParse(unknown[0], options[unknown[0]], "unknown feature option")

    values = {key: value for key, value in options.items() if key in known}
    if SUPERCLAUDE_OPTION in values:
        values[SUPERCLAUDE_OPTION] = SuperClaudeCategories.decode(values[SUPERCLAUDE_OPTION])

    try:
        return ToggleVector.model_validate(values)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "?"
        raise ToggleParse(field, values.get(field), error["msg"]) from exc


def apply_toggle_overrides(
    definition: Mapping[str, Any],
    overrides: Mapping[str, Any],
    feature: str = DEFAULT_FEATURE,
) -> dict[str, Any]:
    """Return a copy of *definition* with feature options updated.

    *overrides* uses the on-disk option names and value forms (the SuperClaude
    option as a JSON string).  The feature entry is created if the template
    does not declare it.
    """
    updated = copy.deepcopy(dict(definition))
    features = updated.setdefault("features", {})
    selector = feature_selector(feature)
    options = dict(features.get(selector) or {})
    options.update(overrides)
    features[selector] = options
    return updated
