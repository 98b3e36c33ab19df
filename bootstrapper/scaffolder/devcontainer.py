"""Container-definition rendering.

The ``devcontainer.json`` template carries ``//`` comments for human
guidance.  Downstream tooling expects strict JSON, so the renderer
substitutes the project name, strips the comments once, and checks that the
result parses and exposes the keys the rest of the pipeline relies on.
"""

from __future__ import annotations

import json
import re
from typing import Any

from bootstrapper.errors import RenderInvalid
from bootstrapper.utils import dump_json


PROJECT_NAME_PLACEHOLDER = "$PROJECT_NAME"

REQUIRED_KEYS: tuple[str, ...] = (
    "name",
    "features",
    "forwardPorts",
    "portsAttributes",
    "customizations",
    "remoteEnv",
    "postCreateCommand",
    "runArgs",
    "mounts",
)

OAUTH_CALLBACK_PORT = 54545

_WHOLE_LINE_COMMENT = re.compile(r"^\s*//")


# ---------------------------------------------------------------------------
# Comment stripping
# ---------------------------------------------------------------------------


def _trailing_comment_start(line: str) -> int:
    """Return the index of a ``//`` outside string literals, or -1."""
    in_string = False
    escaped = False
    for i, char in enumerate(line):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "/" and line.startswith("//", i):
            return i
    return -1


def strip_json_comments(text: str) -> str:
    """Strip single-line ``//`` comments from JSON-with-comments text.

    Whole-line comments are removed, trailing comments are trimmed (a ``//``
    inside a string literal such as a URL is left alone), and lines left
    blank are dropped.
    """
    kept: list[str] = []
    for line in text.splitlines():
        if _WHOLE_LINE_COMMENT.match(line):
            continue
        cut = _trailing_comment_start(line)
        if cut >= 0:
            line = line[:cut].rstrip()
        if not line.strip():
            continue
        kept.append(line)
    return "\n".join(kept) + "\n"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def substitute_project_name(template_text: str, project_name: str) -> str:
    """Replace every ``$PROJECT_NAME`` with *project_name*.

    The name is escaped for a JSON string literal, so names containing quotes
    or backslashes still produce valid JSON.
    """
    escaped = json.dumps(project_name, ensure_ascii=False)[1:-1]
    return template_text.replace(PROJECT_NAME_PLACEHOLDER, escaped)


def parse_devcontainer(text: str) -> dict[str, Any]:
    """Parse strict container-definition JSON.

    Raises:
        RenderInvalid: If *text* is not a JSON object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RenderInvalid(f"{exc.msg} at line {exc.lineno} column {exc.colno}") from exc
    if not isinstance(data, dict):
        raise RenderInvalid("top-level value is not an object")
    return data


def check_required_keys(definition: dict[str, Any]) -> None:
    """Raise ``RenderInvalid`` if any key of ``REQUIRED_KEYS`` is missing."""
    missing = [key for key in REQUIRED_KEYS if key not in definition]
    if missing:
        raise RenderInvalid(f"missing required keys: {', '.join(missing)}")
    customizations = definition["customizations"]
    if not isinstance(customizations, dict):
        raise RenderInvalid("customizations is not an object")
    vscode = customizations.get("vscode", {})
    if not isinstance(vscode, dict):
        raise RenderInvalid("customizations.vscode is not an object")
    extensions = vscode.get("extensions")
    if not isinstance(extensions, list):
        raise RenderInvalid("missing customizations.vscode.extensions")


def render_devcontainer(template_text: str, project_name: str) -> str:
    """Render the container-definition template for *project_name*.

    Pure function of its inputs: identical arguments give identical output.

    Returns:
        Comment-free JSON text, as stripped (not re-serialised).

    Raises:
        RenderInvalid: If the stripped text does not parse or lacks required keys.
    """
    stripped = strip_json_comments(substitute_project_name(template_text, project_name))
    check_required_keys(parse_devcontainer(stripped))
    return stripped


def dump_devcontainer(definition: dict[str, Any]) -> str:
    """Serialise a container definition (2-space indent, trailing newline)."""
    return dump_json(definition)
