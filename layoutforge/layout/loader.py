"""Reading layout files into component trees."""

from __future__ import annotations

import json
from pathlib import Path

from layoutforge.errors import LayoutParseError
from layoutforge.layout.models import ComponentNode
from layoutforge.utils import to_pascal


def parse_layout(text: str, source: str | Path = "<string>") -> ComponentNode:
    """Parse layout JSON text into a :class:`ComponentNode` tree.

    Raises:
        LayoutParseError: If *text* is not valid JSON or its root is not an
            object.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LayoutParseError(source, f"invalid JSON: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(raw, dict):
        raise LayoutParseError(source, "layout root must be a JSON object")
    return ComponentNode.from_json(raw)


def load_layout(path: str | Path) -> ComponentNode:
    """Read and parse one layout file."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LayoutParseError(file_path, f"cannot read file: {exc.strerror}") from exc
    return parse_layout(text, file_path)


def view_name_for(path: str | Path) -> str:
    """Derive the generated type name from a layout file name.

    ``_user_profile.json`` -> ``UserProfile``.
    """
    return to_pascal(Path(path).stem.lstrip("_"))
