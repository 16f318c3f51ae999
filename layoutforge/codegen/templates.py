"""Jinja2 rendering of generated source files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``layoutforge/codegen/templates/`` directory and renders compiled layouts
into complete source files: a declarative ``View`` struct or an imperative
binding class.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

DECLARATIVE_TEMPLATE = "declarative_view.swift.j2"
IMPERATIVE_TEMPLATE = "imperative_binding.swift.j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated source files.

    Templates are rendered with a context dictionary describing one compiled
    layout (type name, body lines, weak view references, invalidate
    methods, ...).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["indent_lines"] = _indent_lines_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"declarative_view.swift.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _indent_lines_filter(lines: list[str], width: int = 4) -> str:
    """Join *lines*, indenting every non-empty one by *width* spaces."""
    pad = " " * width
    return "\n".join(f"{pad}{line}" if line else "" for line in lines)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
