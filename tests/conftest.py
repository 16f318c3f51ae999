"""Shared pytest fixtures for the LayoutForge test suite.

Provides reusable fixtures for:
- Temporary project directories with ``Layouts/`` and ``Styles/``
- Writers for layout and style JSON files
- Compiler configurations and compilation contexts for both output modes
- A helper that builds a PropertySite for a single property of a node
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.context import CompilationContext
from layoutforge.handlers.base import ComponentScope, PropertySite
from layoutforge.layout.models import ComponentNode
from layoutforge.utils import to_camel


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Temporary app project with empty ``Layouts`` and ``Styles`` directories."""
    root = tmp_path / "app"
    (root / "Layouts").mkdir(parents=True)
    (root / "Styles").mkdir()
    yield root


@pytest.fixture
def write_style(project_dir: Path) -> Callable[[str, Any], Path]:
    """Write ``Styles/<name>.json`` and return its path."""

    def _write(name: str, payload: Any) -> Path:
        path = project_dir / "Styles" / f"{name}.json"
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_layout(project_dir: Path) -> Callable[[str, Any], Path]:
    """Write ``Layouts/<name>.json`` and return its path."""

    def _write(name: str, payload: Any) -> Path:
        path = project_dir / "Layouts" / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Configuration & contexts
# ---------------------------------------------------------------------------


@pytest.fixture
def config(project_dir: Path) -> CompilerConfig:
    """Quiet configuration rooted at the temporary project."""
    return CompilerConfig(
        project_dir=project_dir,
        output_dir=project_dir / "Generated",
        quiet=True,
    )


@pytest.fixture
def declarative_ctx(config: CompilerConfig) -> CompilationContext:
    return CompilationContext(config, OutputMode.DECLARATIVE)


@pytest.fixture
def imperative_ctx(config: CompilerConfig) -> CompilationContext:
    return CompilationContext(config, OutputMode.IMPERATIVE)


# ---------------------------------------------------------------------------
# Handler helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_site() -> Callable[..., PropertySite]:
    """Build the PropertySite for *key* of a node given as raw JSON.

    The scope's view name is the camelCased node id (``"view"`` if absent).
    """

    def _make(
        raw: dict[str, Any],
        key: str,
        ctx: CompilationContext,
        scope: ComponentScope | None = None,
    ) -> PropertySite:
        node = ComponentNode.from_json(raw)
        if scope is None:
            scope = ComponentScope(view_name=to_camel(node.id) if node.id else "view")
        return PropertySite(
            node=node, key=key, value=node.properties[key], ctx=ctx, scope=scope
        )

    return _make
