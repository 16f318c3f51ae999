"""Style document loading and resolution.

Style documents are plain JSON objects stored as ``<name>.json`` in the
first existing directory of the configured search path.  A component that
names a style gets the document's properties as a base, with its own
properties merged on top (see :mod:`layoutforge.styles.merge`).  A style may
also supply ``id`` and child slots to a node that has none of its own.

The :class:`StyleCache` is owned by one compilation run and shared between
files compiled concurrently; every style file is read and parsed at most
once per run.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from layoutforge.diagnostics import DiagnosticCode
from layoutforge.layout.models import (
    ChildSlot,
    ComponentNode,
    PropertyValue,
    RESERVED_KEYS,
    value_from_json,
)
from layoutforge.styles.merge import merge_properties

if TYPE_CHECKING:
    from layoutforge.context import CompilationContext

Reporter = Callable[[DiagnosticCode, str, str], None]


# ---------------------------------------------------------------------------
# Style documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyleDocument:
    """One parsed style file."""

    name: str
    path: Path
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    base: Optional[str] = None
    type: Optional[str] = None
    id: Optional[str] = None
    child: Optional[ChildSlot] = None
    children: Optional[ChildSlot] = None

    @classmethod
    def from_json(cls, name: str, path: Path, raw: dict) -> "StyleDocument":
        base = raw.get("style")
        style_type = raw.get("type")
        style_id = raw.get("id")
        return cls(
            name=name,
            path=path,
            properties={
                k: value_from_json(v) for k, v in raw.items() if k not in RESERVED_KEYS
            },
            base=base if isinstance(base, str) else None,
            type=style_type if isinstance(style_type, str) else None,
            id=style_id if isinstance(style_id, str) else None,
            child=ChildSlot.from_json(raw["child"]) if "child" in raw else None,
            children=ChildSlot.from_json(raw["children"]) if "children" in raw else None,
        )

    def over(self, base: "StyleDocument") -> "StyleDocument":
        """This document merged on top of *base*; own slots replace the base's."""
        return replace(
            self,
            properties=merge_properties(base.properties, self.properties),
            base=None,
            type=self.type or base.type,
            id=self.id if self.id is not None else base.id,
            child=self.child if self.child is not None else base.child,
            children=self.children if self.children is not None else base.children,
        )


class _CacheEntry:
    __slots__ = ("lock", "loaded", "document")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.loaded = False
        self.document: Optional[StyleDocument] = None


class StyleCache:
    """Run-scoped, thread-safe memo of style documents keyed by name.

    The style directory is chosen once, on first use: the first existing
    entry of *search_path* wins.  A missing directory is reported once.
    """

    def __init__(self, search_path: list[Path], report: Reporter) -> None:
        self.search_path = list(search_path)
        self._report = report
        self._lock = threading.Lock()
        self._entries: dict[str, _CacheEntry] = {}
        self._directory: Optional[Path] = None
        self._directory_chosen = False
        self.parse_count = 0

    @property
    def directory(self) -> Optional[Path]:
        """The selected style directory, or ``None`` if none exists."""
        with self._lock:
            if not self._directory_chosen:
                self._directory = next((d for d in self.search_path if d.is_dir()), None)
                self._directory_chosen = True
                if self._directory is None:
                    tried = ", ".join(str(d) for d in self.search_path)
                    self._report(
                        DiagnosticCode.MISSING_STYLE_DIRECTORY,
                        f"Styles directory not found. Tried: {tried}",
                        "",
                    )
            return self._directory

    def get(self, name: str) -> Optional[StyleDocument]:
        """Return the style document called *name*, or ``None`` if absent."""
        with self._lock:
            entry = self._entries.setdefault(name, _CacheEntry())
        with entry.lock:
            if not entry.loaded:
                entry.document = self._load(name)
                entry.loaded = True
            return entry.document

    def _load(self, name: str) -> Optional[StyleDocument]:
        directory = self.directory
        if directory is None:
            return None
        path = directory / f"{name}.json"
        if not path.is_file():
            return None

        with self._lock:
            self.parse_count += 1
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self._report(
                DiagnosticCode.STYLE_PARSE_ERROR,
                f"Error parsing style file '{path}': {exc}",
                str(path),
            )
            return None
        if not isinstance(raw, dict):
            self._report(
                DiagnosticCode.STYLE_PARSE_ERROR,
                f"Error parsing style file '{path}': root must be a JSON object",
                str(path),
            )
            return None
        return StyleDocument.from_json(name, path, raw)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class StyleResolver:
    """Merges style documents into one layout tree.

    Args:
        ctx: The compilation context (provides the cache and diagnostics).
        source: Layout file the tree came from, used in diagnostics.
    """

    def __init__(self, ctx: "CompilationContext", source: str = "") -> None:
        self.ctx = ctx
        self.source = source
        self.styles_used: list[str] = []

    def resolve(self, node: ComponentNode, _adopted: tuple[str, ...] = ()) -> ComponentNode:
        """Return *node* with every style reference in its subtree applied.

        A style may carry ``child``/``children`` and ``id``; a node takes them
        only when it has none of its own.  *_adopted* names the styles whose
        children are being resolved, so a style that nests itself is cut off.
        """
        slots: tuple[str, ...] = ()
        inner = _adopted
        if node.style is not None:
            inner = _adopted + (node.style,)
            node, slots = self._apply_style(node, _adopted)
        return node.with_changes(
            child=self._resolve_slot(node.child, inner if "child" in slots else _adopted),
            children=self._resolve_slot(
                node.children, inner if "children" in slots else _adopted
            ),
        )

    def _resolve_slot(
        self, slot: Optional[ChildSlot], adopted: tuple[str, ...]
    ) -> Optional[ChildSlot]:
        if slot is None:
            return None
        return ChildSlot(
            nodes=tuple(self.resolve(child, adopted) for child in slot.nodes),
            single=slot.single,
        )

    def _apply_style(
        self, node: ComponentNode, adopted: tuple[str, ...]
    ) -> tuple[ComponentNode, tuple[str, ...]]:
        """Merge the style under *node*; also return the child slots it supplied."""
        name = node.style
        assert name is not None
        document = self._flatten(name, ())
        if document is None:
            self.ctx.warn(
                DiagnosticCode.STYLE_NOT_FOUND,
                f"Style file '{name}' not found",
                self.source,
            )
            return node.with_changes(style=None), ()

        slots = tuple(
            key
            for key in ("child", "children")
            if getattr(node, key) is None and getattr(document, key) is not None
        )
        if slots and name in adopted:
            self.ctx.warn(
                DiagnosticCode.STYLE_CYCLE,
                f"Style '{name}' nests itself through its children: "
                f"{' -> '.join(adopted + (name,))}",
                self.source,
            )
            slots = ()

        changes = {key: getattr(document, key) for key in slots}
        return (
            node.with_changes(
                style=None,
                type=node.type or document.type or "",
                id=node.id if node.id is not None else document.id,
                properties=merge_properties(document.properties, node.properties),
                **changes,
            ),
            slots,
        )

    def _flatten(self, name: str, chain: tuple[str, ...]) -> Optional[StyleDocument]:
        """Style *name* with its base chain merged in, or ``None`` if absent."""
        if name in chain:
            self.ctx.warn(
                DiagnosticCode.STYLE_CYCLE,
                f"Style cycle detected: {' -> '.join(chain + (name,))}",
                self.source,
            )
            return StyleDocument(name=name, path=Path())
        if len(chain) >= self.ctx.config.max_style_depth:
            self.ctx.warn(
                DiagnosticCode.STYLE_CYCLE,
                f"Style chain deeper than {self.ctx.config.max_style_depth}: "
                f"{' -> '.join(chain + (name,))}",
                self.source,
            )
            return StyleDocument(name=name, path=Path())

        document = self.ctx.styles.get(name)
        if document is None:
            return None
        if name not in self.styles_used:
            self.styles_used.append(name)

        if document.base is None:
            return document

        base = self._flatten(document.base, chain + (name,))
        if base is None:
            self.ctx.warn(
                DiagnosticCode.STYLE_NOT_FOUND,
                f"Style file '{document.base}' (base of '{name}') not found",
                self.source,
            )
            return replace(document, base=None)
        return document.over(base)
