"""Binding expression parsing.

A binding expression is a property value that is *exactly* ``@{<path>}``.
Anything else, including text that merely contains ``@{...}`` somewhere in
the middle, is a literal.  The path is kept verbatim; whether it resolves is
a runtime concern of the generated code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

_BINDING_RE = re.compile(r"@\{(.+)\}", re.DOTALL)
_THIS_RE = re.compile(r"\bthis\b")

FORCE_UNWRAP_SUFFIX = "!!"


@dataclass(frozen=True)
class BindingExpression:
    """A parsed ``@{path}`` reference into external reactive state."""

    raw: str
    path: str

    @property
    def forced(self) -> bool:
        """``True`` when the path carries the ``!!`` force-unwrap marker."""
        return self.path.endswith(FORCE_UNWRAP_SUFFIX)

    @property
    def bare_path(self) -> str:
        """The path without the force-unwrap marker."""
        if self.forced:
            return self.path[: -len(FORCE_UNWRAP_SUFFIX)]
        return self.path

    def reference(
        self, root: str = "", *, view_name: str | None = None, bare: bool = False
    ) -> str:
        """Render the path as a target-language expression.

        Args:
            root: Object the path hangs off (``viewModel.data``); empty for a
                bare reference.
            view_name: When given, the ``this`` token is replaced by it.
            bare: Drop the ``!!`` force-unwrap marker.
        """
        expr = (self.bare_path if bare else self.path).replace("'", '"')
        if view_name:
            expr = _THIS_RE.sub(view_name, expr)
        return f"{root}.{expr}" if root else expr

    def two_way(self, root: str) -> str:
        """Render a two-way (``$``-prefixed) binding reference."""
        return f"${self.reference(root)}"


def parse(raw: Any) -> Optional[BindingExpression]:
    """Parse *raw* into a :class:`BindingExpression`, or ``None`` for literals."""
    if not isinstance(raw, str):
        return None
    match = _BINDING_RE.fullmatch(raw)
    if match is None:
        return None
    return BindingExpression(raw=raw, path=match.group(1))


def is_binding(raw: Any) -> bool:
    """Return ``True`` if *raw* is a full-string binding expression."""
    return parse(raw) is not None
