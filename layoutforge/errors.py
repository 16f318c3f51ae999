"""Exceptions raised by LayoutForge.

Only failures that make a whole file uncompilable are exceptions.  Everything
else (missing styles, unknown component types, ...) is reported as a
:class:`~layoutforge.context.Diagnostic` and compilation carries on.
"""

from __future__ import annotations

from pathlib import Path


class LayoutForgeError(Exception):
    """Base class for all LayoutForge errors."""


class LayoutParseError(LayoutForgeError):
    """Raised when a layout file is not valid JSON or has no root object."""

    def __init__(self, source: str | Path, message: str) -> None:
        self.source = str(source)
        self.message = message
        super().__init__(f"{self.source}: {message}")


class CompileError(LayoutForgeError):
    """Raised when compiling a single layout file fails irrecoverably."""

    def __init__(self, source: str | Path, message: str) -> None:
        self.source = str(source)
        self.message = message
        super().__init__(f"{self.source}: {message}")
