"""The compilation context threaded through every compiler call.

One :class:`CompilationContext` exists per compilation run.  It owns the
configuration, the selected output mode, the run-scoped style cache, the
handler registry and the collected diagnostics.  Nothing in LayoutForge keeps
mutable module-level state.
"""

from __future__ import annotations

import threading
from typing import Optional

from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.diagnostics import Diagnostic, DiagnosticCode
from layoutforge.handlers.registry import HandlerRegistry, default_registry
from layoutforge.styles.resolver import StyleCache
from layoutforge.utils import print_warning


class CompilationContext:
    """Run-scoped state shared by every file compiled in one run.

    Attributes:
        config: The run configuration.
        mode: Output mode (declarative or imperative).
        styles: Thread-safe style document cache.
        registry: Component type -> handler registry.
        diagnostics: Every warning recorded so far, in report order.
    """

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        mode: Optional[OutputMode] = None,
        registry: Optional[HandlerRegistry] = None,
    ) -> None:
        self.config = config or CompilerConfig()
        self.mode = OutputMode(mode) if mode is not None else self.config.mode
        self.registry = registry or default_registry()
        self.diagnostics: list[Diagnostic] = []
        self._lock = threading.Lock()
        self.styles = StyleCache(self.config.style_search_path, self.warn)

    def new_run(self) -> "CompilationContext":
        """A context for the next run: same config, mode and registry, with an
        empty style cache and no diagnostics."""
        return CompilationContext(self.config, self.mode, self.registry)

    @property
    def declarative(self) -> bool:
        return self.mode is OutputMode.DECLARATIVE

    @property
    def data_root(self) -> str:
        """Object that bound paths hang off in the current mode."""
        if self.declarative:
            return self.config.declarative_data_root
        return self.config.imperative_data_root

    def warn(self, code: DiagnosticCode, message: str, source: str = "") -> None:
        """Record a non-fatal diagnostic and echo it to the console."""
        diagnostic = Diagnostic(code=code, message=message, source=source)
        with self._lock:
            self.diagnostics.append(diagnostic)
        if not self.config.quiet:
            print_warning(f"Warning: {diagnostic}")

    def diagnostics_for(self, source: str) -> list[Diagnostic]:
        """Diagnostics attributed to *source* (a layout or style file)."""
        with self._lock:
            return [d for d in self.diagnostics if d.source == source]

    def codes(self) -> list[DiagnosticCode]:
        with self._lock:
            return [d.code for d in self.diagnostics]
