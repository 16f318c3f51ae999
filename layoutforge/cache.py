"""Build cache: skip layouts whose inputs have not changed.

Each entry fingerprints the layout text together with the text of every
style document the previous compilation used, plus the output mode.  A file
whose fingerprint matches and whose output still exists is reported as
skipped instead of being recompiled.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError

from layoutforge.errors import LayoutParseError
from layoutforge.utils import fingerprint, load_json, save_json

if TYPE_CHECKING:
    from layoutforge.context import CompilationContext


class CacheEntry(BaseModel):
    """What was last compiled for one layout file."""

    fingerprint: str = Field(..., description="Digest of the layout, its styles and mode")
    styles: list[str] = Field(default_factory=list, description="Style documents used")
    output: str = Field(default="", description="Generated file path")


class BuildCache:
    """Persisted ``source -> CacheEntry`` map.

    Safe to use from the worker threads of one ``compile_files`` run.
    """

    def __init__(self, path: Path, entries: Optional[dict[str, CacheEntry]] = None) -> None:
        self.path = Path(path)
        self.entries: dict[str, CacheEntry] = dict(entries or {})
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> "BuildCache":
        """Read the cache at *path*; a missing or corrupted file starts empty."""
        path = Path(path)
        if not path.is_file():
            return cls(path)
        try:
            raw = load_json(path)
            entries = {
                str(source): CacheEntry.model_validate(entry)
                for source, entry in raw.get("entries", {}).items()
            }
        except (OSError, ValueError, AttributeError, ValidationError):
            return cls(path)
        return cls(path, entries)

    async def save(self) -> None:
        with self._lock:
            payload = {
                "entries": {
                    source: entry.model_dump() for source, entry in self.entries.items()
                }
            }
        await save_json(payload, self.path)

    # -- Fingerprints ----------------------------------------------------------

    def fingerprint_for(
        self,
        layout_path: Path,
        ctx: "CompilationContext",
        styles: Optional[Iterable[str]] = None,
    ) -> str:
        """Digest of *layout_path*, the given (or last recorded) styles and mode.

        Raises:
            LayoutParseError: If the layout file cannot be read.
        """
        try:
            layout_text = Path(layout_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise LayoutParseError(layout_path, f"cannot read file: {exc.strerror}") from exc

        if styles is None:
            with self._lock:
                entry = self.entries.get(str(layout_path))
            styles = entry.styles if entry is not None else []

        parts = [ctx.mode.value, layout_text]
        styles = list(styles)
        directory = ctx.styles.directory if styles else None
        for name in styles:
            style_path = directory / f"{name}.json" if directory is not None else None
            if style_path is not None and style_path.is_file():
                parts.append(f"{name}\n{style_path.read_text(encoding='utf-8')}")
            else:
                parts.append(f"{name}\n")
        return fingerprint("\x00".join(parts))

    # -- Entries -------------------------------------------------------------------

    def is_fresh(self, source: str, digest: str) -> bool:
        """``True`` when *source* was compiled from identical inputs and its output exists."""
        with self._lock:
            entry = self.entries.get(source)
        if entry is None or entry.fingerprint != digest:
            return False
        return bool(entry.output) and Path(entry.output).is_file()

    def output_for(self, source: str) -> Optional[str]:
        with self._lock:
            entry = self.entries.get(source)
        return entry.output if entry is not None else None

    def record(self, source: str, digest: str, styles: Iterable[str], output: str) -> None:
        with self._lock:
            self.entries[source] = CacheEntry(
                fingerprint=digest, styles=list(styles), output=output
            )
