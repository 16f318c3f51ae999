"""LayoutForge configuration.

Centralised, typed configuration for a compilation run.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class OutputMode(str, Enum):
    """Which rendering paradigm the compiler targets."""

    DECLARATIVE = "declarative"
    IMPERATIVE = "imperative"


DEFAULT_STYLE_DIRS: tuple[str, ...] = (
    "Styles",
    "styles",
    "Layouts/Styles",
    "Layouts/styles",
)


class CompilerConfig(BaseModel):
    """Global LayoutForge configuration.

    Instances are typically created once by the CLI entry point (or by a test)
    and handed to :class:`~layoutforge.context.CompilationContext`, which
    threads them through the rest of the system.
    """

    project_dir: Path = Field(default=Path("."))
    layouts_dir: Path = Field(default=Path("Layouts"))
    styles_dirs: list[Path] = Field(
        default_factory=list,
        description="Ordered style search list; empty means the default candidates",
    )
    output_dir: Path = Field(default=Path("./Generated"))
    mode: OutputMode = Field(default=OutputMode.DECLARATIVE)

    declarative_data_root: str = Field(default="viewModel.data")
    imperative_data_root: str = Field(
        default="", description="Prefix for bound paths in binding classes"
    )
    binding_super_class: str = Field(default="Binding")

    max_style_depth: int = Field(
        default=8, ge=1, description="How many chained style documents may nest"
    )
    max_parallel_files: int = Field(
        default=4, ge=1, description="Maximum files compiled concurrently"
    )
    use_build_cache: bool = Field(default=True)
    quiet: bool = Field(default=False, description="Suppress console diagnostics")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def style_search_path(self) -> list[Path]:
        """Candidate style directories in lookup order."""
        if self.styles_dirs:
            return [
                d if d.is_absolute() else self.project_dir / d for d in self.styles_dirs
            ]
        return [self.project_dir / d for d in DEFAULT_STYLE_DIRS]

    @property
    def cache_dir(self) -> Path:
        """Directory holding the build cache."""
        return self.output_dir / ".layoutforge"

    @property
    def build_cache_path(self) -> Path:
        """Path to the persisted build cache JSON."""
        return self.cache_dir / "build-cache.json"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<cache_dir>/config.json``.

        Returns:
            The resolved path where the file was written.
        """
        target = path or (self.cache_dir / "config.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "CompilerConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "CompilerConfig":
        """Build a ``CompilerConfig`` from environment variables.

        Recognised variables (all optional):
            LAYOUTFORGE_PROJECT_DIR, LAYOUTFORGE_LAYOUTS_DIR,
            LAYOUTFORGE_STYLES_DIRS (``os.pathsep`` separated),
            LAYOUTFORGE_OUTPUT_DIR, LAYOUTFORGE_MODE,
            LAYOUTFORGE_MAX_STYLE_DEPTH, LAYOUTFORGE_MAX_PARALLEL_FILES,
            LAYOUTFORGE_NO_CACHE, LAYOUTFORGE_QUIET.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("LAYOUTFORGE_PROJECT_DIR"):
            kwargs["project_dir"] = Path(os.environ["LAYOUTFORGE_PROJECT_DIR"])
        if os.environ.get("LAYOUTFORGE_LAYOUTS_DIR"):
            kwargs["layouts_dir"] = Path(os.environ["LAYOUTFORGE_LAYOUTS_DIR"])
        if os.environ.get("LAYOUTFORGE_STYLES_DIRS"):
            kwargs["styles_dirs"] = [
                Path(p)
                for p in os.environ["LAYOUTFORGE_STYLES_DIRS"].split(os.pathsep)
                if p.strip()
            ]
        if os.environ.get("LAYOUTFORGE_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["LAYOUTFORGE_OUTPUT_DIR"])
        if os.environ.get("LAYOUTFORGE_MODE"):
            kwargs["mode"] = OutputMode(os.environ["LAYOUTFORGE_MODE"].lower())
        if os.environ.get("LAYOUTFORGE_MAX_STYLE_DEPTH"):
            kwargs["max_style_depth"] = int(os.environ["LAYOUTFORGE_MAX_STYLE_DEPTH"])
        if os.environ.get("LAYOUTFORGE_MAX_PARALLEL_FILES"):
            kwargs["max_parallel_files"] = int(
                os.environ["LAYOUTFORGE_MAX_PARALLEL_FILES"]
            )
        if os.environ.get("LAYOUTFORGE_NO_CACHE"):
            kwargs["use_build_cache"] = False
        if os.environ.get("LAYOUTFORGE_QUIET"):
            kwargs["quiet"] = True
        return cls(**kwargs)
