"""Structured, non-fatal compiler diagnostics."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DiagnosticCode(str, Enum):
    """Everything the compiler reports without aborting."""

    STYLE_NOT_FOUND = "style-not-found"
    STYLE_PARSE_ERROR = "style-parse-error"
    STYLE_CYCLE = "style-cycle"
    MISSING_STYLE_DIRECTORY = "missing-style-directory"
    UNKNOWN_COMPONENT_TYPE = "unknown-component-type"
    MISSING_VIEW_ID = "missing-view-id"
    ZORDER_NOT_CONVERGED = "zorder-not-converged"


class Diagnostic(BaseModel):
    """One warning raised while compiling."""

    code: DiagnosticCode = Field(..., description="Machine-readable category")
    message: str = Field(..., description="Human-readable description")
    source: str = Field(default="", description="File the diagnostic refers to")

    def __str__(self) -> str:
        prefix = f"{self.source}: " if self.source else ""
        return f"{prefix}{self.message} [{self.code.value}]"
