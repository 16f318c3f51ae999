"""Shared utility functions for LayoutForge.

Provides JSON I/O, identifier helpers for generated code, file fingerprints,
and Rich-based console reporting.  The console helpers are the single place
where the compiler talks to the terminal; everything else records structured
diagnostics and lets the caller decide what to print.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically and the write runs in a
    worker thread so it does not block the event loop.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True)
    await asyncio.to_thread(file_path.write_text, content, "utf-8")


def fingerprint(text: str) -> str:
    """Return a short SHA-256 hex digest of *text*."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


# ---------------------------------------------------------------------------
# Identifier helpers
# ---------------------------------------------------------------------------


def to_pascal(name: str) -> str:
    """Convert ``snake_case`` / ``kebab-case`` / path-like names to PascalCase.

    Examples::

        to_pascal("user_profile")       -> "UserProfile"
        to_pascal("common/nav-bar")     -> "NavBar"
        to_pascal("_splash")            -> "Splash"
    """
    base = name.rsplit("/", 1)[-1]
    parts = [p for p in re.split(r"[^a-zA-Z0-9]+", base) if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def to_camel(name: str) -> str:
    """Convert an identifier to lowerCamelCase (``user_name`` -> ``userName``)."""
    pascal = to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


def swift_string(text: str) -> str:
    """Quote *text* as a Swift string literal."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def indent_lines(lines: list[str], spaces: int) -> list[str]:
    """Prefix every non-empty line with *spaces* spaces."""
    pad = " " * spaces
    return [f"{pad}{line}" if line else line for line in lines]


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
