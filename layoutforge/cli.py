"""Command-line entry point.

Usage::

    layoutforge                                   # every layout under ./Layouts
    layoutforge Layouts/profile.json --mode imperative -o Generated
    python -m layoutforge.cli --project-dir ./App --styles-dir Styles --no-cache
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from layoutforge.compiler import FileStatus, LayoutCompiler
from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.utils import console, print_error, print_success, print_summary_table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layoutforge",
        description="LayoutForge -- compile JSON layouts into SwiftUI views or UIKit bindings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  layoutforge\n"
            "  layoutforge Layouts/profile.json --mode imperative\n"
            "  layoutforge --project-dir ./App -o ./App/Generated --no-cache\n"
        ),
    )
    parser.add_argument(
        "layouts",
        nargs="*",
        help="Layout files to compile (default: every *.json under the layouts directory)",
    )
    parser.add_argument(
        "--mode", "-m",
        choices=[m.value for m in OutputMode],
        default=None,
        help="Output mode (default: declarative, or LAYOUTFORGE_MODE)",
    )
    parser.add_argument("--project-dir", default=None, help="Project root directory")
    parser.add_argument("--layouts-dir", default=None, help="Layouts directory")
    parser.add_argument(
        "--styles-dir",
        action="append",
        default=None,
        help="Style directory to search; repeat to add candidates in order",
    )
    parser.add_argument("--output", "-o", default=None, help="Output directory")
    parser.add_argument("--config", default=None, help="Load settings from a saved config JSON")
    parser.add_argument("--no-cache", action="store_true", help="Recompile unchanged files")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress warnings")
    return parser


def config_from_args(args: argparse.Namespace) -> CompilerConfig:
    """Environment / saved config first, then command-line overrides."""
    config = CompilerConfig.load(Path(args.config)) if args.config else CompilerConfig.from_env()
    overrides: dict = {}
    if args.mode:
        overrides["mode"] = OutputMode(args.mode)
    if args.project_dir:
        overrides["project_dir"] = Path(args.project_dir)
    if args.layouts_dir:
        overrides["layouts_dir"] = Path(args.layouts_dir)
    if args.styles_dir:
        overrides["styles_dirs"] = [Path(d) for d in args.styles_dir]
    if args.output:
        overrides["output_dir"] = Path(args.output)
    if args.no_cache:
        overrides["use_build_cache"] = False
    if args.quiet:
        overrides["quiet"] = True
    return config.model_copy(update=overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``layoutforge`` / ``python -m layoutforge.cli``."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except (OSError, ValidationError, ValueError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(2)

    compiler = LayoutCompiler(config)
    paths = [Path(p) for p in args.layouts] or None
    results = asyncio.run(compiler.compile_files(paths))

    if not results:
        print_error("Error: no layout files found")
        sys.exit(1)

    for result in results:
        if result.status is FileStatus.ERROR:
            console.print(f"[bold red]Error:[/bold red] {result.error}")

    compiled = sum(1 for r in results if r.status is FileStatus.OK)
    skipped = sum(1 for r in results if r.status is FileStatus.SKIPPED)
    failed = sum(1 for r in results if r.status is FileStatus.ERROR)
    print_summary_table(
        {
            "Mode": config.mode.value,
            "Files": str(len(results)),
            "Compiled": str(compiled),
            "Skipped (unchanged)": str(skipped),
            "Failed": str(failed),
            "Warnings": str(len(compiler.ctx.diagnostics)),
            "Output": str(config.output_dir),
        },
        title="LayoutForge",
    )

    if failed:
        print_error(f"{failed} file(s) produced no output.")
        sys.exit(1)
    print_success("Compilation completed successfully!")


if __name__ == "__main__":
    main()
