"""Tests for the command-line entry point (layoutforge.cli).

Tests cover:
- Argument parsing and config overrides
- Successful runs writing generated files
- Exit codes for failures, missing layouts and bad configuration
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from layoutforge.cli import build_parser, config_from_args, main
from layoutforge.config import CompilerConfig, OutputMode


def _run(argv: list[str]) -> int:
    """Run ``main`` with a clean environment and return its exit code."""
    with patch.dict(os.environ, {}, clear=True):
        try:
            main(argv)
        except SystemExit as exc:
            return exc.code
    return 0


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestArguments:
    @pytest.mark.unit
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.layouts == []
        assert args.mode is None
        assert args.styles_dir is None
        assert args.no_cache is False

    @pytest.mark.unit
    def test_invalid_mode_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--mode", "reactive"])

    @pytest.mark.unit
    def test_overrides(self, tmp_path: Path):
        args = build_parser().parse_args(
            [
                "--mode", "imperative",
                "--project-dir", str(tmp_path),
                "--layouts-dir", "Screens",
                "--styles-dir", "Theme",
                "--styles-dir", "Styles",
                "-o", str(tmp_path / "out"),
                "--no-cache",
                "-q",
            ]
        )
        with patch.dict(os.environ, {}, clear=True):
            config = config_from_args(args)
        assert config.mode is OutputMode.IMPERATIVE
        assert config.project_dir == tmp_path
        assert config.layouts_dir == Path("Screens")
        assert config.styles_dirs == [Path("Theme"), Path("Styles")]
        assert config.output_dir == tmp_path / "out"
        assert config.use_build_cache is False
        assert config.quiet is True

    @pytest.mark.unit
    def test_saved_config_then_overrides(self, tmp_path: Path):
        saved = CompilerConfig(binding_super_class="BaseBinding").save(tmp_path / "lf.json")
        args = build_parser().parse_args(["--config", str(saved), "--mode", "imperative"])
        config = config_from_args(args)
        assert config.binding_super_class == "BaseBinding"
        assert config.mode is OutputMode.IMPERATIVE

    @pytest.mark.unit
    def test_env_used_without_config_file(self):
        args = build_parser().parse_args([])
        with patch.dict(os.environ, {"LAYOUTFORGE_MODE": "imperative"}, clear=True):
            config = config_from_args(args)
        assert config.mode is OutputMode.IMPERATIVE


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    @pytest.mark.integration
    def test_compiles_project(self, project_dir, write_layout):
        write_layout("home", {"type": "View", "child": [{"type": "Label", "text": "Hi"}]})
        code = _run(["--project-dir", str(project_dir), "-o", str(project_dir / "Out"), "-q"])
        assert code == 0
        assert (project_dir / "Out" / "HomeView.swift").is_file()

    @pytest.mark.integration
    def test_explicit_file_imperative(self, project_dir, write_layout):
        path = write_layout("login", {"type": "TextField", "id": "email", "text": "@{email}"})
        code = _run(
            [str(path), "--project-dir", str(project_dir), "-m", "imperative",
             "-o", str(project_dir / "Out")]
        )
        assert code == 0
        assert (project_dir / "Out" / "LoginBinding.swift").is_file()

    @pytest.mark.integration
    def test_failed_file_exits_1(self, project_dir, write_layout):
        write_layout("ok", {"type": "Label"})
        write_layout("broken", "{nope")
        code = _run(["--project-dir", str(project_dir), "-o", str(project_dir / "Out")])
        assert code == 1
        assert (project_dir / "Out" / "OkView.swift").is_file()

    @pytest.mark.integration
    def test_no_layouts_exits_1(self, project_dir):
        assert _run(["--project-dir", str(project_dir), "-o", str(project_dir / "Out")]) == 1

    @pytest.mark.unit
    def test_bad_config_file_exits_2(self, tmp_path: Path):
        bad = tmp_path / "lf.json"
        bad.write_text(json.dumps({"mode": "reactive"}), encoding="utf-8")
        assert _run(["--config", str(bad)]) == 2

    @pytest.mark.unit
    def test_missing_config_file_exits_2(self, tmp_path: Path):
        assert _run(["--config", str(tmp_path / "absent.json")]) == 2
