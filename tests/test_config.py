"""Unit tests for CompilerConfig (layoutforge.config).

Tests cover:
- Defaults and validation
- Derived paths (style search path, cache paths)
- save/load
- from_env
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from layoutforge.config import DEFAULT_STYLE_DIRS, CompilerConfig, OutputMode


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    @pytest.mark.unit
    def test_default_values(self):
        config = CompilerConfig()
        assert config.project_dir == Path(".")
        assert config.layouts_dir == Path("Layouts")
        assert config.styles_dirs == []
        assert config.output_dir == Path("./Generated")
        assert config.mode is OutputMode.DECLARATIVE
        assert config.declarative_data_root == "viewModel.data"
        assert config.imperative_data_root == ""
        assert config.binding_super_class == "Binding"
        assert config.max_style_depth == 8
        assert config.max_parallel_files == 4
        assert config.use_build_cache is True
        assert config.quiet is False

    @pytest.mark.unit
    def test_mode_from_string(self):
        assert CompilerConfig(mode="imperative").mode is OutputMode.IMPERATIVE

    @pytest.mark.unit
    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            CompilerConfig(mode="reactive")

    @pytest.mark.unit
    @pytest.mark.parametrize("field", ["max_style_depth", "max_parallel_files"])
    def test_limits_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            CompilerConfig(**{field: 0})


# ---------------------------------------------------------------------------
# Derived paths
# ---------------------------------------------------------------------------


class TestDerivedPaths:
    @pytest.mark.unit
    def test_default_style_search_path(self, tmp_path: Path):
        config = CompilerConfig(project_dir=tmp_path)
        assert config.style_search_path == [tmp_path / d for d in DEFAULT_STYLE_DIRS]

    @pytest.mark.unit
    def test_explicit_style_dirs_keep_order(self, tmp_path: Path):
        absolute = tmp_path / "shared"
        config = CompilerConfig(project_dir=tmp_path, styles_dirs=[Path("Theme"), absolute])
        assert config.style_search_path == [tmp_path / "Theme", absolute]

    @pytest.mark.unit
    def test_cache_paths(self, tmp_path: Path):
        config = CompilerConfig(output_dir=tmp_path)
        assert config.cache_dir == tmp_path / ".layoutforge"
        assert config.build_cache_path == tmp_path / ".layoutforge" / "build-cache.json"


# ---------------------------------------------------------------------------
# CompilerConfig.save / CompilerConfig.load
# ---------------------------------------------------------------------------


class TestSaveLoad:
    @pytest.mark.unit
    def test_save_default_path(self, tmp_path: Path):
        config = CompilerConfig(output_dir=tmp_path)
        saved_path = config.save()
        assert saved_path == config.cache_dir / "config.json"
        assert json.loads(saved_path.read_text())["mode"] == "declarative"

    @pytest.mark.unit
    def test_load_roundtrip(self, tmp_path: Path):
        config = CompilerConfig(
            output_dir=tmp_path,
            mode=OutputMode.IMPERATIVE,
            styles_dirs=[Path("Theme")],
            max_style_depth=3,
            binding_super_class="BaseBinding",
        )
        loaded = CompilerConfig.load(config.save(tmp_path / "custom.json"))
        assert loaded == config

    @pytest.mark.unit
    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(OSError):
            CompilerConfig.load(tmp_path / "absent.json")


# ---------------------------------------------------------------------------
# CompilerConfig.from_env
# ---------------------------------------------------------------------------


class TestFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = CompilerConfig.from_env()
        assert config == CompilerConfig()

    @pytest.mark.unit
    def test_paths_and_mode(self):
        env = {
            "LAYOUTFORGE_PROJECT_DIR": "/work/app",
            "LAYOUTFORGE_LAYOUTS_DIR": "Screens",
            "LAYOUTFORGE_OUTPUT_DIR": "/work/out",
            "LAYOUTFORGE_MODE": "IMPERATIVE",
        }
        with patch.dict(os.environ, env, clear=True):
            config = CompilerConfig.from_env()
        assert config.project_dir == Path("/work/app")
        assert config.layouts_dir == Path("Screens")
        assert config.output_dir == Path("/work/out")
        assert config.mode is OutputMode.IMPERATIVE

    @pytest.mark.unit
    def test_styles_dirs_split_on_pathsep(self):
        env = {"LAYOUTFORGE_STYLES_DIRS": os.pathsep.join(["Theme", "", "Styles"])}
        with patch.dict(os.environ, env, clear=True):
            config = CompilerConfig.from_env()
        assert config.styles_dirs == [Path("Theme"), Path("Styles")]

    @pytest.mark.unit
    def test_limits_and_flags(self):
        env = {
            "LAYOUTFORGE_MAX_STYLE_DEPTH": "5",
            "LAYOUTFORGE_MAX_PARALLEL_FILES": "2",
            "LAYOUTFORGE_NO_CACHE": "1",
            "LAYOUTFORGE_QUIET": "1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = CompilerConfig.from_env()
        assert config.max_style_depth == 5
        assert config.max_parallel_files == 2
        assert config.use_build_cache is False
        assert config.quiet is True

    @pytest.mark.unit
    def test_invalid_mode_raises(self):
        with patch.dict(os.environ, {"LAYOUTFORGE_MODE": "reactive"}, clear=True):
            with pytest.raises(ValueError):
                CompilerConfig.from_env()
