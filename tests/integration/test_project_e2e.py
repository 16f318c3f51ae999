"""End-to-end compilation of a small app project.

These tests build a project with chained styles, a shared partial and a
broken screen, then compile every layout in both output modes through
``LayoutCompiler.compile_files`` and inspect the generated Swift files.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from layoutforge.compiler import FileStatus, LayoutCompiler
from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.diagnostics import DiagnosticCode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_project(project_dir, write_layout, write_style) -> Path:
    """Populate the temporary project with styles and four layouts."""
    write_style("base_text", {"fontSize": 14, "fontColor": "#333333"})
    write_style("title_text", {"style": "base_text", "type": "Label", "fontSize": 24})
    write_layout(
        "common/header",
        {
            "type": "View",
            "child": [
                {"type": "Label", "id": "header_title", "text": "@{heading}",
                 "binding_group": ["profile"]},
            ],
        },
    )
    write_layout(
        "profile",
        {
            "type": "SafeAreaView",
            "orientation": "vertical",
            "child": [
                {"data": [{"name": "userName", "class": "String", "defaultValue": "''"}]},
                {"include": "common/header"},
                {"type": "Label", "id": "name_label", "style": "title_text",
                 "text": "@{userName}", "binding_group": ["profile"]},
                {"type": "Switch", "id": "notify_switch", "on": "@{notify}"},
                {"type": "Label", "text": "@{orphan}"},
            ],
        },
    )
    write_layout("broken", "{")
    return project_dir


def _config(project_dir: Path, mode: OutputMode) -> CompilerConfig:
    return CompilerConfig(
        project_dir=project_dir,
        output_dir=project_dir / "Generated" / mode.value,
        mode=mode,
        quiet=True,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestProjectCompilation:
    """Compile the sample project in each mode."""

    @pytest.mark.asyncio
    async def test_declarative(self, sample_project: Path) -> None:
        config = _config(sample_project, OutputMode.DECLARATIVE)
        compiler = LayoutCompiler(config)
        results = {Path(r.source).stem: r for r in await compiler.compile_files()}

        assert set(results) == {"broken", "header", "profile"}
        assert results["broken"].status is FileStatus.ERROR
        assert results["header"].status is FileStatus.OK
        assert results["profile"].status is FileStatus.OK

        text = (config.output_dir / "ProfileView.swift").read_text(encoding="utf-8")
        assert "struct ProfileView: View {" in text
        assert "VStack(alignment: .leading, spacing: 0) {" in text
        assert "HeaderView(viewModel: viewModel)" in text
        assert 'Text("\\(viewModel.data.userName)")' in text
        assert ".font(.system(size: 24))" in text
        assert ".foregroundColor(Color(red: 0.2, green: 0.2, blue: 0.2))" in text
        assert "Toggle(" in text
        assert (config.output_dir / "HeaderView.swift").is_file()

    @pytest.mark.asyncio
    async def test_imperative(self, sample_project: Path) -> None:
        config = _config(sample_project, OutputMode.IMPERATIVE)
        compiler = LayoutCompiler(config)
        results = {Path(r.source).stem: r for r in await compiler.compile_files()}

        profile = results["profile"]
        assert profile.status is FileStatus.OK
        assert [d.code for d in profile.diagnostics] == [DiagnosticCode.MISSING_VIEW_ID]

        text = Path(profile.output_path).read_text(encoding="utf-8")
        assert "class ProfileBinding: Binding {" in text
        assert '    var userName: String = ""\n' in text
        assert "    private(set) var headerBinding: HeaderBinding!\n" in text
        assert "    weak var nameLabel: SJUILabel!\n" in text
        assert "    weak var notifySwitch: SJUISwitch!\n" in text
        assert "headerBinding.invalidateAll(resetForm: resetForm, formInitialized: formInitialized)" in text
        assert "headerBinding.invalidateProfile(resetForm: resetForm, formInitialized: formInitialized)" in text
        assert "func invalidateProfile(" in text
        assert "orphan" not in text

    @pytest.mark.asyncio
    async def test_second_run_skips_unchanged(self, sample_project: Path, write_style) -> None:
        config = _config(sample_project, OutputMode.DECLARATIVE)
        await LayoutCompiler(config).compile_files()

        rerun = {Path(r.source).stem: r.status for r in await LayoutCompiler(config).compile_files()}
        assert rerun == {
            "broken": FileStatus.ERROR,
            "header": FileStatus.SKIPPED,
            "profile": FileStatus.SKIPPED,
        }

        write_style("base_text", {"fontSize": 14, "fontColor": "#000000"})
        rerun = {Path(r.source).stem: r.status for r in await LayoutCompiler(config).compile_files()}
        assert rerun["profile"] is FileStatus.OK
        assert rerun["header"] is FileStatus.SKIPPED
