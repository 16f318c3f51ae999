"""Unit tests for the Jinja2 template renderer (layoutforge.codegen.templates).

Tests cover:
- Rendering the declarative view and imperative binding templates
- Body indentation through the indent_lines filter, blank lines kept bare
"""

from __future__ import annotations

import pytest

from layoutforge.codegen.templates import (
    DECLARATIVE_TEMPLATE,
    IMPERATIVE_TEMPLATE,
    TemplateRenderer,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


def _imperative_context(**overrides):
    context = {
        "view_name": "Profile",
        "binding_class": "ProfileBinding",
        "super_class": "Binding",
        "source_name": "profile.json",
        "data_vars": [],
        "weak_vars": [],
        "partials": [],
        "methods": [],
    }
    context.update(overrides)
    return context


class TestDeclarativeTemplate:
    def test_view_struct(self, renderer):
        text = renderer.render(
            DECLARATIVE_TEMPLATE,
            {"view_name": "Profile", "source_name": "profile.json", "body": ['Text("Hi")', "    .padding(8)"]},
        )
        assert "struct ProfileView: View {" in text
        assert "@ObservedObject var viewModel: ProfileViewModel" in text
        assert '        Text("Hi")\n            .padding(8)\n' in text
        assert "Generated by layoutforge from profile.json" in text
        assert text.endswith("}\n")

    def test_blank_body_lines_are_not_padded(self, renderer):
        text = renderer.render(
            DECLARATIVE_TEMPLATE,
            {"view_name": "Profile", "source_name": "profile.json", "body": ["VStack {", "", "}"]},
        )
        assert "        VStack {\n\n        }\n" in text


class TestImperativeTemplate:
    def test_class_header(self, renderer):
        text = renderer.render(IMPERATIVE_TEMPLATE, _imperative_context())
        assert "@MainActor\nclass ProfileBinding: Binding {\n    var isInitialized = false\n" in text

    def test_data_weak_vars_and_partials(self, renderer):
        text = renderer.render(
            IMPERATIVE_TEMPLATE,
            _imperative_context(
                data_vars=[
                    {"name": "title", "type": "String", "default": '"Hi"'},
                    {"name": "count", "type": "Int?", "default": None},
                ],
                weak_vars=[{"name": "titleLabel", "view_class": "SJUILabel", "id": '"title_label"'}],
                partials=[{"property_name": "header", "binding_class": "HeaderBinding"}],
            ),
        )
        assert '    var title: String = "Hi"\n' in text
        assert "    var count: Int?\n" in text
        assert "    weak var titleLabel: SJUILabel!\n" in text
        assert "    private(set) var headerBinding: HeaderBinding!\n" in text
        assert "        self.headerBinding = HeaderBinding(viewHolder: viewHolder)\n" in text
        assert '        titleLabel = getView("title_label")\n' in text
        assert "        headerBinding.bindView()\n" in text

    def test_invalidate_method(self, renderer):
        text = renderer.render(
            IMPERATIVE_TEMPLATE,
            _imperative_context(
                methods=[
                    {
                        "name": "invalidateAll",
                        "partial_calls": [
                            "headerBinding.invalidateAll(resetForm: resetForm, formInitialized: formInitialized)"
                        ],
                        "body": ["title?.alpha = alpha", "if !isInitialized {", "    title?.text = text", "}"],
                    }
                ]
            ),
        )
        expected = (
            "    func invalidateAll(resetForm: Bool = false, formInitialized: Bool = false) {\n"
            "        if resetForm {\n"
            "            isInitialized = false\n"
            "        }\n"
            "        headerBinding.invalidateAll(resetForm: resetForm, formInitialized: formInitialized)\n"
            "        title?.alpha = alpha\n"
            "        if !isInitialized {\n"
            "            title?.text = text\n"
            "        }\n"
            "        if formInitialized {\n"
            "            isInitialized = true\n"
            "        }\n"
            "    }\n"
        )
        assert expected in text

