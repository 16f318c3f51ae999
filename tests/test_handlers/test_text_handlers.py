"""Unit tests for text-bearing handlers (layoutforge.handlers.text).

Tests cover:
- Label: guarded initial text, unguarded attribute updates, partial
  attribute ranges, declarative Text construction
- IconLabel, TextField/SecureField and TextView/TextEditor construction and
  imperative updates, including fonts kept on the UIKit font property
"""

from __future__ import annotations

import pytest

from layoutforge.handlers.base import ComponentScope, Guard
from layoutforge.handlers.text import (
    IconLabelHandler,
    LabelHandler,
    TextFieldHandler,
    TextViewHandler,
)
from layoutforge.layout.models import ComponentNode

pytestmark = pytest.mark.unit


def _lines(fragments):
    return [line for fragment in fragments for line in fragment.lines]


class TestLabel:
    def test_text_is_guarded(self, imperative_ctx, make_site):
        raw = {"type": "Label", "id": "title_label", "text": "@{title}"}
        (fragment,) = LabelHandler().dispatch(make_site(raw, "text", imperative_ctx))
        assert fragment.guard is Guard.UNINITIALIZED
        assert fragment.lines == (
            "titleLabel?.linkable ?? false ? titleLabel?.applyLinkableAttributedText(title)"
            " : titleLabel?.applyAttributedText(title)",
        )

    def test_font_color_is_unguarded(self, imperative_ctx, make_site):
        scope = ComponentScope(view_name="titleLabel")
        raw = {"type": "Label", "id": "title_label", "fontColor": "@{tint}"}
        (fragment,) = LabelHandler().dispatch(make_site(raw, "fontColor", imperative_ctx, scope))
        assert fragment.guard is Guard.NONE
        assert fragment.lines == (
            "titleLabel?.attributes[NSAttributedString.Key.foregroundColor] = tint",
        )
        assert scope.reapply_text is True

    def test_partial_attribute_ranges(self, imperative_ctx, make_site):
        raw = {
            "type": "Label",
            "id": "note",
            "partialAttributes": [
                {"range": ["@{start}", 4], "fontColor": "#FF0000"},
                {"range": [0, "@{end!!}"]},
            ],
        }
        lines = _lines(LabelHandler().dispatch(make_site(raw, "partialAttributes", imperative_ctx)))
        assert lines == [
            'note?.partialAttributesJSON?[0]["range"][0] = JSON(start ?? "")',
            'note?.partialAttributesJSON?[1]["range"][1] = JSON(end)',
        ]

    def test_declarative_construct(self, declarative_ctx):
        handler = LabelHandler()
        bound = ComponentNode.from_json({"type": "Label", "text": "@{title}"})
        plain = ComponentNode.from_json({"type": "Label", "text": "Hello"})
        assert handler.construct(bound, [], declarative_ctx) == ['Text("\\(viewModel.data.title)")']
        assert handler.construct(plain, [], declarative_ctx) == ['Text("Hello")']

    def test_declarative_text_emits_no_modifier(self, declarative_ctx, make_site):
        site = make_site({"type": "Label", "text": "Hello"}, "text", declarative_ctx)
        assert LabelHandler().dispatch(site) == []

    def test_declarative_alignment(self, declarative_ctx, make_site):
        site = make_site({"type": "Label", "textAlign": "Center"}, "textAlign", declarative_ctx)
        assert _lines(LabelHandler().dispatch(site)) == [".multilineTextAlignment(.center)"]


class TestIconLabel:
    def test_construct_system_icon(self, declarative_ctx):
        node = ComponentNode.from_json(
            {"type": "IconLabel", "icon": "system:star", "text": "Fav", "iconSpacing": 4}
        )
        assert IconLabelHandler().construct(node, [], declarative_ctx) == [
            "HStack(spacing: 4) {",
            '    Image(systemName: "star")',
            '    Text("Fav")',
            "}",
        ]

    def test_imperative_text(self, imperative_ctx, make_site):
        site = make_site({"type": "IconLabel", "id": "fav", "text": "@{label}"}, "text", imperative_ctx)
        assert _lines(IconLabelHandler().dispatch(site)) == ["fav?.label.applyAttributedText(label)"]


class TestTextField:
    def test_construct_two_way(self, declarative_ctx):
        node = ComponentNode.from_json({"type": "TextField", "hint": "Email", "text": "@{email}"})
        assert TextFieldHandler().construct(node, [], declarative_ctx) == [
            'TextField("Email", text: $viewModel.data.email)'
        ]

    def test_construct_secure(self, declarative_ctx):
        node = ComponentNode.from_json({"type": "SecureField", "hint": "Password"})
        assert TextFieldHandler().construct(node, [], declarative_ctx) == [
            'SecureField("Password", text: .constant(""))'
        ]

    def test_text_guarded_enabled_not(self, imperative_ctx, make_site):
        raw = {"type": "TextField", "id": "email_field", "text": "@{email}", "enabled": "@{editable}"}
        handler = TextFieldHandler()
        (text,) = handler.dispatch(make_site(raw, "text", imperative_ctx))
        (enabled,) = handler.dispatch(make_site(raw, "enabled", imperative_ctx))
        assert text.guard is Guard.UNINITIALIZED
        assert text.lines == ("emailField?.text = email",)
        assert enabled.guard is Guard.NONE
        assert enabled.lines == ("emailField?.isEnabled = editable",)

    def test_imperative_font_keeps_size(self, imperative_ctx, make_site):
        scope = ComponentScope(view_name="emailField")
        raw = {"type": "TextField", "id": "email_field", "font": "@{fontName}"}
        handler = TextFieldHandler()
        lines = _lines(handler.dispatch(make_site(raw, "font", imperative_ctx, scope)))
        assert lines == [
            "let emailFieldFontSize = (emailField?.font ?? UIFont.systemFont(ofSize: 14.0)).pointSize",
            "emailField?.font = UIFont(name: fontName, size: emailFieldFontSize)",
        ]
        assert scope.reapply_text is False
        assert handler.finalize(scope, imperative_ctx) == []


class TestTextView:
    def test_construct(self, declarative_ctx):
        node = ComponentNode.from_json({"type": "TextEditor", "text": "@{bio}"})
        assert TextViewHandler().construct(node, [], declarative_ctx) == [
            "TextEditor(text: $viewModel.data.bio)"
        ]

    def test_imperative(self, imperative_ctx, make_site):
        raw = {"type": "TextView", "id": "bio", "text": "@{bio}", "enabled": "@{canEdit}"}
        handler = TextViewHandler()
        (text,) = handler.dispatch(make_site(raw, "text", imperative_ctx))
        (enabled,) = handler.dispatch(make_site(raw, "enabled", imperative_ctx))
        assert text.guard is Guard.UNINITIALIZED
        assert enabled.lines == ("bio?.isEditable = canEdit",)

    def test_imperative_font_size_keeps_family(self, imperative_ctx, make_site):
        scope = ComponentScope(view_name="bio")
        raw = {"type": "TextView", "id": "bio", "fontSize": "@{size}"}
        lines = _lines(TextViewHandler().dispatch(make_site(raw, "fontSize", imperative_ctx, scope)))
        assert lines == [
            "let bioFontName = (bio?.font ?? UIFont.systemFont(ofSize: 14.0)).fontName",
            "bio?.font = UIFont(name: bioFontName, size: size)",
        ]
        assert scope.reapply_text is False
