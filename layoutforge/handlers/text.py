"""Text-bearing handlers: labels, text fields and multi-line text views.

In imperative mode the initial text of these views is applied only while
the binding has not reported itself initialized, so user edits survive
later invalidations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from layoutforge.handlers.base import (
    ComponentScope,
    Fragment,
    Guard,
    Handler,
    PropertySite,
    color_expr,
    render_value,
)
from layoutforge.handlers.fonts import FontMixin
from layoutforge.layout.models import Binding, ComponentNode, ListValue, ObjectValue
from layoutforge.utils import swift_string

if TYPE_CHECKING:
    from layoutforge.context import CompilationContext


def text_literal(node: ComponentNode, ctx: "CompilationContext", key: str = "text") -> str:
    """Render a display string: literal text or an interpolated binding."""
    value = node.get(key)
    if isinstance(value, Binding):
        return f'"\\({render_value(value, ctx)})"'
    return swift_string(str(node.literal(key, "")))


def text_binding(node: ComponentNode, ctx: "CompilationContext", key: str = "text") -> str:
    """Render a two-way text binding (``.constant`` for literals)."""
    value = node.get(key)
    if isinstance(value, Binding):
        return value.expression.two_way(ctx.data_root)
    return f".constant({swift_string(str(node.literal(key, '')))})"


# ---------------------------------------------------------------------------
# Label / Text
# ---------------------------------------------------------------------------


class LabelHandler(FontMixin, Handler):
    type_names = ("Label", "Text")
    view_class = "SJUILabel"

    def construct(self, node, body, ctx):
        return [f"Text({text_literal(node, ctx)})"]

    def declarative_specific(self, site: PropertySite) -> Optional[list[Fragment]]:
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        key = site.key
        if key == "text":
            return []
        if key == "fontColor":
            return self.modifier(site, f".foregroundColor({color_expr(site)})")
        if key == "lines":
            limit = "nil" if site.literal == 0 else site.expr
            return self.modifier(site, f".lineLimit({limit})")
        if key == "textAlign":
            alignment = {"Center": ".center", "Right": ".trailing"}.get(site.literal, ".leading")
            return self.modifier(site, f".multilineTextAlignment({alignment})")
        if key == "underline":
            return self.modifier(site, ".underline()") if site.literal is True else []
        return None

    def imperative_specific(self, site: PropertySite) -> Optional[list[Fragment]]:
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        view = site.view_name
        key = site.key
        if key == "text":
            return self.statement(
                site,
                f"{view}?.linkable ?? false ? {view}?.applyLinkableAttributedText({site.expr})"
                f" : {view}?.applyAttributedText({site.expr})",
                guard=Guard.UNINITIALIZED,
            )
        if key == "selected":
            return self.assign(site, "selected")
        if key == "fontColor":
            site.scope.reapply_text = True
            return self.assign(site, "attributes[NSAttributedString.Key.foregroundColor]")
        if key == "highlightColor":
            site.scope.reapply_text = True
            return self.assign(site, "highlightAttributes?[NSAttributedString.Key.foregroundColor]")
        if key == "hintColor":
            site.scope.reapply_text = True
            return self.assign(site, "hintAttributes?[NSAttributedString.Key.foregroundColor]")
        if key == "partialAttributes":
            return self._partial_attributes(site)
        return None

    def _partial_attributes(self, site: PropertySite) -> list[Fragment]:
        """Re-bind every ``range`` entry of ``partialAttributes`` that is bound."""
        if not isinstance(site.value, ListValue):
            return []
        lines = []
        for index, attribute in enumerate(site.value.items):
            if not isinstance(attribute, ObjectValue):
                continue
            ranges = attribute.entries.get("range")
            if not isinstance(ranges, ListValue):
                continue
            for r_index, bound in enumerate(ranges.items):
                if not isinstance(bound, Binding):
                    continue
                expression = bound.expression
                if expression.forced:
                    json_value = render_value(bound, site.ctx, site.view_name, bare=True)
                else:
                    json_value = f'{render_value(bound, site.ctx, site.view_name)} ?? ""'
                lines.append(
                    f'{site.view_name}?.partialAttributesJSON?[{index}]["range"][{r_index}]'
                    f" = JSON({json_value})"
                )
        if not lines:
            return []
        site.scope.reapply_text = True
        return [Fragment.of(*lines, key=site.key)]

    def finalize(self, scope: ComponentScope, ctx: "CompilationContext") -> list[Fragment]:
        fragments = []
        if not ctx.declarative and scope.reapply_text:
            view = scope.view_name
            text = f"{view}?.attributedText?.string"
            fragments.append(
                Fragment.of(
                    f"{view}?.linkable ?? false ? {view}?.applyLinkableAttributedText({text})"
                    f" : {view}?.applyAttributedText({text})",
                    key="finalize",
                )
            )
        return fragments + super().finalize(scope, ctx)


# ---------------------------------------------------------------------------
# IconLabel
# ---------------------------------------------------------------------------


class IconLabelHandler(FontMixin, Handler):
    type_names = ("IconLabel",)
    view_class = "SJUILabelWithIcon"

    def construct(self, node, body, ctx):
        spacing = node.literal("iconSpacing", 8)
        icon = node.literal("icon_off") or node.literal("icon")
        lines = [f"HStack(spacing: {spacing}) {{"]
        if isinstance(icon, str) and icon:
            if icon.startswith("system:"):
                lines.append(f"    Image(systemName: {swift_string(icon[len('system:'):])})")
            else:
                lines.append(f"    Image({swift_string(icon)})")
        lines.append(f"    Text({text_literal(node, ctx)})")
        lines.append("}")
        return lines

    def declarative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        if site.key in ("text", "icon", "icon_on", "icon_off", "iconSpacing"):
            return []
        if site.key == "fontColor":
            return self.modifier(site, f".foregroundColor({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        if site.key == "text":
            return self.statement(site, f"{site.view_name}?.label.applyAttributedText({site.expr})")
        if site.key == "selected":
            return self.assign(site, "isSelected")
        return None


# ---------------------------------------------------------------------------
# TextField / SecureField
# ---------------------------------------------------------------------------


class TextFieldHandler(FontMixin, Handler):
    type_names = ("TextField", "SecureField")
    view_class = "SJUITextField"
    font_property = "font"

    def construct(self, node, body, ctx):
        secure = node.type_key == "securefield" or node.literal("secure") is True
        control = "SecureField" if secure else "TextField"
        hint = text_literal(node, ctx, "hint")
        return [f"{control}({hint}, text: {text_binding(node, ctx)})"]

    def declarative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        key = site.key
        if key in ("text", "hint", "secure"):
            return []
        if key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if key == "fontColor":
            return self.modifier(site, f".foregroundColor({color_expr(site)})")
        if key == "contentType" and isinstance(site.literal, str):
            return self.modifier(site, f".textContentType(.{site.literal})")
        return None

    def imperative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        key = site.key
        if key == "enabled":
            return self.assign(site, "isEnabled")
        if key == "text":
            return self.assign(site, "text", guard=Guard.UNINITIALIZED)
        if key == "secure":
            return self.assign(site, "isSecureTextEntry")
        if key == "contentType":
            return self.assign(site, "textContentType")
        return None


# ---------------------------------------------------------------------------
# TextView / TextEditor
# ---------------------------------------------------------------------------


class TextViewHandler(FontMixin, Handler):
    type_names = ("TextView", "TextEditor")
    view_class = "SJUITextView"
    font_property = "font"

    def construct(self, node, body, ctx):
        return [f"TextEditor(text: {text_binding(node, ctx)})"]

    def declarative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        if site.key in ("text", "hint"):
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if site.key == "fontColor":
            return self.modifier(site, f".foregroundColor({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        if site.key == "enabled":
            return self.assign(site, "isEditable")
        if site.key == "text":
            return self.assign(site, "text", guard=Guard.UNINITIALIZED)
        return None
