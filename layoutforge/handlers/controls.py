"""Buttons and value controls (slider, progress, activity indicator, web)."""

from __future__ import annotations

from layoutforge.handlers.base import Handler, color_expr, node_value_expr
from layoutforge.handlers.fonts import FontMixin
from layoutforge.handlers.text import text_literal
from layoutforge.layout.models import Binding
from layoutforge.utils import swift_string


class ButtonHandler(FontMixin, Handler):
    type_names = ("Button",)
    view_class = "SJUIButton"

    def construct(self, node, body, ctx):
        action = node.literal("onClick") or node.literal("onclick")
        closure = f"{{ viewModel.{str(action).rstrip(':')}() }}" if action else "{}"
        return [
            f"Button(action: {closure}) {{",
            f"    Text({text_literal(node, ctx)})",
            "}",
        ]

    def declarative_common(self, site):
        # The action is part of the Button initializer.
        if site.key in ("onClick", "onclick"):
            return []
        return super().declarative_common(site)

    def declarative_specific(self, site):
        fonts = self.font_fragments(site)
        if fonts is not None:
            return fonts
        if site.key == "text":
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if site.key == "fontColor":
            return self.modifier(site, f".foregroundColor({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        view = site.view_name
        value = site.expr
        key = site.key
        if key == "enabled":
            return self.assign(site, "isEnabled")
        if key == "text":
            return self.statement(
                site,
                "if #available(iOS 15.0, *) {",
                f"    {view}?.configuration?.attributedTitle = AttributedString({value})",
                f"    {view}?.configurationUpdateHandler?({view})",
                "} else {",
                f"    {view}?.setTitle({value}, for: UIControl.State())",
                "}",
            )
        if key in ("fontColor", "disabledFontColor"):
            attribute = "defaultFontColor" if key == "fontColor" else "disabledFontColor"
            return self.statement(
                site,
                f"{view}?.{attribute} = {value}",
                "if #available(iOS 15.0, *) {",
                f"    {view}?.configurationUpdateHandler?({view})",
                "}",
            )
        return None


class SliderHandler(Handler):
    type_names = ("Slider",)
    view_class = "UISlider"

    def construct(self, node, body, ctx):
        value = node.get("value")
        if isinstance(value, Binding):
            state = value.expression.two_way(ctx.data_root)
        else:
            state = f".constant({node_value_expr(node, 'value', ctx, '0')})"
        low = node_value_expr(node, "minimumValue", ctx, "0")
        high = node_value_expr(node, "maximumValue", ctx, "1")
        return [f"Slider(value: {state}, in: {low}...{high})"]

    def declarative_specific(self, site):
        if site.key in ("value", "minimumValue", "maximumValue"):
            return []
        if site.key in ("tintColor", "tint"):
            return self.modifier(site, f".tint({color_expr(site)})")
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        return None

    def imperative_specific(self, site):
        if site.key == "value":
            return self.assign(site, "value")
        if site.key in ("minimumValue", "maximumValue"):
            return self.assign(site, site.key)
        if site.key == "enabled":
            return self.assign(site, "isEnabled")
        return None


class ProgressHandler(Handler):
    type_names = ("Progress",)
    view_class = "UIProgressView"

    def construct(self, node, body, ctx):
        return [f"ProgressView(value: {node_value_expr(node, 'progress', ctx, '0')})"]

    def declarative_specific(self, site):
        if site.key == "progress":
            return []
        if site.key in ("progressTintColor", "tintColor"):
            return self.modifier(site, f".tint({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        if site.key == "progress":
            return self.assign(site, "progress")
        if site.key == "progressTintColor":
            return self.assign(site, "progressTintColor")
        return None


class IndicatorHandler(Handler):
    type_names = ("Indicator",)
    view_class = "UIActivityIndicatorView"

    def construct(self, node, body, ctx):
        return ["ProgressView()"]

    def declarative_specific(self, site):
        if site.key == "color":
            return self.modifier(site, f".tint({color_expr(site)})")
        if site.key == "hidesWhenStopped":
            return []
        if site.key == "animating" and site.bound:
            return self.modifier(site, f".opacity({site.expr} ? 1 : 0)")
        return None

    def imperative_specific(self, site):
        if site.key == "animating":
            return self.statement(
                site,
                f"{site.expr} ? {site.view_name}?.startAnimating() : {site.view_name}?.stopAnimating()",
            )
        if site.key == "color":
            return self.assign(site, "color")
        return None


class WebHandler(Handler):
    type_names = ("Web",)
    view_class = "WKWebView"

    def construct(self, node, body, ctx):
        url = node.get("url")
        if isinstance(url, Binding):
            address = node_value_expr(node, "url", ctx, '""')
        else:
            address = swift_string(str(node.literal("url", "")))
        return [f"WebView(url: URL(string: {address})!)"]

    def declarative_specific(self, site):
        if site.key == "url":
            return []
        return None

    def imperative_specific(self, site):
        if site.key == "url":
            return self.statement(
                site,
                f"if let url = URL(string: {site.expr}) {{",
                f"    {site.view_name}?.load(URLRequest(url: url))",
                "}",
            )
        return None
