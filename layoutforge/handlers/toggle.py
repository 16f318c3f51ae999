"""Boolean controls: switches, check boxes and radio buttons."""

from __future__ import annotations

from layoutforge.handlers.base import Handler, color_expr, node_value_expr
from layoutforge.handlers.text import text_literal
from layoutforge.layout.models import Binding


def _state_binding(node, ctx, *keys):
    for key in keys:
        value = node.get(key)
        if isinstance(value, Binding):
            return value.expression.two_way(ctx.data_root)
        if value is not None:
            return f".constant({node_value_expr(node, key, ctx, 'false')})"
    return ".constant(false)"


class SwitchHandler(Handler):
    type_names = ("Switch", "Toggle")
    view_class = "SJUISwitch"

    def construct(self, node, body, ctx):
        state = _state_binding(node, ctx, "on", "isOn", "checked")
        if node.get("label") is not None:
            return [f"Toggle({text_literal(node, ctx, 'label')}, isOn: {state})"]
        return [f'Toggle("", isOn: {state})', "    .labelsHidden()"]

    def declarative_specific(self, site):
        if site.key in ("on", "isOn", "checked", "label"):
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if site.key == "tint":
            return self.modifier(site, f".tint({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        if site.key == "on":
            return self.assign(site, "isOn")
        if site.key == "enabled":
            return self.assign(site, "isEnabled")
        return None


class CheckHandler(Handler):
    type_names = ("Check", "Checkbox")
    view_class = "SJUICheckBox"

    def construct(self, node, body, ctx):
        state = _state_binding(node, ctx, "check", "checked", "isOn")
        return [f"Toggle({text_literal(node, ctx, 'label')}, isOn: {state})"]

    def declarative_specific(self, site):
        if site.key in ("check", "checked", "isOn", "label"):
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        return None

    def imperative_specific(self, site):
        if site.key == "check":
            return self.statement(site, f"{site.view_name}?.setCheck({site.expr})")
        if site.key == "enabled":
            return self.assign(site, "isEnabled")
        return None


class RadioHandler(Handler):
    type_names = ("Radio",)
    view_class = "SJUIRadioButton"

    def construct(self, node, body, ctx):
        checked = node_value_expr(node, "check", ctx, "false")
        return [
            "HStack {",
            f'    Image(systemName: {checked} ? "largecircle.fill.circle" : "circle")',
            f"    Text({text_literal(node, ctx)})",
            "}",
        ]

    def declarative_specific(self, site):
        if site.key in ("check", "text", "group"):
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        return None

    def imperative_specific(self, site):
        if site.key == "check":
            return self.statement(
                site,
                f"if {site.expr} {{",
                f"    {site.view_name}?.onCheck()",
                "}",
            )
        if site.key == "enabled":
            return self.assign(site, "isEnabled")
        return None
