"""Selection controls: select boxes (pickers) and segmented controls.

A select box may show a ``prompt`` entry ahead of its items.  Unless the
layout sets ``includePromptWhenDataBinding``, bound indexes address the
items only, so the control's own index is the bound index plus one.
"""

from __future__ import annotations

from layoutforge.handlers.base import Guard, Handler, color_expr, render_value
from layoutforge.layout.models import Binding, ComponentNode, ListValue
from layoutforge.utils import swift_string


def prompt_shift(node: ComponentNode) -> int:
    """How far bound indexes are shifted against the control's own index."""
    if node.get("prompt") is None:
        return 0
    return 0 if node.literal("includePromptWhenDataBinding") is True else 1


def _selection(node, ctx, key):
    value = node.get(key)
    if isinstance(value, Binding):
        return value.expression.two_way(ctx.data_root)
    return f".constant({node.literal(key, 0)})"


def _item_lines(node, ctx, offset):
    """``Text(item).tag(n)`` rows for literal or bound item lists."""
    items = node.get("items")
    if isinstance(items, Binding):
        source = render_value(items, ctx)
        tag = f"index + {offset}" if offset else "index"
        return [
            f"    ForEach(Array({source}.enumerated()), id: \\.offset) {{ index, item in",
            f"        Text(item).tag({tag})",
            "    }",
        ]
    if isinstance(items, ListValue):
        return [
            f"    Text({swift_string(str(item.to_json()))}).tag({index + offset})"
            for index, item in enumerate(items.items)
        ]
    return []


class SelectBoxHandler(Handler):
    type_names = ("SelectBox",)
    view_class = "SJUISelectBox"

    def construct(self, node, body, ctx):
        hint = swift_string(str(node.literal("hint", "Select")))
        if node.literal("selectItemType") == "Date":
            return [
                f"DatePicker({hint}, selection: {_selection(node, ctx, 'selectedDate')},"
                " displayedComponents: .date)"
            ]

        shift = prompt_shift(node)
        lines = [f"Picker({hint}, selection: {_selection(node, ctx, 'selectedIndex')}) {{"]
        prompt = node.get("prompt")
        if prompt is not None:
            # An included prompt is item 0 of the bound index space.
            prompt_tag = -1 if shift else 0
            lines.append(f"    Text({render_value(prompt, ctx)}).tag({prompt_tag})")
            offset = 0 if shift else 1
        else:
            offset = 0
        lines.extend(_item_lines(node, ctx, offset))
        lines.append("}")
        return lines

    def declarative_specific(self, site):
        key = site.key
        if key in (
            "items",
            "prompt",
            "hint",
            "selectedIndex",
            "selectedDate",
            "selectItemType",
            "includePromptWhenDataBinding",
        ):
            return []
        if key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if key == "datePickerStyle" and isinstance(site.literal, str):
            return self.modifier(site, f".datePickerStyle(.{site.literal})")
        return None

    def imperative_specific(self, site):
        view = site.view_name
        value = site.expr
        key = site.key
        if key == "selectedIndex":
            shifted = (
                f"{view}?.hasPrompt ?? false && !{view}.includePromptWhenDataBinding"
                f" ? {value} + 1 : {value}"
            )
            return self.assign(site, "selectedIndex", shifted, guard=Guard.UNINITIALIZED)
        if key == "selectedItem":
            return self.assign(
                site,
                "selectedIndex",
                f"{view}?.items.firstIndex(where: {{$0 == {value}}})",
                guard=Guard.UNINITIALIZED,
            )
        if key == "selectedDate":
            return self.assign(site, "selectedDate", guard=Guard.UNINITIALIZED)
        if key in ("items", "minimumDate", "maximumDate"):
            return self.assign(site, key)
        return None


class SegmentHandler(Handler):
    type_names = ("Segment",)
    view_class = "SJUISegmentedControl"

    def construct(self, node, body, ctx):
        lines = [f'Picker("", selection: {_selection(node, ctx, "selectedIndex")}) {{']
        lines.extend(_item_lines(node, ctx, 0))
        lines.append("}")
        lines.append("    .pickerStyle(.segmented)")
        return lines

    def declarative_specific(self, site):
        if site.key in ("items", "selectedIndex"):
            return []
        if site.key == "enabled":
            return self.modifier(site, f".disabled(!{site.expr})")
        if site.key == "tintColor":
            return self.modifier(site, f".tint({color_expr(site)})")
        return None

    def imperative_specific(self, site):
        if site.key == "selectedIndex":
            return self.assign(site, "selectedSegmentIndex", guard=Guard.UNINITIALIZED)
        if site.key == "enabled":
            return self.assign(site, "isEnabled")
        return None
