"""Image handlers: bundled images and images loaded from a URL."""

from __future__ import annotations

from layoutforge.handlers.base import Handler, render_value
from layoutforge.layout.models import Binding
from layoutforge.utils import swift_string

_CONTENT_MODES = {
    "AspectFill": ".fill",
    "aspectFill": ".fill",
    "fill": ".fill",
    "AspectFit": ".fit",
    "aspectFit": ".fit",
    "fit": ".fit",
}


def _content_mode(site):
    if site.bound:
        return f'.aspectRatio(contentMode: {site.expr} == "fill" ? .fill : .fit)'
    mode = _CONTENT_MODES.get(site.literal)
    if mode is None:
        return None
    return f".aspectRatio(contentMode: {mode})"


class ImageHandler(Handler):
    type_names = ("Image",)
    view_class = "SJUIImageView"

    def construct(self, node, body, ctx):
        source = node.get("srcName") or node.get("src")
        if isinstance(source, Binding):
            name = render_value(source, ctx, bare=True)
        else:
            name = swift_string(str(node.literal("srcName") or node.literal("src") or "placeholder"))
        if node.literal("systemImage") is True:
            return [f"Image(systemName: {name})"]
        return [f"Image({name})", "    .resizable()"]

    def declarative_specific(self, site):
        if site.key in ("srcName", "src", "highlightSrcName", "highlightSrc", "systemImage"):
            return []
        if site.key == "contentMode":
            modifier = _content_mode(site)
            return self.modifier(site, modifier) if modifier else []
        return None

    def imperative_specific(self, site):
        view = site.view_name
        key = site.key
        value = site.expr
        binding = site.binding
        forced = binding is not None and binding.forced

        if key == "srcName":
            if forced:
                return self.assign(site, "image", f"UIImage(named: {site.unwrapped_expr})")
            return self.assign(
                site,
                "image",
                f'!({value} ?? "").isEmpty ? UIImage(named: {value}!) : nil',
            )
        if key == "highlightSrcName":
            if forced:
                return self.assign(site, "highlightedImage", f"UIImage(named: {site.unwrapped_expr})")
            return self.assign(
                site,
                "highlightedImage",
                f"{value} != nil ? UIImage(named: {value}!) : nil",
            )
        if key == "src":
            return self.assign(site, "image")
        if key == "highlightSrc":
            return self.assign(site, "highlightedImage")
        if key == "contentMode":
            return self.assign(site, "contentMode")
        return None


class NetworkImageHandler(Handler):
    type_names = ("NetworkImage",)
    view_class = "NetworkImageView"
    circle = False

    def construct(self, node, body, ctx):
        url = node.get("url")
        if isinstance(url, Binding):
            address = render_value(url, ctx, bare=True)
        else:
            address = swift_string(str(node.literal("url", "")))
        mode = _CONTENT_MODES.get(node.literal("contentMode"), ".fit")
        placeholder = node.literal("placeholder")
        lines = [
            f"AsyncImage(url: URL(string: {address})) {{ image in",
            "    image",
            "        .resizable()",
            f"        .aspectRatio(contentMode: {mode})",
            "} placeholder: {",
            f"    Image({swift_string(str(placeholder))})" if placeholder else "    ProgressView()",
            "}",
        ]
        if self.circle:
            lines.append("    .clipShape(Circle())")
        return lines

    def declarative_specific(self, site):
        if site.key in ("url", "placeholder", "contentMode"):
            return []
        return None

    def imperative_specific(self, site):
        if site.key == "url":
            binding = site.binding
            if binding is not None and binding.forced:
                return self.statement(
                    site, f"{site.view_name}?.setImageURL(string: {site.unwrapped_expr})"
                )
            return self.statement(
                site, f'{site.view_name}?.setImageURL(string: {site.expr} ?? "")'
            )
        if site.key == "contentMode":
            return self.assign(site, "contentMode")
        return None


class CircleImageHandler(NetworkImageHandler):
    type_names = ("CircleImage",)
    view_class = "CircleImageView"
    circle = True
