"""Compound font handling shared by the text-bearing handlers.

A font has two sub-attributes, family (``font``) and size (``fontSize``).
Setting either must keep the other: imperative code reads the current font
back from the view before rebuilding it, declarative code re-emits both
parts in one ``.font(.custom(...))`` modifier whenever either changes.
"""

from __future__ import annotations

from typing import Optional

from layoutforge.handlers.base import Fragment, PropertySite, render_value
from layoutforge.layout.models import Binding

IMPERATIVE_DEFAULT_SIZE = "14.0"
DECLARATIVE_DEFAULT_SIZE = "17"

FONT_WEIGHTS = {
    "ultralight": ".ultraLight",
    "ultra-light": ".ultraLight",
    "thin": ".thin",
    "light": ".light",
    "regular": ".regular",
    "normal": ".regular",
    "medium": ".medium",
    "semibold": ".semibold",
    "semi-bold": ".semibold",
    "bold": ".bold",
    "heavy": ".heavy",
    "black": ".black",
}


def font_weight(raw: object) -> Optional[str]:
    """SwiftUI weight for a weight name, or ``None`` if unrecognised."""
    return FONT_WEIGHTS.get(str(raw).lower())


class FontMixin:
    """Adds ``font`` / ``fontSize`` / ``fontWeight`` handling to a handler."""

    font_keys = ("font", "fontSize", "fontWeight")
    # UIKit property holding the font; None keeps it in the text attributes.
    font_property: Optional[str] = None

    def font_fragments(self, site: PropertySite) -> Optional[list[Fragment]]:
        if site.key not in self.font_keys:
            return None
        if site.declarative:
            return self._declarative_font(site)
        return self._imperative_font(site)

    # -- declarative ---------------------------------------------------------

    @staticmethod
    def _has_family(site: PropertySite) -> bool:
        family = site.node.get("font")
        if family is None:
            return False
        return isinstance(family, Binding) or site.node.literal("font") != "bold"

    def _custom_font(self, site: PropertySite) -> Fragment:
        node = site.node
        family = render_value(node.properties["font"], site.ctx)
        size_value = node.get("fontSize")
        size = (
            render_value(size_value, site.ctx)
            if size_value is not None
            else DECLARATIVE_DEFAULT_SIZE
        )
        return Fragment.of(f".font(.custom({family}, size: {size}))", key=site.key)

    def _declarative_font(self, site: PropertySite) -> list[Fragment]:
        if site.key == "fontWeight":
            if site.bound:
                return [Fragment.of(f".fontWeight({site.expr} == \"bold\" ? .bold : .regular)", key=site.key)]
            weight = font_weight(site.literal)
            return [Fragment.of(f".fontWeight({weight})", key=site.key)] if weight else []

        if site.key == "font":
            if not site.bound and site.literal == "bold":
                return [Fragment.of(".fontWeight(.bold)", key=site.key)]
            return [self._custom_font(site)]

        # fontSize: a family set on the node must survive the size change.
        if self._has_family(site):
            return [self._custom_font(site)]
        return [Fragment.of(f".font(.system(size: {site.expr}))", key=site.key)]

    # -- imperative ------------------------------------------------------------

    def _imperative_font(self, site: PropertySite) -> list[Fragment]:
        view = site.view_name
        fallback = f"UIFont.systemFont(ofSize: {IMPERATIVE_DEFAULT_SIZE})"
        if self.font_property is None:
            current = f"({view}?.attributes[NSAttributedString.Key.font] as? UIFont ?? {fallback})"
            target = f"{view}?.attributes[NSAttributedString.Key.font]"
        else:
            current = f"({view}?.{self.font_property} ?? {fallback})"
            target = f"{view}?.{self.font_property}"

        if site.key == "font":
            lines = (
                f"let {view}FontSize = {current}.pointSize",
                f"{target} = UIFont(name: {site.expr}, size: {view}FontSize)",
            )
        elif site.key == "fontSize":
            lines = (
                f"let {view}FontName = {current}.fontName",
                f"{target} = UIFont(name: {view}FontName, size: {site.expr})",
            )
        else:
            return []
        if self.font_property is None:
            site.scope.reapply_text = True
        return [Fragment.of(*lines, key=site.key)]
