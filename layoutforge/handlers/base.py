"""Handler base class and the fragment types every handler produces.

A handler turns one ``(key, value)`` property of a component into zero or
more :class:`Fragment` objects.  Dispatch for a property always asks
:meth:`Handler.handle_common` first and only falls back to
:meth:`Handler.handle_specific` when the common step declined (returned
``None``).  A property neither step claims is skipped.

Both steps split on the output mode.  In declarative mode fragments are
chained view modifiers (``.opacity(...)``); in imperative mode they are
statements against a live view reference (``label?.alpha = ...``) where a
missing view makes every statement a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from layoutforge.binding import BindingExpression
from layoutforge.layout.models import (
    Binding,
    ComponentNode,
    ListValue,
    ObjectValue,
    PropertyValue,
    Scalar,
)
from layoutforge.utils import swift_string

if TYPE_CHECKING:
    from layoutforge.codegen.zorder import ZPlacement
    from layoutforge.context import CompilationContext


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------


class Guard(str, Enum):
    """Condition an imperative fragment runs under."""

    NONE = "none"
    UNINITIALIZED = "uninitialized"


@dataclass(frozen=True)
class Fragment:
    """One unit of emitted code: a modifier or a (possibly guarded) statement.

    ``lines`` may span several lines; continuation lines carry their own
    relative indentation.
    """

    lines: tuple[str, ...]
    key: str = ""
    guard: Guard = Guard.NONE

    @classmethod
    def of(cls, *lines: str, key: str = "", guard: Guard = Guard.NONE) -> "Fragment":
        return cls(lines=tuple(lines), key=key, guard=guard)


@dataclass
class ComponentScope:
    """Mutable per-component state shared by the property fragments.

    Attributes:
        view_name: Target-language name of the view (camelCase id).
        reapply_text: A label attribute changed and its attributed text must
            be rebuilt after all property fragments.
        reset_constraints: A size/margin/weight changed and the view's
            constraints must be rebuilt after all property fragments.
        placement: Planned z-order for this node, if any.
        z_emitted: The z-order modifier was already written.
    """

    view_name: str
    reapply_text: bool = False
    reset_constraints: bool = False
    placement: Optional["ZPlacement"] = None
    z_emitted: bool = False


@dataclass(frozen=True)
class PropertySite:
    """One property being dispatched, with everything a handler may need."""

    node: ComponentNode
    key: str
    value: PropertyValue
    ctx: "CompilationContext"
    scope: ComponentScope

    @property
    def view_name(self) -> str:
        return self.scope.view_name

    @property
    def declarative(self) -> bool:
        return self.ctx.declarative

    @property
    def binding(self) -> Optional[BindingExpression]:
        if isinstance(self.value, Binding):
            return self.value.expression
        return None

    @property
    def bound(self) -> bool:
        return isinstance(self.value, Binding)

    @property
    def literal(self) -> Any:
        """The raw scalar value, or ``None`` for bindings and containers."""
        if isinstance(self.value, Scalar):
            return self.value.value
        return None

    @property
    def expr(self) -> str:
        """The value rendered as a target-language expression."""
        return render_value(self.value, self.ctx, self.view_name)

    @property
    def unwrapped_expr(self) -> str:
        """Like :attr:`expr` but with the ``!!`` marker removed."""
        return render_value(self.value, self.ctx, self.view_name, bare=True)

    def two_way(self) -> str:
        """A ``$``-prefixed binding, or a ``.constant(...)`` for literals."""
        binding = self.binding
        if binding is not None:
            return binding.two_way(self.ctx.data_root)
        return f".constant({self.expr})"


# ---------------------------------------------------------------------------
# Value rendering
# ---------------------------------------------------------------------------


def swift_literal(raw: Any) -> str:
    """Render a decoded JSON scalar/list/object as a Swift literal."""
    if raw is None:
        return "nil"
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return repr(raw)
    if isinstance(raw, list):
        return "[" + ", ".join(swift_literal(item) for item in raw) + "]"
    if isinstance(raw, dict):
        if not raw:
            return "[:]"
        entries = ", ".join(f"{swift_string(str(k))}: {swift_literal(v)}" for k, v in raw.items())
        return f"[{entries}]"
    return swift_string(str(raw))


def render_value(
    value: PropertyValue,
    ctx: "CompilationContext",
    view_name: str = "",
    *,
    bare: bool = False,
) -> str:
    """Render *value* for the current output mode."""
    if isinstance(value, Binding):
        return value.expression.reference(
            ctx.data_root,
            view_name=None if ctx.declarative else view_name,
            bare=bare,
        )
    if isinstance(value, (ListValue, ObjectValue)):
        return swift_literal(value.to_json())
    return swift_literal(value.value)


def hex_to_color(raw: Any) -> str:
    """Convert ``#RRGGBB`` / ``#AARRGGBB`` to a SwiftUI ``Color`` initializer."""
    if not isinstance(raw, str) or not raw:
        return "Color.clear"
    digits = raw[1:] if raw.startswith("#") else raw
    digits = digits.upper()
    try:
        channels = [int(digits[i : i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
    except ValueError:
        return "Color.black"
    if len(digits) == 6:
        r, g, b = channels
        return f"Color(red: {r}, green: {g}, blue: {b})"
    if len(digits) == 8:
        a, r, g, b = channels
        return f"Color(red: {r}, green: {g}, blue: {b}, opacity: {a})"
    return "Color.black"


def color_expr(site: PropertySite) -> str:
    """Color value for a declarative modifier (hex literal or bound value)."""
    if site.bound:
        return site.expr
    return hex_to_color(site.literal)


def size_expr(raw: Any) -> Optional[str]:
    """Map a layout size literal onto a frame argument (``None`` = natural size)."""
    if raw == "matchParent":
        return ".infinity"
    if raw == "wrapContent" or raw is None:
        return None
    return swift_literal(raw) if not isinstance(raw, str) else raw


def node_value_expr(
    node: ComponentNode, key: str, ctx: "CompilationContext", default: str
) -> str:
    """Render ``node.properties[key]`` or *default* when the key is absent."""
    value = node.get(key)
    if value is None:
        return default
    return render_value(value, ctx)


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------

_LAYOUT_PARAMS = {
    "matchParent": "UILayoutConstraintInfo.LayoutParams.matchParent",
    "wrapContent": "UILayoutConstraintInfo.LayoutParams.wrapContent",
}

_CONSTRAINT_KEYS = (
    "topMargin",
    "rightMargin",
    "bottomMargin",
    "leftMargin",
    "widthWeight",
    "heightWeight",
)

_PADDING_EDGES = (".top", ".trailing", ".bottom", ".leading")
_MARGIN_EDGES = {
    "topMargin": ".top",
    "rightMargin": ".trailing",
    "bottomMargin": ".bottom",
    "leftMargin": ".leading",
}


class Handler:
    """Default handler: common properties only.

    Subclasses set :attr:`type_names` (the component types they serve),
    :attr:`view_class` (the live view class in imperative mode) and override
    :meth:`declarative_specific`, :meth:`imperative_specific` and
    :meth:`construct` as needed.
    """

    type_names: tuple[str, ...] = ()
    view_class: str = "UIView"

    # -- Dispatch ------------------------------------------------------------

    def dispatch(self, site: PropertySite) -> list[Fragment]:
        """Run the common step, then the specific step if common declined."""
        fragments = self.handle_common(site)
        if fragments is None:
            fragments = self.handle_specific(site)
        return list(fragments or [])

    def handle_common(self, site: PropertySite) -> Optional[list[Fragment]]:
        if site.declarative:
            return self.declarative_common(site)
        return self.imperative_common(site)

    def handle_specific(self, site: PropertySite) -> Optional[list[Fragment]]:
        if site.declarative:
            return self.declarative_specific(site)
        return self.imperative_specific(site)

    def declarative_specific(self, site: PropertySite) -> Optional[list[Fragment]]:
        return None

    def imperative_specific(self, site: PropertySite) -> Optional[list[Fragment]]:
        return None

    def finalize(self, scope: ComponentScope, ctx: "CompilationContext") -> list[Fragment]:
        """Fragments that follow every property fragment of the component."""
        if ctx.declarative or not scope.reset_constraints:
            return []
        return [Fragment.of(f"{scope.view_name}?.resetConstraintInfo()", key="finalize")]

    # -- Declarative construction ----------------------------------------------

    def construct(
        self, node: ComponentNode, body: list[str], ctx: "CompilationContext"
    ) -> list[str]:
        """Head expression for *node*; *body* holds the rendered children."""
        if body:
            return ["ZStack(alignment: .topLeading) {", *body, "}"]
        return [f"Text({swift_string('Unsupported component: ' + node.type)})", "    .foregroundColor(.red)"]

    # -- Helpers ---------------------------------------------------------------

    @staticmethod
    def modifier(site: PropertySite, text: str) -> list[Fragment]:
        return [Fragment.of(text, key=site.key)]

    @staticmethod
    def statement(
        site: PropertySite, *lines: str, guard: Guard = Guard.NONE
    ) -> list[Fragment]:
        return [Fragment.of(*lines, key=site.key, guard=guard)]

    def assign(
        self, site: PropertySite, attribute: str, value: Optional[str] = None, **kw: Any
    ) -> list[Fragment]:
        """``view?.attribute = value`` as a one-line statement."""
        rhs = site.expr if value is None else value
        return self.statement(site, f"{site.view_name}?.{attribute} = {rhs}", **kw)

    # -- Common properties (declarative) ------------------------------------------

    def declarative_common(self, site: PropertySite) -> Optional[list[Fragment]]:
        key = site.key
        node = site.node

        if key in ("width", "height"):
            if site.bound:
                return self.modifier(site, f".frame({key}: {site.expr})")
            size = size_expr(site.literal)
            if size is None:
                return []
            if size == ".infinity":
                bound_key = "maxWidth" if key == "width" else "maxHeight"
                return self.modifier(site, f".frame({bound_key}: .infinity)")
            return self.modifier(site, f".frame({key}: {size})")

        if key in ("minWidth", "maxWidth", "minHeight", "maxHeight"):
            size = site.expr if site.bound else size_expr(site.literal)
            if size is None:
                return []
            return self.modifier(site, f".frame({key}: {size})")

        if key == "background":
            return self.modifier(site, f".background({color_expr(site)})")

        if key in ("padding", "paddings", "margins"):
            return self._padding(site)

        if key in _MARGIN_EDGES:
            return self.modifier(site, f".padding({_MARGIN_EDGES[key]}, {site.expr})")

        if key == "cornerRadius":
            return self.modifier(site, f".cornerRadius({site.expr})")

        if key in ("alpha", "opacity"):
            return self.modifier(site, f".opacity({site.expr})")

        if key == "visibility":
            if site.bound:
                return self.modifier(site, f'.opacity({site.expr} == "visible" ? 1 : 0)')
            if site.literal in ("invisible", "gone"):
                return self.modifier(site, ".hidden()")
            return []

        if key == "hidden":
            if site.bound:
                return self.modifier(site, f".opacity({site.expr} ? 0 : 1)")
            return self.modifier(site, ".hidden()") if site.literal is True else []

        if key == "clipToBounds":
            if site.bound:
                return self.modifier(site, f".clipped(antialiased: {site.expr})")
            return self.modifier(site, ".clipped()") if site.literal is True else []

        if key == "borderWidth":
            color = node.get("borderColor")
            if color is None:
                return []
            stroke = (
                render_value(color, site.ctx)
                if isinstance(color, Binding)
                else hex_to_color(node.literal("borderColor"))
            )
            radius = node_value_expr(node, "cornerRadius", site.ctx, "0")
            return [
                Fragment.of(
                    ".overlay(",
                    f"    RoundedRectangle(cornerRadius: {radius})",
                    f"        .stroke({stroke}, lineWidth: {site.expr})",
                    ")",
                    key=key,
                )
            ]
        if key == "borderColor":
            return []

        if key == "shadow":
            if site.bound:
                return self.modifier(site, f".shadow(radius: {site.expr} ? 5 : 0)")
            return self.modifier(site, ".shadow(radius: 5)") if site.literal else []

        if key == "disabled":
            return self.modifier(site, f".disabled({site.expr})")

        if key in ("onClick", "onclick"):
            action = site.literal
            if not isinstance(action, str) or not action:
                return []
            return [
                Fragment.of(
                    ".onTapGesture {",
                    f"    viewModel.{action.rstrip(':')}()",
                    "}",
                    key=key,
                )
            ]

        if key in ("zIndex", "indexAbove", "indexBelow"):
            return self._z_order(site)

        if key == "tag":
            return self.modifier(site, f".tag({site.expr})")

        return None

    def _padding(self, site: PropertySite) -> list[Fragment]:
        value = site.value
        if not isinstance(value, ListValue):
            return self.modifier(site, f".padding({site.expr})")
        items = [render_value(item, site.ctx) for item in value.items]
        if len(items) == 1:
            return self.modifier(site, f".padding({items[0]})")
        if len(items) == 2:
            return [
                Fragment.of(f".padding(.vertical, {items[0]})", key=site.key),
                Fragment.of(f".padding(.horizontal, {items[1]})", key=site.key),
            ]
        if len(items) == 4:
            return [
                Fragment.of(f".padding({edge}, {item})", key=site.key)
                for edge, item in zip(_PADDING_EDGES, items)
            ]
        return []

    def _z_order(self, site: PropertySite) -> list[Fragment]:
        scope = site.scope
        if scope.z_emitted or scope.placement is None:
            return []
        scope.z_emitted = True
        return self.modifier(site, scope.placement.modifier())

    # -- Common properties (imperative) -------------------------------------------

    def imperative_common(self, site: PropertySite) -> Optional[list[Fragment]]:
        key = site.key
        view = site.view_name
        value = site.expr

        if key == "canTap":
            return self.assign(site, "canTap")
        if key == "visibility":
            return self.assign(site, "visibility")
        if key == "background":
            return self.statement(site, f"{view}?.setBackgroundColor(color: {value})")
        if key == "defaultBackground":
            return self.assign(site, "defaultBackgroundColor")
        if key == "disabledBackground":
            return self.assign(site, "disabledBackgroundColor")
        if key == "cornerRadius":
            return self.assign(site, "layer.cornerRadius")
        if key == "borderColor":
            return self.assign(site, "layer.borderColor")
        if key == "borderWidth":
            return self.assign(site, "layer.borderWidth")
        if key == "clipToBounds":
            return self.assign(site, "clipsToBounds")
        if key == "alpha":
            return self.assign(site, "alpha")
        if key == "zIndex":
            return self.assign(site, "layer.zPosition")
        if key == "bindingScript":
            return self.statement(site, value)
        if key in ("width", "height"):
            site.scope.reset_constraints = True
            target = _LAYOUT_PARAMS.get(site.binding.path if site.binding else "", value)
            return self.assign(site, f"constraintInfo?.{key}", target)
        if key in _CONSTRAINT_KEYS:
            site.scope.reset_constraints = True
            return self.assign(site, f"constraintInfo?.{key}")
        return None
