"""Container handlers: stacks, scroll views, lists and partial includes."""

from __future__ import annotations

from layoutforge.handlers.base import Handler, hex_to_color, node_value_expr
from layoutforge.layout.models import ListValue
from layoutforge.utils import to_pascal

_GRADIENT_DIRECTIONS = {
    "Horizontal": "startPoint: .leading, endPoint: .trailing",
    "Oblique": "startPoint: .topLeading, endPoint: .bottomTrailing",
}
_DEFAULT_GRADIENT_DIRECTION = "startPoint: .top, endPoint: .bottom"


def stack_head(node) -> str:
    """Stack opening line chosen by ``orientation``."""
    orientation = node.literal("orientation")
    if orientation == "vertical":
        return "VStack(alignment: .leading, spacing: 0) {"
    if orientation == "horizontal":
        return "HStack(alignment: .top, spacing: 0) {"
    return "ZStack(alignment: .topLeading) {"


class ViewHandler(Handler):
    type_names = ("View", "SafeAreaView")
    view_class = "SJUIView"

    def construct(self, node, body, ctx):
        return [stack_head(node), *body, "}"]

    def declarative_specific(self, site):
        if site.key in ("orientation", "direction"):
            return []
        return None


class GradientViewHandler(ViewHandler):
    type_names = ("GradientView",)
    view_class = "GradientView"

    def declarative_specific(self, site):
        if site.key == "gradient" and isinstance(site.value, ListValue):
            colors = ", ".join(hex_to_color(item.to_json()) for item in site.value.items)
            direction = _GRADIENT_DIRECTIONS.get(
                site.node.literal("gradientDirection"), _DEFAULT_GRADIENT_DIRECTION
            )
            return self.modifier(
                site, f".background(LinearGradient(colors: [{colors}], {direction}))"
            )
        if site.key == "gradientDirection":
            return []
        return super().declarative_specific(site)


class BlurHandler(ViewHandler):
    type_names = ("Blur",)
    view_class = "SJUIVisualEffectView"

    def construct(self, node, body, ctx):
        return [*super().construct(node, body, ctx), "    .background(.ultraThinMaterial)"]

    def declarative_specific(self, site):
        if site.key == "effectStyle":
            if site.literal == "Dark":
                return self.modifier(site, ".preferredColorScheme(.dark)")
            if site.literal == "Light":
                return self.modifier(site, ".preferredColorScheme(.light)")
            return []
        return super().declarative_specific(site)


class ScrollHandler(Handler):
    type_names = ("Scroll", "ScrollView")
    view_class = "SJUIScrollView"

    def construct(self, node, body, ctx):
        axis = ".horizontal" if node.literal("orientation") == "horizontal" else ".vertical"
        return [f"ScrollView({axis}) {{", *body, "}"]

    def declarative_specific(self, site):
        if site.key == "orientation":
            return []
        if site.key == "scrollEnabled":
            return self.modifier(site, f".scrollDisabled(!{site.expr})")
        return None

    def imperative_specific(self, site):
        if site.key == "scrollEnabled":
            return self.assign(site, "isScrollEnabled")
        if site.key == "maxZoom":
            return self.assign(site, "maximumZoomScale")
        if site.key == "minZoom":
            return self.assign(site, "minimumZoomScale")
        return None


class CollectionHandler(Handler):
    type_names = ("Collection",)
    view_class = "SJUICollectionView"

    def construct(self, node, body, ctx):
        columns = node_value_expr(node, "columns", ctx, "2")
        spacing = node_value_expr(node, "itemSpacing", ctx, "10")
        cells = body or [f"    // Cell layout: {node.literal('cellClasses', 'none')}"]
        return [
            f"LazyVGrid(columns: Array(repeating: GridItem(.flexible()), count: {columns}),"
            f" spacing: {spacing}) {{",
            *cells,
            "}",
        ]

    def declarative_specific(self, site):
        if site.key in ("columns", "itemSpacing", "cellClasses"):
            return []
        return None


class TableHandler(Handler):
    type_names = ("Table",)
    view_class = "SJUITableView"

    def construct(self, node, body, ctx):
        return ["List {", *body, "}", "    .listStyle(.plain)"]

    def declarative_specific(self, site):
        if site.key == "separatorStyle":
            if site.literal == "None":
                return self.modifier(site, ".listRowSeparator(.hidden)")
            return []
        return None


class IncludeHandler(Handler):
    """A partial layout compiled on its own and referenced by name."""

    type_names = ("Include",)
    view_class = "UIView"

    @staticmethod
    def include_path(node) -> str:
        """The included layout, relative to the layouts directory."""
        include = node.literal("include", "")
        return include if isinstance(include, str) else ""

    @classmethod
    def partial_name(cls, node) -> str:
        return to_pascal(cls.include_path(node))

    def construct(self, node, body, ctx):
        return [f"{self.partial_name(node)}View(viewModel: viewModel)"]

    def declarative_specific(self, site):
        if site.key in ("include", "variables", "shared_data"):
            return []
        return None
