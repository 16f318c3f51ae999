"""Component tree model.

Usage::

    from layoutforge.layout import load_layout

    root = load_layout("Layouts/profile.json")
    for child in root.iter_children():
        print(child.type, list(child.properties))
"""

from layoutforge.layout.loader import load_layout, parse_layout, view_name_for
from layoutforge.layout.models import (
    Binding,
    ChildSlot,
    ComponentNode,
    DataDeclaration,
    ListValue,
    ObjectValue,
    PropertyValue,
    Scalar,
    contains_binding,
    value_from_json,
    walk,
)

__all__ = [
    "Binding",
    "ChildSlot",
    "ComponentNode",
    "DataDeclaration",
    "ListValue",
    "ObjectValue",
    "PropertyValue",
    "Scalar",
    "contains_binding",
    "load_layout",
    "parse_layout",
    "value_from_json",
    "view_name_for",
    "walk",
]
