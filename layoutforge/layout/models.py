"""In-memory model of one parsed layout tree.

Property values form a closed union of four frozen dataclasses --
:class:`Scalar`, :class:`Binding`, :class:`ObjectValue` and
:class:`ListValue` -- so the style merge and the handlers can dispatch on the
variant instead of probing raw JSON types.  Nodes are frozen as well: a tree
is built once per file, resolved, and then only read.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from layoutforge.binding import BindingExpression, parse

# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Scalar:
    """A literal string, number, boolean or null."""

    value: Any

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Binding:
    """A ``@{path}`` reference, parsed once when the tree is built."""

    expression: BindingExpression

    def to_json(self) -> Any:
        return self.expression.raw


@dataclass(frozen=True)
class ObjectValue:
    """A nested JSON object; entries keep source order."""

    entries: dict[str, "PropertyValue"] = field(default_factory=dict)

    def to_json(self) -> Any:
        return {k: v.to_json() for k, v in self.entries.items()}


@dataclass(frozen=True)
class ListValue:
    """An ordered JSON array.  Merges replace lists wholesale."""

    items: tuple["PropertyValue", ...] = ()

    def to_json(self) -> Any:
        return [item.to_json() for item in self.items]


PropertyValue = Union[Scalar, Binding, ObjectValue, ListValue]


def value_from_json(raw: Any) -> PropertyValue:
    """Convert a decoded JSON value into a :data:`PropertyValue`."""
    if isinstance(raw, dict):
        return ObjectValue({str(k): value_from_json(v) for k, v in raw.items()})
    if isinstance(raw, list):
        return ListValue(tuple(value_from_json(v) for v in raw))
    expression = parse(raw)
    if expression is not None:
        return Binding(expression)
    return Scalar(raw)


def contains_binding(value: PropertyValue) -> bool:
    """Return ``True`` if *value* is, or nests, a binding expression."""
    if isinstance(value, Binding):
        return True
    if isinstance(value, ObjectValue):
        return any(contains_binding(v) for v in value.entries.values())
    if isinstance(value, ListValue):
        return any(contains_binding(v) for v in value.items)
    return False


# ---------------------------------------------------------------------------
# Data declarations
# ---------------------------------------------------------------------------


class DataDeclaration(BaseModel):
    """A reactive data field declared inside a layout (``{"data": [...]}``)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Field name")
    class_name: str = Field(default="String", alias="class", description="Field type")
    default_value: Optional[str] = Field(
        default=None, alias="defaultValue", description="Default value expression"
    )


def _declarations_from_json(raw: Any) -> tuple[DataDeclaration, ...]:
    if not isinstance(raw, list):
        return ()
    declarations = []
    for entry in raw:
        if isinstance(entry, dict) and isinstance(entry.get("name"), str):
            payload = dict(entry)
            default = payload.get("defaultValue")
            if isinstance(default, bool):
                payload["defaultValue"] = "true" if default else "false"
            elif default is not None:
                payload["defaultValue"] = str(default)
            try:
                declarations.append(DataDeclaration.model_validate(payload))
            except ValidationError:
                continue
    return tuple(declarations)


# ---------------------------------------------------------------------------
# Component nodes
# ---------------------------------------------------------------------------

# Keys that are structural rather than properties.
RESERVED_KEYS = frozenset({"type", "id", "style", "child", "children", "data"})


@dataclass(frozen=True)
class ChildSlot:
    """One child container (``child`` or ``children``).

    ``single`` remembers whether the source held one object instead of a list
    so the tree can be written back unchanged.
    """

    nodes: tuple["ComponentNode", ...] = ()
    single: bool = False

    def to_json(self) -> Any:
        if self.single and len(self.nodes) == 1:
            return self.nodes[0].to_json()
        return [node.to_json() for node in self.nodes]

    @classmethod
    def from_json(cls, raw: Any) -> Optional["ChildSlot"]:
        if isinstance(raw, dict):
            return cls(nodes=(ComponentNode.from_json(raw),), single=True)
        if isinstance(raw, list):
            nodes = tuple(ComponentNode.from_json(c) for c in raw if isinstance(c, dict))
            return cls(nodes=nodes, single=False)
        return None


@dataclass(frozen=True)
class ComponentNode:
    """One component in a layout tree."""

    type: str = ""
    id: Optional[str] = None
    style: Optional[str] = None
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    child: Optional[ChildSlot] = None
    children: Optional[ChildSlot] = None
    data: tuple[DataDeclaration, ...] = ()

    # -- Queries -------------------------------------------------------------

    @property
    def type_key(self) -> str:
        """Case-folded dispatch key."""
        return self.type.casefold()

    @property
    def is_data_declaration(self) -> bool:
        """A typeless node that only declares data fields."""
        return not self.type and bool(self.data)

    def iter_children(self) -> Iterator["ComponentNode"]:
        """Yield children from ``child`` then ``children``, in source order."""
        for slot in (self.child, self.children):
            if slot is not None:
                yield from slot.nodes

    def view_children(self) -> list["ComponentNode"]:
        """Children that render as views (data declarations excluded)."""
        return [c for c in self.iter_children() if not c.is_data_declaration]

    def get(self, key: str) -> Optional[PropertyValue]:
        return self.properties.get(key)

    def literal(self, key: str, default: Any = None) -> Any:
        """Return the raw scalar at *key*, or *default* if absent or not scalar."""
        value = self.properties.get(key)
        if isinstance(value, Scalar) and value.value is not None:
            return value.value
        return default

    def binding(self, key: str) -> Optional[BindingExpression]:
        value = self.properties.get(key)
        if isinstance(value, Binding):
            return value.expression
        return None

    def with_changes(self, **changes: Any) -> "ComponentNode":
        return replace(self, **changes)

    # -- JSON conversion -----------------------------------------------------

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.id is not None:
            out["id"] = self.id
        if self.style is not None:
            out["style"] = self.style
        for key, value in self.properties.items():
            out[key] = value.to_json()
        if self.data:
            out["data"] = [d.model_dump(by_alias=True, exclude_none=True) for d in self.data]
        if self.child is not None:
            out["child"] = self.child.to_json()
        if self.children is not None:
            out["children"] = self.children.to_json()
        return out

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> "ComponentNode":
        """Build a node (and its subtree) from a decoded JSON object."""
        node_type = raw.get("type")
        if not isinstance(node_type, str):
            node_type = "Include" if isinstance(raw.get("include"), str) else ""
        node_id = raw.get("id")
        style = raw.get("style")
        properties = {
            key: value_from_json(value)
            for key, value in raw.items()
            if key not in RESERVED_KEYS
        }
        return cls(
            type=node_type,
            id=node_id if isinstance(node_id, str) else None,
            style=style if isinstance(style, str) else None,
            properties=properties,
            child=ChildSlot.from_json(raw["child"]) if "child" in raw else None,
            children=ChildSlot.from_json(raw["children"]) if "children" in raw else None,
            data=_declarations_from_json(raw.get("data")),
        )


def walk(node: ComponentNode) -> Iterator[ComponentNode]:
    """Depth-first, pre-order traversal of a tree."""
    yield node
    for child in node.iter_children():
        yield from walk(child)
