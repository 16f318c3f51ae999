"""Relative z-order planning for one group of siblings.

A node may place itself ``indexAbove`` or ``indexBelow`` a sibling id
instead of giving an absolute ``zIndex``.  When every reference names a
sibling that is statically known, the order values are computed here by a
fixed-point iteration:

* every node with an id publishes its value into a shared map; when two
  nodes share an id the later one wins;
* each round, every node recomputes its value from the *previous* round's
  map: above a resolved target is ``target + 1``, below is ``target - 1``,
  an unresolved target gives ``+1`` / ``-1``;
* rounds repeat until nothing changes, at most ``len(group) + 1`` times.

References to ids outside the group, or bound references, cannot be
resolved at compile time.  Those nodes get the runtime ``.zOrder`` modifier,
which performs the same convergence inside the view framework.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from layoutforge.diagnostics import DiagnosticCode
from layoutforge.handlers.base import render_value
from layoutforge.layout.models import Binding, ComponentNode
from layoutforge.utils import swift_string

if TYPE_CHECKING:
    from layoutforge.context import CompilationContext

Number = Union[int, float]

Z_KEYS = ("zIndex", "indexAbove", "indexBelow")


@dataclass(frozen=True)
class ZPlacement:
    """How one node is ordered among its siblings.

    Exactly one of ``value`` (static result), ``expression`` (bound
    ``zIndex``) or ``node_id`` (runtime convergence) is set.
    """

    value: Optional[Number] = None
    expression: Optional[str] = None
    node_id: Optional[str] = None
    above: Optional[str] = None
    below: Optional[str] = None

    @property
    def static(self) -> bool:
        return self.value is not None

    def modifier(self) -> str:
        if self.value is not None:
            return f".zIndex({self.value})"
        if self.expression is not None:
            return f".zIndex({self.expression})"
        return (
            f".zOrder(id: {self.node_id}, indexAbove: {self.above or 'nil'},"
            f" indexBelow: {self.below or 'nil'})"
        )


def _reference(node: ComponentNode, key: str) -> Optional[str]:
    target = node.literal(key)
    return target if isinstance(target, str) and target else None


def _is_runtime(node: ComponentNode, sibling_ids: set[str]) -> bool:
    for key in ("indexAbove", "indexBelow"):
        value = node.get(key)
        if isinstance(value, Binding):
            return True
        target = _reference(node, key)
        if target is not None and target not in sibling_ids:
            return True
    return False


def _runtime_placement(node: ComponentNode, ctx: "CompilationContext") -> ZPlacement:
    def ref(key: str) -> Optional[str]:
        value = node.get(key)
        return render_value(value, ctx) if value is not None else None

    return ZPlacement(
        node_id=swift_string(node.id or ""),
        above=ref("indexAbove"),
        below=ref("indexBelow"),
    )


def _seed(node: ComponentNode) -> Number:
    value = node.literal("zIndex", 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _step(node: ComponentNode, shared: dict[str, Number]) -> Number:
    above = _reference(node, "indexAbove")
    if above is not None:
        return shared[above] + 1 if above in shared else 1
    below = _reference(node, "indexBelow")
    if below is not None:
        return shared[below] - 1 if below in shared else -1
    return _seed(node)


def _publish(nodes: list[ComponentNode], values: list[Optional[Number]]) -> dict[str, Number]:
    shared: dict[str, Number] = {}
    for node, value in zip(nodes, values):
        if node.id is not None and value is not None:
            shared[node.id] = value
    return shared


def plan_siblings(
    siblings: list[ComponentNode],
    ctx: "CompilationContext",
    source: str = "",
) -> dict[int, ZPlacement]:
    """Plan z-order for one sibling group.

    Returns:
        Placements keyed by the node's index in *siblings*; nodes that take
        no part in z-ordering are absent.
    """
    participants = [
        i for i, node in enumerate(siblings) if any(node.get(k) is not None for k in Z_KEYS)
    ]
    if not participants:
        return {}

    sibling_ids = {node.id for node in siblings if node.id is not None}
    placements: dict[int, ZPlacement] = {}
    static: list[int] = []
    for i in participants:
        node = siblings[i]
        if _is_runtime(node, sibling_ids):
            placements[i] = _runtime_placement(node, ctx)
        elif isinstance(node.get("zIndex"), Binding) and not (
            _reference(node, "indexAbove") or _reference(node, "indexBelow")
        ):
            placements[i] = ZPlacement(expression=render_value(node.properties["zIndex"], ctx))
        else:
            static.append(i)

    if not static:
        return placements

    # Siblings without relative references publish their fixed order (0 if
    # unset); relatively placed ones publish only once computed.
    values: list[Optional[Number]] = [None] * len(siblings)
    for i, node in enumerate(siblings):
        if i not in placements and i not in static:
            values[i] = _seed(node)
    rounds = len(siblings) + 1
    shared = _publish(siblings, values)
    converged = False
    for _ in range(rounds):
        updated = list(values)
        for i in static:
            updated[i] = _step(siblings[i], shared)
        if updated == values:
            converged = True
            break
        values = updated
        shared = _publish(siblings, values)

    if not converged:
        chain = ", ".join(siblings[i].id or f"#{i}" for i in static)
        ctx.warn(
            DiagnosticCode.ZORDER_NOT_CONVERGED,
            f"Relative z-order did not converge after {rounds} rounds: {chain}",
            source,
        )

    for i in static:
        placements[i] = ZPlacement(value=values[i])
    return placements
