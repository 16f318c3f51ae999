"""Per-component assembly of handler fragments into code.

Fragments are concatenated exactly in the order they arrive: property
fragments in source property order, then finalizers.  Nothing is
reordered or deduplicated; when two fragments set the same thing, the
later one wins at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from layoutforge.config import OutputMode
from layoutforge.handlers.base import Fragment, Guard
from layoutforge.layout.models import ComponentNode
from layoutforge.utils import indent_lines

MODIFIER_INDENT = 4


@dataclass
class CompiledUnit:
    """The code produced for one component."""

    node: ComponentNode
    view_name: str
    lines: list[str] = field(default_factory=list)
    fragments: list[Fragment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def empty(self) -> bool:
        return not self.lines


class CodeAssembler:
    """Joins fragments into a modifier chain or a statement sequence."""

    def __init__(self, mode: OutputMode) -> None:
        self.mode = OutputMode(mode)

    def assemble(
        self,
        node: ComponentNode,
        fragments: Sequence[Fragment],
        head: Optional[Sequence[str]] = None,
        view_name: str = "",
    ) -> CompiledUnit:
        """Build the unit for *node*.

        Args:
            node: The component the fragments belong to.
            fragments: Property fragments followed by finalizers.
            head: Declarative constructor lines the modifiers chain onto.
            view_name: Target-language name of the view.
        """
        if self.mode is OutputMode.DECLARATIVE:
            lines = list(head or [])
            for fragment in fragments:
                lines.extend(indent_lines(list(fragment.lines), MODIFIER_INDENT))
        else:
            lines = []
            for fragment in fragments:
                lines.extend(self._statement(fragment))
        return CompiledUnit(
            node=node,
            view_name=view_name,
            lines=lines,
            fragments=list(fragments),
        )

    @staticmethod
    def _statement(fragment: Fragment) -> list[str]:
        if fragment.guard is Guard.UNINITIALIZED:
            return [
                "if !isInitialized {",
                *indent_lines(list(fragment.lines), 4),
                "}",
            ]
        return list(fragment.lines)
