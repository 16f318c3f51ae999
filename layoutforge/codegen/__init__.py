"""Code generation: fragment assembly, z-order planning and template rendering.

Usage::

    from layoutforge.codegen import CodeAssembler, TemplateRenderer

    unit = CodeAssembler(ctx.mode).assemble(node, fragments, head=head)
    source = TemplateRenderer().render(DECLARATIVE_TEMPLATE, {...})
"""

from layoutforge.codegen.assembler import CodeAssembler, CompiledUnit
from layoutforge.codegen.templates import (
    DECLARATIVE_TEMPLATE,
    IMPERATIVE_TEMPLATE,
    TemplateRenderer,
)
from layoutforge.codegen.zorder import ZPlacement, plan_siblings

__all__ = [
    "CodeAssembler",
    "CompiledUnit",
    "DECLARATIVE_TEMPLATE",
    "IMPERATIVE_TEMPLATE",
    "TemplateRenderer",
    "ZPlacement",
    "plan_siblings",
]
