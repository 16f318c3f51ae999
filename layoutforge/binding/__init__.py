"""Binding expression parser.

Usage::

    from layoutforge.binding import parse, is_binding

    expr = parse("@{user.name}")
    print(expr.path)             # "user.name"
    is_binding("pre @{x} post")  # False
"""

from layoutforge.binding.expression import BindingExpression, is_binding, parse

__all__ = [
    "BindingExpression",
    "is_binding",
    "parse",
]
