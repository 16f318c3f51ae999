"""Per-component-type code handlers.

Usage::

    from layoutforge.handlers import default_registry

    registry = default_registry()
    handler = registry.get_handler("label")      # LabelHandler
    fallback = registry.get_handler("Unknown")   # common properties only
"""

from layoutforge.handlers.base import (
    ComponentScope,
    Fragment,
    Guard,
    Handler,
    PropertySite,
    render_value,
    swift_literal,
)
from layoutforge.handlers.registry import BUILTIN_HANDLERS, HandlerRegistry, default_registry

__all__ = [
    "BUILTIN_HANDLERS",
    "ComponentScope",
    "Fragment",
    "Guard",
    "Handler",
    "HandlerRegistry",
    "PropertySite",
    "default_registry",
    "render_value",
    "swift_literal",
]
