"""Component type -> handler registry.

Type keys are case-folded before they are stored or looked up, and several
keys may point at one handler (``Label`` and ``Text`` share a handler).
Unknown types get the default :class:`~layoutforge.handlers.base.Handler`,
which supports the common properties only.
"""

from __future__ import annotations

from typing import Iterable, Optional

from layoutforge.handlers.base import Handler
from layoutforge.handlers.containers import (
    BlurHandler,
    CollectionHandler,
    GradientViewHandler,
    IncludeHandler,
    ScrollHandler,
    TableHandler,
    ViewHandler,
)
from layoutforge.handlers.controls import (
    ButtonHandler,
    IndicatorHandler,
    ProgressHandler,
    SliderHandler,
    WebHandler,
)
from layoutforge.handlers.media import CircleImageHandler, ImageHandler, NetworkImageHandler
from layoutforge.handlers.selector import SegmentHandler, SelectBoxHandler
from layoutforge.handlers.text import (
    IconLabelHandler,
    LabelHandler,
    TextFieldHandler,
    TextViewHandler,
)
from layoutforge.handlers.toggle import CheckHandler, RadioHandler, SwitchHandler

BUILTIN_HANDLERS: tuple[type[Handler], ...] = (
    LabelHandler,
    IconLabelHandler,
    ButtonHandler,
    TextFieldHandler,
    TextViewHandler,
    SwitchHandler,
    CheckHandler,
    RadioHandler,
    SelectBoxHandler,
    SegmentHandler,
    SliderHandler,
    ProgressHandler,
    IndicatorHandler,
    ImageHandler,
    CircleImageHandler,
    NetworkImageHandler,
    ViewHandler,
    ScrollHandler,
    GradientViewHandler,
    BlurHandler,
    CollectionHandler,
    TableHandler,
    WebHandler,
    IncludeHandler,
)


class HandlerRegistry:
    """Maps case-folded component type keys to handler instances."""

    def __init__(self, default: Optional[Handler] = None) -> None:
        self._handlers: dict[str, Handler] = {}
        self.default = default or Handler()

    def register(self, handler: Handler, type_names: Iterable[str] = ()) -> None:
        """Register *handler* under *type_names* (or its own ``type_names``)."""
        for name in tuple(type_names) or handler.type_names:
            self._handlers[name.casefold()] = handler

    def get_handler(self, type_key: str) -> Handler:
        """Handler for *type_key*, or the default handler."""
        return self._handlers.get(type_key.casefold(), self.default)

    def is_registered(self, type_key: str) -> bool:
        return type_key.casefold() in self._handlers

    def type_keys(self) -> list[str]:
        return sorted(self._handlers)


def default_registry() -> HandlerRegistry:
    """A fresh registry with every built-in handler registered."""
    registry = HandlerRegistry()
    for handler_class in BUILTIN_HANDLERS:
        registry.register(handler_class())
    return registry
