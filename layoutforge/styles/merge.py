"""Right-biased deep merge over property values.

* object / object -> merged key-wise, recursively
* list / list     -> override replaces the base wholesale
* anything else   -> override wins
"""

from __future__ import annotations

from typing import Mapping

from layoutforge.layout.models import ObjectValue, PropertyValue


def merge_values(base: PropertyValue, override: PropertyValue) -> PropertyValue:
    """Merge two values; *override* wins wherever they conflict."""
    if isinstance(base, ObjectValue) and isinstance(override, ObjectValue):
        return ObjectValue(merge_properties(base.entries, override.entries))
    return override


def merge_properties(
    base: Mapping[str, PropertyValue],
    override: Mapping[str, PropertyValue],
) -> dict[str, PropertyValue]:
    """Merge two property maps.

    Keys keep the base's order, followed by keys only present in *override*
    in their own order.
    """
    result = dict(base)
    for key, value in override.items():
        if key in result:
            result[key] = merge_values(result[key], value)
        else:
            result[key] = value
    return result
