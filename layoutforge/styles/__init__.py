"""Style resolution: loading named style documents and merging them into
component nodes before code generation.

Usage::

    from layoutforge.styles import StyleResolver

    resolved = StyleResolver(ctx, source="profile.json").resolve(root)
"""

from layoutforge.styles.merge import merge_properties, merge_values
from layoutforge.styles.resolver import StyleCache, StyleDocument, StyleResolver

__all__ = [
    "StyleCache",
    "StyleDocument",
    "StyleResolver",
    "merge_properties",
    "merge_values",
]
