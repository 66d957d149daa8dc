"""Content processing applied to parsed documents."""

from .variables import (
    build_variable_map,
    find_placeholders,
    resolve_section_tree,
    resolve_variables,
    unresolved_placeholders,
)

__all__ = [
    "build_variable_map",
    "find_placeholders",
    "resolve_section_tree",
    "resolve_variables",
    "unresolved_placeholders",
]
