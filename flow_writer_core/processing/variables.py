"""Template variable substitution for section content.

Placeholders have the form ``${name}`` where ``name`` starts with a letter or
underscore followed by letters, digits or underscores. Resolution is a single
textual pass: unknown names are left as-is, placeholder syntax included, and
substituted values are not scanned again.
"""

import re
from collections.abc import Iterable, Mapping

from flow_writer_core.documents import Section, Variable

PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def build_variable_map(variables: Iterable[Variable]) -> dict[str, str]:
    """Reduce variables to a name -> value mapping; later duplicates win."""
    return {variable.name: variable.value for variable in variables}


def resolve_variables(text: str, variables: Mapping[str, str]) -> str:
    """Replace every ``${name}`` whose name is in ``variables``.

    Args:
        text: Text that may contain placeholders.
        variables: Name to value mapping.

    Returns:
        The text with known placeholders replaced. Never raises.

    Example:
        >>> resolve_variables("Hello ${userName}, ${missing}", {"userName": "Jeremy"})
        'Hello Jeremy, ${missing}'
    """

    def _replace(match: re.Match[str]) -> str:
        return variables.get(match.group(1), match.group(0))

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def resolve_section_tree(sections: list[Section], variables: Mapping[str, str]) -> list[Section]:
    """Resolve placeholders in the content of every section, at any depth.

    Traverses in pre-order and returns a new tree; ids, types and ref targets
    are untouched.
    """
    return [
        section.model_copy(
            update={
                "content": resolve_variables(section.content, variables),
                "children": resolve_section_tree(section.children, variables),
            }
        )
        for section in sections
    ]


def find_placeholders(text: str) -> list[str]:
    """Return placeholder names in order of appearance, without duplicates."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(text)))


def unresolved_placeholders(sections: list[Section], variables: Mapping[str, str]) -> dict[str, list[str]]:
    """Map section id -> placeholder names that have no value in ``variables``."""
    missing: dict[str, list[str]] = {}
    for section in sections:
        names = [name for name in find_placeholders(section.content) if name not in variables]
        if names:
            missing[section.id] = names
        missing.update(unresolved_placeholders(section.children, variables))
    return missing


__all__ = [
    "PLACEHOLDER_PATTERN",
    "build_variable_map",
    "find_placeholders",
    "resolve_section_tree",
    "resolve_variables",
    "unresolved_placeholders",
]
