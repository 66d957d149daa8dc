"""Structural validation of context document XML.

Runs before the document parser and decides only whether loading may proceed.
It builds its own lightweight tree, independently of the streaming parser, so
documents that are well-formed XML but structurally wrong are rejected before
the more permissive parser sees them.

Checks, in order, stopping at the first failure:

1. the markup is well-formed;
2. the root element is ``<context>``;
3. ``<meta>``, ``<variables>`` and ``<sections>`` are present;
4. ``<meta>`` has all six required children and ``<app>`` carries
   ``name`` and ``version``;
5. every ``<section>`` under ``<sections>`` has an id and a known type, a
   unique id, a ``<content>`` child, and no nested ``<section>``.

Nesting is rejected here even though the document model, parser and
serializer all support nested sections.
"""

from typing import Final
from xml.etree import ElementTree

from flow_writer_core.documents import SECTION_TYPES
from flow_writer_core.exceptions import (
    DuplicateSectionIdError,
    InvalidSectionTypeError,
    MissingSectionAttributeError,
    MissingSectionContentError,
    NestedSectionError,
    SchemaParseError,
    SchemaStructureError,
)

ROOT_TAG: Final = "context"
REQUIRED_BLOCKS: Final = ("meta", "variables", "sections")
REQUIRED_META_ELEMENTS: Final = ("title", "author", "created", "app", "tags", "description")
REQUIRED_APP_ATTRIBUTES: Final = ("name", "version")


def _child(element: ElementTree.Element, tag: str) -> ElementTree.Element | None:
    return element.find(tag)


def _require_children(parent: ElementTree.Element, tags: tuple[str, ...], path: str) -> None:
    for tag in tags:
        if _child(parent, tag) is None:
            raise SchemaStructureError(f"missing <{tag}>: required element '{path}{tag}' is missing", element=tag)


def _validate_meta(meta: ElementTree.Element) -> None:
    _require_children(meta, REQUIRED_META_ELEMENTS, "meta/")

    app = _child(meta, "app")
    assert app is not None
    for attribute in REQUIRED_APP_ATTRIBUTES:
        if attribute not in app.attrib:
            raise SchemaStructureError(f"App element must have '{attribute}' attribute", element="app")


def _validate_sections(sections: ElementTree.Element) -> None:
    seen_ids: set[str] = set()

    for section in sections.findall("section"):
        section_id = section.get("id")
        if section_id is None:
            raise MissingSectionAttributeError("id")

        section_type = section.get("type")
        if section_type is None:
            raise MissingSectionAttributeError("type", section_id=section_id)

        if section_type not in SECTION_TYPES:
            raise InvalidSectionTypeError(section_id, section_type, SECTION_TYPES)

        if section_id in seen_ids:
            raise DuplicateSectionIdError(section_id)
        seen_ids.add(section_id)

        if _child(section, "content") is None:
            raise MissingSectionContentError(section_id)

        if _child(section, "section") is not None:
            raise NestedSectionError(section_id)


def validate_schema(xml_content: str) -> None:
    """Validate context document markup, raising on the first violation.

    @public

    Args:
        xml_content: Raw document text.

    Raises:
        SchemaParseError: The markup is not well-formed.
        SchemaStructureError: Wrong root, or a required element/attribute is missing.
        MissingSectionAttributeError: A section lacks ``id`` or ``type``.
        InvalidSectionTypeError: A section type is outside SECTION_TYPES.
        DuplicateSectionIdError: Two sections share an id.
        MissingSectionContentError: A section has no ``<content>``.
        NestedSectionError: A section contains another section.
    """
    try:
        root = ElementTree.fromstring(xml_content)
    except ElementTree.ParseError as e:
        raise SchemaParseError(f"XML parsing failed: {e}") from e

    if root.tag != ROOT_TAG:
        raise SchemaStructureError(
            f"bad root: root element must be '{ROOT_TAG}', found '{root.tag}'", element=root.tag
        )

    _require_children(root, REQUIRED_BLOCKS, "")

    meta = _child(root, "meta")
    assert meta is not None
    _validate_meta(meta)

    sections = _child(root, "sections")
    assert sections is not None
    _validate_sections(sections)


__all__ = ["REQUIRED_BLOCKS", "REQUIRED_META_ELEMENTS", "ROOT_TAG", "validate_schema"]
