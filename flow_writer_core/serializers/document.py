"""Render a ContextDocument back to the on-disk XML format.

Output is deterministic: a declaration line naming the target encoding, two-space indentation,
section bodies and diagram source wrapped in CDATA padded with newlines.
Derived flow graph state is never written.
"""

import codecs
from typing import Final

from lxml import etree

from flow_writer_core.documents import ContextDocument, FlowGraph, MetaData, Section, Variable
from flow_writer_core.exceptions import SerializationError

XML_DECLARATION: Final = '<?xml version="1.0" encoding="{encoding}"?>'
FORMAT_VERSION: Final = "1.0"
TAGS_JOINER: Final = ", "
CDATA_END: Final = "]]>"

# Python codec names mapped to the names XML declarations use.
DECLARED_ENCODINGS: Final = {
    "utf-8": "UTF-8",
    "utf-16": "UTF-16",
    "ascii": "US-ASCII",
    "iso8859-1": "ISO-8859-1",
    "iso8859-15": "ISO-8859-15",
    "cp1252": "windows-1252",
}


def _literal_block(text: str) -> str | etree.CDATA:
    """Wrap stripped text as ``\\n<text>\\n`` CDATA.

    Text containing ``]]>`` cannot live in a single CDATA section; it is
    returned as plain text and escaped by the writer instead.
    """
    body = f"\n{text.strip()}\n"
    if CDATA_END in body:
        return body
    return etree.CDATA(body)


def _text_child(parent: etree._Element, tag: str, text: str) -> etree._Element:
    child = etree.SubElement(parent, tag)
    child.text = text
    return child


def _add_meta(root: etree._Element, meta: MetaData) -> None:
    element = etree.SubElement(root, "meta")
    _text_child(element, "title", meta.title)
    _text_child(element, "author", meta.author)
    _text_child(element, "created", meta.created)
    etree.SubElement(element, "app", name=meta.app_info.name, version=meta.app_info.version)
    _text_child(element, "tags", TAGS_JOINER.join(meta.tags))
    _text_child(element, "description", meta.description)


def _add_variables(root: etree._Element, variables: list[Variable]) -> None:
    element = etree.SubElement(root, "variables")
    for variable in variables:
        var = etree.SubElement(element, "var", name=variable.name)
        var.text = variable.value


def _add_section(parent: etree._Element, section: Section) -> None:
    element = etree.SubElement(parent, "section", id=section.id, type=section.section_type)
    if section.ref_target is not None:
        element.set("refTarget", section.ref_target)
    content = etree.SubElement(element, "content")
    content.text = _literal_block(section.content)
    for child in section.children:
        _add_section(element, child)


def _add_flow(root: etree._Element, flow: FlowGraph) -> None:
    element = etree.SubElement(root, "flow", id=flow.id, version=flow.version)
    if flow.title is not None:
        _text_child(element, "title", flow.title)
    diagram = etree.SubElement(element, "diagram")
    diagram.text = _literal_block(flow.mermaid_code)


def _declared_encoding(encoding: str) -> str:
    try:
        name = codecs.lookup(encoding).name
    except LookupError as e:
        raise SerializationError(f"Unknown encoding: {encoding}") from e
    return DECLARED_ENCODINGS.get(name, name.upper())


def serialize_document(doc: ContextDocument, encoding: str = "utf-8") -> str:
    """Serialize a document to XML text.

    @public

    Sections are written with exactly the nesting they have in memory; no
    flatness check is applied here. Tags are joined with ``", "``, so a tag
    that itself contains that separator comes back split on the next load.

    Args:
        doc: Document to render.
        encoding: Encoding the text will be written in. It is named in the
                  declaration, and every character must be representable in it.

    Returns:
        XML text ending with a newline.

    Raises:
        SerializationError: Some text cannot be represented in XML, such as
                            control characters, or in the target encoding.
    """
    declared = _declared_encoding(encoding)
    try:
        root = etree.Element("context", version=FORMAT_VERSION)
        _add_meta(root, doc.meta)
        _add_variables(root, doc.variables)
        sections = etree.SubElement(root, "sections")
        for section in doc.sections:
            _add_section(sections, section)
        if doc.flow_graph is not None:
            _add_flow(root, doc.flow_graph)
        body = etree.tostring(root, encoding="unicode", pretty_print=True)
        body.encode(encoding)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"Cannot serialize document '{doc.meta.title}': {e}") from e

    return f"{XML_DECLARATION.format(encoding=declared)}\n{body}"


__all__ = ["serialize_document"]
