"""Streaming XML reader for context documents.

The reader consumes parser events rather than building a full document tree.
The four blocks (``meta``, ``variables``, ``sections``, ``flow``) are
recognized in any order wherever they start outside another block, including
inside unknown wrapper elements. Each block is converted to models when its
end tag arrives, and its subtree is released. Unknown elements are skipped.
When a block appears more than once the last occurrence wins.

The parser is deliberately more permissive than the schema validator: nested
sections become ``Section.children`` at any depth.

Tags are split on ``,`` and empty entries are dropped, so ``"a, , b"`` reads
as ``["a", "b"]``. Earlier writers of the format kept the empty entries.
"""

from collections.abc import Callable
from typing import Any, Final

from lxml import etree

from flow_writer_core.documents import (
    AppInfo,
    ContextDocument,
    FlowGraph,
    MetaData,
    Section,
    Variable,
)
from flow_writer_core.exceptions import InvalidMarkupError, MissingRequiredFieldError
from flow_writer_core.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)

FEED_CHUNK_SIZE: Final = 64 * 1024
TAGS_SEPARATOR: Final = ","


def _text(element: Any | None) -> str:
    """Trimmed text of an element; CDATA is already merged into ``.text``."""
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _parse_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(TAGS_SEPARATOR) if tag.strip()]


def _parse_meta(element: Any) -> MetaData:
    app = element.find("app")
    if app is None:
        raise MissingRequiredFieldError("app")

    return MetaData(
        title=_text(element.find("title")),
        author=_text(element.find("author")),
        created=_text(element.find("created")),
        app_info=AppInfo(name=app.get("name", ""), version=app.get("version", "")),
        tags=_parse_tags(_text(element.find("tags"))),
        description=_text(element.find("description")),
    )


def _parse_variables(element: Any) -> list[Variable]:
    # Self-closing <var name="x"/> has no text and yields an empty value.
    return [Variable(name=var.get("name", ""), value=_text(var)) for var in element.iterchildren("var")]


def _parse_section(element: Any) -> Section:
    return Section(
        id=element.get("id", ""),
        section_type=element.get("type", ""),
        ref_target=element.get("refTarget"),
        content=_text(element.find("content")),
        children=[_parse_section(child) for child in element.iterchildren("section")],
    )


def _parse_sections(element: Any) -> list[Section]:
    return [_parse_section(section) for section in element.iterchildren("section")]


def _parse_flow(element: Any) -> FlowGraph:
    title = element.find("title")
    return FlowGraph(
        id=element.get("id", ""),
        version=element.get("version", ""),
        title=_text(title) if title is not None else None,
        mermaid_code=_text(element.find("diagram")),
    )


_BLOCK_PARSERS: dict[str, Callable[[Any], Any]] = {
    "meta": _parse_meta,
    "variables": _parse_variables,
    "sections": _parse_sections,
    "flow": _parse_flow,
}


def _new_pull_parser() -> etree.XMLPullParser:
    # Input is always fed as UTF-8; the document's own declaration is ignored.
    return etree.XMLPullParser(
        events=("start", "end"),
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
    )


def parse_document(xml_content: str | bytes) -> ContextDocument:
    """Parse context document XML into a ContextDocument.

    @public

    Variable placeholders are left unresolved and the flow graph's derived
    view is empty; both are filled in by later pipeline stages.

    Args:
        xml_content: Document text. Bytes are decoded as UTF-8, replacing
                     invalid sequences instead of failing.

    Returns:
        The parsed document.

    Raises:
        InvalidMarkupError: Syntax error or premature end of input.
        MissingRequiredFieldError: No ``meta`` block, or ``meta`` without ``app``.
    """
    if isinstance(xml_content, bytes):
        xml_content = xml_content.decode("utf-8", errors="replace")
    data = xml_content.encode("utf-8")

    parser = _new_pull_parser()
    blocks: dict[str, Any] = {}
    depth = 0
    block_depth: int | None = None  # depth of the block being read

    def _drain() -> None:
        nonlocal depth, block_depth
        for event, element in parser.read_events():
            if event == "start":
                depth += 1
                if block_depth is None and element.tag in _BLOCK_PARSERS:
                    block_depth = depth
                continue
            if depth == block_depth:
                if element.tag in blocks:
                    logger.warning(f"Block <{element.tag}> appears more than once, keeping the last one")
                blocks[element.tag] = _BLOCK_PARSERS[element.tag](element)
                element.clear(keep_tail=True)
                block_depth = None
            depth -= 1

    try:
        for offset in range(0, len(data), FEED_CHUNK_SIZE):
            parser.feed(data[offset : offset + FEED_CHUNK_SIZE])
            _drain()
        parser.close()
        _drain()
    except etree.XMLSyntaxError as e:
        raise InvalidMarkupError(str(e)) from e

    if "meta" not in blocks:
        raise MissingRequiredFieldError("meta")

    document = ContextDocument(
        meta=blocks["meta"],
        variables=blocks.get("variables", []),
        sections=blocks.get("sections", []),
        flow_graph=blocks.get("flow"),
    )
    logger.debug(
        f"Parsed document '{document.meta.title}': {len(document.variables)} variables, "
        f"{len(document.sections)} top-level sections, flow={'yes' if document.flow_graph else 'no'}"
    )
    return document


__all__ = ["parse_document"]
