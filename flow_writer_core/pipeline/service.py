"""Document pipeline: load, resolve, enrich and save context documents.

Each call reads the file from scratch; nothing is cached between calls. The
only blocking work, reading and writing the file, runs in a worker thread via
``asyncio.to_thread``. Validation, parsing, resolution and serialization are
in-memory and run inline.

Concurrent saves to the same path are not coordinated: the last writer wins.
"""

import asyncio
import os
import tempfile
from pathlib import Path

from flow_writer_core.documents import ContextDocument, FlowGraph, MetaData, Section
from flow_writer_core.exceptions import (
    DocumentIOError,
    DocumentNotFoundError,
    InvalidMarkupError,
    MissingRequiredFieldError,
    SchemaValidationError,
)
from flow_writer_core.logging import get_pipeline_logger
from flow_writer_core.parsers import enrich_flow_graph, parse_document
from flow_writer_core.processing import (
    build_variable_map,
    resolve_section_tree,
    unresolved_placeholders,
)
from flow_writer_core.serializers import serialize_document
from flow_writer_core.settings import settings
from flow_writer_core.validation import validate_schema

logger = get_pipeline_logger(__name__)


# --- Sync implementation (called via asyncio.to_thread) ---


def _read_text_sync(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise DocumentNotFoundError(f"Context document not found: {path}") from e
    except OSError as e:
        raise DocumentIOError(f"Failed to read context document {path}: {e}") from e
    try:
        return raw.decode(settings.file_encoding, errors="replace")
    except LookupError as e:
        raise DocumentIOError(f"Cannot decode context document {path}: {e}") from e


def _write_text_sync(path: Path, data: bytes) -> None:
    try:
        if settings.atomic_save:
            _replace_atomically(path, data)
        else:
            path.write_bytes(data)
    except OSError as e:
        raise DocumentIOError(f"Failed to write context document {path}: {e}") from e


def _replace_atomically(path: Path, data: bytes) -> None:
    """Write to a temporary file next to ``path`` and rename it over ``path``."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# --- Pipeline stages ---


async def _read_document(path: Path) -> ContextDocument:
    """Read, validate and parse a document without resolving variables."""
    text = await asyncio.to_thread(_read_text_sync, path)
    try:
        validate_schema(text)
        return parse_document(text)
    except (SchemaValidationError, InvalidMarkupError, MissingRequiredFieldError) as e:
        logger.warning(f"Rejected context document {path}: {e}")
        raise


async def load_context_document(path: str | Path) -> ContextDocument:
    """Load a context document with variables resolved in every section.

    @public

    Args:
        path: Document file path.

    Returns:
        A fresh ContextDocument. Section content has ``${name}`` placeholders
        replaced from the document's variables; unknown names are left as-is.
        The flow graph, if any, is not enriched here (see load_flow_graph).

    Raises:
        DocumentNotFoundError: The file does not exist.
        DocumentIOError: The file cannot be read.
        SchemaValidationError: The markup fails structural validation.
        InvalidMarkupError: The markup cannot be parsed.
        MissingRequiredFieldError: Metadata or its app element is missing.
    """
    path = Path(path)
    document = await _read_document(path)

    variables = build_variable_map(document.variables)
    if missing := unresolved_placeholders(document.sections, variables):
        logger.debug(f"Unresolved placeholders in {path}: {missing}")

    resolved = document.model_copy(update={"sections": resolve_section_tree(document.sections, variables)})
    logger.info(f"Loaded context document {path} ({len(resolved.sections)} sections)")
    return resolved


async def load_sections(path: str | Path) -> list[Section]:
    """Load the resolved section tree of a document.

    @public
    """
    document = await load_context_document(path)
    return document.sections


async def load_metadata(path: str | Path) -> MetaData:
    """Load document metadata.

    @public
    """
    document = await load_context_document(path)
    return document.meta


async def load_flow_graph(path: str | Path) -> FlowGraph | None:
    """Load the document's flow graph with its derived graph view, or None.

    @public
    """
    document = await load_context_document(path)
    if document.flow_graph is None:
        return None
    return await process_flow_graph(document.flow_graph)


async def process_flow_graph(flow: FlowGraph) -> FlowGraph:
    """Recompute ``parsed_graph`` and ``node_refs`` from ``mermaid_code``.

    @public
    """
    return enrich_flow_graph(flow)


async def save_document(path: str | Path, sections: list[Section]) -> None:
    """Replace the sections of an existing document and write it back.

    @public

    Metadata, variables and the flow graph are read from the current file and
    written back unchanged. Sections are written exactly as given: content
    that was resolved on load stays resolved, placeholders stay placeholders.

    The write is a full overwrite unless ``settings.atomic_save`` is enabled,
    in which case a temporary file is renamed over the document.

    Args:
        path: Existing document file path.
        sections: New section tree.

    Raises:
        DocumentNotFoundError: The file does not exist.
        DocumentIOError: The file cannot be read or written.
        SchemaValidationError: The current file fails structural validation.
        InvalidMarkupError: The current file cannot be parsed.
        MissingRequiredFieldError: Metadata or its app element is missing.
        SerializationError: The new content cannot be represented in XML
                            or in ``settings.file_encoding``.
    """
    path = Path(path)
    document = await _read_document(path)
    updated = document.model_copy(update={"sections": sections})
    data = serialize_document(updated, settings.file_encoding).encode(settings.file_encoding)

    if settings.atomic_save:
        logger.info(f"Saving {path} atomically via temporary file")
    await asyncio.to_thread(_write_text_sync, path, data)
    logger.info(f"Saved context document {path} ({len(sections)} sections)")


__all__ = [
    "load_context_document",
    "load_flow_graph",
    "load_metadata",
    "load_sections",
    "process_flow_graph",
    "save_document",
]
