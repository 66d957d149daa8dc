"""Flow Writer Core - context documents with embedded flow diagrams.

@public

A context document is an XML file holding metadata, named template
variables, a tree of content sections and an optional Mermaid flow diagram
whose nodes link to sections. This package turns such a file into a
validated, variable-resolved, diagram-enriched model, and writes it back.

Core Capabilities:
    - **Validation**: Structural checks that fail fast with typed errors
    - **Parsing**: Streaming XML reader into pydantic models
    - **Variables**: ``${name}`` substitution in section content
    - **Diagrams**: Node, edge and click-reference extraction from Mermaid source
    - **Serialization**: Deterministic XML output with CDATA section bodies

Quick Start:
    >>> import asyncio
    >>> from flow_writer_core import load_sections, load_flow_graph
    >>>
    >>> sections = asyncio.run(load_sections("context.xml"))
    >>> flow = asyncio.run(load_flow_graph("context.xml"))
    >>> [(node.id, node.ref_section_id) for node in flow.parsed_graph.nodes]

Environment Variables:
    - FLOW_WRITER_DOC_PATH: Default document path for the CLI
    - FLOW_WRITER_ATOMIC_SAVE: Save through a temporary file and rename
    - FLOW_WRITER_LOGGING_CONFIG: Path to a YAML logging configuration
    - FLOW_WRITER_LOG_LEVEL: Level for the flow_writer_core logger
"""

from .documents import (
    PRODUCIBLE_NODE_TYPES,
    SECTION_TYPES,
    AppInfo,
    ContextDocument,
    FlowGraph,
    GraphEdge,
    GraphNode,
    GraphStructure,
    MetaData,
    NodeReference,
    NodeType,
    Section,
    Variable,
)
from .exceptions import (
    DocumentIOError,
    DocumentNotFoundError,
    FlowWriterError,
    InvalidMarkupError,
    MissingRequiredFieldError,
    SchemaValidationError,
    SerializationError,
)
from .logging import LoggingConfig, get_pipeline_logger, setup_logging
from .parsers import enrich_flow_graph, parse_document, parse_mermaid
from .pipeline import (
    get_document_path,
    load_context_document,
    load_flow_graph,
    load_metadata,
    load_sections,
    process_flow_graph,
    save_document,
)
from .processing import build_variable_map, resolve_section_tree, resolve_variables
from .serializers import serialize_document
from .settings import settings
from .validation import validate_schema

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "settings",
    # Logging
    "get_pipeline_logger",
    "LoggingConfig",
    "setup_logging",
    # Documents
    "AppInfo",
    "ContextDocument",
    "FlowGraph",
    "GraphEdge",
    "GraphNode",
    "GraphStructure",
    "MetaData",
    "NodeReference",
    "NodeType",
    "PRODUCIBLE_NODE_TYPES",
    "SECTION_TYPES",
    "Section",
    "Variable",
    # Errors
    "DocumentIOError",
    "DocumentNotFoundError",
    "FlowWriterError",
    "InvalidMarkupError",
    "MissingRequiredFieldError",
    "SchemaValidationError",
    "SerializationError",
    # Components
    "validate_schema",
    "parse_document",
    "parse_mermaid",
    "enrich_flow_graph",
    "build_variable_map",
    "resolve_variables",
    "resolve_section_tree",
    "serialize_document",
    # Pipeline
    "get_document_path",
    "load_context_document",
    "load_flow_graph",
    "load_metadata",
    "load_sections",
    "process_flow_graph",
    "save_document",
]
