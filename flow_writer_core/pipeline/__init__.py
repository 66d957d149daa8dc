"""Async load/save operations over context document files.

@public
"""

from .paths import get_document_path
from .service import (
    load_context_document,
    load_flow_graph,
    load_metadata,
    load_sections,
    process_flow_graph,
    save_document,
)

__all__ = [
    "get_document_path",
    "load_context_document",
    "load_flow_graph",
    "load_metadata",
    "load_sections",
    "process_flow_graph",
    "save_document",
]
