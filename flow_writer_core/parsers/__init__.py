"""Readers for context document markup and embedded Mermaid diagrams."""

from .diagram import (
    enrich_flow_graph,
    extract_mermaid_source,
    parse_click_actions,
    parse_edges,
    parse_mermaid,
    parse_nodes,
)
from .document import parse_document

__all__ = [
    "enrich_flow_graph",
    "extract_mermaid_source",
    "parse_click_actions",
    "parse_document",
    "parse_edges",
    "parse_mermaid",
    "parse_nodes",
]
