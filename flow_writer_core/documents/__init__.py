"""Document model for context documents.

Provides the ContextDocument aggregate with its metadata, variables, the
recursive Section tree, and the FlowGraph whose parsed view is derived from
its Mermaid source.
"""

from .context_document import AppInfo, ContextDocument, MetaData, Variable
from .flow_graph import (
    PRODUCIBLE_NODE_TYPES,
    FlowGraph,
    GraphEdge,
    GraphNode,
    GraphStructure,
    NodeReference,
    NodeType,
)
from .section import SECTION_TYPES, Section, iter_sections

__all__ = [
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
    "iter_sections",
]
