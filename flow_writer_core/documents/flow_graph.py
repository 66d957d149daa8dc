"""Flow graph models.

A flow graph is stored on disk only as its Mermaid source (``mermaid_code``).
``parsed_graph`` and ``node_refs`` are a view derived from that source by
``flow_writer_core.parsers.diagram.enrich_flow_graph`` on every load; they are
listed in ``FlowGraph.DERIVED_FIELDS`` and the serializer never reads them.
"""

from enum import StrEnum
from typing import Any, ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field


class NodeType(StrEnum):
    """Mermaid flowchart node shapes.

    The full shape vocabulary is declared so the extraction grammar can grow
    without a model change. Only the members in ``PRODUCIBLE_NODE_TYPES`` are currently
    emitted by the diagram parser.
    """

    RECTANGLE = "rectangle"
    ROUND_EDGES = "roundedges"
    STADIUM = "stadium"
    SUBROUTINE = "subroutine"
    CYLINDRICAL = "cylindrical"
    CIRCLE = "circle"
    ASYMMETRIC = "asymmetric"
    RHOMBUS = "rhombus"
    HEXAGON = "hexagon"
    PARALLELOGRAM = "parallelogram"
    TRAPEZOID = "trapezoid"


PRODUCIBLE_NODE_TYPES: Final[frozenset[NodeType]] = frozenset({NodeType.RECTANGLE, NodeType.ROUND_EDGES})
"""Shapes the diagram parser can currently emit."""


class GraphNode(BaseModel):
    """A diagram node.

    ``ref_section_id`` is filled in after parsing, by linking click actions
    to nodes; the diagram grammar itself never sets it.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: str
    label: str
    node_type: NodeType = Field(alias="nodeType")
    ref_section_id: str | None = None


class GraphEdge(BaseModel):
    """A directed diagram edge (serialized with ``from``/``to`` keys)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    label: str | None = None


class NodeReference(BaseModel):
    """A ``click`` annotation binding a diagram node to a section."""

    model_config = ConfigDict(extra="forbid")

    node_id: str
    section_id: str
    click_action: str
    tooltip: str | None = None


class GraphStructure(BaseModel):
    """Nodes and edges extracted from Mermaid source."""

    model_config = ConfigDict(extra="forbid")

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def find_node(self, node_id: str) -> GraphNode | None:
        """Return the first node with the given id, or None."""
        return next((node for node in self.nodes if node.id == node_id), None)


class FlowGraph(BaseModel):
    """A diagram attached to a context document.

    @public

    Attributes:
        id: Flow identifier.
        version: Flow format version.
        title: Optional display title.
        mermaid_code: Diagram source exactly as stored, including any
                      surrounding markdown fence.
        parsed_graph: Derived. Nodes and edges extracted from mermaid_code.
        node_refs: Derived. Click actions extracted from mermaid_code.
    """

    DERIVED_FIELDS: ClassVar[frozenset[str]] = frozenset({"parsed_graph", "node_refs"})

    model_config = ConfigDict(extra="forbid")

    id: str
    version: str
    title: str | None = None
    mermaid_code: str = ""
    parsed_graph: GraphStructure = Field(default_factory=GraphStructure)
    node_refs: list[NodeReference] = Field(default_factory=list)

    def persisted(self) -> dict[str, Any]:
        """Return the fields that are written to disk, without derived state."""
        return self.model_dump(exclude=set(self.DERIVED_FIELDS))


__all__ = [
    "FlowGraph",
    "GraphEdge",
    "GraphNode",
    "GraphStructure",
    "NodeReference",
    "NodeType",
    "PRODUCIBLE_NODE_TYPES",
]
