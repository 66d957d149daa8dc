"""Best-effort extraction of graph structure from Mermaid flowchart source.

The grammar is a small token scanner rather than a full Mermaid parser:

* nodes come from two ordered passes over the whole source, rectangles
  ``id[label]`` first and round nodes ``id(label)`` second; an id claimed by the
  rectangle pass is never re-declared as round;
* edges are read one per line, labeled ``a -->|label| b`` lines taking
  precedence over plain ``a --> b`` lines; characters other than dashes may
  sit between the source id and the arrow (``A[Start] --> B``);
* ``click id "target" "tooltip"`` statements become node references.

Nothing here raises on malformed input; unrecognized text contributes nothing.
"""

import re
from typing import NamedTuple

from flow_writer_core.documents import (
    FlowGraph,
    GraphEdge,
    GraphNode,
    GraphStructure,
    NodeReference,
    NodeType,
)
from flow_writer_core.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)

ARROW = "-->"
MERMAID_FENCE_PATTERN = re.compile(r"```mermaid\s*\n(.*?)\n```", re.DOTALL)
CLICK_KEYWORD = "click"


class _Shape(NamedTuple):
    opener: str
    closer: str
    node_type: NodeType


# Pass order matters: the first shape to claim an id wins.
NODE_SHAPE_PASSES: tuple[_Shape, ...] = (
    _Shape("[", "]", NodeType.RECTANGLE),
    _Shape("(", ")", NodeType.ROUND_EDGES),
)


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _word_end(text: str, start: int) -> int:
    """Return the index just past the run of word characters starting at ``start``."""
    end = start
    while end < len(text) and _is_word_char(text[end]):
        end += 1
    return end


def _skip_spaces(text: str, start: int) -> int:
    while start < len(text) and text[start].isspace():
        start += 1
    return start


def _word_starts(text: str):
    """Yield (start, end) of each maximal run of word characters."""
    pos = 0
    while pos < len(text):
        if _is_word_char(text[pos]):
            end = _word_end(text, pos)
            yield pos, end
            pos = end
        else:
            pos += 1


def extract_mermaid_source(content: str) -> str:
    """Return the body of the first ```mermaid fenced block, or the input unchanged.

    The body is everything between the line that opens the fence and the next
    closing fence line, exactly as written. Input without a fence is assumed
    to be bare Mermaid source.
    """
    match = MERMAID_FENCE_PATTERN.search(content)
    if match is None:
        return content
    return match.group(1)


def _scan_shape(source: str, shape: _Shape) -> list[tuple[str, str]]:
    """Find every ``id<opener>label<closer>`` occurrence, left to right."""
    found: list[tuple[str, str]] = []
    pos = 0
    while pos < len(source):
        if not _is_word_char(source[pos]):
            pos += 1
            continue
        word_end = _word_end(source, pos)
        if word_end < len(source) and source[word_end] == shape.opener:
            close = source.find(shape.closer, word_end + 1)
            if close > word_end + 1:
                found.append((source[pos:word_end], source[word_end + 1 : close]))
                pos = close + 1
                continue
        pos = word_end
    return found


def parse_nodes(source: str) -> list[GraphNode]:
    """Extract rectangle and round nodes.

    Example:
        >>> [(n.id, n.label, n.node_type.value) for n in parse_nodes("A[X] --> B(Y)")]
        [('A', 'X', 'rectangle'), ('B', 'Y', 'roundedges')]
    """
    first_pass, *later_passes = NODE_SHAPE_PASSES
    # Every occurrence in the first pass is kept, repeats included.
    nodes = [
        GraphNode(id=node_id, label=label, node_type=first_pass.node_type)
        for node_id, label in _scan_shape(source, first_pass)
    ]
    claimed = {node.id for node in nodes}
    for shape in later_passes:
        for node_id, label in _scan_shape(source, shape):
            if node_id in claimed:
                continue
            nodes.append(GraphNode(id=node_id, label=label, node_type=shape.node_type))
            claimed.add(node_id)
    return nodes


def _match_edge(line: str, labeled: bool) -> GraphEdge | None:
    """Match the first edge on a line, trying each word run as the source id."""
    for start, end in _word_starts(line):
        dash = line.find("-", end)
        if dash < 0 or not line.startswith(ARROW, dash):
            continue
        pos = _skip_spaces(line, dash + len(ARROW))
        label = None
        if labeled:
            if pos >= len(line) or line[pos] != "|":
                continue
            close = line.find("|", pos + 1)
            if close <= pos + 1:
                continue
            label = line[pos + 1 : close]
            pos = _skip_spaces(line, close + 1)
        target_end = _word_end(line, pos)
        if target_end == pos:
            continue
        return GraphEdge(source=line[start:end], target=line[pos:target_end], label=label)
    return None


def parse_edges(source: str) -> list[GraphEdge]:
    """Extract at most one edge per line, in line order.

    Example:
        >>> [(e.source, e.target, e.label) for e in parse_edges("A --> B\\nC -->|Alt A| D")]
        [('A', 'B', None), ('C', 'D', 'Alt A')]
    """
    edges: list[GraphEdge] = []
    for raw_line in source.splitlines():
        line = raw_line.strip()
        if f"{ARROW}|" in line:
            edge = _match_edge(line, labeled=True)
        elif ARROW in line:
            edge = _match_edge(line, labeled=False)
        else:
            continue
        if edge is not None:
            edges.append(edge)
    return edges


def _read_quoted(source: str, pos: int) -> tuple[str, int] | None:
    """Read a non-empty double-quoted string at ``pos``; return (text, index after quote)."""
    if pos >= len(source) or source[pos] != '"':
        return None
    close = source.find('"', pos + 1)
    if close <= pos + 1:
        return None
    return source[pos + 1 : close], close + 1


def _match_click(source: str, start: int) -> tuple[NodeReference, int] | None:
    pos = start + len(CLICK_KEYWORD)
    after_keyword = _skip_spaces(source, pos)
    if after_keyword == pos:
        return None
    id_end = _word_end(source, after_keyword)
    if id_end == after_keyword:
        return None
    node_id = source[after_keyword:id_end]
    target_start = _skip_spaces(source, id_end)
    if target_start == id_end:
        return None
    quoted = _read_quoted(source, target_start)
    if quoted is None:
        return None
    click_action, pos = quoted
    tooltip = None
    tooltip_quoted = _read_quoted(source, _skip_spaces(source, pos))
    if tooltip_quoted is not None:
        tooltip, pos = tooltip_quoted
    section_id = click_action[1:] if click_action.startswith("#") else click_action
    return NodeReference(node_id=node_id, section_id=section_id, click_action=click_action, tooltip=tooltip), pos


def parse_click_actions(source: str) -> list[NodeReference]:
    """Extract ``click <id> "<target>" ["<tooltip>"]`` statements.

    ``section_id`` is the target with one leading ``#`` removed;
    ``click_action`` keeps the raw target.
    """
    refs: list[NodeReference] = []
    pos = source.find(CLICK_KEYWORD)
    while pos >= 0:
        matched = _match_click(source, pos)
        if matched is None:
            pos = source.find(CLICK_KEYWORD, pos + 1)
            continue
        ref, end = matched
        refs.append(ref)
        pos = source.find(CLICK_KEYWORD, end)
    return refs


def parse_mermaid(mermaid_code: str) -> GraphStructure:
    """Extract nodes and edges from (optionally fenced) Mermaid source."""
    source = extract_mermaid_source(mermaid_code)
    return GraphStructure(nodes=parse_nodes(source), edges=parse_edges(source))


def enrich_flow_graph(flow: FlowGraph) -> FlowGraph:
    """Return a copy of ``flow`` with its derived graph view recomputed.

    Whatever ``parsed_graph``/``node_refs`` the input carried is discarded.
    Each node referenced by a click action gets that action's section id;
    references to unknown nodes are kept in ``node_refs`` but link nothing.
    """
    source = extract_mermaid_source(flow.mermaid_code)
    graph = GraphStructure(nodes=parse_nodes(source), edges=parse_edges(source))
    node_refs = parse_click_actions(source)

    for ref in node_refs:
        node = graph.find_node(ref.node_id)
        if node is None:
            logger.debug(f"Click target '{ref.node_id}' in flow '{flow.id}' matches no node")
            continue
        node.ref_section_id = ref.section_id

    return flow.model_copy(update={"parsed_graph": graph, "node_refs": node_refs})


__all__ = [
    "enrich_flow_graph",
    "extract_mermaid_source",
    "parse_click_actions",
    "parse_edges",
    "parse_mermaid",
    "parse_nodes",
]
