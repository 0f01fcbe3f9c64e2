"""Anchor (handle) resolution for diagram edges.

Each edge attaches to a named anchor on both endpoints. Anchors left unset
by the edge templates are chosen from the relative positions of the two
nodes, then a short list of overrides keeps condition boxes and the
upward "return" edges on the sides they are drawn with.
"""
from typing import Dict, List

from .state_graph import GraphEdge, GraphNode, STATE_LEFT_HANDLES


def resolve_edge(edge: GraphEdge, source: GraphNode, target: GraphNode) -> None:
    """Assign ``source_handle``/``target_handle`` on a single edge in place."""
    is_up = source.y > target.y
    goes_left = source.x > target.x
    goes_right = source.x < target.x

    if not edge.source_handle:
        edge.source_handle = "source-right" if source.x < target.x else "source-left"
    if not edge.target_handle:
        edge.target_handle = "target-left" if target.x < source.x else "target-right"

    if source.is_state and not target.is_state and goes_left:
        edge.target_handle = "target-right"

    if not source.is_state and target.is_state and goes_right:
        edge.source_handle = "source-left"

    # Upward edges leave the top band of a state and arrive at the bottom band
    if is_up:
        if source.is_state:
            edge.source_handle = (
                "source-right-top" if source.x < target.x else "source-left-top"
            )
        if target.is_state:
            edge.target_handle = (
                "target-right-bottom" if target.x < source.x else "target-left-bottom"
            )


def resolve_anchors(nodes: List[GraphNode], edges: List[GraphEdge]) -> Dict[str, List[str]]:
    """Resolve every edge's anchors and record which anchors each node uses.

    Sets ``handles_used`` on every node and returns the same mapping keyed
    by node id. State nodes always expose their left-side target anchors.
    """
    by_id = {node.id: node for node in nodes}
    usage: Dict[str, List[str]] = {}

    def mark(node_id: str, handle: str) -> None:
        used = usage.setdefault(node_id, [])
        if handle not in used:
            used.append(handle)

    for edge in edges:
        source = by_id[edge.source]
        target = by_id[edge.target]
        resolve_edge(edge, source, target)
        mark(edge.source, edge.source_handle)
        mark(edge.target, edge.target_handle)

    for node in nodes:
        if node.is_state:
            for handle in STATE_LEFT_HANDLES:
                mark(node.id, handle)
        node.handles_used = list(usage.get(node.id, []))

    return {node_id: list(handles) for node_id, handles in usage.items()}
