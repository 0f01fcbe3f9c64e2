"""Build the sleep-settings graph from transition settings and conditions."""
from typing import Any, Dict, List, Mapping, Optional

from .anchors import resolve_anchors
from .conditions import extract_conditions
from .state_graph import (
    COLUMN_X, EDGE_ORDER, STATES, TRANSITIONS,
    GraphEdge, GraphNode, GraphResult, NodeKind, TransitionSlot, transition,
)


def _slot_entry(block: Optional[Mapping[str, Any]], slot: str) -> Any:
    """Return a transition's entry, or an empty object when missing."""
    if not isinstance(block, Mapping):
        return {}
    entry = block.get(slot)
    return entry if isinstance(entry, Mapping) else {}


def build_state_nodes() -> List[GraphNode]:
    """Create one node per power state, top to bottom."""
    return [
        GraphNode(
            id=state.id,
            kind=NodeKind.STATE,
            x=state.x,
            y=state.y,
            data={"label": state.label, "icon": state.icon},
        )
        for state in STATES.values()
    ]


def build_condition_node(slot: TransitionSlot, settings: Any, condition: Any) -> GraphNode:
    return GraphNode(
        id=slot.node_id,
        kind=NodeKind.CONDITION,
        x=COLUMN_X[slot.column],
        y=slot.y,
        data={"conditions": extract_conditions(condition, settings)},
    )


def build_edges() -> List[GraphEdge]:
    """Create the state -> condition -> state edge pair for every transition.

    Only the anchors preset by the transition table are filled in here.
    """
    edges = []
    for name in EDGE_ORDER:
        slot = transition(name)
        source = STATES[slot.source].id
        target = STATES[slot.target].id
        edges.append(GraphEdge(
            id=f"{source}-to-{slot.node_id}",
            source=source,
            target=slot.node_id,
            source_handle=slot.entry_anchor,
            dashed=slot.dashed,
        ))
        edges.append(GraphEdge(
            id=f"{slot.node_id}-to-{target}",
            source=slot.node_id,
            target=target,
            target_handle=slot.exit_anchor,
            dashed=slot.dashed,
        ))
    return edges


def build_graph(settings: Optional[Mapping[str, Any]],
                conditions: Optional[Mapping[str, Any]]) -> GraphResult:
    """Build the full positioned, anchor-resolved graph.

    ``settings`` is the document's ``sleepsettings`` block and ``conditions``
    its ``sleepcdns`` block. Missing transitions render as empty condition
    nodes, so the result always has 4 state nodes, 6 condition nodes and
    12 edges.
    """
    nodes = build_state_nodes()
    for slot in TRANSITIONS:
        nodes.append(build_condition_node(
            slot,
            _slot_entry(settings, slot.slot),
            _slot_entry(conditions, slot.slot),
        ))

    edges = build_edges()
    resolve_anchors(nodes, edges)
    return GraphResult(nodes=nodes, edges=edges)


def summarize(result: GraphResult) -> Dict[str, Dict[str, Any]]:
    """Per-transition view of a built graph, keyed by slot name."""
    summary = {}
    for slot in TRANSITIONS:
        node = result.node(slot.node_id)
        summary[slot.slot] = {
            "source": STATES[slot.source].label,
            "target": STATES[slot.target].label,
            "conditions": node.data["conditions"],
        }
    return summary
