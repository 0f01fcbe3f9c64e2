"""Graph data model for the sleep-settings diagram - 4 power states, 6 transitions."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PowerState(Enum):
    """Device power states, top to bottom in the diagram."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SLEEP = "sleep"
    DEEP_SLEEP = "deep-sleep"


class NodeKind(Enum):
    STATE = "state"
    CONDITION = "condition"


@dataclass
class StateNode:
    id: str
    label: str
    icon: str
    x: float
    y: float


@dataclass(frozen=True)
class TransitionSlot:
    """One fixed transition between two power states.

    ``entry_anchor`` is preset on the state -> condition edge and
    ``exit_anchor`` on the condition -> state edge; the anchor resolver
    fills in the other end of each.
    """
    slot: str
    node_id: str
    source: PowerState
    target: PowerState
    column: str
    y: float
    entry_anchor: str
    exit_anchor: str
    dashed: bool = False


@dataclass
class GraphNode:
    id: str
    kind: NodeKind
    x: float
    y: float
    data: Dict[str, Any]
    handles_used: List[str] = field(default_factory=list)

    @property
    def is_state(self) -> bool:
        return self.kind is NodeKind.STATE

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.data)
        if "conditions" in data:
            data["conditions"] = {k: list(v) for k, v in data["conditions"].items()}
        data["handlesUsed"] = list(self.handles_used)
        return {
            "id": self.id,
            "kind": self.kind.value,
            "position": {"x": self.x, "y": self.y},
            "data": data,
        }


@dataclass
class GraphEdge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    dashed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
            "dashed": self.dashed,
        }


@dataclass
class GraphResult:
    nodes: List[GraphNode]
    edges: List[GraphEdge]

    def node(self, node_id: str) -> GraphNode:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def edge(self, edge_id: str) -> GraphEdge:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise KeyError(edge_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


# Layout: 3 columns, state boxes 288px wide centred on x=400, 200px column gap
CENTER_X = 400
STATE_WIDTH = 288
H_GAP = 200

STATE_X = CENTER_X - STATE_WIDTH / 2
LEFT_X = STATE_X - H_GAP - STATE_WIDTH
RIGHT_X = STATE_X + STATE_WIDTH + H_GAP

COLUMN_X = {
    "left": LEFT_X,
    "right": RIGHT_X,
}

STATES: Dict[PowerState, StateNode] = {
    PowerState.ACTIVE: StateNode("active", "ACTIVE", "zap", STATE_X, 50),
    PowerState.INACTIVE: StateNode("inactive", "INACTIVE", "power", STATE_X, 280),
    PowerState.SLEEP: StateNode("sleep", "SLEEP", "power-off", STATE_X, 450),
    PowerState.DEEP_SLEEP: StateNode("deep-sleep", "DEEP SLEEP", "battery-low", STATE_X, 650),
}

# Left column: wake-up transitions. Right column: power-down transitions.
TRANSITIONS: List[TransitionSlot] = [
    TransitionSlot("inactToAct", "condition-inact-to-act",
                   PowerState.INACTIVE, PowerState.ACTIVE,
                   "left", 150, "source-left", "target-left"),
    TransitionSlot("sleepToInact", "condition-sleep-to-inact",
                   PowerState.SLEEP, PowerState.INACTIVE,
                   "left", 350, "source-left", "target-left-bottom"),
    TransitionSlot("deepSleepToInact", "condition-deep-to-inact",
                   PowerState.DEEP_SLEEP, PowerState.INACTIVE,
                   "left", 550, "source-left", "target-left-bottom", dashed=True),
    TransitionSlot("actToInact", "condition-act-to-inact",
                   PowerState.ACTIVE, PowerState.INACTIVE,
                   "right", 150, "source-right", "target-right"),
    TransitionSlot("inactToSleep", "condition-inact-to-sleep",
                   PowerState.INACTIVE, PowerState.SLEEP,
                   "right", 350, "source-right", "target-right"),
    TransitionSlot("sleepToDeepSleep", "condition-sleep-to-deep",
                   PowerState.SLEEP, PowerState.DEEP_SLEEP,
                   "right", 550, "source-right", "target-right"),
]

SLOT_NAMES: Tuple[str, ...] = tuple(t.slot for t in TRANSITIONS)

# Edge drawing order: forward (right column) pair first, then its return pair
EDGE_ORDER: Tuple[str, ...] = (
    "actToInact",
    "inactToAct",
    "inactToSleep",
    "sleepToInact",
    "sleepToDeepSleep",
    "deepSleepToInact",
)

# Anchors every state node exposes on its left side, wired or not
STATE_LEFT_HANDLES: Tuple[str, ...] = ("target-left", "target-left-bottom", "target-left-top")

ANCHOR_IDS: Tuple[str, ...] = (
    "target-left",
    "target-right",
    "source-left",
    "source-right",
    "source-left-top",
    "source-right-top",
    "source-left-bottom",
    "source-right-bottom",
    "target-left-top",
    "target-right-top",
    "target-left-bottom",
    "target-right-bottom",
    "source-top",
)

STATE_GRADIENT = ("#6366f1", "#a855f7")
EDGE_COLOR = "#6366f1"


def transition(slot: str) -> TransitionSlot:
    """Look up a transition slot by its document key."""
    for t in TRANSITIONS:
        if t.slot == slot:
            return t
    raise KeyError(slot)
