# sleepgraph/tests/test_state_graph.py
import pytest
from ..state_graph import (
    ANCHOR_IDS, COLUMN_X, EDGE_ORDER, SLOT_NAMES, STATE_LEFT_HANDLES, STATES, TRANSITIONS,
    GraphEdge, GraphNode, NodeKind, PowerState, StateNode, transition,
)


def test_state_node_has_required_fields():
    node = StateNode(id="active", label="ACTIVE", icon="zap", x=256, y=50)
    assert node.id == "active"
    assert node.label == "ACTIVE"
    assert node.icon == "zap"
    assert node.x == 256
    assert node.y == 50


def test_states_contains_all_four_power_states():
    assert len(STATES) == 4
    assert set(STATES) == set(PowerState)
    assert [s.id for s in STATES.values()] == ["active", "inactive", "sleep", "deep-sleep"]


def test_states_are_stacked_top_to_bottom_in_one_column():
    xs = {s.x for s in STATES.values()}
    ys = [s.y for s in STATES.values()]
    assert xs == {256}
    assert ys == sorted(ys)
    assert ys == [50, 280, 450, 650]


def test_six_transition_slots_with_unique_ids():
    assert len(TRANSITIONS) == 6
    assert len(set(SLOT_NAMES)) == 6
    assert len({t.node_id for t in TRANSITIONS}) == 6
    assert set(EDGE_ORDER) == set(SLOT_NAMES)


def test_wake_up_transitions_sit_in_left_column():
    """Transitions toward a more active state use the left column."""
    order = list(PowerState)
    for t in TRANSITIONS:
        waking = order.index(t.target) < order.index(t.source)
        assert t.column == ("left" if waking else "right"), t.slot


def test_column_positions_flank_state_column():
    assert COLUMN_X["left"] == -232
    assert COLUMN_X["right"] == 744


def test_only_deep_sleep_recovery_is_dashed():
    dashed = [t.slot for t in TRANSITIONS if t.dashed]
    assert dashed == ["deepSleepToInact"]


def test_preset_anchors_are_known_anchor_ids():
    for t in TRANSITIONS:
        assert t.entry_anchor in ANCHOR_IDS
        assert t.exit_anchor in ANCHOR_IDS
    for handle in STATE_LEFT_HANDLES:
        assert handle in ANCHOR_IDS


def test_transition_lookup():
    slot = transition("sleepToDeepSleep")
    assert slot.source is PowerState.SLEEP
    assert slot.target is PowerState.DEEP_SLEEP
    with pytest.raises(KeyError):
        transition("deepSleepToActive")


def test_node_to_dict_uses_renderer_keys():
    node = GraphNode(
        id="condition-x", kind=NodeKind.CONDITION, x=1, y=2,
        data={"conditions": {"and": ["a"], "or": [], "targ": [], "nonZero": []}},
        handles_used=["target-right"],
    )
    d = node.to_dict()
    assert d["kind"] == "condition"
    assert d["position"] == {"x": 1, "y": 2}
    assert d["data"]["handlesUsed"] == ["target-right"]
    assert d["data"]["conditions"]["and"] == ["a"]


def test_edge_to_dict_uses_renderer_keys():
    edge = GraphEdge("e", "a", "b", "source-left", "target-right", dashed=True)
    assert edge.to_dict() == {
        "id": "e",
        "source": "a",
        "target": "b",
        "sourceHandle": "source-left",
        "targetHandle": "target-right",
        "dashed": True,
    }
