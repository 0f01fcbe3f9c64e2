"""Power-state (sleep settings) diagram synthesis for vehicle devices."""
from .builder import build_graph
from .conditions import describe_conditions, extract_conditions, non_zero_conditions
from .document import (
    DocumentParseError, SchemaError, SettingsDocumentError,
    build_graph_from_document, load_document, parse_document,
)
from .state_graph import GraphEdge, GraphNode, GraphResult, NodeKind, PowerState

__all__ = [
    "build_graph",
    "build_graph_from_document",
    "describe_conditions",
    "extract_conditions",
    "non_zero_conditions",
    "load_document",
    "parse_document",
    "DocumentParseError",
    "SchemaError",
    "SettingsDocumentError",
    "GraphEdge",
    "GraphNode",
    "GraphResult",
    "NodeKind",
    "PowerState",
]
