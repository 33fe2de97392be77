import json
from dataclasses import dataclass, field
from typing import Any, Dict, List


def _decode_properties(value: Any) -> Dict[str, Any]:
    """Graph APIs ship node properties either as a map or as a JSON string."""
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, str) and value.strip():
        try:
            decoded = json.loads(value)
        except ValueError:
            return {"raw": value}
        return decoded if isinstance(decoded, dict) else {"raw": decoded}
    return {}


@dataclass
class GraphNode:
    id: str
    label: str = ""
    node_type: str = "Unknown"
    level: int = 0  # derived, never trusted from input
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        node_id = str(data["id"])
        return cls(
            id=node_id,
            label=data.get("label") or node_id,
            node_type=data.get("node_type") or data.get("nodeType") or "Unknown",
            properties=_decode_properties(data.get("properties")),
        )


@dataclass
class GraphEdge:
    id: str
    source: str
    target: str
    label: str = ""
    relationship_type: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        source = str(data["source"])
        target = str(data["target"])
        rel_type = data.get("relationship_type") or data.get("relationshipType") or ""
        return cls(
            id=str(data.get("id") or f"{source}->{target}"),
            source=source,
            target=target,
            label=data.get("label") or rel_type,
            relationship_type=rel_type,
        )


@dataclass
class GraphSnapshot:
    """One graph query result: unordered nodes and edges.

    Duplicate ids are collapsed, first occurrence wins.
    """
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def __post_init__(self):
        self.nodes = _dedupe(self.nodes)
        self.edges = _dedupe(self.edges)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSnapshot":
        return cls(
            nodes=[GraphNode.from_dict(n) for n in data.get("nodes") or []],
            edges=[GraphEdge.from_dict(e) for e in data.get("edges") or []],
        )


def _dedupe(items):
    seen = set()
    unique = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique
