from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.ir.graph_ir import GraphEdge, GraphNode


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class LayoutNode(GraphNode):
    position: Position = field(default_factory=Position)
    parent_id: Optional[str] = None   # primary parent, anchors collapse
    collapsible: bool = False
    collapsed: bool = False
    hidden: bool = False
    is_reverse: bool = False
    shape: str = "rect"
    color: str = "#BDBDBD"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "node_type": self.node_type,
            "level": self.level,
            "properties": self.properties,
            "position": {"x": self.position.x, "y": self.position.y},
            "parent_id": self.parent_id,
            "collapsible": self.collapsible,
            "collapsed": self.collapsed,
            "hidden": self.hidden,
            "is_reverse": self.is_reverse,
            "shape": self.shape,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutNode":
        position = data.get("position") or {}
        return cls(
            id=str(data["id"]),
            label=data.get("label") or str(data["id"]),
            node_type=data.get("node_type") or "Unknown",
            level=int(data.get("level") or 0),
            properties=dict(data.get("properties") or {}),
            position=Position(x=position.get("x", 0.0), y=position.get("y", 0.0)),
            parent_id=data.get("parent_id"),
            collapsible=bool(data.get("collapsible", False)),
            collapsed=bool(data.get("collapsed", False)),
            hidden=bool(data.get("hidden", False)),
            is_reverse=bool(data.get("is_reverse", False)),
            shape=data.get("shape") or "rect",
            color=data.get("color") or "#BDBDBD",
        )


@dataclass
class LayoutEdge(GraphEdge):
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "relationship_type": self.relationship_type,
            "hidden": self.hidden,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutEdge":
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            label=data.get("label") or "",
            relationship_type=data.get("relationship_type") or "",
            hidden=bool(data.get("hidden", False)),
        )


@dataclass
class LayoutResult:
    nodes: List[LayoutNode] = field(default_factory=list)
    edges: List[LayoutEdge] = field(default_factory=list)
    roots: List[str] = field(default_factory=list)
    issues: List[Any] = field(default_factory=list)  # ValidationIssue

    @property
    def collapsed_ids(self) -> List[str]:
        return [n.id for n in self.nodes if n.collapsed]

    @property
    def visible_ids(self) -> List[str]:
        return [n.id for n in self.nodes if not n.hidden]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "roots": list(self.roots),
            "collapsed": self.collapsed_ids,
            "issues": [i.to_dict() for i in self.issues],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutResult":
        return cls(
            nodes=[LayoutNode.from_dict(n) for n in data.get("nodes") or []],
            edges=[LayoutEdge.from_dict(e) for e in data.get("edges") or []],
            roots=list(data.get("roots") or []),
        )
