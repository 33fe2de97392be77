from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set

from app.ir.graph_ir import GraphEdge, GraphNode


@dataclass
class LayoutContext:
    """
    Working set for one layout request.

    Built from a single query result and discarded with the response;
    nothing here outlives the request.
    """
    # Input (copied, levels reset)
    nodes: List[GraphNode]
    edges: List[GraphEdge]

    # Adjacency, in edge order
    node_index: Dict[str, GraphNode] = field(default_factory=dict)
    outgoing: Dict[str, List[str]] = field(default_factory=dict)
    incoming: Dict[str, List[str]] = field(default_factory=dict)

    # Level assignment output
    roots: List[str] = field(default_factory=list)
    visited: Set[str] = field(default_factory=set)
    reverse_ids: Set[str] = field(default_factory=set)

    @classmethod
    def build(cls, nodes: List[GraphNode], edges: List[GraphEdge]) -> "LayoutContext":
        working = [replace(n, level=0, properties=dict(n.properties)) for n in nodes]
        context = cls(nodes=working, edges=list(edges))
        context.node_index = {n.id: n for n in working}

        for edge in context.edges:
            context.outgoing.setdefault(edge.source, []).append(edge.target)
            context.incoming.setdefault(edge.target, []).append(edge.source)

        return context

    def children(self, node_id: str) -> List[str]:
        return self.outgoing.get(node_id, [])

    def parents(self, node_id: str) -> List[str]:
        return self.incoming.get(node_id, [])

    def primary_parent(self, node_id: str) -> Optional[str]:
        """Source of the first edge that targets *node_id*."""
        parents = self.parents(node_id)
        return parents[0] if parents else None

    def level_of(self, node_id: str) -> int:
        node = self.node_index.get(node_id)
        return node.level if node else 0
