"""
Level assignment over an arbitrary directed graph.

The input may be cyclic, disconnected, or contain nodes that only point
back into the hierarchy. Levels come from a multi-root breadth-first
traversal where the first discovery of a node fixes its level; later,
possibly shorter, paths never correct it.
"""

import logging
from collections import deque
from typing import Iterable, List, Optional, Set, Tuple

from app import config
from app.ir.graph_ir import GraphEdge, GraphNode
from app.layout.context import LayoutContext

logger = logging.getLogger(__name__)


class GraphLevelAssigner:
    """
    Assigns each node a non-negative level.

    Steps:
    1. Root selection (indegree zero, outdegree fallback)
    2. Breadth-first traversal from all roots at level 0
    3. Reverse-node pass: relates-back nodes that were never reached
       but point into visited nodes are placed one level past them
    4. Nodes reachable only through a reverse node are levelled from it
    """

    def __init__(
        self,
        reverse_node_types: Optional[Iterable[str]] = None,
        fallback_root_count: Optional[int] = None,
    ):
        self.reverse_node_types = frozenset(
            config.REVERSE_NODE_TYPES if reverse_node_types is None else reverse_node_types
        )
        self.fallback_root_count = (
            config.FALLBACK_ROOT_COUNT if fallback_root_count is None else fallback_root_count
        )

    def assign_levels(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> List[GraphNode]:
        """Return copies of *nodes* with ``level`` set; inputs are untouched."""
        context = LayoutContext.build(nodes, edges)
        self.run(context)
        return context.nodes

    def run(self, context: LayoutContext) -> LayoutContext:
        context.roots = self.select_roots(context)
        self._traverse(context)
        self._position_reverse_nodes(context)

        logger.debug(
            "[LevelAssigner] %d nodes, roots=%s, reverse=%s, unreached=%d",
            len(context.nodes),
            context.roots,
            sorted(context.reverse_ids),
            sum(1 for n in context.nodes if n.id not in context.visited and n.id not in context.reverse_ids),
        )
        return context

    # ---------- roots ----------

    def select_roots(self, context: LayoutContext) -> List[str]:
        candidates = [n for n in context.nodes if not context.parents(n.id)]

        if not candidates:
            # Fully cyclic: most source-like nodes break the deadlock.
            ranked = sorted(context.nodes, key=lambda n: len(context.children(n.id)), reverse=True)
            roots = [n.id for n in ranked[: self.fallback_root_count]]
            logger.info("[LevelAssigner] No indegree-zero node, outdegree fallback roots: %s", roots)
            return roots

        primary = [n for n in candidates if not self._relates_back(n)]
        reachable = self._reachable_from([n.id for n in primary], context)

        roots = []
        for node in candidates:
            if self._relates_back(node) and any(
                target in reachable for target in context.children(node.id)
            ):
                # Held back: becomes a reverse candidate.
                continue
            roots.append(node.id)
        return roots

    def _relates_back(self, node: GraphNode) -> bool:
        return node.node_type in self.reverse_node_types

    @staticmethod
    def _reachable_from(start: List[str], context: LayoutContext) -> Set[str]:
        seen: Set[str] = set(start)
        queue = deque(start)
        while queue:
            current = queue.popleft()
            for child in context.children(current):
                if child not in seen:
                    seen.add(child)
                    queue.append(child)
        return seen

    # ---------- traversal ----------

    @staticmethod
    def _traverse(context: LayoutContext, seeds: Optional[Iterable[Tuple[str, int]]] = None) -> None:
        queue = deque(((root, 0) for root in context.roots) if seeds is None else seeds)

        while queue:
            node_id, level = queue.popleft()
            if node_id in context.visited or node_id in context.reverse_ids:
                continue
            context.visited.add(node_id)

            node = context.node_index.get(node_id)
            if node is not None:
                node.level = max(node.level, level)

            for child in context.children(node_id):
                if child not in context.visited:
                    queue.append((child, level + 1))

    # ---------- reverse nodes ----------

    def _position_reverse_nodes(self, context: LayoutContext) -> None:
        roots = set(context.roots)

        for node in context.nodes:
            if node.id in roots or node.id in context.visited:
                continue
            if not self._relates_back(node):
                continue

            visited_targets = [t for t in context.children(node.id) if t in context.visited]
            if not visited_targets:
                continue

            node.level = max(context.level_of(t) for t in visited_targets) + 1
            context.reverse_ids.add(node.id)

        # Children only reachable through a reverse node continue from its column
        seeds = [
            (child, node.level + 1)
            for node in context.nodes
            if node.id in context.reverse_ids
            for child in context.children(node.id)
            if child not in context.visited
        ]
        if seeds:
            self._traverse(context, seeds)
