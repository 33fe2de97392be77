"""
Collapse / expand state for a leveled layout.

Collapse propagates only along primary-parent links: a node shared by
several parents follows whichever parent discovered it first.
"""

import logging
from collections import deque
from typing import Dict, List

from app.layout.types import LayoutEdge, LayoutNode

logger = logging.getLogger(__name__)


def initial_collapsed(node: LayoutNode) -> bool:
    return node.collapsible and (node.level == 1 or node.is_reverse)


def initial_hidden(node: LayoutNode) -> bool:
    return node.level > 1 and not node.is_reverse


class CollapseStateManager:
    """
    Owns the ``collapsed`` / ``hidden`` flags of one layout session.

    Callers serialize toggles; no internal locking.
    """

    def __init__(self, nodes: List[LayoutNode], edges: List[LayoutEdge]):
        self.nodes = nodes
        self.edges = edges
        self._index: Dict[str, LayoutNode] = {n.id: n for n in nodes}
        self._children: Dict[str, List[str]] = {}
        for node in nodes:
            if node.parent_id is not None:
                self._children.setdefault(node.parent_id, []).append(node.id)

    def initialize(self) -> None:
        for node in self.nodes:
            node.collapsed = initial_collapsed(node)
            node.hidden = initial_hidden(node)
        self.refresh_edges()

    def descendants(self, node_id: str) -> List[str]:
        """Transitive primary-parent descendants, excluding *node_id*."""
        found: List[str] = []
        seen = {node_id}
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            for child in self._children.get(current, []):
                if child in seen:
                    continue
                seen.add(child)
                found.append(child)
                queue.append(child)
        return found

    def toggle(self, node_id: str) -> bool:
        """Flip *node_id*; returns False (no-op) for unknown or leaf nodes."""
        node = self._index.get(node_id)
        if node is None or not node.collapsible:
            logger.debug("[Collapse] Ignoring toggle on %s", node_id)
            return False

        node.collapsed = not node.collapsed
        if node.collapsed:
            affected = self.descendants(node_id)
            for child_id in affected:
                self._index[child_id].hidden = True
        else:
            affected = self._expanded_descendants(node_id)
            for child_id in affected:
                self._index[child_id].hidden = False

        self.refresh_edges()
        logger.debug(
            "[Collapse] %s %s (%d descendants)",
            "Collapsed" if node.collapsed else "Expanded", node_id, len(affected),
        )
        return True

    def _expanded_descendants(self, node_id: str) -> List[str]:
        """Descendants not sitting below a still-collapsed node."""
        found: List[str] = []
        seen = {node_id}
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            for child in self._children.get(current, []):
                if child in seen:
                    continue
                seen.add(child)
                found.append(child)
                if not self._index[child].collapsed:
                    queue.append(child)
        return found

    def refresh_edges(self) -> None:
        """An edge is hidden when either endpoint is hidden."""
        for edge in self.edges:
            edge.hidden = self._is_hidden(edge.source) or self._is_hidden(edge.target)

    def _is_hidden(self, node_id: str) -> bool:
        node = self._index.get(node_id)
        return node.hidden if node is not None else False
