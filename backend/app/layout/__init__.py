"""
Hierarchical layout: level assignment, collapse state and positioning
for arbitrary graph query results.
"""

from app.layout.types import LayoutEdge, LayoutNode, LayoutResult, Position
from app.layout.levels import GraphLevelAssigner
from app.layout.collapse import CollapseStateManager
from app.layout.composer import LayoutComposer, compose_layout

__all__ = [
    "LayoutEdge",
    "LayoutNode",
    "LayoutResult",
    "Position",
    "GraphLevelAssigner",
    "CollapseStateManager",
    "LayoutComposer",
    "compose_layout",
]
