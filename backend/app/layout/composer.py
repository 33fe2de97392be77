"""
Layout Composer - turns one graph query result into a renderable layout.

Pipeline:
1. Validate the raw nodes/edges (issues are reported, never fatal)
2. Collapse duplicates, drop edges whose endpoints are not in the result
3. Assign levels (GraphLevelAssigner)
4. Position by level column / row index, attach parent + style
5. Initial collapse / hidden state (CollapseStateManager)
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from app import config
from app.ir.graph_ir import GraphEdge, GraphNode, GraphSnapshot
from app.layout.collapse import CollapseStateManager
from app.layout.context import LayoutContext
from app.layout.levels import GraphLevelAssigner
from app.layout.types import LayoutEdge, LayoutNode, LayoutResult, Position
from app.validation.graph_validator import GraphValidator
from app.visual.visual_style import style_for

logger = logging.getLogger(__name__)


class LayoutComposer:

    def __init__(
        self,
        level_assigner: Optional[GraphLevelAssigner] = None,
        column_width: Optional[float] = None,
        row_height: Optional[float] = None,
    ):
        self.level_assigner = level_assigner or GraphLevelAssigner()
        self.column_width = config.LAYOUT_COLUMN_WIDTH if column_width is None else column_width
        self.row_height = config.LAYOUT_ROW_HEIGHT if row_height is None else row_height
        self.validator = GraphValidator()

    def compose(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> LayoutResult:
        validation = self.validator.validate(nodes, edges)

        snapshot = GraphSnapshot(nodes=list(nodes), edges=list(edges))
        node_ids = {n.id for n in snapshot.nodes}
        kept_edges = [e for e in snapshot.edges if e.source in node_ids and e.target in node_ids]
        if len(kept_edges) < len(snapshot.edges):
            logger.warning(
                "[LayoutComposer] Dropped %d edges with missing endpoints",
                len(snapshot.edges) - len(kept_edges),
            )

        context = LayoutContext.build(snapshot.nodes, kept_edges)
        self.level_assigner.run(context)

        layout_nodes = self._place(context)
        layout_edges = [
            LayoutEdge(
                id=e.id,
                source=e.source,
                target=e.target,
                label=e.label,
                relationship_type=e.relationship_type,
            )
            for e in kept_edges
        ]

        CollapseStateManager(layout_nodes, layout_edges).initialize()

        result = LayoutResult(
            nodes=layout_nodes,
            edges=layout_edges,
            roots=list(context.roots),
            issues=validation.issues,
        )
        logger.info(
            "[LayoutComposer] %d nodes, %d edges, %d roots, %d visible",
            len(layout_nodes), len(layout_edges), len(result.roots), len(result.visible_ids),
        )
        return result

    def compose_snapshot(self, snapshot: GraphSnapshot) -> LayoutResult:
        return self.compose(snapshot.nodes, snapshot.edges)

    # ---------- positioning ----------

    def _place(self, context: LayoutContext) -> List[LayoutNode]:
        by_level: Dict[int, List[GraphNode]] = OrderedDict()
        for node in sorted(context.nodes, key=lambda n: n.level):
            by_level.setdefault(node.level, []).append(node)

        placed: Dict[str, LayoutNode] = {}
        for level, members in by_level.items():
            for index, node in enumerate(members):
                style = style_for(node.node_type)
                placed[node.id] = LayoutNode(
                    id=node.id,
                    label=node.label,
                    node_type=node.node_type,
                    level=node.level,
                    properties=node.properties,
                    position=Position(x=level * self.column_width, y=index * self.row_height),
                    parent_id=context.primary_parent(node.id),
                    collapsible=bool(context.children(node.id)),
                    is_reverse=node.id in context.reverse_ids,
                    shape=style["shape"],
                    color=style["color"],
                )

        # Keep input order in the output
        return [placed[n.id] for n in context.nodes]


def compose_layout(nodes: List[GraphNode], edges: List[GraphEdge]) -> LayoutResult:
    return LayoutComposer().compose(nodes, edges)
