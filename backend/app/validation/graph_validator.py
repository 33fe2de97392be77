"""
Graph Validator - Reports structural problems in a graph query result.

Nothing here is fatal: layout runs on whatever the query returned and the
issues travel with the response.

Catches issues like:
- Duplicate node / edge ids
- Edges referencing nodes missing from the result
- Self-loops and duplicate edges
- Orphaned nodes (no connections)
- Cycles (handled by layout, reported for visibility)
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from app.ir.graph_ir import GraphEdge, GraphNode

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    ERROR = "error"      # Part of the graph cannot be placed
    WARNING = "warning"  # Graph lays out but may look odd
    INFO = "info"


@dataclass
class ValidationIssue:
    severity: ValidationSeverity
    code: str
    message: str
    node_id: Optional[str] = None
    edge_info: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
        }


@dataclass
class GraphValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }


class GraphValidator:
    """
    Usage:
        result = GraphValidator().validate(nodes, edges)
        for issue in result.issues:
            print(f"[{issue.severity.value}] {issue.message}")
    """

    def validate(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> GraphValidationResult:
        node_ids = {n.id for n in nodes}

        issues: List[ValidationIssue] = []
        issues.extend(self._check_duplicate_ids(nodes, "node"))
        issues.extend(self._check_duplicate_ids(edges, "edge"))
        issues.extend(self._check_empty_labels(nodes))
        issues.extend(self._check_missing_edge_references(edges, node_ids))
        issues.extend(self._check_self_loops(edges))
        issues.extend(self._check_duplicate_edges(edges))
        issues.extend(self._check_orphaned_nodes(edges, node_ids))
        issues.extend(self._check_cycles(nodes, edges))

        result = GraphValidationResult(
            issues=issues,
            stats={"nodes": len(node_ids), "edges": len(edges)},
        )
        if issues:
            logger.info(
                "[GraphValidator] %d issues (%d errors, %d warnings)",
                len(issues), result.error_count, result.warning_count,
            )
        return result

    def _check_duplicate_ids(self, items, kind: str) -> List[ValidationIssue]:
        counts: Dict[str, int] = defaultdict(int)
        for item in items:
            counts[item.id] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code=f"DUPLICATE_{kind.upper()}_ID",
                message=f"{kind.title()} id '{item_id}' appears {count} times, first kept",
                node_id=item_id if kind == "node" else None,
            )
            for item_id, count in counts.items()
            if count > 1
        ]

    def _check_empty_labels(self, nodes: List[GraphNode]) -> List[ValidationIssue]:
        issues = []
        for node in nodes:
            if not node.label or not node.label.strip():
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="EMPTY_LABEL",
                    message=f"Node '{node.id}' has empty label",
                    node_id=node.id,
                ))
        return issues

    def _check_missing_edge_references(self, edges: List[GraphEdge], node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for edge in edges:
            for end, code in ((edge.source, "MISSING_SOURCE_NODE"), (edge.target, "MISSING_TARGET_NODE")):
                if end not in node_ids:
                    issues.append(ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code=code,
                        message=f"Edge '{edge.id}' references node '{end}' not in the result",
                        edge_info=f"{edge.source} -> {edge.target}",
                    ))
        return issues

    def _check_self_loops(self, edges: List[GraphEdge]) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="SELF_LOOP",
                message=f"Edge creates self-loop on node '{edge.source}'",
                node_id=edge.source,
                edge_info=f"{edge.source} -> {edge.target}",
            )
            for edge in edges
            if edge.source == edge.target
        ]

    def _check_duplicate_edges(self, edges: List[GraphEdge]) -> List[ValidationIssue]:
        counts: Dict[Tuple[str, str, str], int] = defaultdict(int)
        for edge in edges:
            counts[(edge.source, edge.target, edge.relationship_type)] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="DUPLICATE_EDGE",
                message=f"Edge '{source}' -> '{target}' ({rel}) appears {count} times",
                edge_info=f"{source} -> {target}",
            )
            for (source, target, rel), count in counts.items()
            if count > 1
        ]

    def _check_orphaned_nodes(self, edges: List[GraphEdge], node_ids: Set[str]) -> List[ValidationIssue]:
        connected = {e.source for e in edges} | {e.target for e in edges}
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="ORPHANED_NODE",
                message=f"Node '{node_id}' has no connections and stays at level 0",
                node_id=node_id,
            )
            for node_id in sorted(node_ids - connected)
        ]

    def _check_cycles(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> List[ValidationIssue]:
        adjacency: Dict[str, List[str]] = defaultdict(list)
        for edge in edges:
            if edge.source != edge.target:
                adjacency[edge.source].append(edge.target)

        # Iterative DFS, colors: 0 new, 1 on stack, 2 done
        color: Dict[str, int] = defaultdict(int)
        cycles: List[List[str]] = []

        for start in [n.id for n in nodes]:
            if color[start]:
                continue
            stack = [(start, iter(adjacency.get(start, [])))]
            path = [start]
            color[start] = 1
            while stack:
                current, neighbors = stack[-1]
                advanced = False
                for neighbor in neighbors:
                    if color[neighbor] == 0:
                        color[neighbor] = 1
                        path.append(neighbor)
                        stack.append((neighbor, iter(adjacency.get(neighbor, []))))
                        advanced = True
                        break
                    if color[neighbor] == 1:
                        cycles.append(path[path.index(neighbor):] + [neighbor])
                if not advanced:
                    color[current] = 2
                    path.pop()
                    stack.pop()

        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="CYCLE",
                message="Cycle detected: " + " -> ".join(cycle),
                node_id=cycle[0],
            )
            for cycle in cycles
        ]


def validate_graph(nodes: List[GraphNode], edges: List[GraphEdge]) -> GraphValidationResult:
    return GraphValidator().validate(nodes, edges)
