"""Structural checks on graph query results"""

from app.ir.graph_ir import GraphEdge, GraphNode
from app.validation import ValidationSeverity, validate_graph


def _nodes(*ids):
    return [GraphNode(id=i, label=i) for i in ids]


def _edge(source, target, edge_id=None, rel=""):
    return GraphEdge(id=edge_id or f"{source}->{target}", source=source, target=target, relationship_type=rel)


def test_clean_graph_has_no_issues():
    result = validate_graph(_nodes("A", "B"), [_edge("A", "B")])

    assert result.is_valid
    assert result.issues == []
    assert result.stats == {"nodes": 2, "edges": 1}


def test_missing_endpoint_is_an_error():
    result = validate_graph(_nodes("A"), [_edge("A", "Z"), _edge("Y", "A")])

    assert not result.is_valid
    assert result.error_count == 2
    assert set(result.codes()) >= {"MISSING_TARGET_NODE", "MISSING_SOURCE_NODE"}


def test_cycle_is_reported_not_fatal():
    result = validate_graph(_nodes("A", "B"), [_edge("A", "B"), _edge("B", "A")])

    cycles = [i for i in result.issues if i.code == "CYCLE"]
    assert result.is_valid
    assert len(cycles) == 1
    assert cycles[0].severity == ValidationSeverity.INFO
    assert "A -> B -> A" in cycles[0].message


def test_self_loop_is_not_a_cycle():
    result = validate_graph(_nodes("A"), [_edge("A", "A")])

    assert "SELF_LOOP" in result.codes()
    assert "CYCLE" not in result.codes()


def test_orphans_empty_labels_and_duplicates():
    nodes = _nodes("A", "B", "LONE") + [GraphNode(id="A", label=""), GraphNode(id="C", label="  ")]
    edges = [
        _edge("A", "B", "e1", "CALLS"),
        _edge("A", "B", "e2", "CALLS"),
        _edge("B", "C", "e3"),
        _edge("B", "C", "e3"),
    ]

    result = validate_graph(nodes, edges)
    codes = result.codes()

    assert "ORPHANED_NODE" in codes
    assert "DUPLICATE_NODE_ID" in codes
    assert "DUPLICATE_EDGE_ID" in codes
    assert "DUPLICATE_EDGE" in codes
    assert codes.count("EMPTY_LABEL") == 2
    assert result.warning_count == 2


def test_issue_to_dict():
    result = validate_graph(_nodes("A"), [_edge("A", "A")])
    issue = result.to_dict()["issues"][0]

    assert issue["severity"] == "warning"
    assert issue["code"] == "SELF_LOOP"
    assert issue["node_id"] == "A"
    assert issue["edge_info"] == "A -> A"
