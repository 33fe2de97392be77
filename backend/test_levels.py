"""Level assignment over cyclic / disconnected / relates-back graphs"""

from app.ir.graph_ir import GraphNode
from app.layout.context import LayoutContext
from app.layout.levels import GraphLevelAssigner


def _levels(nodes):
    return {n.id: n.level for n in nodes}


def test_simple_chain(graph):
    nodes, edges = graph([("A", "B"), ("B", "C")])

    leveled = GraphLevelAssigner().assign_levels(nodes, edges)

    assert _levels(leveled) == {"A": 0, "B": 1, "C": 2}


def test_inputs_are_not_mutated(graph):
    nodes, edges = graph([("A", "B"), ("B", "C")])
    GraphLevelAssigner().assign_levels(nodes, edges)
    assert all(n.level == 0 for n in nodes)


def test_two_cycle_falls_back_to_outdegree_roots(graph):
    nodes, edges = graph([("A", "B"), ("B", "A")])

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.roots == ["A", "B"]
    assert _levels(context.nodes) == {"A": 0, "B": 0}


def test_fallback_takes_top_three_by_outdegree(graph):
    nodes, edges = graph([
        ("A", "B"), ("B", "C"), ("C", "D"), ("D", "A"),
        ("A", "C"), ("B", "D"), ("D", "B"),
    ])
    # outdegree: A=2, B=2, C=1, D=2

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.roots == ["A", "B", "D"]
    assert _levels(context.nodes) == {"A": 0, "B": 0, "C": 1, "D": 0}


def test_fallback_root_count_is_configurable(graph):
    nodes, edges = graph([("A", "B"), ("B", "C"), ("C", "A")])

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner(fallback_root_count=1).run(context)

    assert context.roots == ["A"]
    assert _levels(context.nodes) == {"A": 0, "B": 1, "C": 2}


def test_cycle_below_a_root_terminates(graph):
    nodes, edges = graph([("R", "A"), ("A", "B"), ("B", "A")])

    leveled = GraphLevelAssigner().assign_levels(nodes, edges)

    assert _levels(leveled) == {"R": 0, "A": 1, "B": 2}


def test_first_discovery_wins(graph):
    nodes, edges = graph([("A", "Z"), ("X", "Y"), ("Y", "Z")])

    leveled = GraphLevelAssigner().assign_levels(nodes, edges)

    assert _levels(leveled) == {"A": 0, "Z": 1, "X": 0, "Y": 1}


def test_relates_back_node_becomes_reverse(graph):
    nodes, edges = graph(
        [("A", "B"), ("R", "B")],
        types={"A": "Application", "B": "Component", "R": "BusinessFunction"},
    )

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.roots == ["A"]
    assert context.reverse_ids == {"R"}
    assert _levels(context.nodes) == {"A": 0, "B": 1, "R": 2}


def test_reverse_level_uses_deepest_visited_target(graph):
    nodes, edges = graph(
        [("A", "B"), ("B", "C"), ("R", "B"), ("R", "C")],
        types={"R": "BusinessCapability"},
    )

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.reverse_ids == {"R"}
    assert _levels(context.nodes)["R"] == 3


def test_relates_back_node_with_own_subtree_stays_root(graph):
    nodes, edges = graph([("R", "S")], types={"R": "BusinessFunction"})

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.roots == ["R"]
    assert context.reverse_ids == set()
    assert _levels(context.nodes) == {"R": 0, "S": 1}


def test_reverse_types_are_configurable(graph):
    nodes, edges = graph(
        [("A", "B"), ("R", "B")],
        types={"R": "BusinessFunction"},
    )

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner(reverse_node_types=[]).run(context)

    assert context.roots == ["A", "R"]
    assert context.reverse_ids == set()
    assert _levels(context.nodes) == {"A": 0, "B": 1, "R": 0}


def test_isolated_node_is_root_at_level_zero(graph):
    nodes, edges = graph([("A", "B")])
    nodes.append(GraphNode(id="LONE", label="Lone"))

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert "LONE" in context.roots
    assert _levels(context.nodes)["LONE"] == 0


def test_children_of_reverse_node_are_levelled_after_it(graph):
    nodes, edges = graph(
        [("A", "B"), ("R", "B"), ("R", "X"), ("X", "Y")],
        types={"R": "BusinessFunction"},
    )

    context = LayoutContext.build(nodes, edges)
    GraphLevelAssigner().run(context)

    assert context.roots == ["A"]
    assert context.reverse_ids == {"R"}
    assert _levels(context.nodes) == {"A": 0, "B": 1, "R": 2, "X": 3, "Y": 4}
    assert {"X", "Y"} <= context.visited
