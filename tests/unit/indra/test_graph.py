"""Unit tests for the mirrored adjacency index."""

from __future__ import annotations

from indra.core.graph import DependencyGraph
from indra.core.types import Connections, DependencyCycle, TaskNotFound


def _graph(*ids: str) -> DependencyGraph:
    graph = DependencyGraph()
    for task_id in ids:
        graph.ensure_node(task_id)
    return graph


def test_ensure_node_is_idempotent() -> None:
    graph = _graph("a", "b")
    graph.add_dependency("a", "b")
    graph.ensure_node("a")
    assert graph.dependencies("a") == {"b"}
    assert len(graph) == 2


def test_add_dependency_mirrors_both_sides() -> None:
    graph = _graph("a", "b")
    assert graph.add_dependency("a", "b") is None
    assert graph.dependencies("a") == {"b"}
    assert graph.dependees("b") == {"a"}
    assert graph.dependees("a") == frozenset()
    assert graph.dependencies("b") == frozenset()


def test_add_dependency_twice_is_noop() -> None:
    graph = _graph("a", "b")
    graph.add_dependency("a", "b")
    assert graph.add_dependency("a", "b") is None
    assert graph.snapshot()["a"] == Connections(dependencies=frozenset({"b"}), dependees=frozenset())


def test_add_dependency_names_missing_operand() -> None:
    graph = _graph("a")
    assert graph.add_dependency("x", "a") == TaskNotFound("x", "dependee")
    assert graph.add_dependency("a", "y") == TaskNotFound("y", "dependent")
    assert graph.dependencies("a") == frozenset()


def test_remove_dependency_absent_edge_is_noop() -> None:
    graph = _graph("a", "b")
    assert graph.remove_dependency("a", "b") is None
    assert graph.remove_dependency("a", "zzz") == TaskNotFound("zzz", "dependent")


def test_remove_node_severs_every_edge() -> None:
    graph = _graph("a", "b", "c", "d")
    graph.add_dependency("a", "b")
    graph.add_dependency("b", "c")
    graph.add_dependency("d", "b")
    assert graph.remove_node("b") is None
    assert "b" not in graph
    assert graph.dependencies("a") == frozenset()
    assert graph.dependencies("d") == frozenset()
    assert graph.dependees("c") == frozenset()
    assert graph.remove_node("b") == TaskNotFound("b")


def test_self_edge_rejected() -> None:
    graph = _graph("a")
    assert graph.add_dependency("a", "a") == DependencyCycle("a", "a", ("a", "a"))
    assert graph.dependencies("a") == frozenset()


def test_cycle_closing_edge_rejected_and_graph_unchanged() -> None:
    graph = _graph("a", "b", "c")
    graph.add_dependency("a", "b")
    graph.add_dependency("b", "c")
    before = graph.snapshot()
    err = graph.add_dependency("c", "a")
    assert isinstance(err, DependencyCycle)
    assert err.path == ("c", "a", "b", "c")
    assert graph.snapshot() == before


def test_cycle_check_can_be_disabled() -> None:
    graph = _graph("a", "b")
    graph.add_dependency("a", "b")
    assert graph.add_dependency("b", "a", reject_cycles=False) is None
    cycle = graph.find_cycle()
    assert isinstance(cycle, DependencyCycle)
    assert cycle.path == ("a", "b", "a")


def test_find_cycle_on_dag_is_none() -> None:
    graph = _graph("a", "b", "c", "d")
    graph.add_dependency("a", "b")
    graph.add_dependency("a", "c")
    graph.add_dependency("b", "d")
    graph.add_dependency("c", "d")
    assert graph.find_cycle() is None


def test_closure_follows_dependencies_only() -> None:
    graph = _graph("goal", "a", "b", "c", "other")
    graph.add_dependency("goal", "a")
    graph.add_dependency("a", "b")
    graph.add_dependency("a", "c")
    graph.add_dependency("other", "c")
    closure = graph.closure("a")
    assert closure[0] == "a"
    assert sorted(closure) == ["a", "b", "c"]
    assert graph.closure("missing") == TaskNotFound("missing")


def test_scoped_copy_is_independent_and_self_consistent() -> None:
    graph = _graph("goal", "a", "b")
    graph.add_dependency("goal", "a")
    graph.add_dependency("a", "b")
    work = graph.copy(["a", "b"])
    assert work.dependees("a") == frozenset()
    work.remove_node("b")
    assert graph.dependencies("a") == {"b"}
    assert graph.dependees("b") == {"a"}
    assert work.dependencies("a") == frozenset()


def test_leaves_and_roots() -> None:
    graph = _graph("a", "b", "c", "lonely")
    graph.add_dependency("a", "b")
    graph.add_dependency("b", "c")
    assert graph.leaves() == ["c", "lonely"]
    assert graph.roots() == ["a", "lonely"]


def test_snapshot_is_detached() -> None:
    graph = _graph("a", "b")
    snapshot = graph.snapshot()
    graph.add_dependency("a", "b")
    assert snapshot["a"].dependencies == frozenset()


def test_to_networkx_scoped_edges() -> None:
    graph = _graph("goal", "a", "b")
    graph.add_dependency("goal", "a")
    graph.add_dependency("a", "b")
    digraph = graph.to_networkx(["a", "b"])
    assert sorted(digraph.nodes) == ["a", "b"]
    assert list(digraph.edges) == [("a", "b")]
    assert sorted(graph.to_networkx().edges) == [("a", "b"), ("goal", "a")]


def test_find_path_follows_dependencies() -> None:
    graph = _graph("a", "b", "c")
    graph.add_dependency("a", "b")
    graph.add_dependency("b", "c")
    assert graph.find_path("a", "c") == ("a", "b", "c")
    assert graph.find_path("c", "a") is None
    assert graph.find_path("a", "missing") is None


def test_find_cycle_ignores_cycles_outside_scope() -> None:
    graph = _graph("a", "b", "x", "y")
    graph.add_dependency("a", "b")
    graph.add_dependency("x", "y")
    graph.add_dependency("y", "x", reject_cycles=False)
    assert graph.find_cycle(["a", "b"]) is None
    assert graph.find_cycle([]) is None
    cycle = graph.find_cycle(["x", "y"])
    assert isinstance(cycle, DependencyCycle)
    assert cycle.path == ("x", "y", "x")
    assert (cycle.dependee, cycle.dependent) == ("y", "x")


def test_find_cycle_reports_self_loop() -> None:
    graph = _graph("a")
    graph.add_dependency("a", "a", reject_cycles=False)
    cycle = graph.find_cycle()
    assert isinstance(cycle, DependencyCycle)
    assert cycle.path == ("a", "a")
