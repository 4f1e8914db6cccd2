"""
Tests for GraphStore
"""

import pytest

from schedgraph.core.graph.store import GraphStore
from schedgraph.core.types import Dependency, DependencyType, ScheduleItem


def dep(id, predecessor_id, successor_id, **kwargs):
    return Dependency(
        id=id, schedule_id="s", predecessor_id=predecessor_id, successor_id=successor_id, **kwargs
    )


@pytest.fixture
def graph():
    g = GraphStore("s", [ScheduleItem(id=i, name=i.upper()) for i in ("a", "b", "c")])
    g.add_edge(dep("d1", "a", "b"))
    g.add_edge(dep("d2", "a", "c"))
    g.add_edge(dep("d3", "b", "c"))
    return g


class TestGraphStore:
    def test_items(self, graph):
        assert graph.has_item("a")
        assert not graph.has_item("z")
        assert graph.get_item("b").name == "B"
        assert [i.id for i in graph.list_items()] == ["a", "b", "c"]

    def test_edges_keep_insertion_order(self, graph):
        assert [e.id for e in graph.list_edges()] == ["d1", "d2", "d3"]
        assert len(graph) == 3
        assert "d2" in graph

    def test_outgoing_and_incoming(self, graph):
        assert [e.id for e in graph.outgoing("a")] == ["d1", "d2"]
        assert [e.id for e in graph.incoming("c")] == ["d2", "d3"]
        assert graph.outgoing("c") == []
        assert graph.incoming("unknown") == []

    def test_edge_between(self, graph):
        assert graph.edge_between("a", "b").id == "d1"
        assert graph.edge_between("b", "a") is None

    def test_add_duplicate_id_raises(self, graph):
        with pytest.raises(KeyError):
            graph.add_edge(dep("d1", "b", "a"))

    def test_remove_edge_updates_indices(self, graph):
        removed = graph.remove_edge("d2")
        assert removed.id == "d2"
        assert [e.id for e in graph.outgoing("a")] == ["d1"]
        assert [e.id for e in graph.incoming("c")] == ["d3"]
        assert graph.edge_between("a", "c") is None

    def test_remove_unknown_raises(self, graph):
        with pytest.raises(KeyError):
            graph.remove_edge("nope")

    def test_replace_edge(self, graph):
        graph.replace_edge(dep("d1", "a", "b", type=DependencyType.start_to_start, lag=2))
        edge = graph.get_edge("d1")
        assert edge.type == DependencyType.start_to_start
        assert edge.lag == 2
        assert [e.id for e in graph.list_edges()] == ["d1", "d2", "d3"]

    def test_replace_edge_rejects_new_endpoints(self, graph):
        with pytest.raises(ValueError):
            graph.replace_edge(dep("d1", "b", "a"))

    def test_revision_is_owned_by_the_caller(self, graph):
        assert graph.revision == 0
        graph.remove_edge("d3")
        graph.add_edge(dep("d4", "c", "b"))
        assert graph.revision == 0
        graph.revision = 7
        assert "revision=7" in repr(graph)

    def test_edges_outlive_their_items(self, graph):
        """Items are reference data; dropping one keeps its edges."""
        graph.replace_items([ScheduleItem(id="a", name="A")])
        assert not graph.has_item("b")
        assert graph.get_edge("d1") is not None
