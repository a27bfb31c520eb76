"""
Tests for the immutable Graph value and its networkit conversion.
"""

import pytest

from commfilter.network.graph import Edge, Graph
from commfilter.common.exceptions import GraphConstructionError


class TestGraphConstruction:
    """Test Graph creation and validation."""

    def setup_method(self):
        self.graph = Graph(
            ["A", "B", "C", "D"],
            [("A", "B"), ("B", "C", 2.0), Edge("A", "B", 3.0), ("C", "C")],
            attributes={"A": {"media": "NYT", "type": 1}, "C": {"media": "WSJ"}},
            weighted=True
        )

    def test_nodes_and_edges(self):
        assert self.graph.nodes() == ("A", "B", "C", "D")
        assert self.graph.number_of_nodes() == 4
        assert self.graph.number_of_edges() == 4
        assert self.graph.edges()[1] == Edge("B", "C", 2.0)
        assert self.graph.directed
        assert self.graph.weighted

    def test_tuple_edges_default_weight(self):
        assert self.graph.edges()[0].weight == 1.0
        assert isinstance(self.graph.edges()[0].weight, float)

    def test_parallel_edges_kept(self):
        pairs = [(e.source, e.target) for e in self.graph.edges()]
        assert pairs.count(("A", "B")) == 2

    def test_duplicate_nodes(self):
        with pytest.raises(GraphConstructionError, match="unique"):
            Graph(["A", "B", "A"])

    def test_dangling_edge(self):
        with pytest.raises(GraphConstructionError) as exc_info:
            Graph(["A"], [("A", "B")])
        assert exc_info.value.operation == "add_edges"

    def test_attributes_for_unknown_node(self):
        with pytest.raises(GraphConstructionError, match="unknown node"):
            Graph(["A"], attributes={"Z": {"media": "X"}})

    def test_empty_graph(self):
        graph = Graph()
        assert graph.is_empty()
        assert graph.nodes() == ()
        assert len(graph) == 0


class TestGraphAccessors:
    """Test attribute and degree lookup."""

    def setup_method(self):
        self.graph = Graph(
            ["A", "B", "C"],
            [("A", "B"), ("B", "C"), ("A", "B"), ("C", "C")],
            attributes={"A": {"media": "NYT", "audience": 10}, "B": {"media": "WaPo"}}
        )

    def test_attribute(self):
        assert self.graph.attribute("A", "media") == "NYT"
        assert self.graph.attribute("C", "media", None) is None

    def test_missing_attribute(self):
        with pytest.raises(KeyError):
            self.graph.attribute("C", "media")
        with pytest.raises(KeyError):
            self.graph.attribute("Z", "media", None)

    def test_attributes_are_copies(self):
        fields = self.graph.attributes("A")
        fields["media"] = "changed"
        assert self.graph.attribute("A", "media") == "NYT"

    def test_attribute_names(self):
        assert self.graph.attribute_names() == ["media", "audience"]

    def test_degree(self):
        assert self.graph.degree("A", "out") == 2
        assert self.graph.degree("B", "in") == 2
        assert self.graph.degree("B") == 3
        assert self.graph.degree("C") == 3

    def test_contains(self):
        assert "A" in self.graph
        assert "Z" not in self.graph
        assert self.graph.has_node("B")


class TestGraphValueSemantics:
    """Test equality and hashing."""

    def test_equal_graphs(self):
        a = Graph(["A", "B"], [("A", "B")], attributes={"A": {"x": 1}})
        b = Graph(["A", "B"], [Edge("A", "B", 1.0)], attributes={"A": {"x": 1}})
        assert a == b

    def test_node_order_matters(self):
        assert Graph(["A", "B"]) != Graph(["B", "A"])

    def test_direction_matters(self):
        assert Graph(["A"], directed=True) != Graph(["A"], directed=False)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Graph(["A"]))

    def test_repr(self):
        assert repr(Graph(["A", "B"], [("A", "B")])) == (
            "Graph(nodes=2, edges=1, directed=True, weighted=False)"
        )


class TestToNetworkit:
    """Test conversion to networkit graphs."""

    def setup_method(self):
        self.graph = Graph(
            ["A", "B", "C"],
            [("A", "B", 1.0), ("A", "B", 2.0), ("B", "A", 4.0), ("B", "C", 0.5)],
            weighted=True
        )

    def test_internal_ids_follow_node_order(self):
        nk_graph, mapper = self.graph.to_networkit()

        assert nk_graph.numberOfNodes() == 3
        assert nk_graph.isDirected()
        assert [mapper.get_original(i) for i in range(3)] == ["A", "B", "C"]

    def test_collapse_directed(self):
        nk_graph, mapper = self.graph.to_networkit(collapse_multi_edges=True)
        a, b = mapper.get_internal("A"), mapper.get_internal("B")

        assert nk_graph.numberOfEdges() == 3
        assert nk_graph.weight(a, b) == 3.0
        assert nk_graph.weight(b, a) == 4.0

    def test_collapse_undirected(self):
        nk_graph, mapper = self.graph.to_networkit(directed=False, collapse_multi_edges=True)
        a, b = mapper.get_internal("A"), mapper.get_internal("B")

        assert not nk_graph.isDirected()
        assert nk_graph.numberOfEdges() == 2
        assert nk_graph.weight(a, b) == 7.0

    def test_unweighted(self):
        nk_graph, _ = Graph(["A", "B"], [("A", "B")]).to_networkit()
        assert not nk_graph.isWeighted()
        assert nk_graph.numberOfEdges() == 1
