"""
Tests for graph construction from edge lists and node tables.
"""

import os
import tempfile

import pytest
import polars as pl

from commfilter.network.construction import build_graph, get_graph_info
from commfilter.network.graph import Edge
from commfilter.common.exceptions import (
    DataFormatError,
    GraphConstructionError,
    ValidationError
)


class TestBuildGraphFromDataFrame:
    """Test build_graph with in-memory tables."""

    def setup_method(self):
        self.edges = pl.DataFrame({
            "from": ["s01", "s01", "s02", "s03", "s01"],
            "to": ["s02", "s03", "s03", "s01", "s02"],
            "weight": [22, 5, 11, 4, 3]
        })
        self.nodes = pl.DataFrame({
            "id": ["s01", "s02", "s03", "s04"],
            "media": ["NY Times", "Washington Post", "Wall Street Journal", "USA Today"],
            "audience.size": [20.0, 25.0, 30.0, 32.0]
        })

    def test_nodes_in_first_appearance_order(self):
        graph = build_graph(self.edges)

        assert graph.nodes() == ("s01", "s02", "s03")
        assert graph.number_of_edges() == 5
        assert graph.directed
        assert not graph.weighted
        assert all(edge.weight == 1.0 for edge in graph.edges())

    def test_weighted(self):
        graph = build_graph(self.edges, weight_col="weight")

        assert graph.weighted
        assert graph.edges()[0] == Edge("s01", "s02", 22.0)

    def test_parallel_edges_preserved(self):
        with pytest.warns(UserWarning, match="parallel edges"):
            graph = build_graph(self.edges)
        pairs = [(e.source, e.target) for e in graph.edges()]
        assert pairs.count(("s01", "s02")) == 2

    def test_node_table(self):
        graph = build_graph(self.edges, nodes=self.nodes, weight_col="weight")

        assert graph.nodes() == ("s01", "s02", "s03", "s04")
        assert graph.degree("s04") == 0
        assert graph.attribute("s02", "media") == "Washington Post"
        assert graph.attribute("s04", "audience.size") == 32.0
        assert graph.attribute_names() == ["media", "audience.size"]

    def test_undirected(self):
        graph = build_graph(self.edges, directed=False)
        assert not graph.directed

    def test_drop_self_loops(self):
        edges = pl.DataFrame({"from": ["A", "B"], "to": ["A", "C"]})
        graph = build_graph(edges, allow_self_loops=False)

        assert graph.edges() == (Edge("B", "C"),)
        assert graph.nodes() == ("B", "C")

    def test_custom_columns(self):
        edges = pl.DataFrame({"src": [1, 2], "dst": [2, 3]})
        graph = build_graph(edges, source_col="src", target_col="dst")
        assert graph.nodes() == (1, 2, 3)

    def test_empty_edge_list(self):
        edges = pl.DataFrame({"from": [], "to": []}, schema={"from": pl.Utf8, "to": pl.Utf8})
        with pytest.warns(UserWarning, match="Empty edge list"):
            graph = build_graph(edges)
        assert graph.is_empty()

    def test_empty_edge_list_with_node_table(self):
        edges = pl.DataFrame({"from": [], "to": []}, schema={"from": pl.Utf8, "to": pl.Utf8})
        with pytest.warns(UserWarning):
            graph = build_graph(edges, nodes=self.nodes)
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 0

    def test_unknown_endpoint(self):
        nodes = self.nodes.filter(pl.col("id") != "s03")
        with pytest.raises(GraphConstructionError) as exc_info:
            build_graph(self.edges, nodes=nodes)
        assert exc_info.value.operation == "join_node_table"
        assert exc_info.value.details["unknown_nodes"] == ["s03"]

    def test_missing_columns(self):
        with pytest.raises(ValidationError):
            build_graph(self.edges, source_col="source")

    def test_invalid_input_type(self):
        with pytest.raises(DataFormatError):
            build_graph([("A", "B")])


class TestBuildGraphFromFiles:
    """Test build_graph reading delimited files."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.edge_path = os.path.join(self.temp_dir, "links.csv")
        self.node_path = os.path.join(self.temp_dir, "nodes.csv")

        with open(self.edge_path, "w") as f:
            f.write("from,to,weight\ns01,s02,22\ns02,s03,11\n")
        with open(self.node_path, "w") as f:
            f.write("id,media\ns01,NY Times\ns02,Washington Post\ns03,Wall Street Journal\n")

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_read_files(self):
        graph = build_graph(self.edge_path, nodes=self.node_path, weight_col="weight")

        assert graph.nodes() == ("s01", "s02", "s03")
        assert graph.edges()[1] == Edge("s02", "s03", 11.0)
        assert graph.attribute("s03", "media") == "Wall Street Journal"

    def test_custom_separator(self):
        tsv_path = os.path.join(self.temp_dir, "links.tsv")
        with open(tsv_path, "w") as f:
            f.write("from\tto\nA\tB\n")

        graph = build_graph(tsv_path, separator="\t")
        assert graph.edges() == (Edge("A", "B"),)

    def test_missing_file(self):
        with pytest.raises(DataFormatError, match="not found"):
            build_graph(os.path.join(self.temp_dir, "missing.csv"))


class TestGraphInfo:
    """Test get_graph_info statistics."""

    def test_info(self):
        edges = pl.DataFrame({"from": ["A", "A", "B", "C"], "to": ["B", "B", "C", "C"]})
        nodes = pl.DataFrame({"id": ["A", "B", "C"], "media": ["x", "y", "z"]})
        with pytest.warns(UserWarning):
            graph = build_graph(edges, nodes=nodes)

        info = get_graph_info(graph)
        assert info["num_nodes"] == 3
        assert info["num_edges"] == 4
        assert info["num_self_loops"] == 1
        assert info["num_parallel_edges"] == 1
        assert info["density"] == pytest.approx(3 / 6)
        assert info["attributes"] == ["media"]

    def test_single_node_density(self):
        from commfilter.network.graph import Graph
        assert get_graph_info(Graph(["A"]))["density"] == 0.0
