"""
Graph construction module for the commfilter library.

Builds ``Graph`` values from a delimited-text edge list and an optional node
attribute table keyed by node id. Tables are read and validated with polars;
the result is an immutable graph whose nodes carry the attribute columns.
"""

from typing import Any, Dict, List, Optional, Union
import warnings
from pathlib import Path

import polars as pl

from ..common.exceptions import (
    GraphConstructionError,
    ValidationError,
    DataFormatError
)
from ..common.validators import validate_edgelist_dataframe, validate_node_table
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from .graph import Edge, Graph

logger = get_logger(__name__)

TableInput = Union[str, Path, pl.DataFrame]


def build_graph(
    edgelist: TableInput,
    nodes: Optional[TableInput] = None,
    source_col: str = "from",
    target_col: str = "to",
    weight_col: Optional[str] = None,
    node_id_col: str = "id",
    directed: bool = True,
    allow_self_loops: bool = True,
    separator: str = ","
) -> Graph:
    """
    Construct a graph from an edge list and an optional node table.

    Parameters
    ----------
    edgelist : Union[str, Path, pl.DataFrame]
        Path to a delimited-text file or a polars DataFrame with one row per
        edge. Repeated rows become parallel edges.
    nodes : Union[str, Path, pl.DataFrame], optional
        Node attribute table. When given, it defines the node set: every edge
        endpoint must appear in it, and nodes without edges are kept as
        isolated nodes. All columns other than ``node_id_col`` become node
        attributes.
    source_col : str, default "from"
        Name of the source node column
    target_col : str, default "to"
        Name of the target node column
    weight_col : str, optional
        Name of the edge weight column. Without it every edge weighs 1.0.
    node_id_col : str, default "id"
        Name of the id column in the node table
    directed : bool, default True
        Whether the graph is directed
    allow_self_loops : bool, default True
        If False, self-loops are dropped with an info log
    separator : str, default ","
        Field separator used when reading files

    Returns
    -------
    Graph
        Immutable graph value

    Raises
    ------
    DataFormatError
        If an input file cannot be read or parsed
    ValidationError
        If required columns are missing or hold invalid values
    GraphConstructionError
        If an edge references a node absent from the node table

    Examples
    --------
    >>> edges = pl.DataFrame({
    ...     "from": ["s01", "s01", "s02"],
    ...     "to": ["s02", "s03", "s03"],
    ...     "weight": [22, 5, 11]
    ... })
    >>> graph = build_graph(edges, weight_col="weight")
    >>> graph.nodes()
    ('s01', 's02', 's03')

    Notes
    -----
    Without a node table, nodes are ordered by first appearance in the edge
    list (source before target on each row). With a node table, the table's
    row order is used.
    """
    log_function_entry(
        "build_graph",
        edgelist=type(edgelist).__name__,
        nodes=type(nodes).__name__,
        directed=directed
    )

    with LoggingTimer("build_graph"):
        try:
            edge_df = _load_table(edgelist, separator, "edge list")
            validate_edgelist_dataframe(edge_df, source_col, target_col, weight_col)

            if not allow_self_loops:
                initial_count = len(edge_df)
                edge_df = edge_df.filter(pl.col(source_col) != pl.col(target_col))
                removed_count = initial_count - len(edge_df)
                if removed_count > 0:
                    logger.info("Removed %d self-loop edges", removed_count)

            if nodes is not None:
                node_df = _load_table(nodes, separator, "node table")
                validate_node_table(node_df, node_id_col)
                node_ids, attributes = _node_table_to_attributes(node_df, node_id_col)
                _check_endpoints(edge_df, source_col, target_col, set(node_ids))
            else:
                node_ids = _nodes_from_edges(edge_df, source_col, target_col)
                attributes = {}

            if edge_df.is_empty():
                warnings.warn("Empty edge list provided. Creating graph without edges.")

            edges = _edges_from_table(edge_df, source_col, target_col, weight_col)

            graph = Graph(
                node_ids,
                edges,
                directed=directed,
                attributes=attributes,
                weighted=weight_col is not None
            )

            logger.info(
                "Graph construction completed: %d nodes, %d edges, directed=%s, weighted=%s",
                graph.number_of_nodes(), graph.number_of_edges(), directed,
                weight_col is not None
            )

            return graph

        except (ValidationError, GraphConstructionError):
            raise
        except Exception as e:
            raise GraphConstructionError(
                f"Unexpected error during graph construction: {str(e)}",
                operation="build_graph",
                cause=e
            ) from e


def _load_table(table: TableInput, separator: str, description: str) -> pl.DataFrame:
    """
    Load a table from a file path or return a DataFrame as-is.

    Raises
    ------
    DataFormatError
        If the file does not exist, cannot be parsed, or the input type is
        not supported
    """
    if isinstance(table, pl.DataFrame):
        return table

    if isinstance(table, (str, Path)):
        file_path = Path(table)

        if not file_path.exists():
            raise DataFormatError(
                f"{description.capitalize()} file not found: {table}",
                format_type="CSV",
                file_path=str(table)
            )

        logger.debug("Loading %s from file: %s", description, file_path)
        try:
            return pl.read_csv(file_path, separator=separator)
        except (pl.exceptions.ComputeError, pl.exceptions.NoDataError) as e:
            raise DataFormatError(
                f"Failed to parse {description} file: {str(e)}",
                format_type="CSV",
                file_path=str(table),
                cause=e
            ) from e

    raise DataFormatError(
        f"Invalid {description} type: {type(table)}. Expected path or pl.DataFrame",
        format_type="DataFrame"
    )


def _node_table_to_attributes(node_df: pl.DataFrame, node_id_col: str):
    """Split a node table into ordered ids and a per-node attribute mapping."""
    node_ids = node_df[node_id_col].to_list()
    attribute_cols = [col for col in node_df.columns if col != node_id_col]

    attributes: Dict[Any, Dict[str, Any]] = {}
    if attribute_cols:
        for row in node_df.iter_rows(named=True):
            node_id = row.pop(node_id_col)
            attributes[node_id] = row

    logger.debug("Loaded %d nodes with attributes %s", len(node_ids), attribute_cols)
    return node_ids, attributes


def _check_endpoints(
    edge_df: pl.DataFrame,
    source_col: str,
    target_col: str,
    known_ids: set
) -> None:
    endpoints = set(edge_df[source_col].to_list()) | set(edge_df[target_col].to_list())
    unknown = endpoints - known_ids
    if unknown:
        raise GraphConstructionError(
            f"{len(unknown)} edge endpoint(s) are missing from the node table",
            node_count=len(known_ids),
            edge_count=len(edge_df),
            operation="join_node_table",
            details={"unknown_nodes": sorted(unknown, key=str)[:10]}
        )


def _nodes_from_edges(edge_df: pl.DataFrame, source_col: str, target_col: str) -> List[Any]:
    seen: Dict[Any, None] = {}
    for source, target in edge_df.select([source_col, target_col]).iter_rows():
        seen.setdefault(source, None)
        seen.setdefault(target, None)
    return list(seen)


def _edges_from_table(
    edge_df: pl.DataFrame,
    source_col: str,
    target_col: str,
    weight_col: Optional[str]
) -> List[Edge]:
    if weight_col is None:
        return [Edge(s, t) for s, t in edge_df.select([source_col, target_col]).iter_rows()]
    return [
        Edge(s, t, float(w))
        for s, t, w in edge_df.select([source_col, target_col, weight_col]).iter_rows()
    ]


def get_graph_info(graph: Graph) -> Dict[str, Any]:
    """
    Get basic statistics about a graph.

    Examples
    --------
    >>> info = get_graph_info(graph)
    >>> print(f"Nodes: {info['num_nodes']}, Edges: {info['num_edges']}")
    """
    n_nodes = graph.number_of_nodes()
    n_edges = graph.number_of_edges()
    self_loops = sum(1 for edge in graph.edges() if edge.source == edge.target)
    distinct_pairs = len({(edge.source, edge.target) for edge in graph.edges()})

    if n_nodes > 1:
        possible = n_nodes * (n_nodes - 1)
        if not graph.directed:
            possible /= 2
        density = distinct_pairs / possible
    else:
        density = 0.0

    return {
        "num_nodes": n_nodes,
        "num_edges": n_edges,
        "directed": graph.directed,
        "weighted": graph.weighted,
        "num_self_loops": self_loops,
        "num_parallel_edges": n_edges - distinct_pairs,
        "density": density,
        "attributes": graph.attribute_names()
    }
