"""
Graph filtering module for the commfilter library.

Produces induced subgraphs: a node subset together with every original edge
whose endpoints both survive. Filtering never modifies its input, so the same
graph can be filtered repeatedly with different drop sets.
"""

from typing import Iterable

from ..common.logging_config import get_logger, log_function_entry
from .graph import Graph, NodeId

logger = get_logger(__name__)


def filter_graph(graph: Graph, dropped: Iterable[NodeId]) -> Graph:
    """
    Remove ``dropped`` nodes and every edge touching them.

    Parameters
    ----------
    graph : Graph
        Graph to filter (left unchanged)
    dropped : Iterable[NodeId]
        Node ids to remove. Ids that are not graph nodes are ignored.

    Returns
    -------
    Graph
        New graph with nodes ``graph.nodes() - dropped`` in their original
        order, the surviving edges in their original order and multiplicity,
        and the attributes of the surviving nodes. Dropping every node yields
        an empty graph.

    Examples
    --------
    >>> g = Graph(["A", "B", "C"], [("A", "B"), ("B", "C")])
    >>> filter_graph(g, {"C"}).edges()
    (Edge(source='A', target='B', weight=1.0),)
    """
    drop_set = frozenset(dropped)

    log_function_entry(
        "filter_graph",
        graph_nodes=graph.number_of_nodes(),
        graph_edges=graph.number_of_edges(),
        dropped=len(drop_set)
    )

    unknown = [node for node in drop_set if not graph.has_node(node)]
    if unknown:
        logger.debug("Ignoring %d drop ids that are not graph nodes", len(unknown))

    kept_nodes = [node for node in graph.nodes() if node not in drop_set]
    kept_edges = [
        edge for edge in graph.edges()
        if edge.source not in drop_set and edge.target not in drop_set
    ]
    table = graph.attribute_table()
    kept_attributes = {node: table[node] for node in kept_nodes if node in table}

    filtered = Graph(
        kept_nodes,
        kept_edges,
        directed=graph.directed,
        attributes=kept_attributes,
        weighted=graph.weighted
    )

    logger.info(
        "Graph filtering completed: %d -> %d nodes, %d -> %d edges",
        graph.number_of_nodes(), filtered.number_of_nodes(),
        graph.number_of_edges(), filtered.number_of_edges()
    )

    return filtered


def keep_nodes(graph: Graph, kept: Iterable[NodeId]) -> Graph:
    """Induced subgraph on ``kept`` (the complement form of ``filter_graph``)."""
    kept_set = frozenset(kept)
    return filter_graph(graph, [node for node in graph.nodes() if node not in kept_set])
