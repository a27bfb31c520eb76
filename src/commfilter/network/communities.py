"""
Community detection module for the commfilter library.

Community detection is treated as a pluggable capability: any callable that
takes a ``Graph`` and returns a total mapping from node id to community id can
drive the rest of the pipeline. This module supplies concrete detectors built
on networkit:

- ``edge_betweenness``: Girvan-Newman divisive clustering. Edges with the
  highest betweenness are removed one at a time and the cut with the highest
  modularity is kept.
- ``louvain``: networkit's parallel Louvain method (PLM).
- ``label_propagation``: networkit's parallel label propagation (PLP).

All detectors work on the undirected view of the graph with parallel edges
merged into a single weighted edge.
"""

from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional
from collections import Counter
from functools import partial
import warnings

import networkit as nk
import numpy as np

from ..common.exceptions import ComputationError, validate_parameter, require_positive
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.config import AVAILABLE_ALGORITHMS
from .graph import Graph, NodeId

logger = get_logger(__name__)

CommunityAssignment = Mapping[NodeId, Hashable]
CommunityDetector = Callable[[Graph], CommunityAssignment]


def detect_communities(
    graph: Graph,
    algorithm: str = "edge_betweenness",
    resolution: float = 1.0,
    random_seed: Optional[int] = None
) -> Dict[NodeId, int]:
    """
    Assign every node of ``graph`` to a community.

    Parameters
    ----------
    graph : Graph
        Graph to cluster
    algorithm : str, default "edge_betweenness"
        One of "edge_betweenness", "louvain", "label_propagation"
    resolution : float, default 1.0
        Resolution (gamma) for the Louvain method. Ignored by the other
        algorithms.
    random_seed : int, optional
        Seed for networkit's random generator (louvain, label_propagation)

    Returns
    -------
    Dict[NodeId, int]
        Total mapping from node id to community id. Community ids are
        contiguous integers numbered by first appearance in ``graph.nodes()``.

    Raises
    ------
    ConfigurationError
        If the algorithm is unknown or resolution is not positive
    ComputationError
        If the underlying networkit algorithm fails

    Examples
    --------
    >>> membership = detect_communities(graph, algorithm="louvain", random_seed=42)
    >>> membership["s01"]
    0

    Notes
    -----
    Girvan-Newman recomputes edge betweenness after every removal, which costs
    O(m^2 n) overall. It is meant for graphs with up to a few thousand edges.
    """
    log_function_entry(
        "detect_communities",
        graph_nodes=graph.number_of_nodes(),
        graph_edges=graph.number_of_edges(),
        algorithm=algorithm,
        resolution=resolution,
        random_seed=random_seed
    )

    validate_parameter(algorithm, AVAILABLE_ALGORITHMS, "algorithm", "detect_communities")
    require_positive(resolution, "resolution")

    if graph.is_empty():
        warnings.warn("Empty graph provided. Returning empty community assignment.")
        return {}

    if graph.number_of_edges() == 0:
        logger.info("Graph has no edges. Each node forms its own community.")
        return {node: index for index, node in enumerate(graph.nodes())}

    with LoggingTimer("detect_communities", {"algorithm": algorithm, "nodes": graph.number_of_nodes()}):
        nk_graph, id_mapper = graph.to_networkit(directed=False, collapse_multi_edges=True)

        try:
            if algorithm == "edge_betweenness":
                partition_vector = _run_edge_betweenness(nk_graph)
            elif algorithm == "louvain":
                partition_vector = _run_louvain(nk_graph, resolution, random_seed)
            else:
                partition_vector = _run_label_propagation(nk_graph, random_seed)
        except Exception as e:
            raise ComputationError(
                f"Community detection failed: {str(e)}",
                operation="detect_communities",
                error_type="algorithm_failure",
                details={"algorithm": algorithm},
                cause=e
            ) from e

        labels = _relabel_communities(partition_vector)
        original_ids = id_mapper.get_original_batch(list(range(nk_graph.numberOfNodes())))
        assignment = dict(zip(original_ids, labels))

    logger.info(
        "Community detection completed: algorithm=%s, %d nodes, %d communities",
        algorithm, len(assignment), len(set(labels))
    )
    return assignment


def make_detector(algorithm: str = "edge_betweenness", **params: Any) -> CommunityDetector:
    """
    Bind ``detect_communities`` to an algorithm and parameters.

    Examples
    --------
    >>> detector = make_detector("louvain", random_seed=1)
    >>> membership = detector(graph)
    """
    validate_parameter(algorithm, AVAILABLE_ALGORITHMS, "algorithm", "make_detector")
    return partial(detect_communities, algorithm=algorithm, **params)


def _run_edge_betweenness(nk_graph: nk.Graph) -> List[int]:
    """
    Girvan-Newman clustering returning the maximum-modularity cut.

    Betweenness is computed on an unweighted copy without self-loops;
    modularity of each cut is measured on the weighted input graph, or on its
    unweighted form when every edge weighs zero.
    """
    work = nk.graphtools.toUnweighted(nk_graph) if nk_graph.isWeighted() else nk.Graph(nk_graph)
    work.removeSelfLoops()

    # Modularity is undefined for zero total edge weight
    quality_graph = nk_graph if nk_graph.totalEdgeWeight() > 0 else nk.graphtools.toUnweighted(nk_graph)

    best_partition = _component_partition(work)
    best_vector = best_partition.getVector()
    best_quality = _modularity(best_partition, quality_graph)
    removed = 0

    while work.numberOfEdges() > 0:
        work.indexEdges(True)
        betweenness = nk.centrality.Betweenness(work, normalized=False, computeEdgeCentrality=True)
        betweenness.run()
        edge_scores = betweenness.edgeScores()

        u, v = max(work.iterEdges(), key=lambda e: edge_scores[work.edgeId(e[0], e[1])])
        work.removeEdge(u, v)
        removed += 1

        partition = _component_partition(work)
        quality = _modularity(partition, quality_graph)
        if quality > best_quality + 1e-12:
            best_quality = quality
            best_vector = partition.getVector()

    logger.debug("Edge betweenness removed %d edges, best modularity %.4f", removed, best_quality)
    return list(best_vector)


def _component_partition(graph: nk.Graph):
    components = nk.components.ConnectedComponents(graph)
    components.run()
    return components.getPartition()


def _modularity(partition, graph: nk.Graph) -> float:
    return nk.community.Modularity().getQuality(partition, graph)


def _run_louvain(nk_graph: nk.Graph, resolution: float, random_seed: Optional[int]) -> List[int]:
    if random_seed is not None:
        nk.setSeed(random_seed, False)

    louvain = nk.community.PLM(nk_graph, refine=True, gamma=resolution)
    louvain.run()
    partition = louvain.getPartition()
    return [partition.subsetOf(node) for node in range(nk_graph.numberOfNodes())]


def _run_label_propagation(nk_graph: nk.Graph, random_seed: Optional[int]) -> List[int]:
    if random_seed is not None:
        nk.setSeed(random_seed, False)

    plp = nk.community.PLP(nk_graph)
    plp.run()
    partition = plp.getPartition()
    return [partition.subsetOf(node) for node in range(nk_graph.numberOfNodes())]


def _relabel_communities(partition: List[int]) -> List[int]:
    """
    Relabel community IDs to be contiguous starting from 0.

    Labels are handed out in order of first appearance so that the same
    partition always yields the same ids.
    """
    community_map: Dict[int, int] = {}
    for community_id in partition:
        if community_id not in community_map:
            community_map[community_id] = len(community_map)
    return [community_map[community_id] for community_id in partition]


def get_community_summary(assignment: CommunityAssignment) -> Dict[str, Any]:
    """
    Get summary statistics for a community assignment.

    Returns
    -------
    Dict[str, Any]
        - num_communities: Number of communities
        - community_sizes: Sizes sorted from largest to smallest
        - size_distribution: min/max/mean/median of the sizes
        - total_nodes: Number of assigned nodes
    """
    community_sizes = list(Counter(assignment.values()).values())

    size_stats = {
        "min": min(community_sizes) if community_sizes else 0,
        "max": max(community_sizes) if community_sizes else 0,
        "mean": float(np.mean(community_sizes)) if community_sizes else 0.0,
        "median": float(np.median(community_sizes)) if community_sizes else 0.0,
    }

    return {
        "num_communities": len(community_sizes),
        "community_sizes": sorted(community_sizes, reverse=True),
        "size_distribution": size_stats,
        "total_nodes": len(assignment)
    }
