"""
Membership aggregation for the commfilter library.

Turns a community assignment into a community size table and splits the graph
into nodes that belong to large communities (kept) and nodes that belong to
small ones (dropped). Every function here is pure: inputs are never modified
and results are new values, so a threshold can be swept without re-running
community detection.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Hashable, Mapping
from collections import Counter

from ..common.exceptions import IncompleteAssignmentError
from ..common.config import DEFAULT_THRESHOLD, check_threshold
from ..common.logging_config import get_logger
from .graph import Graph, NodeId

logger = get_logger(__name__)


@dataclass(frozen=True)
class Partition:
    """
    Kept/dropped split of a graph's nodes for one size threshold.

    Attributes
    ----------
    threshold : int
        Inclusive minimum community size for a community to be large
    sizes : Dict[Hashable, int]
        Community size table (community id -> member count)
    large : FrozenSet[Hashable]
        Communities with size >= threshold
    small : FrozenSet[Hashable]
        Communities with size < threshold
    kept : FrozenSet[NodeId]
        Nodes whose community is large
    dropped : FrozenSet[NodeId]
        Nodes whose community is small
    """

    threshold: int
    sizes: Dict[Hashable, int]
    large: FrozenSet[Hashable]
    small: FrozenSet[Hashable]
    kept: FrozenSet[NodeId]
    dropped: FrozenSet[NodeId]


def check_assignment(graph: Graph, assignment: Mapping[NodeId, Hashable]) -> None:
    """
    Raise ``IncompleteAssignmentError`` if any graph node has no community.

    Entries for ids that are not graph nodes are allowed and ignored.
    """
    missing = [node for node in graph.nodes() if node not in assignment]
    if missing:
        raise IncompleteAssignmentError(missing)


def community_sizes(graph: Graph, assignment: Mapping[NodeId, Hashable]) -> Dict[Hashable, int]:
    """
    Count the members of each community among the graph's nodes.

    Parameters
    ----------
    graph : Graph
        Graph whose nodes are counted
    assignment : Mapping[NodeId, Hashable]
        Total mapping from node id to community id

    Returns
    -------
    Dict[Hashable, int]
        Community id -> number of graph nodes with that id. The counts sum to
        ``graph.number_of_nodes()``.

    Raises
    ------
    IncompleteAssignmentError
        If any graph node lacks an entry in ``assignment``

    Examples
    --------
    >>> g = Graph(["A", "B", "C"])
    >>> community_sizes(g, {"A": 1, "B": 1, "C": 2})
    {1: 2, 2: 1}
    """
    check_assignment(graph, assignment)
    return dict(Counter(assignment[node] for node in graph.nodes()))


def partition_nodes(
    graph: Graph,
    assignment: Mapping[NodeId, Hashable],
    threshold: int = DEFAULT_THRESHOLD
) -> Partition:
    """
    Split nodes into kept and dropped sets by community size.

    Parameters
    ----------
    graph : Graph
        Graph whose nodes are partitioned
    assignment : Mapping[NodeId, Hashable]
        Total mapping from node id to community id
    threshold : int, default 5
        Communities with at least this many members are kept

    Returns
    -------
    Partition
        Size table, large/small community sets and kept/dropped node sets

    Raises
    ------
    InvalidThresholdError
        If threshold is not a positive integer
    IncompleteAssignmentError
        If any graph node lacks an entry in ``assignment``

    Examples
    --------
    >>> g = Graph(["A", "B", "C", "D", "E"])
    >>> membership = {"A": 1, "B": 1, "C": 1, "D": 2, "E": 2}
    >>> p = partition_nodes(g, membership, threshold=3)
    >>> sorted(p.kept), sorted(p.dropped)
    (['A', 'B', 'C'], ['D', 'E'])
    """
    check_threshold(threshold)
    sizes = community_sizes(graph, assignment)

    large = frozenset(c for c, size in sizes.items() if size >= threshold)
    small = frozenset(sizes) - large

    kept = frozenset(node for node in graph.nodes() if assignment[node] in large)
    dropped = frozenset(graph.nodes()) - kept

    logger.debug(
        "Partitioned %d nodes at threshold %d: %d kept in %d communities, %d dropped in %d communities",
        graph.number_of_nodes(), threshold, len(kept), len(large), len(dropped), len(small)
    )

    return Partition(
        threshold=threshold,
        sizes=sizes,
        large=large,
        small=small,
        kept=kept,
        dropped=dropped
    )
