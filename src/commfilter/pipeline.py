"""
End-to-end community filtering pipeline.

Runs community detection once per graph, then derives the size table,
kept/dropped partition, filtered graph and colours for a threshold. The
detection result is cached, so ``refilter`` can sweep thresholds without
running the detector again.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional

from .common.config import PipelineConfig
from .common.exceptions import ValidationError
from .common.logging_config import get_logger, LoggingTimer
from .network.aggregation import Partition, check_assignment, partition_nodes
from .network.communities import CommunityDetector, make_detector
from .network.filtering import filter_graph
from .network.graph import Graph, NodeId
from .visualization.colors import RGBA, assign_colors, node_colors

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """
    Everything derived from one graph, assignment and threshold.

    Attributes
    ----------
    graph : Graph
        The input graph
    assignment : Dict[NodeId, Hashable]
        Community per node, as returned by the detector. Each result holds
        its own copy, so changing it does not affect later results.
    partition : Partition
        Size table and kept/dropped split
    filtered : Graph
        Induced subgraph on the kept nodes
    color_map : Dict[Hashable, RGBA]
        Colour per large community
    node_colors : Dict[NodeId, RGBA]
        Colour per node of ``filtered``
    labels : Dict[NodeId, Hashable]
        Community id per node of ``filtered``
    """

    graph: Graph
    assignment: Dict[NodeId, Hashable]
    partition: Partition
    filtered: Graph
    color_map: Dict[Hashable, RGBA]
    node_colors: Dict[NodeId, RGBA]
    labels: Dict[NodeId, Hashable]

    @property
    def sizes(self) -> Dict[Hashable, int]:
        return self.partition.sizes


class CommunityPipeline:
    """
    Detect, aggregate, filter and colour communities of a graph.

    Parameters
    ----------
    detector : CommunityDetector, optional
        Callable returning a community assignment for a graph. Defaults to
        ``make_detector(config.algorithm, random_seed=config.random_seed)``.
    config : PipelineConfig, optional
        Threshold, alpha and default algorithm. Defaults to
        ``PipelineConfig.from_env()``.

    Examples
    --------
    >>> pipeline = CommunityPipeline(config=PipelineConfig(threshold=5))
    >>> result = pipeline.run(graph)
    >>> sweep = [pipeline.refilter(t) for t in (2, 5, 10)]
    """

    def __init__(
        self,
        detector: Optional[CommunityDetector] = None,
        config: Optional[PipelineConfig] = None
    ) -> None:
        self.config = (config or PipelineConfig.from_env()).validate()
        self.detector = detector or make_detector(
            self.config.algorithm, random_seed=self.config.random_seed
        )
        self._graph: Optional[Graph] = None
        self._assignment: Optional[Dict[NodeId, Hashable]] = None

    def run(self, graph: Graph, threshold: Optional[int] = None) -> PipelineResult:
        """
        Detect communities on ``graph`` and derive the filtered result.

        Detection is skipped when ``graph`` equals the graph of the previous
        run; the cached assignment is reused.

        Raises
        ------
        IncompleteAssignmentError
            If the detector leaves a node without a community
        InvalidThresholdError
            If the threshold is not a positive integer
        """
        if self._graph is None or self._graph != graph:
            with LoggingTimer("community_detection", {"nodes": graph.number_of_nodes()}):
                assignment = dict(self.detector(graph))
            check_assignment(graph, assignment)
            self._graph = graph
            self._assignment = assignment
        else:
            logger.debug("Reusing cached community assignment")

        return self._derive(threshold if threshold is not None else self.config.threshold)

    def refilter(self, threshold: int) -> PipelineResult:
        """
        Re-derive the result for a new threshold from the cached assignment.

        Raises
        ------
        ValidationError
            If ``run`` has not been called yet
        """
        if self._graph is None or self._assignment is None:
            raise ValidationError("refilter() called before run()", field="pipeline")
        return self._derive(threshold)

    def _derive(self, threshold: int) -> PipelineResult:
        graph, assignment = self._graph, self._assignment

        partition = partition_nodes(graph, assignment, threshold)
        filtered = filter_graph(graph, partition.dropped)
        color_map = assign_colors(sorted_communities(partition.large), alpha=self.config.alpha)

        logger.info(
            "Threshold %d keeps %d of %d communities (%d of %d nodes)",
            threshold, len(partition.large), len(partition.sizes),
            len(partition.kept), graph.number_of_nodes()
        )

        return PipelineResult(
            graph=graph,
            assignment=dict(assignment),
            partition=partition,
            filtered=filtered,
            color_map=color_map,
            node_colors=node_colors(filtered.nodes(), assignment, color_map),
            labels={node: assignment[node] for node in filtered.nodes()}
        )


def sorted_communities(communities) -> List[Hashable]:
    """Community ids in ascending order; mixed types are ordered by their string form."""
    try:
        return sorted(communities)
    except TypeError:
        return sorted(communities, key=lambda c: (type(c).__name__, str(c)))


def run_pipeline(
    graph: Graph,
    detector: Optional[CommunityDetector] = None,
    threshold: Optional[int] = None,
    alpha: Optional[float] = None,
    algorithm: Optional[str] = None
) -> PipelineResult:
    """One-shot convenience wrapper around ``CommunityPipeline``."""
    config = PipelineConfig.from_env(threshold=threshold, alpha=alpha, algorithm=algorithm)
    return CommunityPipeline(detector=detector, config=config).run(graph)
