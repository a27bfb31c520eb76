"""
Centrality analysis module for the commfilter library.

Computes node degree and PageRank for a ``Graph`` with networkit and reports
them against the original node ids in a polars DataFrame.
"""

from typing import Any, Dict, Sequence

import polars as pl
import networkit as nk
import numpy as np

from ..common.exceptions import ComputationError, ConfigurationError, validate_parameter
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from .graph import Graph

logger = get_logger(__name__)

AVAILABLE_METRICS = ["degree", "pagerank"]
DEGREE_MODES = ["in", "out", "all"]


def extract_centrality(
    graph: Graph,
    metrics: Sequence[str] = ("degree", "pagerank"),
    mode: str = "all",
    damping: float = 0.85,
    normalized: bool = False
) -> pl.DataFrame:
    """
    Calculate centrality measures for every node.

    Parameters
    ----------
    graph : Graph
        Graph to analyse
    metrics : Sequence[str], default ("degree", "pagerank")
        Metrics to compute. Available: "degree", "pagerank".
    mode : str, default "all"
        Degree direction: "in", "out" or "all". Parallel edges are counted
        separately and a self-loop adds one to both in- and out-degree.
        Ignored for undirected graphs, where every mode gives the total degree.
    damping : float, default 0.85
        PageRank damping factor, in (0, 1)
    normalized : bool, default False
        Divide degree by its maximum possible value for a simple graph and
        rescale PageRank to [0, 1]

    Returns
    -------
    pl.DataFrame
        ``node_id`` column in graph node order, then one
        ``<metric>_centrality`` column per requested metric

    Raises
    ------
    ConfigurationError
        If a metric or mode is unknown or damping is out of range
    ComputationError
        If networkit fails

    Examples
    --------
    >>> df = extract_centrality(graph, metrics=["degree"], mode="in")
    >>> df.sort("degree_centrality", descending=True).head(3)
    """
    log_function_entry(
        "extract_centrality",
        graph_nodes=graph.number_of_nodes(),
        metrics=list(metrics),
        mode=mode
    )

    for metric in metrics:
        validate_parameter(metric, AVAILABLE_METRICS, "metrics", "extract_centrality")
    validate_parameter(mode, DEGREE_MODES, "mode", "extract_centrality")
    if not 0.0 < damping < 1.0:
        raise ConfigurationError(
            f"damping must be in (0, 1), got {damping}",
            parameter="damping",
            value=damping,
            function="extract_centrality"
        )

    data: Dict[str, Any] = {"node_id": list(graph.nodes())}

    if graph.is_empty():
        for metric in metrics:
            data[f"{metric}_centrality"] = []
        return pl.DataFrame(data)

    with LoggingTimer("extract_centrality", {"metrics": list(metrics), "nodes": graph.number_of_nodes()}):
        nk_graph, _ = graph.to_networkit()

        for metric in metrics:
            try:
                if metric == "degree":
                    values = _degree(nk_graph, mode, normalized)
                else:
                    values = _pagerank(nk_graph, damping, normalized)
            except Exception as e:
                raise ComputationError(
                    f"Failed to calculate {metric} centrality: {str(e)}",
                    operation=f"calculate_{metric}",
                    error_type="numerical",
                    cause=e
                ) from e
            data[f"{metric}_centrality"] = values.tolist()

    return pl.DataFrame(data)


def _degree(nk_graph: nk.Graph, mode: str, normalized: bool) -> np.ndarray:
    n = nk_graph.numberOfNodes()
    if nk_graph.isDirected():
        in_degrees = np.array([nk_graph.degreeIn(v) for v in range(n)], dtype=float)
        out_degrees = np.array([nk_graph.degreeOut(v) for v in range(n)], dtype=float)
        if mode == "in":
            values = in_degrees
        elif mode == "out":
            values = out_degrees
        else:
            values = in_degrees + out_degrees
    else:
        values = np.array([nk_graph.degree(v) for v in range(n)], dtype=float)

    if normalized and n > 1:
        max_possible = n - 1
        if nk_graph.isDirected() and mode == "all":
            max_possible *= 2
        values = values / max_possible

    return values


def _pagerank(nk_graph: nk.Graph, damping: float, normalized: bool) -> np.ndarray:
    pr = nk.centrality.PageRank(nk_graph, damping)
    pr.run()
    values = np.nan_to_num(np.array(pr.scores(), dtype=float), nan=0.0)

    if normalized:
        min_val, max_val = np.min(values), np.max(values)
        if max_val > min_val:
            values = (values - min_val) / (max_val - min_val)

    return values


def get_centrality_summary(centrality_df: pl.DataFrame) -> Dict[str, Dict[str, float]]:
    """
    Get min/max/mean/std for every centrality column.

    Examples
    --------
    >>> summary = get_centrality_summary(extract_centrality(graph))
    >>> summary["pagerank"]["max"]
    """
    summary = {}
    for col in centrality_df.columns:
        if not col.endswith("_centrality"):
            continue
        values = centrality_df[col].to_numpy()
        metric = col[: -len("_centrality")]
        if len(values) == 0:
            summary[metric] = {"min": 0.0, "max": 0.0, "mean": 0.0, "std": 0.0}
            continue
        summary[metric] = {
            "min": float(np.min(values)),
            "max": float(np.max(values)),
            "mean": float(np.mean(values)),
            "std": float(np.std(values)),
        }
    return summary
