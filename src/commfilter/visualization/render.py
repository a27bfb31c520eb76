"""
Rendering hand-off for filtered community graphs.

``render_payload`` collects what a renderer needs per node (colour and
community label). ``draw_graph`` is a small matplotlib renderer that places
nodes on a circle, groups them by community and draws edges without arrows.
Styling beyond that is left to the caller.
"""

from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from ..common.logging_config import get_logger
from ..network.graph import Graph, NodeId
from .colors import RGBA, node_colors

logger = get_logger(__name__)

DEFAULT_NODE_COLOR: RGBA = (0.6, 0.6, 0.6, 1.0)


def render_payload(
    graph: Graph,
    assignment: Mapping[NodeId, Hashable],
    color_map: Mapping[Hashable, RGBA]
) -> Dict[str, Dict[NodeId, Any]]:
    """
    Per-node colours and labels for the nodes of ``graph``.

    Returns
    -------
    Dict[str, Dict[NodeId, Any]]
        ``{"colors": {node: rgba}, "labels": {node: community_id}}``. Nodes
        without a coloured community are absent from ``colors``.
    """
    return {
        "colors": node_colors(graph.nodes(), assignment, color_map),
        "labels": {node: assignment[node] for node in graph.nodes() if node in assignment},
    }


def circular_layout(
    graph: Graph,
    labels: Optional[Mapping[NodeId, Hashable]] = None
) -> Dict[NodeId, Tuple[float, float]]:
    """
    Positions on the unit circle, with members of a community placed next
    to each other when ``labels`` is given.
    """
    nodes = list(graph.nodes())
    if labels:
        first_seen: Dict[Hashable, int] = {}
        for node in nodes:
            first_seen.setdefault(labels.get(node), len(first_seen))
        nodes.sort(key=lambda node: first_seen[labels.get(node)])

    n = len(nodes)
    angles = 2 * np.pi * np.arange(n) / max(n, 1)
    return {node: (float(np.cos(a)), float(np.sin(a))) for node, a in zip(nodes, angles)}


def draw_graph(
    graph: Graph,
    colors: Optional[Mapping[NodeId, RGBA]] = None,
    labels: Optional[Mapping[NodeId, Hashable]] = None,
    ax=None,
    node_size: float = 60.0,
    edge_color: RGBA = (0.5, 0.5, 0.5, 0.4),
    edge_width: float = 0.8,
    show_labels: bool = True,
    title: Optional[str] = None
):
    """
    Draw ``graph`` with matplotlib.

    Parameters
    ----------
    graph : Graph
        Graph to draw, usually the filtered one
    colors : Mapping[NodeId, RGBA], optional
        Node colours. Nodes without an entry use a neutral grey.
    labels : Mapping[NodeId, Hashable], optional
        Text drawn next to each node, typically the community id
    ax : matplotlib.axes.Axes, optional
        Axes to draw on. A new figure is created when omitted.

    Returns
    -------
    matplotlib.axes.Axes
        The axes drawn on
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    positions = circular_layout(graph, labels)
    colors = colors or {}

    segments = [
        (positions[edge.source], positions[edge.target])
        for edge in graph.edges()
        if edge.source != edge.target
    ]
    if segments:
        ax.add_collection(LineCollection(segments, colors=[edge_color], linewidths=edge_width, zorder=1))

    if positions:
        nodes = list(positions)
        xy = np.array([positions[node] for node in nodes])
        ax.scatter(
            xy[:, 0], xy[:, 1],
            s=node_size,
            c=[colors.get(node, DEFAULT_NODE_COLOR) for node in nodes],
            edgecolors="none",
            zorder=2
        )
        if show_labels and labels:
            for node, (x, y) in zip(nodes, xy):
                if node in labels:
                    ax.annotate(str(labels[node]), (x, y), fontsize=7,
                                ha="center", va="center", zorder=3)

    ax.set_xlim(-1.2, 1.2)
    ax.set_ylim(-1.2, 1.2)
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title)

    logger.debug("Drew graph with %d nodes and %d edge segments", graph.number_of_nodes(), len(segments))
    return ax
