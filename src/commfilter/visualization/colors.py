"""
Community colour assignment.

Each kept community gets a colour from an evenly spaced hue wheel with a fixed
transparency, so that n communities are spread as far apart in hue as
possible. The mapping depends only on the order of the ids passed in.
"""

from typing import Dict, Hashable, Mapping, Sequence, Tuple

import numpy as np
from matplotlib.colors import hsv_to_rgb

from ..common.exceptions import ConfigurationError, ValidationError
from ..common.config import DEFAULT_ALPHA
from ..network.graph import NodeId

RGBA = Tuple[float, float, float, float]


def assign_colors(
    community_ids: Sequence[Hashable],
    alpha: float = DEFAULT_ALPHA,
    saturation: float = 1.0,
    value: float = 1.0
) -> Dict[Hashable, RGBA]:
    """
    Map each community id to a distinct RGBA colour.

    Parameters
    ----------
    community_ids : Sequence[Hashable]
        Distinct community ids. The k-th of n ids gets hue k / n.
    alpha : float, default 0.7
        Transparency shared by every colour, in [0, 1]
    saturation : float, default 1.0
        HSV saturation, in (0, 1]
    value : float, default 1.0
        HSV value (brightness), in (0, 1]

    Returns
    -------
    Dict[Hashable, RGBA]
        One ``(r, g, b, alpha)`` tuple of floats in [0, 1] per input id. An
        empty input gives an empty mapping.

    Raises
    ------
    ValidationError
        If an id appears more than once
    ConfigurationError
        If alpha, saturation or value is out of range

    Examples
    --------
    >>> colors = assign_colors([3, 1], alpha=0.5)
    >>> colors[3]
    (1.0, 0.0, 0.0, 0.5)
    """
    ids = list(community_ids)
    if len(set(ids)) != len(ids):
        raise ValidationError(
            "Community ids must be distinct",
            field="community_ids",
            details={"count": len(ids), "distinct": len(set(ids))}
        )

    if not 0.0 <= alpha <= 1.0:
        raise ConfigurationError(f"alpha must be between 0.0 and 1.0, got {alpha}",
                                 parameter="alpha", value=alpha)
    for name, level in (("saturation", saturation), ("value", value)):
        if not 0.0 < level <= 1.0:
            raise ConfigurationError(f"{name} must be in (0, 1], got {level}",
                                     parameter=name, value=level)

    if not ids:
        return {}

    n = len(ids)
    hsv = np.column_stack([
        np.arange(n) / n,
        np.full(n, saturation),
        np.full(n, value),
    ])
    rgb = hsv_to_rgb(hsv)

    return {
        community_id: (float(r), float(g), float(b), float(alpha))
        for community_id, (r, g, b) in zip(ids, rgb)
    }


def node_colors(
    nodes: Sequence[NodeId],
    assignment: Mapping[NodeId, Hashable],
    color_map: Mapping[Hashable, RGBA]
) -> Dict[NodeId, RGBA]:
    """
    Colour of each node's community.

    Nodes whose community has no colour (dropped communities) are left out.
    """
    return {
        node: color_map[assignment[node]]
        for node in nodes
        if node in assignment and assignment[node] in color_map
    }
