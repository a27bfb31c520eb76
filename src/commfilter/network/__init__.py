"""
Graph value, construction and analysis module.

This module provides the network side of the pipeline:
- Immutable graph value with networkit conversion
- Graph construction from edge lists and node attribute tables
- Centrality measures (degree, PageRank)
- Pluggable community detection (edge betweenness, Louvain, label propagation)
- Membership aggregation into kept/dropped partitions
- Induced-subgraph filtering
- Graph export
"""

from .graph import Edge, Graph, NodeId

from .construction import build_graph, get_graph_info

from .analysis import extract_centrality, get_centrality_summary

from .communities import (
    CommunityAssignment,
    CommunityDetector,
    detect_communities,
    make_detector,
    get_community_summary
)

from .aggregation import Partition, check_assignment, community_sizes, partition_nodes

from .filtering import filter_graph, keep_nodes

from .export import export_graph
