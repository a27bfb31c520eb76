"""
commfilter - community extraction and filtering for small networks.

Builds a directed, weighted graph from an edge list and a node attribute
table, detects communities, drops nodes whose community is smaller than a
size threshold and colours the remaining communities for plotting.

Modules:
    common: Exceptions, ID mapping, validation, configuration and logging
    network: Graph value, construction, centrality, communities, filtering, export
    visualization: Community colours and matplotlib rendering
    pipeline: End-to-end detect/aggregate/filter/colour pipeline
"""

__version__ = "0.1.0"

from .common.exceptions import (
    NetworkAnalysisError,
    ValidationError,
    GraphConstructionError,
    ConfigurationError,
    ComputationError,
    DataFormatError,
    IncompleteAssignmentError,
    InvalidThresholdError
)
from .common.config import PipelineConfig
from .common.logging_config import setup_logging, get_logger
from .network import (
    Edge,
    Graph,
    build_graph,
    extract_centrality,
    detect_communities,
    make_detector,
    community_sizes,
    partition_nodes,
    Partition,
    filter_graph,
    export_graph
)
from .visualization import assign_colors, draw_graph, render_payload
from .pipeline import CommunityPipeline, PipelineResult, run_pipeline

__all__ = [
    "NetworkAnalysisError", "ValidationError", "GraphConstructionError",
    "ConfigurationError", "ComputationError", "DataFormatError",
    "IncompleteAssignmentError", "InvalidThresholdError",
    "PipelineConfig", "setup_logging", "get_logger",
    "Edge", "Graph", "build_graph", "extract_centrality",
    "detect_communities", "make_detector", "community_sizes",
    "partition_nodes", "Partition", "filter_graph", "export_graph",
    "assign_colors", "draw_graph", "render_payload",
    "CommunityPipeline", "PipelineResult", "run_pipeline",
]
