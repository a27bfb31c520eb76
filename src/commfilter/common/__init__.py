"""
Common utilities for the commfilter library.

This module provides shared functionality used across all other modules:
- Custom exception hierarchy
- ID mapping between original and networkit integer IDs
- Input validation for edge lists and node tables
- Pipeline configuration
- Logging configuration
"""

from .exceptions import (
    NetworkAnalysisError,
    ValidationError,
    GraphConstructionError,
    ConfigurationError,
    ComputationError,
    DataFormatError,
    IncompleteAssignmentError,
    InvalidThresholdError,
    validate_parameter,
    require_positive
)

from .id_mapper import IDMapper
from .validators import validate_edgelist_dataframe, validate_node_table
from .config import PipelineConfig, check_threshold

from .logging_config import (
    setup_logging,
    get_logger,
    configure_external_library_logging,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter
)
