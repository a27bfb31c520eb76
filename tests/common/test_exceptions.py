"""
Tests for the exception hierarchy and parameter validation helpers.
"""

import pytest

from commfilter.common.exceptions import (
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


class TestNetworkAnalysisError:
    """Test the base exception."""

    def test_basic_message(self):
        error = NetworkAnalysisError("Something failed")
        assert str(error) == "Something failed"
        assert error.message == "Something failed"
        assert error.details == {}
        assert error.context == {}
        assert error.cause is None

    def test_details_and_context_in_message(self):
        error = NetworkAnalysisError(
            "Invalid network size",
            details={"nodes": 0},
            context={"operation": "build"}
        )
        assert "Details: nodes=0" in str(error)
        assert "Context: operation=build" in str(error)

    def test_long_details_are_summarised(self):
        error = NetworkAnalysisError("Too many", details={"ids": list(range(100))})
        assert "<list with 100 items>" in str(error)

    def test_cause_is_chained(self):
        cause = ValueError("bad")
        error = NetworkAnalysisError("Wrapped", cause=cause)
        assert error.__cause__ is cause

    def test_add_context_chains(self):
        error = NetworkAnalysisError("Failed")
        assert error.add_context(step=2) is error
        assert error.context == {"step": 2}

    def test_get_debug_info(self):
        error = NetworkAnalysisError("Failed", details={"a": 1}, cause=KeyError("k"))
        info = error.get_debug_info()
        assert info["exception_type"] == "NetworkAnalysisError"
        assert info["message"] == "Failed"
        assert info["details"] == {"a": 1}
        assert "k" in info["cause"]


class TestSubclasses:
    """Test the specialised exceptions."""

    def test_hierarchy(self):
        assert issubclass(ValidationError, NetworkAnalysisError)
        assert issubclass(DataFormatError, ValidationError)
        assert issubclass(GraphConstructionError, NetworkAnalysisError)
        assert issubclass(ConfigurationError, NetworkAnalysisError)
        assert issubclass(ComputationError, NetworkAnalysisError)
        assert issubclass(IncompleteAssignmentError, ValidationError)
        assert issubclass(InvalidThresholdError, ConfigurationError)

    def test_validation_error_with_field(self):
        error = ValidationError("Contains nulls", field="from", value=None)
        assert error.field == "from"
        assert str(error).startswith("Validation error in field 'from': Contains nulls")
        assert error.details["field"] == "from"

    def test_validation_error_without_field(self):
        error = ValidationError("Bad input")
        assert str(error).startswith("Validation error: Bad input")

    def test_graph_construction_error_context(self):
        error = GraphConstructionError("Unknown node", node_count=3, edge_count=2,
                                       operation="join_node_table")
        assert error.context == {"node_count": 3, "edge_count": 2, "operation": "join_node_table"}

    def test_configuration_error_lists_options(self):
        error = ConfigurationError(
            "Invalid algorithm",
            parameter="algorithm",
            value="spectral",
            valid_options=["louvain"]
        )
        assert "Valid options for 'algorithm': ['louvain']" in str(error)
        assert error.details["invalid_value"] == "spectral"

    def test_computation_error_context(self):
        error = ComputationError("Failed", operation="detect", error_type="algorithm_failure")
        assert error.context["operation"] == "detect"
        assert error.context["error_type"] == "algorithm_failure"

    def test_data_format_error_details(self):
        error = DataFormatError("Not found", format_type="CSV", file_path="edges.csv")
        assert error.details["format_type"] == "CSV"
        assert error.details["file_path"] == "edges.csv"


class TestDomainErrors:
    """Test the community filtering errors."""

    def test_incomplete_assignment_carries_missing_nodes(self):
        error = IncompleteAssignmentError(["E"])
        assert error.missing_nodes == ["E"]
        assert error.field == "assignment"
        assert "missing 1 graph node(s)" in str(error)
        assert error.details["missing_count"] == 1

    def test_incomplete_assignment_truncates_details(self):
        error = IncompleteAssignmentError(range(25))
        assert len(error.missing_nodes) == 25
        assert len(error.details["missing_nodes"]) == 10

    def test_invalid_threshold_carries_value(self):
        error = InvalidThresholdError(0)
        assert error.threshold == 0
        assert error.parameter == "threshold"
        assert "positive integer, got 0" in str(error)

    def test_catchable_as_base(self):
        with pytest.raises(NetworkAnalysisError):
            raise InvalidThresholdError(-1)


class TestValidationHelpers:
    """Test validate_parameter and require_positive."""

    def test_validate_parameter_accepts_valid(self):
        validate_parameter("louvain", ["louvain", "label_propagation"], "algorithm")

    def test_validate_parameter_rejects_invalid(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_parameter("spectral", ["louvain"], "algorithm", "detect_communities")
        assert exc_info.value.parameter == "algorithm"
        assert exc_info.value.function == "detect_communities"

    def test_require_positive(self):
        require_positive(1.0, "resolution")
        with pytest.raises(ConfigurationError):
            require_positive(0, "resolution")

    def test_require_positive_allow_zero(self):
        require_positive(0, "count", allow_zero=True)
        with pytest.raises(ConfigurationError):
            require_positive(-1, "count", allow_zero=True)


class TestCallerDictsUntouched:
    """Test that details and context passed in are copied, not modified."""

    def test_validation_error(self):
        details = {"count": 1}
        ValidationError("Bad", field="from", details=details)
        assert details == {"count": 1}

    def test_configuration_error(self):
        details = {"source": "env"}
        ConfigurationError("Bad", parameter="alpha", value=2.0, details=details)
        assert details == {"source": "env"}

    def test_computation_error(self):
        context = {"step": 1}
        ComputationError("Failed", operation="detect", context=context)
        assert context == {"step": 1}

    def test_data_format_error(self):
        details = {"rows": 3}
        DataFormatError("Bad", format_type="CSV", details=details)
        assert details == {"rows": 3}

    def test_graph_construction_error_merges_context(self):
        context = {"step": "load"}
        error = GraphConstructionError("Failed", operation="build", context=context)
        assert error.context == {"step": "load", "operation": "build"}
        assert context == {"step": "load"}

    def test_add_context_does_not_leak(self):
        context = {"step": 1}
        error = NetworkAnalysisError("Failed", context=context)
        error.add_context(extra=True)
        assert context == {"step": 1}

    def test_incomplete_assignment(self):
        details = {"source": "detector"}
        error = IncompleteAssignmentError(["E"], details=details)
        assert details == {"source": "detector"}
        assert error.details["source"] == "detector"
