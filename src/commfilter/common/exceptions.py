"""
Exception hierarchy for the commfilter library.

Every error raised by the library derives from ``NetworkAnalysisError`` so that
callers can catch library failures with a single except clause. Subclasses
carry structured details (offending field, missing node ids, threshold value)
for programmatic handling.
"""

from typing import Dict, Any, Optional, List, Union, Iterable
import traceback


class NetworkAnalysisError(Exception):
    """
    Base exception for all commfilter errors.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Additional structured information about the error
    cause : Exception, optional
        The underlying exception that caused this error
    context : Dict[str, Any], optional
        Additional context about the operation that failed

    Examples
    --------
    >>> raise NetworkAnalysisError("Graph construction failed")
    >>> raise NetworkAnalysisError(
    ...     "Invalid network size",
    ...     details={"nodes": 0, "edges": 10}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        self.cause = cause
        self.context = dict(context or {})

        full_message = message

        if self.details:
            detail_parts = []
            for key, value in self.details.items():
                if isinstance(value, (list, dict, set, tuple)) and len(str(value)) > 100:
                    detail_parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
                else:
                    detail_parts.append(f"{key}={value}")

            if detail_parts:
                full_message += f" (Details: {', '.join(detail_parts)})"

        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            if context_parts:
                full_message += f" (Context: {', '.join(context_parts)})"

        super().__init__(full_message)

        if cause is not None:
            self.__cause__ = cause

    def add_context(self, **kwargs: Any) -> 'NetworkAnalysisError':
        """
        Add additional context to the exception.

        Returns
        -------
        NetworkAnalysisError
            Self, for method chaining
        """
        self.context.update(kwargs)
        return self

    def get_debug_info(self) -> Dict[str, Any]:
        """Get all available error information as a dictionary."""
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "traceback": traceback.format_exc() if self.__traceback__ is not None else None
        }


class ValidationError(NetworkAnalysisError):
    """
    Exception raised for input validation errors.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the field or column that failed validation
    value : Any, optional
        The invalid value that caused the error
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the validation failure

    Examples
    --------
    >>> raise ValidationError("Source column contains null values", field="from")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = dict(details or {})
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class GraphConstructionError(NetworkAnalysisError):
    """
    Exception raised while building a graph value from tabular input.

    Parameters
    ----------
    message : str
        Description of the graph construction error
    node_count : int, optional
        Number of nodes known when the error occurred
    edge_count : int, optional
        Number of edges processed when the error occurred
    operation : str, optional
        Specific operation that failed (e.g., "join_node_table")
    """

    def __init__(
        self,
        message: str,
        node_count: Optional[int] = None,
        edge_count: Optional[int] = None,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        self.node_count = node_count
        self.edge_count = edge_count
        self.operation = operation

        context = dict(kwargs.pop("context", None) or {})
        if node_count is not None:
            context["node_count"] = node_count
        if edge_count is not None:
            context["edge_count"] = edge_count
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)


class ConfigurationError(NetworkAnalysisError):
    """
    Exception raised for invalid configuration or parameter values.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic parameter
    value : Any, optional
        The invalid parameter value
    valid_options : List[Any], optional
        List of valid options for the parameter
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid detection algorithm",
    ...     parameter="algorithm",
    ...     value="spectral",
    ...     valid_options=["edge_betweenness", "louvain", "label_propagation"]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = dict(kwargs.get("details") or {})
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class ComputationError(NetworkAnalysisError):
    """
    Exception raised when a computation inside an external algorithm fails.

    Parameters
    ----------
    message : str
        Description of the computational error
    operation : str, optional
        The computational operation that failed
    error_type : str, optional
        Type of computational error (e.g., "numerical", "algorithm_failure")
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type

        context = dict(kwargs.get("context") or {})
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        kwargs["context"] = context
        super().__init__(message, **kwargs)


class DataFormatError(ValidationError):
    """
    Exception raised for unreadable files and malformed tabular input.

    Parameters
    ----------
    message : str
        Description of the format error
    format_type : str, optional
        Expected format (e.g., "CSV", "DataFrame")
    file_path : str, optional
        Path to the problematic file
    """

    def __init__(
        self,
        message: str,
        format_type: Optional[str] = None,
        file_path: Optional[str] = None,
        **kwargs
    ) -> None:
        details = dict(kwargs.get("details") or {})

        if format_type:
            details["format_type"] = format_type
        if file_path:
            details["file_path"] = file_path

        kwargs["details"] = details
        super().__init__(message, **kwargs)


class IncompleteAssignmentError(ValidationError):
    """
    Raised when a community assignment does not cover every graph node.

    Parameters
    ----------
    missing_nodes : Iterable[Any]
        Graph node ids that have no community entry

    Examples
    --------
    >>> raise IncompleteAssignmentError(["E"])
    """

    def __init__(self, missing_nodes: Iterable[Any], **kwargs) -> None:
        self.missing_nodes = list(missing_nodes)
        details = dict(kwargs.pop("details", None) or {})
        details["missing_count"] = len(self.missing_nodes)
        details["missing_nodes"] = self.missing_nodes[:10]
        super().__init__(
            f"Community assignment is missing {len(self.missing_nodes)} graph node(s)",
            field="assignment",
            details=details,
            **kwargs
        )


class InvalidThresholdError(ConfigurationError):
    """Raised when a community size threshold is not a positive integer."""

    def __init__(self, threshold: Any, **kwargs) -> None:
        self.threshold = threshold
        super().__init__(
            f"Community size threshold must be a positive integer, got {threshold!r}",
            parameter="threshold",
            value=threshold,
            **kwargs
        )


def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a parameter value is in the list of valid options.

    Raises
    ------
    ConfigurationError
        If value is not in valid_options
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Raises
    ------
    ConfigurationError
        If value is not positive (or non-negative if allow_zero=True)
    """
    if allow_zero and value < 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be non-negative, got {value}",
            parameter=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be positive, got {value}",
            parameter=parameter_name,
            value=value
        )
