"""
Input validation utilities for the commfilter library.

Validation runs on the polars tables handed to graph construction, before any
graph value is built, so that data problems surface with the offending column
named.
"""

from typing import Optional
import warnings

import polars as pl

from .exceptions import ValidationError


def validate_edgelist_dataframe(
    df: pl.DataFrame,
    source_col: str = "from",
    target_col: str = "to",
    weight_col: Optional[str] = None,
    allow_self_loops: bool = True
) -> None:
    """
    Validate an edge list DataFrame for graph construction.

    Checks that the required columns exist, that endpoint columns hold no
    nulls and that the weight column, when given, is numeric and
    non-negative. An empty DataFrame with the right columns is valid.

    Parameters
    ----------
    df : pl.DataFrame
        Edge list DataFrame to validate
    source_col : str, default "from"
        Name of the source node column
    target_col : str, default "to"
        Name of the target node column
    weight_col : str, optional
        Name of the edge weight column (if present)
    allow_self_loops : bool, default True
        Whether to allow edges from a node to itself

    Raises
    ------
    ValidationError
        If the DataFrame fails any validation checks

    Examples
    --------
    >>> df = pl.DataFrame({
    ...     "from": ["A", "B", "C"],
    ...     "to": ["B", "C", "A"],
    ...     "weight": [1.0, 2.0, 1.5]
    ... })
    >>> validate_edgelist_dataframe(df, weight_col="weight")
    """
    required_cols = [source_col, target_col]
    if weight_col is not None:
        required_cols.append(weight_col)

    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        raise ValidationError(
            f"Missing required columns: {missing_cols}",
            field="columns",
            details={"available_columns": df.columns, "missing": missing_cols}
        )

    for col in [source_col, target_col]:
        null_count = df[col].null_count()
        if null_count > 0:
            raise ValidationError(
                f"Column contains {null_count} null values",
                field=col,
                details={"null_count": null_count, "total_rows": len(df)}
            )

    if weight_col is not None:
        weight_series = df[weight_col]

        if not weight_series.dtype.is_numeric():
            raise ValidationError(
                f"Weight column must be numeric, got {weight_series.dtype}",
                field=weight_col,
                details={"dtype": str(weight_series.dtype)}
            )

        null_count = weight_series.null_count()
        if null_count > 0:
            raise ValidationError(
                f"Weight column contains {null_count} null values",
                field=weight_col,
                details={"null_count": null_count}
            )

        if len(weight_series) > 0 and weight_series.min() < 0:
            negative_count = int((weight_series < 0).sum())
            raise ValidationError(
                f"Weight column contains {negative_count} negative values",
                field=weight_col,
                details={"min_weight": weight_series.min(), "negative_count": negative_count}
            )

    if not allow_self_loops and len(df) > 0:
        self_loop_count = int((df[source_col] == df[target_col]).sum())
        if self_loop_count > 0:
            raise ValidationError(
                f"Found {self_loop_count} self-loops (edges from node to itself)",
                field="edges",
                details={"self_loop_count": self_loop_count}
            )

    if len(df) > 0:
        unique_edges = df.select([source_col, target_col]).n_unique()
        if unique_edges < len(df):
            # Parallel edges are kept as a multigraph; only worth a note.
            warnings.warn(
                f"Edge list contains {len(df) - unique_edges} repeated "
                f"({source_col}, {target_col}) pairs; they are kept as parallel edges."
            )


def validate_node_table(df: pl.DataFrame, id_col: str = "id") -> None:
    """
    Validate a node attribute table keyed by ``id_col``.

    Raises
    ------
    ValidationError
        If the id column is missing, contains nulls or repeats an id
    """
    if id_col not in df.columns:
        raise ValidationError(
            f"Node table has no id column '{id_col}'",
            field="columns",
            details={"available_columns": df.columns}
        )

    null_count = df[id_col].null_count()
    if null_count > 0:
        raise ValidationError(
            f"Column contains {null_count} null values",
            field=id_col,
            details={"null_count": null_count}
        )

    duplicate_count = len(df) - df[id_col].n_unique()
    if duplicate_count > 0:
        duplicated = df.filter(pl.col(id_col).is_duplicated())[id_col].unique().to_list()
        raise ValidationError(
            f"Node ids must be unique, found {duplicate_count} repeated rows",
            field=id_col,
            details={"duplicated_ids": duplicated[:10]}
        )
