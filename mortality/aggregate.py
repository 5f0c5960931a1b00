"""Grouped reductions and ranked selection.

All functions return new DataFrames.  Group order is always the order in
which a group key combination first appears in the input, which is also the
tie-break order used by :func:`top_n`.
"""

from __future__ import annotations

import logging
from typing import List, Literal, Sequence

import pandas as pd

from .config import ALL_CAUSES, CAUSE_COL, ENTITY_COL, NATIONAL_ENTITY
from .errors import AggregationError

logger = logging.getLogger(__name__)

Reducer = Literal["sum", "mean"]
Direction = Literal["ascending", "descending"]

METRIC_COL = "metric"
VALUE_COL = "value"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def exclude_aggregates(
    df: pd.DataFrame,
    *,
    cause_col: str = CAUSE_COL,
    entity_col: str = ENTITY_COL,
) -> pd.DataFrame:
    """Drop the "All causes" rows and the national aggregate rows.

    This is the filter for "leading causes" summaries, where both kinds of
    row would double count the individual states and causes.
    """
    mask = (df[cause_col].astype(str) != ALL_CAUSES) & (
        df[entity_col].astype(str) != NATIONAL_ENTITY
    )
    return df.loc[mask].copy()


# ---------------------------------------------------------------------------
# Reduction
# ---------------------------------------------------------------------------


def _validate_request(
    df: pd.DataFrame, group_keys: List[str], metric_column: str, reducer: str
) -> None:
    if not group_keys:
        raise AggregationError("At least one group key is required.")
    missing = [key for key in group_keys if key not in df.columns]
    if missing:
        raise AggregationError(f"Group keys not in table: {missing}")
    if metric_column not in df.columns:
        raise AggregationError(f"Metric column {metric_column!r} not in table.")
    dtype = df[metric_column].dtype
    if not pd.api.types.is_numeric_dtype(dtype) or pd.api.types.is_bool_dtype(dtype):
        raise AggregationError(
            f"Metric column {metric_column!r} is not numeric (dtype {dtype})."
        )
    if reducer not in ("sum", "mean"):
        raise AggregationError(f"Unsupported reducer {reducer!r}; use 'sum' or 'mean'.")


def aggregate(
    df: pd.DataFrame,
    group_keys: Sequence[str],
    metric_column: str,
    reducer: Reducer = "sum",
) -> pd.DataFrame:
    """Reduce ``metric_column`` over the groups defined by ``group_keys``.

    Parameters
    ----------
    df : pd.DataFrame
        Long-form table.  Callers filter rows beforehand, e.g. with
        :func:`exclude_aggregates`.
    group_keys : Sequence[str]
        Ordered list of grouping columns.
    metric_column : str
        Numeric column to reduce.
    reducer : {"sum", "mean"}
        ``"sum"`` adds values in float64.  ``"mean"`` divides by the number
        of non-missing observations in the group.  A group with no
        observations at all gets ``pd.NA`` for either reducer.

    Returns
    -------
    pd.DataFrame
        One row per group in first-seen order, with the group key columns
        (original dtypes), ``metric`` and a nullable ``Float64`` ``value``.

    Raises
    ------
    AggregationError
        For unknown keys, a missing or non-numeric metric, or an unknown
        reducer.
    """
    keys = list(group_keys)
    _validate_request(df, keys, metric_column, reducer)

    values = df[metric_column].astype("float64")
    # object keys keep first-seen order and never expand unobserved categories
    groupers = [df[key].astype(object) for key in keys]
    grouped = values.groupby(groupers, sort=False, dropna=False)
    if reducer == "sum":
        reduced = grouped.sum(min_count=1)
    else:
        reduced = grouped.mean()

    result = reduced.rename(VALUE_COL).reset_index()
    result.columns = [*keys, VALUE_COL]
    for key in keys:
        result[key] = result[key].astype(df[key].dtype)
    result.insert(len(keys), METRIC_COL, metric_column)
    result[VALUE_COL] = result[VALUE_COL].astype("Float64")

    logger.debug(
        "Aggregated %s (%s) over %s: %d groups", metric_column, reducer, keys, len(result)
    )
    return result


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def top_n(summaries: pd.DataFrame, n: int, by: Direction = "descending") -> pd.DataFrame:
    """Return the first ``n`` summaries after a stable sort on ``value``.

    Ties keep their original (first-seen) order and missing values sort
    last.  When fewer than ``n`` rows exist, all of them are returned.
    """
    if n < 0:
        raise AggregationError(f"n must be non-negative, got {n}.")
    if by not in ("ascending", "descending"):
        raise AggregationError(f"Unknown sort direction {by!r}.")
    ranked = summaries.sort_values(
        VALUE_COL,
        ascending=(by == "ascending"),
        kind="mergesort",
        na_position="last",
    )
    return ranked.head(n).reset_index(drop=True)


def top_n_within(
    summaries: pd.DataFrame,
    n: int,
    within: Sequence[str],
    by: Direction = "descending",
) -> pd.DataFrame:
    """Apply :func:`top_n` inside each partition of ``within``.

    Partitions appear in first-seen order; e.g. the leading causes per
    region with ``within=["region"]``.
    """
    cols = list(within)
    missing = [col for col in cols if col not in summaries.columns]
    if missing:
        raise AggregationError(f"Partition columns not in table: {missing}")
    if summaries.empty:
        return summaries.reset_index(drop=True)

    partitions = summaries.groupby(
        [summaries[col].astype(object) for col in cols], sort=False, dropna=False
    )
    parts = [top_n(part, n, by=by) for _, part in partitions]
    return pd.concat(parts, ignore_index=True)
