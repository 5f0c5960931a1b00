"""Long-to-wide reshaping of the mortality table.

:func:`pivot` builds one row per row-key combination and one column per
cause.  Cells with no matching record hold ``pd.NA`` rather than zero, so
:func:`melt` can reproduce the original records exactly by discarding them.
"""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from .config import CAUSE_COL, DEFAULT_PIVOT_KEYS, RATE_COL
from .errors import PivotConflictError, SchemaError

logger = logging.getLogger(__name__)


def _find_conflicts(
    distinct: pd.DataFrame, cell_keys: list[str], value_column: str
) -> pd.DataFrame:
    """Return rows of ``distinct`` whose cell key occurs with several values."""
    clashing = distinct.duplicated(subset=cell_keys, keep=False)
    return distinct.loc[clashing].sort_values(cell_keys + [value_column])


def pivot(
    df: pd.DataFrame,
    row_keys: Sequence[str] = DEFAULT_PIVOT_KEYS,
    column_key: str = CAUSE_COL,
    value_column: str = RATE_COL,
) -> pd.DataFrame:
    """Pivot the long table so each ``column_key`` value becomes a column.

    Parameters
    ----------
    df : pd.DataFrame
        Long-form table with the row keys, the column key and the value.
    row_keys : Sequence[str]
        Columns identifying an output row.  Defaults to
        ``("state", "year", "region")``.
    column_key : str
        Column whose distinct values become output columns.
    value_column : str
        Column providing the cell values.

    Returns
    -------
    pd.DataFrame
        Row key columns (original dtypes, sorted) followed by one nullable
        ``Float64`` column per distinct ``column_key`` value, in the order
        the values first appear in ``df``.

    Raises
    ------
    SchemaError
        If any of the named columns is missing.
    PivotConflictError
        If two records map to the same cell with different values.  Exact
        duplicates collapse into a single cell.
    """
    keys = list(row_keys)
    cell_keys = keys + [column_key]
    missing = [col for col in cell_keys + [value_column] if col not in df.columns]
    if missing:
        raise SchemaError(f"Missing expected columns: {missing}")

    if df.empty:
        return pd.DataFrame({key: pd.Series(dtype=df[key].dtype) for key in keys})

    cells = df[cell_keys + [value_column]].astype({key: object for key in cell_keys})
    distinct = cells.drop_duplicates()
    conflicts = _find_conflicts(distinct, cell_keys, value_column)
    if not conflicts.empty:
        sample = conflicts.head(6).to_dict("records")
        raise PivotConflictError(
            f"{conflicts[cell_keys].drop_duplicates().shape[0]} cell(s) have "
            f"conflicting {value_column!r} values, e.g. {sample}"
        )

    columns = list(cells[column_key].unique())
    wide = distinct.pivot(index=keys, columns=column_key, values=value_column)
    wide = wide.reindex(columns=columns).astype("float64").astype("Float64")
    wide.columns.name = None
    wide = wide.reset_index()

    for key in keys:
        wide[key] = wide[key].astype(df[key].dtype)

    logger.info(
        "Pivoted %d records into %d rows x %d %s columns",
        len(df),
        len(wide),
        len(columns),
        column_key,
    )
    return wide


def melt(
    wide: pd.DataFrame,
    row_keys: Sequence[str] = DEFAULT_PIVOT_KEYS,
    column_key: str = CAUSE_COL,
    value_column: str = RATE_COL,
) -> pd.DataFrame:
    """Inverse of :func:`pivot`: one long row per non-missing wide cell."""
    keys = list(row_keys)
    missing = [key for key in keys if key not in wide.columns]
    if missing:
        raise SchemaError(f"Missing expected columns: {missing}")

    long = wide.melt(id_vars=keys, var_name=column_key, value_name=value_column)
    long = long.dropna(subset=[value_column]).reset_index(drop=True)
    long[value_column] = long[value_column].astype("float64")
    return long
