"""Pairwise Pearson correlation between the cause columns of the wide table."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CORRELATION_EXCLUDE
from .errors import SchemaError

logger = logging.getLogger(__name__)


def correlate(
    wide: pd.DataFrame,
    exclude_columns: Sequence[str] = DEFAULT_CORRELATION_EXCLUDE,
) -> pd.DataFrame:
    """Compute the Pearson correlation matrix over the numeric cause columns.

    Each pair of columns uses only the rows where both are present
    (pairwise-complete), so a missing cell removes a row from the pairs that
    involve that column and no others.

    Parameters
    ----------
    wide : pd.DataFrame
        Output of :func:`mortality.reshape.pivot`.
    exclude_columns : Sequence[str]
        Identifier columns to leave out.  Defaults to state, year and region.

    Returns
    -------
    pd.DataFrame
        Square, symmetric ``Float64`` matrix indexed by column name on both
        axes.  A pair whose complete rows have zero variance in either column
        is ``pd.NA`` (undefined).  The diagonal is 1.0 for every column with
        nonzero variance and ``pd.NA`` otherwise.

    Raises
    ------
    SchemaError
        If ``exclude_columns`` names a column the table does not have.
    """
    unknown = [col for col in exclude_columns if col not in wide.columns]
    if unknown:
        raise SchemaError(f"Cannot exclude columns not in table: {unknown}")

    candidates = wide.drop(columns=list(exclude_columns))
    numeric_cols = [
        col
        for col in candidates.columns
        if pd.api.types.is_numeric_dtype(candidates[col].dtype)
        and not pd.api.types.is_bool_dtype(candidates[col].dtype)
    ]
    skipped = [col for col in candidates.columns if col not in numeric_cols]
    if skipped:
        logger.warning("Skipping non-numeric columns in correlation: %s", skipped)

    numeric = candidates[numeric_cols].astype("float64")
    matrix = numeric.corr(method="pearson", min_periods=2)

    # Self-correlation is exact whenever the column varies at all
    varies = np.array([numeric[col].dropna().nunique() > 1 for col in numeric_cols], dtype=bool)
    values = matrix.to_numpy(copy=True)
    np.fill_diagonal(values, np.where(varies, 1.0, np.nan))
    matrix = pd.DataFrame(values, index=numeric_cols, columns=numeric_cols)

    undefined = int(matrix.isna().to_numpy().sum())
    if undefined:
        logger.info("%d correlation cell(s) undefined (zero variance or too few rows)", undefined)
    return matrix.astype("Float64")
