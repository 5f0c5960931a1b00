"""Schema normalisation for the raw mortality table.

The published CSV uses title-cased, space-separated headers
(``"Age-adjusted Death Rate"``, ``"113 Cause Name"``) that vary between
releases.  :func:`normalize` maps any such table onto the canonical long
schema used by every later stage::

    state | year | cause_name | deaths | age_adjusted_death_rate

String identifiers become ``category`` columns so later equality checks
and group-bys operate on integer codes.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

import pandas as pd

from .config import (
    CANONICAL_COLUMNS,
    CATEGORICAL_COLUMNS,
    DEATHS_COL,
    RATE_ALIASES,
    RATE_COL,
    REDUNDANT_COLUMNS,
    YEAR_COL,
)
from .errors import SchemaError

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_columns(names: Iterable[object]) -> List[str]:
    """Lower-case column names and join words with underscores."""
    return [_SEPARATORS.sub("_", str(name).strip().lower()) for name in names]


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise ``SchemaError`` if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise SchemaError(f"Missing expected columns: {missing}")


def _rename_rate(df: pd.DataFrame) -> pd.DataFrame:
    if RATE_COL in df.columns:
        return df
    for alias in RATE_ALIASES:
        normalized = normalize_columns([alias])[0]
        if normalized in df.columns:
            return df.rename(columns={normalized: RATE_COL})
    return df


def _coerce_non_negative(series: pd.Series, name: str) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce")
    bad = values.isna() | (values < 0)
    if bad.any():
        examples = series[bad].head(5).tolist()
        raise SchemaError(
            f"Column {name!r} has {int(bad.sum())} missing, unparseable or "
            f"negative values, e.g. {examples}"
        )
    return values


def normalize(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the raw table into the canonical record schema.

    Steps:

    * Lower-case and underscore every column name.
    * Rename the age-adjusted rate column to ``age_adjusted_death_rate``.
    * Drop the redundant ``113_cause_name`` column.
    * Validate and coerce ``year``, ``deaths`` and the rate.
    * Convert ``state`` and ``cause_name`` to ``category``.

    Parameters
    ----------
    raw : pd.DataFrame
        The table as read from the source.  Not modified.

    Returns
    -------
    pd.DataFrame
        A new DataFrame holding exactly the canonical columns, in canonical
        order.  Applying :func:`normalize` to its own output returns an
        equal frame.

    Raises
    ------
    SchemaError
        If a required column is absent after renaming, or if ``year`` is not
        an integer or ``deaths``/rate are not non-negative numbers.
    """
    df = raw.copy()
    df.columns = normalize_columns(df.columns)
    df = _rename_rate(df)
    df = df.drop(columns=REDUNDANT_COLUMNS, errors="ignore")
    ensure_columns(df, CANONICAL_COLUMNS)
    df = df[CANONICAL_COLUMNS].copy()

    years = pd.to_numeric(df[YEAR_COL], errors="coerce")
    if years.isna().any() or (years % 1 != 0).any():
        raise SchemaError(f"Column {YEAR_COL!r} must hold whole years.")
    df[YEAR_COL] = years.astype("int64")

    deaths = _coerce_non_negative(df[DEATHS_COL], DEATHS_COL)
    if (deaths % 1 != 0).any():
        raise SchemaError(f"Column {DEATHS_COL!r} must hold whole counts.")
    df[DEATHS_COL] = deaths.astype("int64")
    df[RATE_COL] = _coerce_non_negative(df[RATE_COL], RATE_COL).astype("float64")

    for col in CATEGORICAL_COLUMNS:
        blank = df[col].isna() | (df[col].astype(str).str.strip() == "")
        if blank.any():
            raise SchemaError(f"Column {col!r} has {int(blank.sum())} blank identifiers.")
        if not isinstance(df[col].dtype, pd.CategoricalDtype):
            df[col] = df[col].astype(str).str.strip().astype("category")

    logger.debug("Normalised %d rows into columns %s", len(df), list(df.columns))
    return df.reset_index(drop=True)
