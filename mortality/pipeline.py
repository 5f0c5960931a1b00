"""Core pipeline logic: derive comparison tables from the mortality data.

This module chains the individual stages over one static snapshot of
the NCHS leading-causes-of-death table:

* :mod:`mortality.normalize` cleans the raw headers and types.
* :mod:`mortality.regions` attaches a census region to every record.
* :mod:`mortality.aggregate` builds region x cause summaries and
  leading-cause rankings.
* :mod:`mortality.reshape` produces the wide state-year and
  region-year tables.
* :mod:`mortality.correlation` and :mod:`mortality.anomaly` derive the
  correlation matrix and the coverage ratios.

The primary entry point is :func:`run_pipeline`, which returns every
derived table in a single dictionary.  Each stage receives the previous
stage's output explicitly and returns a new DataFrame.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

import pandas as pd

from .aggregate import VALUE_COL, aggregate, exclude_aggregates, top_n, top_n_within
from .anomaly import detect
from .cdc_fetch import load_raw
from .config import (
    CAUSE_COL,
    DEATHS_COL,
    DEFAULT_ANOMALY_ENTITY,
    DEFAULT_CORRELATION_EXCLUDE,
    DEFAULT_SEP,
    DEFAULT_TOP_N,
    ENTITY_COL,
    MORTALITY_SOURCE,
    NATIONAL_ENTITY,
    RATE_COL,
    REGION_COL,
    YEAR_COL,
)
from .correlation import correlate
from .errors import PipelineError
from .normalize import normalize
from .regions import classify
from .reshape import pivot

# Module‑level logger
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def filter_years(
    df: pd.DataFrame,
    year_min: Optional[int],
    year_max: Optional[int],
    *,
    year_col: str = YEAR_COL,
) -> pd.DataFrame:
    """Return a DataFrame filtered to the inclusive year range.

    Parameters
    ----------
    df : pd.DataFrame
        Input data containing a column with year values.
    year_min : Optional[int]
        Lower bound (inclusive); ``None`` leaves the lower bound unbounded.
    year_max : Optional[int]
        Upper bound (inclusive); ``None`` leaves the upper bound unbounded.
    year_col : str
        Name of the column in ``df`` holding year values.

    Returns
    -------
    pd.DataFrame
        A new DataFrame containing only rows where ``year_col`` lies
        between ``year_min`` and ``year_max``.
    """
    if year_min is None and year_max is None:
        return df.copy()
    if year_min is not None and year_max is not None and year_min > year_max:
        raise PipelineError(f"Empty year range: {year_min} > {year_max}.")
    mask = pd.Series(True, index=df.index, dtype=bool)
    if year_min is not None:
        mask &= df[year_col] >= year_min
    if year_max is not None:
        mask &= df[year_col] <= year_max
    return df.loc[mask].reset_index(drop=True)


def prepare(
    raw: pd.DataFrame,
    *,
    year_min: Optional[int] = None,
    year_max: Optional[int] = None,
) -> pd.DataFrame:
    """Normalise, year-filter and region-classify the raw table."""
    long = normalize(raw)
    long = filter_years(long, year_min, year_max)
    if long.empty:
        raise PipelineError(f"No rows remain after filtering to years {year_min}–{year_max}.")
    return classify(long)


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


def regional_summaries(long: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Region x cause summaries over the individual states and causes.

    Returns death sums and mean age-adjusted rates keyed by region and
    cause, both excluding the "All causes" and national rows.
    """
    leading = exclude_aggregates(long)
    return {
        "region_cause_sum": aggregate(leading, [REGION_COL, CAUSE_COL], DEATHS_COL, "sum"),
        "region_cause_mean": aggregate(leading, [REGION_COL, CAUSE_COL], RATE_COL, "mean"),
    }


def leading_causes(long: pd.DataFrame, n: int = DEFAULT_TOP_N) -> Dict[str, pd.DataFrame]:
    """Top ``n`` causes by deaths, nationally and within each region."""
    leading = exclude_aggregates(long)
    national = aggregate(leading, [CAUSE_COL], DEATHS_COL, "sum")
    by_region = aggregate(leading, [REGION_COL, CAUSE_COL], DEATHS_COL, "sum")
    return {
        "leading_causes": top_n(national, n, by="descending"),
        "leading_causes_by_region": top_n_within(by_region, n, [REGION_COL], by="descending"),
    }


def regional_wide(long: pd.DataFrame) -> pd.DataFrame:
    """Mean rate per region, year and cause, pivoted to one row per region-year."""
    states = long.loc[long[ENTITY_COL].astype(str) != NATIONAL_ENTITY]
    means = aggregate(states, [REGION_COL, YEAR_COL, CAUSE_COL], RATE_COL, "mean")
    means = means.astype({VALUE_COL: "float64"})
    return pivot(
        means,
        row_keys=(REGION_COL, YEAR_COL),
        column_key=CAUSE_COL,
        value_column=VALUE_COL,
    )


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def run_pipeline(
    raw: Optional[pd.DataFrame] = None,
    *,
    source: str | Path = MORTALITY_SOURCE,
    sep: str = DEFAULT_SEP,
    year_min: Optional[int] = None,
    year_max: Optional[int] = None,
    n: int = DEFAULT_TOP_N,
    anomaly_entity: str = DEFAULT_ANOMALY_ENTITY,
    correlation_exclude: Sequence[str] = DEFAULT_CORRELATION_EXCLUDE,
) -> Dict[str, object]:
    """Run the full pipeline and return every derived table.

    Parameters
    ----------
    raw : pd.DataFrame, optional
        Raw table supplied by the caller.  When ``None`` it is loaded from
        ``source``.
    source : str or Path, optional
        Location of the mortality CSV.  Defaults to
        ``config.MORTALITY_SOURCE``.
    sep : str, optional
        Column delimiter of the CSV.
    year_min, year_max : Optional[int], optional
        Inclusive bounds on the years kept.
    n : int, optional
        Number of leading causes to keep in the rankings.
    anomaly_entity : str, optional
        Entity whose sub-cause coverage is computed.
    correlation_exclude : Sequence[str], optional
        Identifier columns left out of the correlation matrix.

    Returns
    -------
    Dict[str, object]
        DataFrames under ``"long"``, ``"region_cause_sum"``,
        ``"region_cause_mean"``, ``"leading_causes"``,
        ``"leading_causes_by_region"``, ``"wide"``, ``"regional_wide"``,
        ``"correlation"`` and ``"coverage"``, plus the ``"year_min"`` and
        ``"year_max"`` actually present.
    """
    # 1. Load and clean
    if raw is None:
        raw = load_raw(source, sep=sep)
    long = prepare(raw, year_min=year_min, year_max=year_max)
    logger.info(
        "Prepared %d records for %d entities and %d causes",
        len(long),
        long[ENTITY_COL].nunique(),
        long[CAUSE_COL].nunique(),
    )

    # 2. Summaries
    payload: Dict[str, object] = {"long": long}
    payload.update(regional_summaries(long))
    payload.update(leading_causes(long, n))

    # 3. Reshape
    wide = pivot(long)
    payload["wide"] = wide
    payload["regional_wide"] = regional_wide(long)

    # 4. Statistics on the reshaped views
    payload["correlation"] = correlate(wide, exclude_columns=correlation_exclude)
    payload["coverage"] = detect(long, anomaly_entity)

    payload["year_min"] = int(long[YEAR_COL].min())
    payload["year_max"] = int(long[YEAR_COL].max())
    return payload
