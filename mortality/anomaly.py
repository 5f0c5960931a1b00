"""Sub-cause coverage check for a single entity.

For every year of one entity, the sub-cause values are summed and compared
with the "All causes" value.  A ratio well below 1.0 means the listed causes
cover only part of total mortality; the module only reports the ratio.
"""

from __future__ import annotations

import logging

import pandas as pd

from .config import ALL_CAUSES, CAUSE_COL, ENTITY_COL, RATE_COL, YEAR_COL
from .errors import DivisionError, MissingBaselineError, SchemaError

logger = logging.getLogger(__name__)

PROPORTION_COLUMNS = [
    ENTITY_COL,
    YEAR_COL,
    "sum_of_subcauses",
    "all_causes_value",
    "coverage_ratio",
]


def detect(
    df: pd.DataFrame,
    entity: str,
    value_column: str = RATE_COL,
) -> pd.DataFrame:
    """Compute the coverage ratio of ``entity`` for each of its years.

    Parameters
    ----------
    df : pd.DataFrame
        Normalised long table.
    entity : str
        State name, ``"District of Columbia"`` or ``"United States"``.
    value_column : str, optional
        Column to compare; the age-adjusted rate by default.

    Returns
    -------
    pd.DataFrame
        Columns ``state``, ``year``, ``sum_of_subcauses``,
        ``all_causes_value`` and ``coverage_ratio``, one row per year in
        ascending order.  Empty when ``entity`` is not in the table.

    Raises
    ------
    MissingBaselineError
        If a year has no "All causes" record for the entity.
    DivisionError
        If the "All causes" value is zero.
    SchemaError
        If a year has more than one "All causes" record, or a column is missing.
    """
    missing = [c for c in (ENTITY_COL, YEAR_COL, CAUSE_COL, value_column) if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing expected columns: {missing}")

    rows = df.loc[df[ENTITY_COL].astype(str) == entity]
    if rows.empty:
        logger.warning("Entity %r not present; no coverage ratios computed.", entity)
        return pd.DataFrame(columns=PROPORTION_COLUMNS)

    is_total = rows[CAUSE_COL].astype(str) == ALL_CAUSES
    records = []
    for year, year_rows in rows.groupby(YEAR_COL, sort=True):
        year = int(year)
        baseline = year_rows.loc[is_total.loc[year_rows.index], value_column]
        if baseline.empty:
            raise MissingBaselineError(entity, year)
        if len(baseline) > 1:
            raise SchemaError(
                f"{len(baseline)} 'All causes' records for {entity!r} in {year}."
            )
        all_causes_value = float(baseline.iloc[0])
        if all_causes_value == 0:
            raise DivisionError(entity, year)

        subcauses = year_rows.loc[~is_total.loc[year_rows.index], value_column]
        sum_of_subcauses = float(subcauses.astype("float64").sum())
        records.append(
            {
                ENTITY_COL: entity,
                YEAR_COL: year,
                "sum_of_subcauses": sum_of_subcauses,
                "all_causes_value": all_causes_value,
                "coverage_ratio": sum_of_subcauses / all_causes_value,
            }
        )

    result = pd.DataFrame(records, columns=PROPORTION_COLUMNS)
    logger.info(
        "Coverage for %s over %d year(s): min %.3f, max %.3f",
        entity,
        len(result),
        result["coverage_ratio"].min(),
        result["coverage_ratio"].max(),
    )
    return result
