"""
Configuration constants for the mortality data pipeline.
"""

from typing import Dict, FrozenSet, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
# NCHS - Leading Causes of Death: United States
MORTALITY_SOURCE: str = (
    "https://data.cdc.gov/api/views/bi63-dtpu/rows.csv?accessType=DOWNLOAD"
)

DEFAULT_SEP: str = ","
REQUEST_TIMEOUT: int = 30

# ======================================================
#  CANONICAL SCHEMA
# ======================================================
ENTITY_COL: str = "state"
YEAR_COL: str = "year"
CAUSE_COL: str = "cause_name"
DEATHS_COL: str = "deaths"
RATE_COL: str = "age_adjusted_death_rate"
REGION_COL: str = "region"

CANONICAL_COLUMNS: List[str] = [ENTITY_COL, YEAR_COL, CAUSE_COL, DEATHS_COL, RATE_COL]
CATEGORICAL_COLUMNS: List[str] = [ENTITY_COL, CAUSE_COL]

# Header spellings (after lower/underscore normalisation) that mean the rate
RATE_ALIASES: Tuple[str, ...] = (
    "age-adjusted_death_rate",
    "age_adjusted_rate",
    "rate",
)

# ICD-10 "113 cause list" label; same information as cause_name, finer grain
REDUNDANT_COLUMNS: List[str] = ["113_cause_name"]

# ======================================================
#  SENTINELS
# ======================================================
ALL_CAUSES: str = "All causes"
NATIONAL_ENTITY: str = "United States"

# ======================================================
#  CENSUS REGIONS
# ======================================================
NORTHEAST_STATES: FrozenSet[str] = frozenset(
    {
        "Connecticut",
        "Maine",
        "Massachusetts",
        "New Hampshire",
        "Rhode Island",
        "Vermont",
        "New Jersey",
        "New York",
        "Pennsylvania",
    }
)

MIDWEST_STATES: FrozenSet[str] = frozenset(
    {
        "Illinois",
        "Indiana",
        "Michigan",
        "Ohio",
        "Wisconsin",
        "Iowa",
        "Kansas",
        "Minnesota",
        "Missouri",
        "Nebraska",
        "North Dakota",
        "South Dakota",
    }
)

SOUTH_STATES: FrozenSet[str] = frozenset(
    {
        "Delaware",
        "District of Columbia",
        "Florida",
        "Georgia",
        "Maryland",
        "North Carolina",
        "South Carolina",
        "Virginia",
        "West Virginia",
        "Alabama",
        "Kentucky",
        "Mississippi",
        "Tennessee",
        "Arkansas",
        "Louisiana",
        "Oklahoma",
        "Texas",
    }
)

WEST_STATES: FrozenSet[str] = frozenset(
    {
        "Arizona",
        "Colorado",
        "Idaho",
        "Montana",
        "Nevada",
        "New Mexico",
        "Utah",
        "Wyoming",
        "Alaska",
        "California",
        "Hawaii",
        "Oregon",
        "Washington",
    }
)

# ======================================================
#  PIPELINE DEFAULTS
# ======================================================
DEFAULT_TOP_N: int = 10
DEFAULT_ANOMALY_ENTITY: str = "District of Columbia"
DEFAULT_CORRELATION_EXCLUDE: Tuple[str, ...] = (ENTITY_COL, YEAR_COL, REGION_COL)
DEFAULT_PIVOT_KEYS: Tuple[str, ...] = (ENTITY_COL, YEAR_COL, REGION_COL)

# Names of the table-shaped artifacts written by ``data_manager.export_payload``
EXPORT_TABLES: Dict[str, str] = {
    "region_cause_sum": "Deaths summed by region and cause",
    "region_cause_mean": "Mean age-adjusted rate by region and cause",
    "leading_causes": "Top causes nationally by deaths",
    "leading_causes_by_region": "Top causes per region by deaths",
    "wide": "One row per state-year, one column per cause",
    "regional_wide": "One row per region-year, one column per cause",
    "correlation": "Pairwise Pearson correlation between causes",
    "coverage": "Sub-cause coverage of the all-causes rate",
}
