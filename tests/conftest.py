"""Shared fixtures for the mortality pipeline tests."""

from __future__ import annotations

import pandas as pd
import pytest

RAW_HEADERS = [
    "Year",
    "113 Cause Name",
    "Cause Name",
    "State",
    "Deaths",
    "Age-adjusted Death Rate",
]


def raw_frame(rows):
    """Build a table shaped like the published CSV from (state, year, cause, deaths, rate)."""
    records = [
        {
            "Year": year,
            "113 Cause Name": f"{cause} (ICD-10 code)",
            "Cause Name": cause,
            "State": state,
            "Deaths": deaths,
            "Age-adjusted Death Rate": rate,
        }
        for state, year, cause, deaths, rate in rows
    ]
    return pd.DataFrame(records, columns=RAW_HEADERS)


OHIO_ROWS = [
    ("Ohio", 2015, "Cancer", 100, 50.0),
    ("Ohio", 2015, "Heart disease", 120, 55.0),
    ("Ohio", 2015, "All causes", 400, 200.0),
]

SAMPLE_ROWS = [
    ("Ohio", 2015, "Cancer", 100, 50.0),
    ("Ohio", 2015, "Heart disease", 120, 55.0),
    ("Ohio", 2015, "All causes", 400, 200.0),
    ("Ohio", 2016, "Cancer", 110, 52.0),
    ("Ohio", 2016, "Heart disease", 125, 57.5),
    ("Ohio", 2016, "All causes", 420, 205.0),
    ("Iowa", 2015, "Cancer", 40, 45.0),
    ("Iowa", 2015, "Heart disease", 60, 49.0),
    ("Iowa", 2015, "All causes", 150, 180.0),
    ("Iowa", 2016, "Cancer", 42, 46.0),
    ("Iowa", 2016, "All causes", 155, 182.0),
    ("Texas", 2015, "Cancer", 300, 60.0),
    ("Texas", 2015, "Heart disease", 350, 70.0),
    ("Texas", 2015, "All causes", 900, 250.0),
    ("Texas", 2016, "Cancer", 310, 61.0),
    ("Texas", 2016, "Heart disease", 340, 68.0),
    ("Texas", 2016, "All causes", 910, 245.0),
    ("United States", 2015, "Cancer", 5000, 55.0),
    ("United States", 2015, "Heart disease", 6000, 60.0),
    ("United States", 2015, "All causes", 20000, 220.0),
]


@pytest.fixture
def ohio_raw() -> pd.DataFrame:
    return raw_frame(OHIO_ROWS)


@pytest.fixture
def sample_raw() -> pd.DataFrame:
    return raw_frame(SAMPLE_ROWS)


@pytest.fixture
def sample_long(sample_raw) -> pd.DataFrame:
    from mortality.normalize import normalize
    from mortality.regions import classify

    return classify(normalize(sample_raw))
