import pandas as pd
import pytest

from mortality.errors import PivotConflictError, SchemaError
from mortality.normalize import normalize
from mortality.regions import classify
from mortality.reshape import melt, pivot

RATE = "age_adjusted_death_rate"


def _records(df):
    return {
        (str(r.state), int(r.year), str(r.cause_name), float(r.age_adjusted_death_rate))
        for r in df.itertuples(index=False)
    }


def test_ohio_produces_single_wide_row(ohio_raw):
    wide = pivot(classify(normalize(ohio_raw)))
    assert len(wide) == 1
    row = wide.iloc[0]
    assert (str(row["state"]), int(row["year"]), str(row["region"])) == ("Ohio", 2015, "Midwest")
    assert row["Cancer"] == 50
    assert row["Heart disease"] == 55
    assert row["All causes"] == 200


def test_cause_columns_match_distinct_causes(sample_long):
    wide = pivot(sample_long)
    causes = list(wide.columns[3:])
    assert causes == ["Cancer", "Heart disease", "All causes"]
    assert set(causes) == set(sample_long["cause_name"].astype(str))
    assert not wide.duplicated(subset=["state", "year"]).any()


def test_missing_cell_is_no_value_not_zero(sample_long):
    wide = pivot(sample_long)
    iowa_2016 = wide[(wide["state"] == "Iowa") & (wide["year"] == 2016)]
    assert iowa_2016["Heart disease"].iloc[0] is pd.NA
    assert iowa_2016["Cancer"].iloc[0] == 46.0


def test_row_keys_keep_types_and_sort(sample_long):
    wide = pivot(sample_long)
    assert wide["year"].dtype == "int64"
    assert isinstance(wide["region"].dtype, pd.CategoricalDtype)
    keys = list(zip(wide["state"].astype(str), wide["year"]))
    assert keys == sorted(keys)


def test_round_trip_reproduces_records(sample_long):
    wide = pivot(sample_long)
    long_again = melt(wide)
    assert _records(long_again) == _records(sample_long)
    assert len(long_again) == len(sample_long)


def test_identical_duplicates_collapse(sample_long):
    doubled = pd.concat([sample_long, sample_long.iloc[:2]], ignore_index=True)
    pd.testing.assert_frame_equal(pivot(doubled), pivot(sample_long))


def test_conflicting_duplicates_raise(sample_long):
    clash = sample_long.iloc[[0]].copy()
    clash[RATE] = clash[RATE] + 1.0
    with pytest.raises(PivotConflictError, match="conflicting"):
        pivot(pd.concat([sample_long, clash], ignore_index=True))


def test_coarser_row_keys_collide(sample_long):
    # several years per state land on the same (state, cause) cell
    with pytest.raises(PivotConflictError):
        pivot(sample_long, row_keys=("state",))


def test_region_year_pivot_of_custom_value_column():
    means = pd.DataFrame(
        {
            "region": ["South", "South", "West"],
            "year": [2015, 2015, 2015],
            "cause_name": ["Cancer", "Stroke", "Cancer"],
            "value": [60.0, 40.0, 50.0],
        }
    )
    wide = pivot(means, row_keys=("region", "year"), value_column="value")
    assert wide["region"].tolist() == ["South", "West"]
    assert wide["Stroke"].iloc[1] is pd.NA


def test_missing_columns_raise(sample_long):
    with pytest.raises(SchemaError):
        pivot(sample_long.drop(columns=["region"]))
    with pytest.raises(SchemaError):
        melt(pd.DataFrame({"Cancer": [1.0]}))


def test_empty_input_gives_empty_table(sample_long):
    wide = pivot(sample_long.iloc[0:0])
    assert wide.empty
    assert list(wide.columns) == ["state", "year", "region"]
