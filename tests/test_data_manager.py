import pandas as pd
import pytest

from mortality import data_manager
from mortality.pipeline import run_pipeline


@pytest.fixture
def payload(sample_raw):
    return run_pipeline(sample_raw, anomaly_entity="Ohio")


def test_export_writes_every_table(payload, tmp_path):
    written = data_manager.export_payload(payload, tmp_path)
    assert set(written) == set(data_manager.EXPORT_TABLES)
    for path in written.values():
        assert path.exists()
        assert not path.with_suffix(".csv.tmp").exists()


def test_exported_missing_cells_are_blank(payload, tmp_path):
    written = data_manager.export_payload(payload, tmp_path)
    wide = pd.read_csv(written["wide"])
    iowa_2016 = wide[(wide["state"] == "Iowa") & (wide["year"] == 2016)]
    assert iowa_2016["Heart disease"].isna().all()


def test_correlation_export_keeps_labels(payload, tmp_path):
    written = data_manager.export_payload(payload, tmp_path)
    matrix = pd.read_csv(written["correlation"], index_col=0)
    assert list(matrix.index) == list(matrix.columns)


def test_export_skips_absent_tables(tmp_path):
    written = data_manager.export_payload({"wide": pd.DataFrame({"a": [1]})}, tmp_path)
    assert list(written) == ["wide"]


def test_output_dir_from_environment(monkeypatch, tmp_path):
    target = tmp_path / "exports"
    monkeypatch.setenv("MORTALITY_OUTPUT_DIR", str(target))
    assert data_manager.resolve_output_dir() == target.resolve()
    assert target.is_dir()


def test_failed_write_leaves_no_temp_file(monkeypatch, tmp_path):
    def broken_to_csv(self, path, **kwargs):
        path.write_text("partial", encoding="utf-8")
        raise OSError("disk full")

    monkeypatch.setattr(pd.DataFrame, "to_csv", broken_to_csv)
    with pytest.raises(OSError, match="disk full"):
        data_manager.export_payload({"wide": pd.DataFrame({"a": [1]})}, tmp_path)
    assert list(tmp_path.iterdir()) == []
