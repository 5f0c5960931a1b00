import pandas as pd

from mortality.main import main, parse_args


def test_parse_args_defaults():
    args = parse_args([])
    assert args.top_n == 10
    assert args.entity == "District of Columbia"
    assert args.year_min is None
    assert args.output_dir is None
    assert args.correlation_exclude == ["state", "year", "region"]


def test_main_runs_and_exports(sample_raw, tmp_path, capsys):
    source = tmp_path / "deaths.csv"
    sample_raw.to_csv(source, index=False)
    out_dir = tmp_path / "out"

    main(["--source", str(source), "--output-dir", str(out_dir), "--entity", "Texas", "--top-n", "3"])

    assert (out_dir / "wide.csv").exists()
    assert (out_dir / "coverage.csv").exists()
    printed = capsys.readouterr().out
    assert "MORTALITY PIPELINE COMPLETE" in printed
    assert "Coverage for Texas" in printed


def test_correlation_exclude_flag_reaches_pipeline(sample_raw, tmp_path):
    source = tmp_path / "deaths.csv"
    sample_raw.to_csv(source, index=False)
    out_dir = tmp_path / "out"

    main(
        [
            "--source", str(source),
            "--output-dir", str(out_dir),
            "--entity", "Ohio",
            "--correlation-exclude", "state", "region",
        ]
    )

    matrix = pd.read_csv(out_dir / "correlation.csv", index_col=0)
    assert "year" in matrix.columns
    assert "state" not in matrix.columns
