"""Data manager for exporting pipeline results.

This module writes the table-shaped results of ``pipeline.run_pipeline``
to CSV for downstream consumers (charting and reporting).  Files are only
written, never read back: every run recomputes from the raw snapshot.
"""

import os
import tempfile
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .config import EXPORT_TABLES

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Output directory
# ---------------------------------------------------------------------------


def resolve_output_dir() -> Path:
    """Select a writable directory for exported tables.

    The lookup order is:

    1. The ``MORTALITY_OUTPUT_DIR`` environment variable, if set.
    2. A ``data`` folder at the repository root.
    3. A temporary directory in ``/tmp``.

    Each candidate path is tested for writability by attempting to
    create and delete a sentinel file.  The first path that succeeds
    is returned.
    """
    candidates: list[Path] = []
    env = os.getenv("MORTALITY_OUTPUT_DIR")
    if env:
        candidates.append(Path(env).expanduser().resolve())

    # Repo root /data (two levels up from this file)
    candidates.append(Path(__file__).resolve().parent.parent / "data")
    candidates.append(Path(tempfile.gettempdir()) / "mortality_pipeline")

    for path in candidates:
        try:
            path.mkdir(parents=True, exist_ok=True)
            test_file = path / ".write_test"
            test_file.write_text("ok", encoding="utf-8")
            test_file.unlink()
            return path
        except OSError as exc:
            logger.debug("Output directory %s not writable: %s", path, exc)

    # Final fallback: ensure the last candidate exists
    fallback = candidates[-1]
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def _atomic_to_csv(df: pd.DataFrame, path: Path, *, index: bool = False) -> None:
    """Write a DataFrame to CSV atomically.

    The CSV is first written to a temporary file in the same directory
    and then renamed to the final location.  This avoids leaving a
    partially written file if the process is interrupted mid‑write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        df.to_csv(tmp_path, index=index)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def export_payload(
    payload: Dict[str, object], directory: Optional[Path] = None
) -> Dict[str, Path]:
    """Write every table-shaped artifact of ``payload`` to ``<name>.csv``.

    Missing cells are written as empty fields.  The correlation matrix
    keeps its index so the cause names label both axes.

    Returns
    -------
    Dict[str, Path]
        Mapping of artifact name to the file written.
    """
    out_dir = Path(directory) if directory is not None else resolve_output_dir()
    written: Dict[str, Path] = {}
    for name in EXPORT_TABLES:
        table = payload.get(name)
        if not isinstance(table, pd.DataFrame):
            logger.warning("Payload has no table %r; skipping export", name)
            continue
        path = out_dir / f"{name}.csv"
        _atomic_to_csv(table, path, index=(name == "correlation"))
        written[name] = path

    logger.info("Exported %d tables to %s", len(written), out_dir)
    return written
