"""
Loads the raw NCHS leading-causes-of-death table.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import pandas as pd
import requests

from .config import DEFAULT_SEP, MORTALITY_SOURCE, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def _resolve_source_stream(source: str | Path) -> BytesIO | Path:
    """
    Return a file-like object (for URLs) or Path (for local files) for the CSV.
    """
    source_str = str(source)
    if source_str.lower().startswith(("http://", "https://")):
        logger.info("Downloading mortality table from %s", source_str)
        response = requests.get(source_str, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return BytesIO(response.content)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Mortality table not found at {path}")
    return path


def load_raw(source: str | Path = MORTALITY_SOURCE, sep: str = DEFAULT_SEP) -> pd.DataFrame:
    """Load the raw mortality CSV as published.

    Parameters
    ----------
    source : str or Path
        Local path or HTTP(S) URL of the CSV.
    sep : str, optional
        Column delimiter; defaults to `","`.

    Returns
    -------
    pd.DataFrame
        The raw table with its original headers.  Deaths are published with
        thousands separators, which are stripped here.
    """
    stream = _resolve_source_stream(source)
    raw = pd.read_csv(stream, sep=sep, thousands=",")
    logger.info("Loaded %d raw rows with columns %s", len(raw), list(raw.columns))
    return raw
