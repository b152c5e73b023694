"""
Deterministic data loading and light cleaning for the Vancouver crime report.
Loaders read one yearly CSV snapshot (crime_<year>.csv) and normalize column names.
The data directory defaults to data/raw and can be overridden with CRIME_DATA_DIR
(environment or .env at repo root).
"""
from __future__ import annotations
import os
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = REPO_ROOT / "data" / "raw"
CRIME_FILE_PATTERN = "crime_{year}.csv"

REQUIRED_COLUMNS: Sequence[str] = ("year", "month", "type", "hundred_block")


def load_data_dir() -> Path:
    """Resolve the data directory from CRIME_DATA_DIR (env or .env), else data/raw."""
    value = os.getenv("CRIME_DATA_DIR")
    if value:
        return Path(value)
    env_path = REPO_ROOT / ".env"
    if env_path.exists():
        for line in env_path.read_text().splitlines():
            if line.strip().startswith("CRIME_DATA_DIR="):
                return Path(line.split("=", 1)[1].strip().strip("\"' "))
    return DATA_DIR


def crime_file(year: int, data_dir: Path | str | None = None) -> Path:
    """Path of the yearly incident file, e.g. data/raw/crime_2013.csv."""
    base = Path(data_dir) if data_dir is not None else load_data_dir()
    return base / CRIME_FILE_PATTERN.format(year=year)


def _clean_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c) for c in df.columns]
    df.columns = df.columns.str.strip().str.lower()
    return df


def missing_columns(df: pd.DataFrame, required: Sequence[str] = REQUIRED_COLUMNS) -> list:
    return [c for c in required if c not in df.columns]


def read_crime_csv(source: Any) -> pd.DataFrame:
    """Read an incident CSV (path or buffer); columns lowercased.

    type and hundred_block are kept as plain text; no categorical inference here.
    Raises OSError / pandas parser errors unchanged, callers wrap them.
    """
    df = pd.read_csv(source)
    df = _clean_columns(df)
    logger.info("Read %d rows x %d columns from %s", len(df), len(df.columns), source)
    return df


def records_to_frame(rows: Iterable[Any], columns: Sequence[str] = REQUIRED_COLUMNS) -> pd.DataFrame:
    """Build a frame from a row sequence of dicts or tuples; columns lowercased."""
    rows = list(rows)
    if rows and isinstance(rows[0], dict):
        df = pd.DataFrame.from_records(rows)
    else:
        df = pd.DataFrame.from_records(rows, columns=list(columns))
    return _clean_columns(df)


__all__ = [
    "DATA_DIR",
    "REQUIRED_COLUMNS",
    "load_data_dir",
    "crime_file",
    "missing_columns",
    "read_crime_csv",
    "records_to_frame",
]
