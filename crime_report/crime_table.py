"""
CrimeTable: one year of incident records plus the report's transformations.
Load -> recode type/month -> completeness -> tallies -> rank subsets.
Every transformation returns a new CrimeTable; the wrapped frame is never mutated.
"""
from __future__ import annotations
import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .data_utils import (
    crime_file,
    missing_columns,
    read_crime_csv,
    records_to_frame,
)
from .sql_builder import run_tally

logger = logging.getLogger(__name__)

MONTH_LABELS: List[str] = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
MONTH_RC = "monthRC"
TYPE_RAW = "type_raw"


class CrimeTableError(Exception):
    """Base class for crime table failures."""


class LoadError(CrimeTableError):
    """Raised when the source cannot be read or lacks required columns."""


class RecodeError(CrimeTableError):
    """Raised when a value has no categorical mapping."""


class RangeError(CrimeTableError):
    """Raised when a type rank range is invalid for the table's levels."""


def type_levels_by_frequency(values: pd.Series) -> List[str]:
    """
    Distinct values ordered by ascending count.
    Equal counts keep first-seen order (sorted() is stable over pd.unique order).
    """
    observed = values.dropna()
    counts = observed.value_counts()
    first_seen = list(pd.unique(observed))
    return sorted(first_seen, key=lambda v: counts[v])


class CrimeTable:
    """Read-only snapshot of incident records backed by a pandas DataFrame."""

    def __init__(self, df: pd.DataFrame):
        self._df = df

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def load(cls, source: Any) -> "CrimeTable":
        """Load a CSV path or buffer. Raises LoadError on read failure or missing columns."""
        try:
            df = read_crime_csv(source)
        except (OSError, ValueError, pd.errors.ParserError) as exc:
            raise LoadError(f"Unable to read crime data from {source}: {exc}") from exc
        return cls._checked(df, source)

    @classmethod
    def load_year(cls, year: int, data_dir: Path | str | None = None) -> "CrimeTable":
        """Load crime_<year>.csv from the data directory."""
        path = crime_file(year, data_dir)
        if not path.exists():
            raise LoadError(f"No crime data file for {year}: {path}")
        return cls.load(path)

    @classmethod
    def from_records(cls, rows: Iterable[Any]) -> "CrimeTable":
        """Build a table from (year, month, type, hundred_block) tuples or dicts."""
        try:
            df = records_to_frame(rows)
        except (TypeError, ValueError) as exc:
            raise LoadError(f"Unable to build crime table from records: {exc}") from exc
        return cls._checked(df, "records")

    @classmethod
    def _checked(cls, df: pd.DataFrame, source: Any) -> "CrimeTable":
        missing = missing_columns(df)
        if missing:
            raise LoadError(
                f"Crime data from {source} is missing required columns: {', '.join(missing)}"
            )
        logger.info("Loaded %d incidents from %s", len(df), source)
        return cls(df.reset_index(drop=True))

    # =========================================================================
    # EXPLORATION
    # =========================================================================

    @property
    def frame(self) -> pd.DataFrame:
        """A copy of the underlying frame."""
        return self._df.copy()

    @property
    def columns(self) -> List[str]:
        return list(self._df.columns)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._df.shape

    def __len__(self) -> int:
        return len(self._df)

    def __repr__(self) -> str:
        return f"CrimeTable(rows={len(self._df)}, columns={self.columns})"

    def head(self, n: int = 10) -> pd.DataFrame:
        return self._df.head(n).copy()

    def sample(self, n: int = 10, random_state: Optional[int] = None) -> pd.DataFrame:
        """Random rows for eyeballing; n is capped at the row count."""
        return self._df.sample(n=min(n, len(self._df)), random_state=random_state).copy()

    def month_range(self) -> Tuple[Any, Any]:
        months = self._df["month"]
        return months.min(), months.max()

    def years(self) -> List[Any]:
        return list(pd.unique(self._df["year"].dropna()))

    def type_values(self) -> List[str]:
        """Distinct raw crime types in first-seen order."""
        col = TYPE_RAW if TYPE_RAW in self._df.columns else "type"
        return [str(v) for v in pd.unique(self._df[col].dropna())]

    # =========================================================================
    # RECODING
    # =========================================================================

    @property
    def has_type_levels(self) -> bool:
        return isinstance(self._df["type"].dtype, pd.CategoricalDtype)

    @property
    def type_levels(self) -> List[str]:
        """Type levels in ascending-frequency order (requires recode_type)."""
        if not self.has_type_levels:
            raise RecodeError("type has not been recoded; call recode_type() first")
        return list(self._df["type"].cat.categories)

    def recode_type(self) -> "CrimeTable":
        """Make type categorical, levels ordered by ascending frequency; raw text kept in type_raw."""
        df = self._df.copy()
        raw = df[TYPE_RAW] if TYPE_RAW in df.columns else df["type"].astype(object)
        levels = type_levels_by_frequency(raw)
        df[TYPE_RAW] = raw
        df["type"] = pd.Categorical(raw, categories=levels, ordered=False)
        logger.info("Recoded type into %d levels: %s", len(levels), levels)
        return CrimeTable(df)

    def recode_month(self) -> "CrimeTable":
        """Add ordered categorical monthRC (Jan..Dec). Raises RecodeError outside 1..12."""
        df = self._df.copy()
        months = pd.to_numeric(df["month"], errors="coerce")
        unparsable = df["month"].notna() & months.isna()
        present = months.dropna()
        bad = present[(present < 1) | (present > 12) | (present != np.floor(present))]
        if unparsable.any() or not bad.empty:
            offending = sorted(set(df.loc[unparsable, "month"].astype(str)) | set(bad.astype(str)))
            raise RecodeError(f"Month values outside 1..12: {', '.join(offending)}")

        codes = months.fillna(0).astype(int) - 1
        df[MONTH_RC] = pd.Categorical.from_codes(
            codes.to_numpy(),
            categories=MONTH_LABELS,
            ordered=True,
        )
        logger.info("Recoded %d months into %s", int(months.notna().sum()), MONTH_RC)
        return CrimeTable(df)

    def _recoded(self) -> "CrimeTable":
        table = self
        if not table.has_type_levels:
            table = table.recode_type()
        if MONTH_RC not in table._df.columns:
            table = table.recode_month()
        return table

    # =========================================================================
    # COMPLETENESS
    # =========================================================================

    def complete_cases(self) -> int:
        """Rows with no missing field. Informational only; nothing is dropped."""
        return int(self._df.notna().all(axis=1).sum())

    # =========================================================================
    # TALLIES
    # =========================================================================

    def tally_by_type(self) -> pd.DataFrame:
        """Counts per type, descending; equal counts keep level order. Missing types trail."""
        table = self if self.has_type_levels else self.recode_type()
        result = run_tally(table._df["type"])
        logger.info("Tallied %d types", len(result))
        return result

    def tally_by_month(self) -> pd.DataFrame:
        """Counts per month label, descending; equal counts keep calendar order. Missing months trail."""
        table = self if MONTH_RC in self._df.columns else self.recode_month()
        result = run_tally(table._df[MONTH_RC])
        logger.info("Tallied %d months", len(result))
        return result

    def monthly_counts_by_type(self) -> pd.DataFrame:
        """Month x type count matrix (all 12 months, observed types in level order)."""
        table = self._recoded()
        df = table._df
        observed = set(df["type"].dropna().astype(str))
        levels = [lvl for lvl in df["type"].cat.categories if lvl in observed]
        if not levels:
            empty = pd.DataFrame(index=pd.Index(MONTH_LABELS, name=MONTH_RC), dtype="int64")
            empty.columns.name = "type"
            return empty
        pivot = (
            df.groupby([MONTH_RC, "type"], observed=True).size()
            .unstack(fill_value=0)
        )
        pivot.index = pivot.index.astype(str)
        pivot.columns = pivot.columns.astype(str)
        pivot = pivot.reindex(
            index=MONTH_LABELS,
            columns=levels,
            fill_value=0,
        )
        pivot.index.name = MONTH_RC
        pivot.columns.name = "type"
        return pivot.astype("int64")

    # =========================================================================
    # SUBSETS
    # =========================================================================

    def subset_by_type_rank(self, start: int, stop: int) -> "CrimeTable":
        """
        Rows whose type rank is in [start, stop).
        Ranks are 0-based positions in type_levels (least frequent first).
        Rows with a missing type have no rank and fall in no subset.
        """
        levels = self.type_levels
        n = len(levels)
        if start < 0 or stop > n or start >= stop:
            raise RangeError(
                f"Rank range [{start}, {stop}) is invalid for {n} type levels"
            )
        wanted = levels[start:stop]
        df = self._df[self._df["type"].isin(wanted)].copy()
        logger.info("Subset ranks [%d, %d) -> %s (%d rows)", start, stop, wanted, len(df))
        return CrimeTable(df)

    def split_by_type_rank(self, split: Optional[int] = None) -> Tuple["CrimeTable", "CrimeTable"]:
        """
        (low, high) subsets so low- and high-count types get separate scales.
        Default split point is ceil(levels / 2): 4 low and 3 high for 7 levels.
        A side with no levels (single type, split of 0 or n) comes back empty.
        """
        n = len(self.type_levels)
        if split is None:
            split = math.ceil(n / 2)
        if split < 0 or split > n:
            raise RangeError(f"Split point {split} is invalid for {n} type levels")
        low = self.subset_by_type_rank(0, split) if split > 0 else self._empty()
        high = self.subset_by_type_rank(split, n) if split < n else self._empty()
        return low, high

    def _empty(self) -> "CrimeTable":
        return CrimeTable(self._df.iloc[0:0].copy())


__all__ = [
    "MONTH_LABELS",
    "MONTH_RC",
    "CrimeTable",
    "CrimeTableError",
    "LoadError",
    "RecodeError",
    "RangeError",
    "type_levels_by_frequency",
]
