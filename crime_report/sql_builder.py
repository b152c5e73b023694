"""
SQL builder for the crime report tallies.
Builds DuckDB GROUP BY / COUNT(*) SQL over a registered frame and runs it
in an in-memory connection.
"""
from __future__ import annotations
import logging
from typing import List

import duckdb
import pandas as pd

logger = logging.getLogger(__name__)

TALLY_TABLE = "incidents"
LEVEL_COLUMN = "level_code"


def _quote_ident(name: str) -> str:
    """Quote an identifier for DuckDB (monthRC is mixed-case)."""
    return '"' + name.replace('"', '""') + '"'


def build_tally_sql(group_col: str, table: str = TALLY_TABLE) -> str:
    """
    Build a count-per-group query ordered by count descending.
    Ties are broken by the level column (category code), so equal counts keep
    the category order of the source categorical.
    """
    col = _quote_ident(group_col)
    lines: List[str] = [
        f"SELECT {col}, COUNT(*) AS count",
        f"FROM {_quote_ident(table)}",
        f"GROUP BY {col}, {LEVEL_COLUMN}",
        f"ORDER BY count DESC, {LEVEL_COLUMN} ASC",
    ]
    return "\n".join(lines)


def run_tally(series: pd.Series) -> pd.DataFrame:
    """
    Tally a categorical series; returns [<name>, count] with the same categories.
    Missing values are counted in one trailing row with a missing label, so the
    counts always sum to len(series).
    """
    if not isinstance(series.dtype, pd.CategoricalDtype):
        raise TypeError(f"Column '{series.name}' must be categorical to tally")
    name = str(series.name)
    codes = series.cat.codes.to_numpy()
    observed = codes >= 0
    frame = pd.DataFrame({
        name: series.astype(object).to_numpy()[observed],
        LEVEL_COLUMN: codes[observed],
    })
    sql = build_tally_sql(name)
    logger.debug("Tally SQL:\n%s", sql)

    conn = duckdb.connect(database=":memory:")
    try:
        conn.register(TALLY_TABLE, frame)
        result = conn.execute(sql).df()
    finally:
        conn.close()

    result[name] = pd.Categorical(
        result[name],
        categories=series.cat.categories,
        ordered=series.cat.ordered,
    )
    result["count"] = result["count"].astype("int64")

    missing = int((~observed).sum())
    if missing:
        tail = pd.DataFrame({
            name: pd.Categorical(
                [None], categories=series.cat.categories, ordered=series.cat.ordered
            ),
            "count": pd.Series([missing], dtype="int64"),
        })
        result = pd.concat([result, tail], ignore_index=True)
    return result.reset_index(drop=True)


__all__ = ["build_tally_sql", "run_tally"]
