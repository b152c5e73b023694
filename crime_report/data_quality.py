"""
Data quality module for the crime report.
Audits missing values per column and formats a readable summary.
Rows with missing values are reported, not dropped.
"""
from __future__ import annotations
from typing import Any, Dict

from .crime_table import CrimeTable


# =============================================================================
# DATA QUALITY AUDIT
# =============================================================================
def audit_table(table: CrimeTable, dataset_name: str = "crime") -> Dict[str, Any]:
    """
    Audit a table for null values.

    Returns:
        Dict with per-column null counts and percentages, complete-row count,
        and overall cell completeness
    """
    df = table.frame
    total_rows = len(df)
    audit_results = {
        "dataset": dataset_name,
        "total_rows": total_rows,
        "complete_cases": table.complete_cases(),
        "columns": {},
        "overall_completeness": 0.0,
    }

    total_cells = 0
    null_cells = 0

    for col in df.columns:
        col_nulls = int(df[col].isna().sum())
        null_pct = (col_nulls / total_rows * 100) if total_rows > 0 else 0

        audit_results["columns"][col] = {
            "null_count": col_nulls,
            "null_percentage": round(null_pct, 2),
        }

        total_cells += total_rows
        null_cells += col_nulls

    audit_results["overall_completeness"] = round(
        (1 - null_cells / total_cells) * 100 if total_cells > 0 else 100, 2
    )

    return audit_results


# =============================================================================
# QUALITY REPORT FORMATTING
# =============================================================================
def format_quality_report(audit: Dict[str, Any]) -> str:
    """Format an audit as human-readable text."""
    lines = []
    lines.append("=" * 60)
    lines.append(f"DATA QUALITY REPORT: {audit.get('dataset', '').upper()}")
    lines.append("=" * 60)
    lines.append(f"  Rows: {audit.get('total_rows', 0):,}")
    lines.append(f"  Complete rows: {audit.get('complete_cases', 0):,}")
    lines.append(f"  Completeness: {audit.get('overall_completeness', 0)}%")
    lines.append("")

    columns_with_nulls = [
        (col, info)
        for col, info in audit.get("columns", {}).items()
        if info.get("null_count", 0) > 0
    ]

    if columns_with_nulls:
        lines.append("  Columns with missing values:")
        for col, info in columns_with_nulls:
            lines.append(
                f"    - {col}: {info['null_count']:,} nulls ({info['null_percentage']}%)"
            )
    else:
        lines.append("  No missing values!")

    return "\n".join(lines)


__all__ = ["audit_table", "format_quality_report"]
