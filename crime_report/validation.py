"""
Validation module for the crime report.
Reports the load-time invariants (single year, month domain, completeness).
Nothing is filtered or repaired here; the table is only inspected.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List

import pandas as pd

from .crime_table import CrimeTable

logger = logging.getLogger(__name__)


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.passed = True
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self.facts: Dict[str, Any] = {}

    def add_warning(self, msg: str):
        self.warnings.append(msg)
        logger.warning(msg)

    def add_error(self, msg: str):
        self.errors.append(msg)
        self.passed = False
        logger.error(msg)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "warnings": self.warnings,
            "errors": self.errors,
            "facts": self.facts,
        }


def check_single_year(table: CrimeTable, validation: ValidationResult) -> None:
    years = table.years()
    validation.facts["years"] = [int(y) for y in years]
    if len(years) > 1:
        validation.add_warning(
            f"Expected one calendar year, found {len(years)}: {sorted(validation.facts['years'])}"
        )


def check_month_domain(table: CrimeTable, validation: ValidationResult) -> None:
    raw = table.frame["month"]
    months = pd.to_numeric(raw, errors="coerce")
    present = months.dropna()
    validation.facts["month_range"] = (present.min(), present.max()) if not present.empty else (None, None)
    unparsable = raw.notna() & months.isna()
    out_of_domain = int(unparsable.sum()) + int(((present < 1) | (present > 12) | (present % 1 != 0)).sum())
    if out_of_domain:
        validation.add_error(f"{out_of_domain} record(s) have month outside 1..12")


def check_completeness(table: CrimeTable, validation: ValidationResult) -> None:
    """Completeness is advisory: incomplete rows produce a warning, never an error."""
    complete = table.complete_cases()
    validation.facts["complete_cases"] = complete
    validation.facts["total_records"] = len(table)
    incomplete = len(table) - complete
    if incomplete:
        validation.add_warning(f"{incomplete} record(s) have at least one missing field")


def check_table(table: CrimeTable) -> ValidationResult:
    """Run all invariant checks against a loaded table."""
    validation = ValidationResult()
    check_single_year(table, validation)
    check_month_domain(table, validation)
    check_completeness(table, validation)
    return validation


__all__ = [
    "ValidationResult",
    "check_single_year",
    "check_month_domain",
    "check_completeness",
    "check_table",
]
