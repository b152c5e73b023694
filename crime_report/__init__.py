"""
Vancouver crime report: one year of incident records, recoded, tallied and charted.
"""
from .crime_table import (
    MONTH_LABELS,
    CrimeTable,
    CrimeTableError,
    LoadError,
    RangeError,
    RecodeError,
)

__all__ = [
    "MONTH_LABELS",
    "CrimeTable",
    "CrimeTableError",
    "LoadError",
    "RecodeError",
    "RangeError",
]
