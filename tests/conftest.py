"""
Pytest configuration for the crime report tests.
Forces the non-interactive matplotlib backend and provides small incident tables.
"""
import matplotlib
import pytest

from crime_report.crime_table import CrimeTable

matplotlib.use("Agg")


def _rows(counts, year=2013):
    """Expand {type: count} into incident rows spread over months 1..12."""
    rows = []
    i = 0
    for crime_type, n in counts.items():
        for _ in range(n):
            rows.append((year, i % 12 + 1, crime_type, f"{i}XX W BROADWAY"))
            i += 1
    return rows


@pytest.fixture
def abc_table():
    """Types A:10, B:50, C:5."""
    return CrimeTable.from_records(_rows({"A": 10, "B": 50, "C": 5}))


@pytest.fixture
def seven_type_table():
    """Seven types with distinct counts, shaped like the 2013 file."""
    counts = {
        "Theft From Auto Under $5000": 70,
        "Mischief": 40,
        "Break and Enter Residential/Other": 30,
        "Theft of Auto Under $5000": 12,
        "Other Theft": 50,
        "Break and Enter Commercial": 20,
        "Theft From Auto Over $5000": 3,
    }
    return CrimeTable.from_records(_rows(counts))


@pytest.fixture
def three_rows():
    return [
        (2013, 1, "Theft", "100 Main St"),
        (2013, 1, "Mischief", "200 Oak St"),
        (2013, 2, "Theft", "300 Elm St"),
    ]


@pytest.fixture
def crime_csv(tmp_path, three_rows):
    """A crime_2013.csv in upper-case headers, as published."""
    path = tmp_path / "crime_2013.csv"
    lines = ["TYPE,YEAR,MONTH,HUNDRED_BLOCK"]
    for year, month, crime_type, block in three_rows:
        lines.append(f"{crime_type},{year},{month},{block}")
    path.write_text("\n".join(lines) + "\n")
    return path
