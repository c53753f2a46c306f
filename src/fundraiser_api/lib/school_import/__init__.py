"""School import library public API.

Provides parsing of the state / district / school hierarchy CSV.
"""

from fundraiser_api.lib.school_import.csv_loader import EXPECTED_COLUMNS, SchoolImportRecord, parse_schools_csv

__all__ = [
    "EXPECTED_COLUMNS",
    "SchoolImportRecord",
    "parse_schools_csv",
]
