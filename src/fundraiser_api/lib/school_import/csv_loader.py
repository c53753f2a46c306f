"""CSV loader for the state / district / school hierarchy.

Parses a flat file with one row per school::

    State,State Abbr,District,School
    Utah,UT,Washington County,Snow Canyon High School
"""

import csv
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

EXPECTED_COLUMNS: tuple[str, ...] = ("State", "State Abbr", "District", "School")


@dataclass(frozen=True)
class SchoolImportRecord:
    """One school and the district and state it belongs to."""

    state_name: str
    state_abbr: str
    district_name: str
    school_name: str


def parse_schools_csv(file_path: Path) -> list[SchoolImportRecord]:
    """Parse a school hierarchy CSV file.

    Blank rows and rows missing any of the four values are skipped; repeated
    rows are kept once, in first-seen order.

    Args:
        file_path: Path to the CSV file.

    Returns:
        Deduplicated list of SchoolImportRecord objects.

    Raises:
        ValueError: If the CSV has no header row or is missing expected columns.
    """
    logger.info(f"Parsing school hierarchy CSV: {file_path}")

    seen: set[SchoolImportRecord] = set()
    records: list[SchoolImportRecord] = []
    skipped = 0

    with Path.open(file_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            msg = f"CSV file has no header row: {file_path}"
            raise ValueError(msg)

        missing = set(EXPECTED_COLUMNS) - {name.strip() for name in reader.fieldnames}
        if missing:
            msg = f"CSV missing expected columns: {sorted(missing)}"
            raise ValueError(msg)

        for row in reader:
            values = {key.strip(): (value or "").strip() for key, value in row.items() if key is not None}
            if not any(values.values()):
                continue
            if not all(values.get(col) for col in EXPECTED_COLUMNS):
                skipped += 1
                logger.warning(f"Skipping incomplete row {reader.line_num}: {values}")
                continue

            record = SchoolImportRecord(
                state_name=values["State"],
                state_abbr=values["State Abbr"].upper(),
                district_name=values["District"],
                school_name=values["School"],
            )
            if record not in seen:
                seen.add(record)
                records.append(record)

    logger.info(f"Parsed {len(records)} school rows ({skipped} incomplete rows skipped)")
    return records
