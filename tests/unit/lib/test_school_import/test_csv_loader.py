"""Unit tests for the school hierarchy CSV loader."""

from pathlib import Path

import pytest

from fundraiser_api.lib.school_import import SchoolImportRecord, parse_schools_csv


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "schools.csv"
    path.write_text(content, encoding="utf-8")
    return path


class TestParseSchoolsCsv:
    """Tests for parse_schools_csv."""

    def test_parses_rows(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "State,State Abbr,District,School\n"
            "Utah,UT,Washington County,Snow Canyon\n"
            "Nevada,nv,Clark County,Desert Hills\n",
        )
        records = parse_schools_csv(path)
        assert records == [
            SchoolImportRecord("Utah", "UT", "Washington County", "Snow Canyon"),
            SchoolImportRecord("Nevada", "NV", "Clark County", "Desert Hills"),
        ]

    def test_strips_whitespace_and_deduplicates(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "State , State Abbr,District,School\n"
            " Utah ,UT, Washington County ,Snow Canyon\n"
            "Utah,UT,Washington County,Snow Canyon\n",
        )
        assert len(parse_schools_csv(path)) == 1

    def test_skips_blank_and_incomplete_rows(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "State,State Abbr,District,School\n"
            ",,,\n"
            "Utah,UT,Washington County,\n"
            "Utah,UT,Washington County,Snow Canyon\n",
        )
        records = parse_schools_csv(path)
        assert [r.school_name for r in records] == ["Snow Canyon"]

    def test_missing_column_raises(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "State,District,School\nUtah,Washington County,Snow Canyon\n")
        with pytest.raises(ValueError, match="State Abbr"):
            parse_schools_csv(path)

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "")
        with pytest.raises(ValueError, match="no header row"):
            parse_schools_csv(path)
