"""Tests for header normalization and column resolution."""

import pytest

from taxonomy_importer.core.columns import ColumnMap, is_blank_row, normalize_header
from taxonomy_importer.utils.exceptions import CSVFormatError


class TestNormalizeHeader:
    @pytest.mark.parametrize(
        "cell,expected",
        [
            ("name", "name"),
            ("  Name ", "name"),
            ("DESCRIPTION", "description"),
            ("\ufeffName", "name"),
            ("\tParent\n", "parent"),
        ],
    )
    def test_normalize(self, cell, expected):
        assert normalize_header(cell) == expected


class TestColumnMap:
    def test_all_columns(self):
        columns = ColumnMap.from_header(["name", "slug", "description", "parent"])

        assert (columns.name, columns.slug, columns.description, columns.parent) == (0, 1, 2, 3)
        assert columns.optional_columns == {"slug": True, "description": True, "parent": True}

    def test_reordered_and_padded_headers(self):
        columns = ColumnMap.from_header([" Parent", "extra", "NAME "])

        assert columns.name == 2
        assert columns.parent == 0
        assert columns.slug is None
        assert columns.description is None
        assert columns.headers == ("parent", "extra", "name")

    def test_first_duplicate_header_wins(self):
        columns = ColumnMap.from_header(["name", "Name"])

        assert columns.name == 0

    def test_missing_name_column(self):
        with pytest.raises(CSVFormatError) as exc_info:
            ColumnMap.from_header(["title", "slug"])

        assert str(exc_info.value) == "missing required name column"
        assert exc_info.value.line_number == 1

    @pytest.mark.parametrize("header", [None, [], ["", "  "]])
    def test_empty_header(self, header):
        with pytest.raises(CSVFormatError) as exc_info:
            ColumnMap.from_header(header)

        assert str(exc_info.value) == "file is empty or invalid"

    def test_cell_trims_and_tolerates_short_rows(self):
        columns = ColumnMap.from_header(["name", "slug", "parent"])
        row = ["  Web Dev  ", " web-dev "]

        assert columns.cell(row, columns.name) == "Web Dev"
        assert columns.cell(row, columns.slug) == "web-dev"
        assert columns.cell(row, columns.parent) == ""
        assert columns.cell(row, None) == ""


class TestIsBlankRow:
    @pytest.mark.parametrize(
        "row,expected",
        [
            ([], True),
            ([""], True),
            (["  ", "\t", ""], True),
            (["", "x"], False),
            (["0"], False),
        ],
    )
    def test_is_blank_row(self, row, expected):
        assert is_blank_row(row) is expected
