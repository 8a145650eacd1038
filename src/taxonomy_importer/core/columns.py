"""Header normalization and column resolution."""

from collections.abc import Sequence
from dataclasses import dataclass

from ..utils.exceptions import CSVFormatError

NAME_COLUMN = "name"
SLUG_COLUMN = "slug"
DESCRIPTION_COLUMN = "description"
PARENT_COLUMN = "parent"

EMPTY_FILE_MESSAGE = "file is empty or invalid"
MISSING_NAME_MESSAGE = "missing required name column"


def normalize_header(cell: str) -> str:
    """Trim and lowercase a header cell (a leading byte-order mark is dropped)."""
    return cell.lstrip("\ufeff").strip().lower()


def is_blank_row(row: Sequence[str]) -> bool:
    """True when every cell of the row is empty or whitespace."""
    return all(not cell.strip() for cell in row)


@dataclass(frozen=True)
class ColumnMap:
    """
    Column indices resolved from a CSV header row.

    Attributes:
        name: Index of the required name column
        slug: Index of the slug column, or None
        description: Index of the description column, or None
        parent: Index of the parent column, or None
        headers: Normalized header cells
    """

    name: int
    slug: int | None = None
    description: int | None = None
    parent: int | None = None
    headers: tuple[str, ...] = ()

    @classmethod
    def from_header(cls, header: Sequence[str] | None) -> "ColumnMap":
        """
        Resolve column indices from a raw header row.

        Matching is case- and whitespace-insensitive. When a header is
        repeated, its first occurrence wins. Unknown columns are ignored.

        Args:
            header: First record of the CSV, or None if the file had none

        Returns:
            ColumnMap

        Raises:
            CSVFormatError: If the header is missing/empty or has no name column
        """
        if not header or is_blank_row(header):
            raise CSVFormatError(EMPTY_FILE_MESSAGE, line_number=1)

        headers = tuple(normalize_header(cell) for cell in header)

        def index_of(column: str) -> int | None:
            try:
                return headers.index(column)
            except ValueError:
                return None

        name_index = index_of(NAME_COLUMN)
        if name_index is None:
            raise CSVFormatError(MISSING_NAME_MESSAGE, line_number=1)

        return cls(
            name=name_index,
            slug=index_of(SLUG_COLUMN),
            description=index_of(DESCRIPTION_COLUMN),
            parent=index_of(PARENT_COLUMN),
            headers=headers,
        )

    @staticmethod
    def cell(row: Sequence[str], index: int | None) -> str:
        """
        Get a trimmed cell value.

        Args:
            row: Data row
            index: Column index, or None when the column is absent

        Returns:
            Trimmed value, or "" when the column is absent or the row is short
        """
        if index is None or index >= len(row):
            return ""
        return row[index].strip()

    @property
    def optional_columns(self) -> dict[str, bool]:
        """Which optional columns are present."""
        return {
            SLUG_COLUMN: self.slug is not None,
            DESCRIPTION_COLUMN: self.description is not None,
            PARENT_COLUMN: self.parent is not None,
        }
