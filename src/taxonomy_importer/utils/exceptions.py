"""Custom exceptions for the taxonomy CSV importer.

Exception Hierarchy:
-------------------
ImporterError (base)
├── ImportIOError           # Stream could not be opened or read
├── CSVFormatError          # Empty header row, missing name column
├── UnknownTaxonomyError    # Taxonomy kind is not category/tag
└── TermStoreError (base for store errors)
    └── TermCreationError   # Store refused to create a term

Usage Guidelines:
----------------
1. ImportIOError, CSVFormatError and UnknownTaxonomyError are fatal: they
   are raised before any row is processed and end the whole import.

2. TermCreationError is a per-row soft error: the importer counts it and
   moves on to the next row.

3. Use ImporterError as catch-all for importer-specific errors.
"""


class ImporterError(Exception):
    """Base exception for all importer errors."""

    pass


class ImportIOError(ImporterError):
    """Raised when the CSV stream cannot be opened or read."""

    def __init__(self, message: str = "could not open file", path: str | None = None) -> None:
        """
        Initialize ImportIOError.

        Args:
            message: Error message.
            path: Optional path of the file that failed.
        """
        super().__init__(message)
        self.path = path


class CSVFormatError(ImporterError):
    """Raised when the CSV header row is unusable."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        """
        Initialize CSVFormatError.

        Args:
            message: Error message.
            line_number: Optional line number where the problem was found.
        """
        super().__init__(message)
        self.line_number = line_number


class UnknownTaxonomyError(ImporterError):
    """Raised when a taxonomy kind is not recognized."""

    def __init__(self, value: object) -> None:
        super().__init__("invalid taxonomy type")
        self.value = value


class TermStoreError(ImporterError):
    """Base exception for term store errors."""

    pass


class TermCreationError(TermStoreError):
    """
    Raised when the term store refuses to create a term.

    Common causes:
    1. The name is empty
    2. A term with the same name already exists under the same parent
    3. An explicit slug collides with an existing term
    4. The parent term does not exist
    """

    def __init__(self, message: str, name: str | None = None, taxonomy: str | None = None) -> None:
        """
        Initialize TermCreationError.

        Args:
            message: Error message from the store.
            name: Name of the term that could not be created.
            taxonomy: Taxonomy the term was meant for.
        """
        super().__init__(message)
        self.name = name
        self.taxonomy = taxonomy
