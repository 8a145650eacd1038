"""Utility functions and exceptions."""

from .exceptions import (
    CSVFormatError,
    ImporterError,
    ImportIOError,
    TermCreationError,
    TermStoreError,
    UnknownTaxonomyError,
)

__all__ = [
    "ImporterError",
    "ImportIOError",
    "CSVFormatError",
    "UnknownTaxonomyError",
    "TermStoreError",
    "TermCreationError",
]
