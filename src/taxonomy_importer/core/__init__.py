"""Core components of the taxonomy CSV importer.

This package contains the import engine, header/column resolution and the
default slug and text sanitizers.
"""

from .columns import ColumnMap, normalize_header
from .importer import ImportSession, TaxonomyImporter, new_session_id, open_csv
from .sanitizer import sanitize_text_field, sanitize_title

__all__ = [
    "ColumnMap",
    "ImportSession",
    "TaxonomyImporter",
    "new_session_id",
    "normalize_header",
    "open_csv",
    "sanitize_text_field",
    "sanitize_title",
]
