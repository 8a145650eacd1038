"""Data models for the taxonomy CSV importer."""

from .results import ImportResult
from .terms import TaxonomyKind, TermRecord, TermReference, TermRequest, term_id_of

__all__ = [
    # Terms
    "TaxonomyKind",
    "TermRequest",
    "TermRecord",
    "TermReference",
    "term_id_of",
    # Results
    "ImportResult",
]
