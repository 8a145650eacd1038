"""Term storage backends."""

from .base import TermStore
from .sqlite import SQLiteTermStore

__all__ = ["TermStore", "SQLiteTermStore"]
