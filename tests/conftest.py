"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Store fixtures: in-memory SQLite store and a pre-configured mock store
- Importer fixtures: importers wired to either store
- CSV fixtures: stream and file factories
"""

import io
import logging
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from taxonomy_importer.core.importer import TaxonomyImporter
from taxonomy_importer.store.base import TermStore
from taxonomy_importer.store.sqlite import SQLiteTermStore

# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> SQLiteTermStore:
    """Create an empty in-memory term store."""
    term_store = SQLiteTermStore(":memory:")
    yield term_store
    term_store.close()


@pytest.fixture
def mock_store() -> MagicMock:
    """Create a pre-configured mock term store.

    Nothing exists by default and every create returns the next id
    starting at 100. Individual tests can override specific methods.

    Example:
        def test_something(mock_store):
            mock_store.create.side_effect = TermCreationError("boom")
    """
    term_store = MagicMock(spec=TermStore)
    term_store.exists.return_value = None
    ids = iter(range(100, 10_000))
    term_store.create.side_effect = lambda *args, **kwargs: next(ids)
    return term_store


# =============================================================================
# Importer Fixtures
# =============================================================================


@pytest.fixture
def importer(store: SQLiteTermStore) -> TaxonomyImporter:
    """Create an importer backed by the in-memory store."""
    return TaxonomyImporter(store)


@pytest.fixture
def mock_importer(mock_store: MagicMock) -> TaxonomyImporter:
    """Create an importer backed by the mock store."""
    return TaxonomyImporter(mock_store)


# =============================================================================
# CSV Fixtures
# =============================================================================


@pytest.fixture
def csv_stream() -> Callable[..., io.StringIO]:
    """Factory fixture for CSV text streams built from lines.

    Example:
        def test_something(csv_stream):
            stream = csv_stream("name,parent", "Technology,")
    """

    def _create(*lines: str) -> io.StringIO:
        return io.StringIO("\n".join(lines) + "\n")

    return _create


@pytest.fixture
def csv_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing CSV lines to a temporary file."""

    def _create(*lines: str, name: str = "terms.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return path

    return _create


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging calls made by a test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()
