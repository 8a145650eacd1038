"""SQLite-backed term store.

Database Schema:
---------------
```
terms (
    term_id      INTEGER PRIMARY KEY,
    taxonomy     TEXT NOT NULL,       -- category | tag
    name         TEXT NOT NULL,
    slug         TEXT NOT NULL,       -- unique per taxonomy
    description  TEXT NOT NULL,
    parent_id    INTEGER NOT NULL     -- 0 = no parent
)
```

Creation Rules:
--------------
- A name is required.
- Parents are only kept for hierarchical taxonomies and must exist.
- A hierarchical taxonomy rejects a second term with the same name under
  the same parent; a flat taxonomy rejects a repeated name outright.
- Slugs derived from the name get a numeric suffix on collision
  (``web``, ``web-2``, ...). An explicit slug that collides is rejected.

Every ``create`` commits immediately. Use ``":memory:"`` as the path for
a throwaway store.

Usage:
-----
```python
with SQLiteTermStore(".taxonomy.db") as store:
    tech_id = store.create("Technology", TaxonomyKind.CATEGORY)
    store.create("Web Dev", TaxonomyKind.CATEGORY, parent=tech_id)
    store.exists("web-dev", TaxonomyKind.CATEGORY)
```
"""

import sqlite3
from collections.abc import Callable
from pathlib import Path
from types import TracebackType

import structlog

from ..core.sanitizer import sanitize_title
from ..models.terms import TaxonomyKind, TermRecord
from ..utils.exceptions import TermCreationError
from .base import TermStore

logger = structlog.get_logger(__name__)

MEMORY_PATH = ":memory:"


class SQLiteTermStore(TermStore):
    """
    Term store persisted in a SQLite database.

    Features:
    - Lookup by slug or exact name
    - Per-call commits
    - Unique slugs per taxonomy
    - Context manager support
    """

    def __init__(
        self,
        db_path: str | Path = MEMORY_PATH,
        slugify: Callable[[str], str] = sanitize_title,
    ) -> None:
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            slugify: Slug sanitizer used for lookups and derived slugs
        """
        self.db_path = str(db_path)
        self._slugify = slugify
        if self.db_path != MEMORY_PATH:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: sqlite3.Connection = self._initialize_db()

    def _initialize_db(self) -> sqlite3.Connection:
        """Initialize database schema."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS terms (
                term_id INTEGER PRIMARY KEY AUTOINCREMENT,
                taxonomy TEXT NOT NULL,
                name TEXT NOT NULL,
                slug TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                parent_id INTEGER NOT NULL DEFAULT 0,
                UNIQUE (taxonomy, slug)
            )
        """
        )

        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_terms_name
            ON terms(taxonomy, name)
        """
        )

        conn.commit()
        return conn

    def exists(self, name: str, taxonomy: TaxonomyKind) -> TermRecord | None:
        """
        Find a term by slug or exact name within a taxonomy.

        The slug match (against the sanitized form of ``name``) is tried
        first, then the exact name.

        Args:
            name: Term name or slug
            taxonomy: Taxonomy to search

        Returns:
            Matching TermRecord, or None
        """
        name = name.strip()
        if not name:
            return None

        slug = self._slugify(name)
        if slug:
            row = self.conn.execute(
                "SELECT * FROM terms WHERE taxonomy = ? AND slug = ? ORDER BY term_id LIMIT 1",
                (taxonomy.value, slug),
            ).fetchone()
            if row is not None:
                return self._row_to_record(row)

        row = self.conn.execute(
            "SELECT * FROM terms WHERE taxonomy = ? AND name = ? ORDER BY term_id LIMIT 1",
            (taxonomy.value, name),
        ).fetchone()
        return self._row_to_record(row) if row is not None else None

    def create(
        self,
        name: str,
        taxonomy: TaxonomyKind,
        *,
        slug: str | None = None,
        description: str | None = None,
        parent: int | None = None,
    ) -> int:
        """
        Insert a new term and commit.

        Args:
            name: Term name
            taxonomy: Taxonomy to insert into
            slug: Explicit slug (derived from the name when omitted)
            description: Plain-text description
            parent: Parent term identifier (ignored for flat taxonomies)

        Returns:
            Identifier of the new term

        Raises:
            TermCreationError: If the term violates a creation rule
        """
        name = name.strip()
        if not name:
            raise TermCreationError("A name is required for this term.", taxonomy=taxonomy.value)

        parent_id = parent if (parent and taxonomy.is_hierarchical) else 0
        if parent_id and self.get(parent_id, taxonomy) is None:
            raise TermCreationError("Parent term does not exist.", name, taxonomy.value)

        if taxonomy.is_hierarchical:
            clash = self.conn.execute(
                "SELECT 1 FROM terms WHERE taxonomy = ? AND name = ? AND parent_id = ?",
                (taxonomy.value, name, parent_id),
            ).fetchone()
            if clash is not None:
                raise TermCreationError(
                    "A term with the name provided already exists with this parent.",
                    name,
                    taxonomy.value,
                )
        else:
            clash = self.conn.execute(
                "SELECT 1 FROM terms WHERE taxonomy = ? AND name = ?",
                (taxonomy.value, name),
            ).fetchone()
            if clash is not None:
                raise TermCreationError(
                    "A term with the name provided already exists in this taxonomy.",
                    name,
                    taxonomy.value,
                )

        final_slug = self._resolve_slug(name, taxonomy, slug)

        try:
            cursor = self.conn.execute(
                """
                INSERT INTO terms (taxonomy, name, slug, description, parent_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (taxonomy.value, name, final_slug, description or "", parent_id),
            )
            self.conn.commit()
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            raise TermCreationError(f"Could not insert term: {e}", name, taxonomy.value) from e

        term_id = cursor.lastrowid
        assert term_id is not None, "INSERT should always set lastrowid"
        logger.debug(
            "term_inserted",
            term_id=term_id,
            name=name,
            slug=final_slug,
            taxonomy=taxonomy.value,
            parent_id=parent_id,
        )
        return term_id

    def _resolve_slug(self, name: str, taxonomy: TaxonomyKind, slug: str | None) -> str:
        """
        Pick the slug for a new term.

        Raises:
            TermCreationError: If an explicit slug is already taken
        """
        explicit = self._slugify(slug) if slug else ""
        if explicit:
            if self._slug_taken(explicit, taxonomy):
                raise TermCreationError(
                    f"Duplicate term slug: {explicit}", name, taxonomy.value
                )
            return explicit

        base = self._slugify(name) or "term"
        candidate = base
        suffix = 2
        while self._slug_taken(candidate, taxonomy):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _slug_taken(self, slug: str, taxonomy: TaxonomyKind) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM terms WHERE taxonomy = ? AND slug = ?",
            (taxonomy.value, slug),
        ).fetchone()
        return row is not None

    def get(self, term_id: int, taxonomy: TaxonomyKind | None = None) -> TermRecord | None:
        """
        Get a term by identifier.

        Args:
            term_id: Term identifier
            taxonomy: Optional taxonomy the term must belong to

        Returns:
            TermRecord, or None
        """
        if taxonomy is None:
            row = self.conn.execute("SELECT * FROM terms WHERE term_id = ?", (term_id,)).fetchone()
        else:
            row = self.conn.execute(
                "SELECT * FROM terms WHERE term_id = ? AND taxonomy = ?",
                (term_id, taxonomy.value),
            ).fetchone()
        return self._row_to_record(row) if row is not None else None

    def list_terms(self, taxonomy: TaxonomyKind | None = None) -> list[TermRecord]:
        """
        List terms in creation order.

        Args:
            taxonomy: Restrict to one taxonomy (all when None)

        Returns:
            List of TermRecord
        """
        if taxonomy is None:
            cursor = self.conn.execute("SELECT * FROM terms ORDER BY term_id ASC")
        else:
            cursor = self.conn.execute(
                "SELECT * FROM terms WHERE taxonomy = ? ORDER BY term_id ASC",
                (taxonomy.value,),
            )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def _row_to_record(self, row: sqlite3.Row) -> TermRecord:
        """
        Convert SQLite row to TermRecord.

        Args:
            row: SQLite row

        Returns:
            TermRecord object
        """
        return TermRecord(
            term_id=row["term_id"],
            name=row["name"],
            slug=row["slug"],
            taxonomy=TaxonomyKind(row["taxonomy"]),
            description=row["description"],
            parent_id=row["parent_id"],
        )

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()

    def __enter__(self) -> "SQLiteTermStore":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()
