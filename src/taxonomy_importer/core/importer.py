"""CSV-to-taxonomy importer.

Overview:
--------
TaxonomyImporter reads a CSV document in a single sequential pass and
turns every data row into a term in the injected TermStore. Rows are
never buffered: each row is resolved, checked and created (or skipped)
before the next one is read.

CSV Format:
----------
```
name,slug,description,parent
Technology,technology,Tech related posts,
Web Development,web-dev,Website development topics,Technology
Design,design,Design and creativity posts,
```
Only ``name`` is required. Header matching ignores case and surrounding
whitespace; unknown columns are ignored.

Parent Resolution:
-----------------
Parents are only resolved for hierarchical taxonomies (category). A parent
name is looked up in the store first, then in the session cache of names
seen earlier in the same file. A parent that only appears in a later row
is never found; the child is created without a parent.

Counters:
--------
- created: the store accepted the term
- skipped: blank name, or a term with that name already exists
- errors: the store refused the term (TermCreationError)
Blank rows count towards nothing.

Error Handling:
--------------
- ImportIOError: stream cannot be opened or read
- CSVFormatError: empty header or missing name column
- UnknownTaxonomyError: taxonomy kind not recognized
These end the call before any row is touched. ``run`` raises them;
``import_stream`` and ``import_file`` return them as a failed ImportResult.

A read failure after the header ends the row loop instead: the rows
already processed stay committed and counted, and the result carries a
message naming the last line read. Files are decoded with replacement
characters, so undecodable bytes never stop an import.
"""

import csv
import time
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import structlog

from ..models.results import ImportResult
from ..models.terms import TaxonomyKind, TermReference, TermRequest, term_id_of
from ..observability.logger import LogContext
from ..store.base import TermStore
from ..utils.exceptions import (
    CSVFormatError,
    ImporterError,
    ImportIOError,
    TermCreationError,
)
from .columns import EMPTY_FILE_MESSAGE, ColumnMap, is_blank_row
from .sanitizer import sanitize_text_field, sanitize_title

logger = structlog.get_logger(__name__)

OPEN_FAILED_MESSAGE = "could not open file"
READ_STOPPED_MESSAGE = "stopped reading"


def new_session_id() -> str:
    """Short identifier tying together the log lines of one import."""
    return uuid.uuid4().hex[:8]


def open_csv(csv_path: Path | str, encoding: str = "utf-8-sig") -> TextIO:
    """
    Open a CSV file for reading.

    Undecodable bytes become U+FFFD instead of failing the read.

    Raises:
        ImportIOError: If the file cannot be opened (``path`` is set)
    """
    try:
        return open(csv_path, encoding=encoding, errors="replace", newline="")
    except OSError as e:
        raise ImportIOError(OPEN_FAILED_MESSAGE, path=str(csv_path)) from e


@dataclass
class ImportSession:
    """
    Per-call import state.

    Attributes:
        taxonomy: Taxonomy being imported into
        name_to_term: Names seen so far in this file, in row order, mapped to
            the existing or newly created term
        created: Terms created
        skipped: Rows skipped (blank name or already existing)
        errors: Rows the store refused
        rows_processed: Non-blank data rows seen
        stopped_after_line: Last line read before a read failure, if any
    """

    taxonomy: TaxonomyKind
    name_to_term: dict[str, TermReference] = field(default_factory=dict)
    created: int = 0
    skipped: int = 0
    errors: int = 0
    rows_processed: int = 0
    stopped_after_line: int | None = None

    def to_result(self, duration_seconds: float) -> ImportResult:
        """Build the successful result for this session."""
        message = None
        if self.stopped_after_line is not None:
            message = f"{READ_STOPPED_MESSAGE} after line {self.stopped_after_line}"
        return ImportResult(
            success=True,
            created=self.created,
            skipped=self.skipped,
            errors=self.errors,
            message=message,
            rows_processed=self.rows_processed,
            duration_seconds=duration_seconds,
        )


class TaxonomyImporter:
    """
    Import taxonomy terms from CSV into a term store.

    Features:
    - Single streaming pass, one row at a time
    - Case/whitespace-insensitive headers
    - Same-file parent references (earlier rows only)
    - Existing terms are skipped, never overwritten
    - Store failures are counted per row and never abort the import
    """

    def __init__(
        self,
        store: TermStore,
        slugify: Callable[[str], str] = sanitize_title,
        clean_text: Callable[[str], str] = sanitize_text_field,
    ) -> None:
        """
        Initialize importer.

        Args:
            store: Term store used for existence lookups and creation
            slugify: Slug sanitizer applied to the slug column
            clean_text: Text sanitizer applied to the description column
        """
        self.store = store
        self.slugify = slugify
        self.clean_text = clean_text

    def import_file(
        self,
        csv_path: Path | str,
        taxonomy: TaxonomyKind | str,
        encoding: str = "utf-8-sig",
        session_id: str | None = None,
    ) -> ImportResult:
        """
        Import a CSV file.

        Args:
            csv_path: Path to CSV file
            taxonomy: Taxonomy kind (or its name)
            encoding: File encoding
            session_id: Identifier bound to every log line of the run

        Returns:
            ImportResult (success=False with a message on upfront failure)
        """
        try:
            handle = open_csv(csv_path, encoding)
        except ImportIOError as e:
            logger.error("csv_open_failed", csv_path=e.path, error=str(e.__cause__))
            return ImportResult.failure(str(e))

        with handle:
            return self.import_stream(handle, taxonomy, session_id=session_id)

    def import_stream(
        self, stream: TextIO, taxonomy: TaxonomyKind | str, session_id: str | None = None
    ) -> ImportResult:
        """
        Import CSV data from an open text stream.

        Args:
            stream: Readable text stream positioned at the start of the CSV
            taxonomy: Taxonomy kind (or its name)
            session_id: Identifier bound to every log line of the run

        Returns:
            ImportResult (success=False with a message on upfront failure)
        """
        try:
            return self.run(stream, taxonomy, session_id=session_id)
        except ImporterError as e:
            logger.error("import_failed", error=str(e), error_type=type(e).__name__)
            return ImportResult.failure(str(e))

    def run(
        self, stream: TextIO, taxonomy: TaxonomyKind | str, session_id: str | None = None
    ) -> ImportResult:
        """
        Import CSV data, raising on upfront failures.

        Args:
            stream: Readable text stream positioned at the start of the CSV
            taxonomy: Taxonomy kind (or its name)
            session_id: Identifier bound to every log line (generated if omitted)

        Returns:
            Successful ImportResult

        Raises:
            UnknownTaxonomyError: If taxonomy is not recognized
            ImportIOError: If the header cannot be read
            CSVFormatError: If the header is empty or lacks a name column
        """
        kind = TaxonomyKind.parse(taxonomy)
        started = time.perf_counter()
        session = ImportSession(taxonomy=kind)

        with LogContext(import_session=session_id or new_session_id(), taxonomy=kind.value):
            rows = self._read_rows(stream, session)
            columns = ColumnMap.from_header(self._next_row(rows))

            logger.info(
                "import_started",
                headers=list(columns.headers),
                optional_columns=columns.optional_columns,
            )

            for line_num, row in rows:
                self._process_row(session, columns, row, line_num)

            result = session.to_result(time.perf_counter() - started)
            logger.info(
                "import_complete",
                created=result.created,
                skipped=result.skipped,
                errors=result.errors,
                rows_processed=result.rows_processed,
                duration_seconds=round(result.duration_seconds, 3),
            )
            return result

    def _read_rows(
        self, stream: TextIO, session: ImportSession
    ) -> Iterator[tuple[int, list[str]]]:
        """
        Yield ``(line_number, row)`` pairs from the stream.

        A failure while reading the header raises. A later failure ends
        the iteration and is recorded on the session.
        """
        reader = csv.reader(stream)
        line_num = 0
        try:
            for row in reader:
                line_num = reader.line_num
                yield line_num, row
        except csv.Error as e:
            if not line_num:
                raise CSVFormatError(EMPTY_FILE_MESSAGE, line_number=1) from e
            self._stop_reading(session, line_num, e)
        except (OSError, ValueError) as e:
            if not line_num:
                raise ImportIOError(OPEN_FAILED_MESSAGE) from e
            self._stop_reading(session, line_num, e)

    @staticmethod
    def _stop_reading(session: ImportSession, line_num: int, error: Exception) -> None:
        session.stopped_after_line = line_num
        logger.warning("read_stopped", after_line=line_num, error=str(error))

    @staticmethod
    def _next_row(rows: Iterator[tuple[int, list[str]]]) -> list[str] | None:
        line = next(rows, None)
        return line[1] if line is not None else None

    def _process_row(
        self, session: ImportSession, columns: ColumnMap, row: list[str], line_num: int
    ) -> None:
        """Resolve one data row and create or skip its term."""
        if is_blank_row(row):
            return

        session.rows_processed += 1

        name = columns.cell(row, columns.name)
        if not name:
            session.skipped += 1
            logger.debug("blank_name", line=line_num)
            return

        request = self._build_request(session.taxonomy, columns, row, name)

        parent_id = None
        if request.parent_ref:
            parent_id = self._resolve_parent(session, request.parent_ref, line_num)

        existing = self.store.exists(name, session.taxonomy)
        if existing is not None:
            session.skipped += 1
            session.name_to_term[name] = existing
            logger.debug("term_exists", line=line_num, name=name, term_id=term_id_of(existing))
            return

        try:
            term_id = self.store.create(
                name, session.taxonomy, **request.creation_args(parent_id)
            )
        except TermCreationError as e:
            session.errors += 1
            logger.warning("term_create_failed", line=line_num, name=name, error=str(e))
            return

        session.created += 1
        session.name_to_term[name] = term_id
        logger.info("term_created", line=line_num, name=name, term_id=term_id, parent_id=parent_id)

    def _build_request(
        self, taxonomy: TaxonomyKind, columns: ColumnMap, row: list[str], name: str
    ) -> TermRequest:
        """Build the creation request for a row with a non-blank name."""
        slug = None
        raw_slug = columns.cell(row, columns.slug)
        if raw_slug:
            slug = self.slugify(raw_slug)

        description = None
        raw_description = columns.cell(row, columns.description)
        if raw_description:
            description = self.clean_text(raw_description)

        parent_ref = None
        if taxonomy.is_hierarchical:
            parent_ref = columns.cell(row, columns.parent) or None

        return TermRequest(name=name, slug=slug, description=description, parent_ref=parent_ref)

    def _resolve_parent(self, session: ImportSession, parent_name: str, line_num: int) -> int | None:
        """
        Find the identifier of a parent term.

        The store is consulted first, then names seen earlier in this file.

        Returns:
            Parent identifier, or None if the parent is unknown
        """
        parent: TermReference | None = self.store.exists(parent_name, session.taxonomy)
        if parent is None:
            parent = session.name_to_term.get(parent_name)

        if parent is None:
            logger.warning("parent_unresolved", line=line_num, parent=parent_name)
            return None

        parent_id = term_id_of(parent)
        logger.debug("parent_resolved", line=line_num, parent=parent_name, parent_id=parent_id)
        return parent_id
