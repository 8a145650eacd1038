"""Term store interface consumed by the importer."""

from abc import ABC, abstractmethod

from ..models.terms import TaxonomyKind, TermRecord


class TermStore(ABC):
    """
    Persistent term storage.

    The importer only needs an existence lookup and an insert. Each
    ``create`` call is committed on its own; no transaction spans rows.
    """

    @abstractmethod
    def exists(self, name: str, taxonomy: TaxonomyKind) -> TermRecord | None:
        """
        Find a term by slug or exact name within a taxonomy.

        Args:
            name: Term name (or slug) to look up
            taxonomy: Taxonomy to search

        Returns:
            Matching TermRecord, or None
        """

    @abstractmethod
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
        Insert a new term.

        Args:
            name: Term name
            taxonomy: Taxonomy to insert into
            slug: Explicit slug (derived from the name when omitted)
            description: Plain-text description
            parent: Parent term identifier (hierarchical taxonomies only)

        Returns:
            Identifier of the new term

        Raises:
            TermCreationError: If the store refuses the term
        """
