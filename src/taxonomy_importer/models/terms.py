"""Term models: taxonomy kinds, per-row requests and stored records."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from ..utils.exceptions import UnknownTaxonomyError


class TaxonomyKind(str, Enum):
    """Kind of taxonomy a term belongs to."""

    CATEGORY = "category"  # Hierarchical
    TAG = "tag"  # Flat

    @property
    def is_hierarchical(self) -> bool:
        """Whether terms of this kind may have a parent."""
        return self is TaxonomyKind.CATEGORY

    @classmethod
    def parse(cls, value: "str | TaxonomyKind") -> "TaxonomyKind":
        """
        Parse a user-supplied taxonomy kind.

        Accepts the enum itself, its value in any case, and ``post_tag`` as
        an alias for ``tag``.

        Args:
            value: Kind to parse

        Returns:
            TaxonomyKind member

        Raises:
            UnknownTaxonomyError: If the value names no known kind
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownTaxonomyError(value)

        normalized = value.strip().lower()
        normalized = TAXONOMY_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise UnknownTaxonomyError(value) from None


# Wire names used by content-management systems for the same kinds
TAXONOMY_ALIASES: dict[str, str] = {
    "post_tag": "tag",
    "categories": "category",
    "tags": "tag",
}


def _strip(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def _none_if_empty(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class TermRequest(BaseModel):
    """
    A term-creation request derived from one CSV row.

    ``slug`` and ``description`` hold already-sanitized values.
    ``parent_ref`` is the raw parent name from the CSV and is only set
    for hierarchical taxonomies.
    """

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, BeforeValidator(_strip), Field(min_length=1)]
    slug: Annotated[str | None, BeforeValidator(_none_if_empty)] = None
    description: Annotated[str | None, BeforeValidator(_none_if_empty)] = None
    parent_ref: Annotated[str | None, BeforeValidator(_none_if_empty)] = None

    def creation_args(self, parent_id: int | None = None) -> dict[str, Any]:
        """
        Build the optional keyword arguments for ``TermStore.create``.

        Args:
            parent_id: Resolved parent identifier, if any

        Returns:
            Dict with only the arguments that are set
        """
        args: dict[str, Any] = {}
        if self.slug:
            args["slug"] = self.slug
        if self.description:
            args["description"] = self.description
        if parent_id:
            args["parent"] = parent_id
        return args


@dataclass(frozen=True)
class TermRecord:
    """
    A term as persisted by the term store.

    Attributes:
        term_id: Store-issued identifier
        name: Display name
        slug: URL-safe identifier, unique within the taxonomy
        taxonomy: Kind of taxonomy
        description: Plain-text description
        parent_id: Parent term identifier (0 when the term has no parent)
    """

    term_id: int
    name: str
    slug: str
    taxonomy: TaxonomyKind
    description: str = ""
    parent_id: int = 0


# A reference is either a bare identifier (fresh from create) or a
# record (from an existence lookup).
TermReference = int | TermRecord | Mapping[str, Any]


def term_id_of(reference: TermReference) -> int:
    """
    Extract the term identifier from any reference variant.

    Args:
        reference: Bare id, TermRecord, or mapping with a ``term_id`` key

    Returns:
        Integer term identifier

    Raises:
        TypeError: If the reference carries no identifier
    """
    if isinstance(reference, TermRecord):
        return reference.term_id
    if isinstance(reference, Mapping):
        if "term_id" not in reference:
            raise TypeError(f"Term reference has no term_id: {reference!r}")
        return int(reference["term_id"])
    if isinstance(reference, bool):
        raise TypeError(f"Not a term reference: {reference!r}")
    if isinstance(reference, int):
        return reference
    raise TypeError(f"Not a term reference: {reference!r}")
