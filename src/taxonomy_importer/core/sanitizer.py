"""Slug and free-text sanitizers for CSV cell values.

Both functions are plain callables so the importer can take replacements
(``TaxonomyImporter(store, slugify=..., clean_text=...)``).
"""

import re
import unicodedata

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[#\w]+;")
_OCTET_RE = re.compile(r"%[0-9a-fA-F]{2}")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9_-]+")
_DASHES_RE = re.compile(r"-{2,}")


def strip_tags(text: str) -> str:
    """Remove HTML tags, dropping script/style blocks with their content."""
    text = _SCRIPT_STYLE_RE.sub("", text)
    return _TAG_RE.sub("", text)


def remove_accents(text: str) -> str:
    """
    Fold accented characters to their ASCII base letters.

    Characters with no ASCII decomposition are dropped.

    Args:
        text: Text to fold

    Returns:
        ASCII-only text
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def sanitize_title(text: str) -> str:
    """
    Turn free text into a URL-safe slug.

    Lowercase ASCII letters, digits, underscores and single hyphens only;
    whitespace, periods and other punctuation become hyphen separators.

    Examples:
        "Web Development!" -> "web-development"
        "Café Ñu"          -> "cafe-nu"
        "  --a.b--  "      -> "a-b"

    Args:
        text: Raw title or slug

    Returns:
        Sanitized slug (may be empty if nothing usable remains)
    """
    slug = strip_tags(text)
    slug = remove_accents(slug)
    slug = _OCTET_RE.sub("", slug)
    slug = _ENTITY_RE.sub("", slug)
    slug = slug.lower()
    slug = _SLUG_INVALID_RE.sub("-", slug)
    slug = _DASHES_RE.sub("-", slug)
    return slug.strip("-")


def sanitize_text_field(text: str) -> str:
    """
    Clean a single-line free-text value.

    Strips markup, percent-encoded octets and control characters, and
    collapses all whitespace (newlines and tabs included) to single spaces.

    Args:
        text: Raw cell value

    Returns:
        Cleaned plain text
    """
    cleaned = strip_tags(text)
    cleaned = _OCTET_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    cleaned = _CONTROL_RE.sub("", cleaned)
    return cleaned.strip()
