"""Taxonomy CSV Importer - bulk import of categories and tags."""

from .cli import app
from .config import ImporterConfig
from .core.importer import TaxonomyImporter

__version__ = "1.0.0"
__all__ = ["app", "ImporterConfig", "TaxonomyImporter"]
