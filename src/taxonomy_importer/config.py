"""Configuration management for the taxonomy CSV importer."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

from .models.terms import TaxonomyKind


class LogFormat(str, Enum):
    """Rendering of log lines."""

    CONSOLE = "console"
    JSON = "json"


@dataclass
class StoreConfig:
    """Term store location."""

    path: str = ".taxonomy.db"


@dataclass
class ImportConfig:
    """Defaults applied to import runs."""

    default_taxonomy: TaxonomyKind = TaxonomyKind.CATEGORY
    encoding: str = "utf-8-sig"  # Tolerates a byte-order mark


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: LogFormat = LogFormat.CONSOLE
    file: Path | None = None

    @property
    def json_logs(self) -> bool:
        return self.format == LogFormat.JSON


@dataclass
class ImporterConfig:
    """
    Complete configuration for the taxonomy CSV importer.

    This combines all configuration sections.
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    importer: ImportConfig = field(default_factory=ImportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "ImporterConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            ImporterConfig instance

        Raises:
            ValueError: If the YAML is invalid or not a mapping
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        store = StoreConfig(**(data.get("store") or {}))

        importer_data = dict(data.get("importer") or {})
        if "default_taxonomy" in importer_data:
            importer_data["default_taxonomy"] = TaxonomyKind.parse(
                importer_data["default_taxonomy"]
            )
        importer = ImportConfig(**importer_data)

        logging_data = dict(data.get("logging") or {})
        if "format" in logging_data:
            logging_data["format"] = LogFormat(str(logging_data["format"]).lower())
        # Convert file path string to Path if present
        if logging_data.get("file"):
            logging_data["file"] = Path(logging_data["file"])
        logging = LoggingConfig(**logging_data)

        return cls(store=store, importer=importer, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data = {
            "store": self.store.__dict__,
            "importer": {
                k: v.value if isinstance(v, Enum) else v for k, v in self.importer.__dict__.items()
            },
            "logging": {
                k: v.value if isinstance(v, Enum) else str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "ImporterConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            TAXONOMY_DB: Term store database path (default: .taxonomy.db)
            TAXONOMY_KIND: Default taxonomy kind (default: category)
            TAXONOMY_ENCODING: CSV encoding (default: utf-8-sig)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_FORMAT: console or json (default: console)
            LOG_FILE: Optional log file path

        Returns:
            ImporterConfig instance
        """
        log_file = os.environ.get("LOG_FILE")
        return cls(
            store=StoreConfig(path=os.environ.get("TAXONOMY_DB", StoreConfig.path)),
            importer=ImportConfig(
                default_taxonomy=TaxonomyKind.parse(os.environ.get("TAXONOMY_KIND", "category")),
                encoding=os.environ.get("TAXONOMY_ENCODING", ImportConfig.encoding),
            ),
            logging=LoggingConfig(
                level=os.environ.get("LOG_LEVEL", "INFO"),
                format=LogFormat(os.environ.get("LOG_FORMAT", "console").lower()),
                file=Path(log_file) if log_file else None,
            ),
        )


def load_config(config_file: Path | None = None) -> ImporterConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        ImporterConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return ImporterConfig.from_file(config_file)
    return ImporterConfig.from_env()
