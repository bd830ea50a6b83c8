"""
Centralized configuration management.

Configuration is loaded from:
1. Environment variables
2. .env file (if present)
3. Default values

Usage:
    from banglaroll.config import get_config
    config = get_config()
    print(config.extraction.max_workers)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Existing environment variables win over .env entries
load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)


def _get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class ExtractionConfig:
    """Per-file extraction limits and batch parallelism."""
    max_workers: int = field(default_factory=lambda: _get_int_env("MAX_WORKERS", 4))
    max_file_size_mb: float = field(default_factory=lambda: _get_float_env("MAX_FILE_SIZE_MB", 200.0))
    max_pages: int = field(default_factory=lambda: _get_int_env("MAX_PAGES", 2000))
    timeout_sec: float = field(default_factory=lambda: _get_float_env("EXTRACTION_TIMEOUT_SEC", 300.0))
    document_extension: str = field(
        default_factory=lambda: os.getenv("DOCUMENT_EXTENSION", ".pdf").strip().lower() or ".pdf"
    )

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


@dataclass
class StorageConfig:
    """Flat JSON voter store configuration."""
    store_file: str = field(default_factory=lambda: os.getenv("VOTER_STORE_FILE", "voters.json"))
    default_page_size: int = field(default_factory=lambda: _get_int_env("DEFAULT_PAGE_SIZE", 10))


@dataclass
class RulesConfig:
    """Corruption rule table location (empty means the bundled table)."""
    rules_path: str = field(default_factory=lambda: os.getenv("RULES_PATH", "").strip())

    @property
    def path(self) -> Optional[Path]:
        return Path(self.rules_path) if self.rules_path else None


@dataclass
class Config:
    """
    Main application configuration.

    All settings are loaded from environment variables with sensible defaults.
    Set DEBUG=1 in environment to enable debug mode.
    """

    # Base directory (project root)
    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    # Directory paths
    data_dir: Path = field(default=None)
    logs_dir: Path = field(default=None)

    # Debug mode (verbose logging, rejected-entry dumps)
    debug: bool = field(default_factory=lambda: _get_bool_env("DEBUG", False))
    log_to_file: bool = field(default_factory=lambda: _get_bool_env("LOG_TO_FILE", True))

    # Sub-configurations
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)

    def __post_init__(self):
        """Resolve paths after initialization."""
        if self.data_dir is None:
            self.data_dir = self.base_dir / os.getenv("DATA_DIR", "data")
        if self.logs_dir is None:
            self.logs_dir = self.base_dir / os.getenv("LOG_DIR", "logs")

    @property
    def store_path(self) -> Path:
        """Path of the JSON voter store."""
        store_file = Path(self.storage.store_file)
        if store_file.is_absolute():
            return store_file
        return self.data_dir / store_file


# Global config instance (lazily initialized)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
