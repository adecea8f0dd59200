"""
Configuration management with typed Pydantic models.

Provides the batch size and store settings of an import with
environment-aware YAML loading.
"""

from addressimport.config.loader import load_config
from addressimport.config.settings import (
    DEFAULT_BATCH_SIZE,
    DatabaseConfig,
    DisplayConfig,
    ImportConfig,
    LoadConfig,
    LoggingConfig,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DatabaseConfig",
    "DisplayConfig",
    "ImportConfig",
    "LoadConfig",
    "LoggingConfig",
    "load_config",
]
