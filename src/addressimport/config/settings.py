"""
Typed configuration models using Pydantic.

All tunables of an import are defined here with explicit typing and
validation. Processing code receives an ImportConfig and never reads
environment variables or files itself.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BATCH_SIZE = 1000


class LoadConfig(BaseModel):
    """How the destructive replace writes to the store."""

    model_config = ConfigDict(frozen=True)

    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        ge=1,
        description="Maximum number of barangay records per insert call",
    )
    atomic: bool = Field(
        default=False,
        description="Run the whole replace in one store transaction when supported",
    )


class DatabaseConfig(BaseModel):
    """SQLite store location and behaviour."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(
        default=Path("./data/addresses.db"), description="Path to the SQLite database"
    )
    enforce_foreign_keys: bool = Field(
        default=True, description="Enable SQLite foreign key enforcement"
    )


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure level is one of the standard logging level names."""
        name = v.upper()
        if name not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return name


class DisplayConfig(BaseModel):
    """Console presentation limits."""

    model_config = ConfigDict(frozen=True)

    max_errors: int = Field(
        default=10, ge=1, description="Number of validation errors shown before truncating"
    )


class ImportConfig(BaseModel):
    """Complete import configuration."""

    model_config = ConfigDict(frozen=True)

    load: LoadConfig = Field(default_factory=LoadConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @property
    def batch_size(self) -> int:
        """Convenience accessor for the barangay batch size."""
        return self.load.batch_size
