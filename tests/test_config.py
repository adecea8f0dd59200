"""Tests for configuration system."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from addressimport.config import (
    DEFAULT_BATCH_SIZE,
    ImportConfig,
    LoadConfig,
    LoggingConfig,
    load_config,
)


class TestLoadConfig:
    """Tests for LoadConfig."""

    def test_defaults(self) -> None:
        """Test default batch size and non-atomic mode."""
        config = LoadConfig()
        assert config.batch_size == DEFAULT_BATCH_SIZE == 1000
        assert config.atomic is False

    def test_batch_size_must_be_positive(self) -> None:
        """Test that a zero batch size is rejected."""
        with pytest.raises(ValidationError):
            LoadConfig(batch_size=0)

    def test_frozen(self) -> None:
        """Test that config objects are immutable."""
        config = LoadConfig()
        with pytest.raises(ValidationError):
            config.batch_size = 5  # type: ignore[misc]


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_level_is_normalized(self) -> None:
        """Test that level names are upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_level(self) -> None:
        """Test that an unknown level raises error."""
        with pytest.raises(ValidationError, match="Unknown log level"):
            LoggingConfig(level="chatty")


class TestImportConfig:
    """Tests for the aggregate config."""

    def test_defaults(self) -> None:
        """Test that every section has defaults."""
        config = ImportConfig()
        assert config.batch_size == 1000
        assert config.database.path == Path("./data/addresses.db")
        assert config.database.enforce_foreign_keys is True
        assert config.display.max_errors == 10


class TestLoadConfigFile:
    """Tests for load_config."""

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty YAML file yields the default config."""
        path = tmp_path / "import.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == ImportConfig()

    def test_sections(self, tmp_path: Path) -> None:
        """Test that all sections are read."""
        path = tmp_path / "import.yaml"
        path.write_text(
            "load:\n"
            "  batch_size: 250\n"
            "  atomic: true\n"
            "database:\n"
            "  path: db/test.db\n"
            "  enforce_foreign_keys: false\n"
            "logging:\n"
            "  level: warning\n"
            "display:\n"
            "  max_errors: 3\n",
            encoding="utf-8",
        )

        config = load_config(path)
        assert config.load.batch_size == 250
        assert config.load.atomic is True
        assert config.database.path == Path("db/test.db")
        assert config.database.enforce_foreign_keys is False
        assert config.logging.level == "WARNING"
        assert config.display.max_errors == 3

    def test_env_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ${VAR} and ${VAR:default} interpolation."""
        monkeypatch.setenv("TEST_BATCH", "42")
        monkeypatch.delenv("TEST_DB", raising=False)
        path = tmp_path / "import.yaml"
        path.write_text(
            "load:\n  batch_size: ${TEST_BATCH}\ndatabase:\n  path: ${TEST_DB:fallback.db}\n",
            encoding="utf-8",
        )

        config = load_config(path)
        assert config.load.batch_size == 42
        assert config.database.path == Path("fallback.db")

    def test_base_inheritance(self, tmp_path: Path) -> None:
        """Test that base.yaml next to the config is merged underneath it."""
        (tmp_path / "base.yaml").write_text(
            "load:\n  batch_size: 10\n  atomic: true\ndisplay:\n  max_errors: 5\n",
            encoding="utf-8",
        )
        path = tmp_path / "prod.yaml"
        path.write_text("load:\n  batch_size: 20\n", encoding="utf-8")

        config = load_config(path)
        assert config.load.batch_size == 20
        assert config.load.atomic is True
        assert config.display.max_errors == 5

    def test_base_yaml_itself(self, tmp_path: Path) -> None:
        """Test that loading base.yaml directly does not merge it with itself."""
        path = tmp_path / "base.yaml"
        path.write_text("load:\n  batch_size: 7\n", encoding="utf-8")

        assert load_config(path).load.batch_size == 7

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Test that invalid values raise a validation error."""
        path = tmp_path / "import.yaml"
        path.write_text("load:\n  batch_size: -1\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_config(path)

    def test_section_must_be_mapping(self, tmp_path: Path) -> None:
        """Test that a scalar section raises error."""
        path = tmp_path / "import.yaml"
        path.write_text("load: 5\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)
