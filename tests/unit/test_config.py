"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tabledb.infrastructure.config import Config, ObservabilityConfig, StorageConfig, get_config


@pytest.mark.unit
class TestConfig:
    """Tests for configuration defaults and overrides."""

    def test_defaults(self) -> None:
        config = Config()

        assert config.storage.data_dir == Path(".")
        assert config.storage.file_extension == "csv"
        assert config.storage.delimiter == ","
        assert config.storage.encoding == "utf-8"
        assert config.observability.log_format == "json"
        assert config.observability.otel_endpoint is None

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TABLEDB_STORAGE__FILE_EXTENSION", "tbl")
        monkeypatch.setenv("TABLEDB_STORAGE__DATA_DIR", "/srv/tabledb")
        monkeypatch.setenv("TABLEDB_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.storage.file_extension == "tbl"
        assert config.storage.data_dir == Path("/srv/tabledb")
        assert config.observability.log_level == "DEBUG"

    def test_test_config(self, test_config: Config, temp_dir: Path) -> None:
        assert test_config.storage.data_dir == temp_dir

    @pytest.mark.parametrize("delimiter", ["", ";;"])
    def test_invalid_delimiter(self, delimiter: str) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(delimiter=delimiter)

    def test_invalid_extension(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(file_extension=".csv")

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(log_format="xml")

    def test_get_config_cached(self) -> None:
        assert get_config() is get_config()
