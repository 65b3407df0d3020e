"""Unit tests for ImportSettings."""

from pathlib import Path

import pytest

from jobber_reconcile.config import ImportSettings
from jobber_reconcile.errors import ConfigError


class TestDefaults:
    def test_defaults(self) -> None:
        settings = ImportSettings()
        assert settings.batch_size == 500
        assert settings.db_path == Path("residential.db")
        assert settings.rest_url is None


class TestFromEnv:
    """Tests for environment overlay."""

    def test_reads_prefixed_variables(self) -> None:
        settings = ImportSettings.from_env(
            {
                "JOBBER_RECONCILE_DB": "/tmp/x.db",
                "JOBBER_RECONCILE_REST_URL": "https://db.example.com",
                "JOBBER_RECONCILE_REST_KEY": "k",
                "JOBBER_RECONCILE_BATCH_SIZE": "100",
            }
        )
        assert settings.db_path == Path("/tmp/x.db")
        assert settings.rest_url == "https://db.example.com"
        assert settings.rest_api_key == "k"
        assert settings.batch_size == 100

    def test_blank_variables_ignored(self) -> None:
        assert ImportSettings.from_env({"JOBBER_RECONCILE_BATCH_SIZE": "  "}).batch_size == 500

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ConfigError):
            ImportSettings.from_env({"JOBBER_RECONCILE_BATCH_SIZE": "0"})
        with pytest.raises(ConfigError):
            ImportSettings.from_env({"JOBBER_RECONCILE_BATCH_SIZE": "many"})


class TestFromYaml:
    """Tests for YAML loading."""

    def test_nested_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("import:\n  batch_size: 50\n  db_path: data/res.db\n")
        settings = ImportSettings.from_yaml(path, environ={})
        assert settings.batch_size == 50
        assert settings.db_path == Path("data/res.db")

    def test_flat_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("batch_size: 25\nrest_url: https://db.example.com\n")
        settings = ImportSettings.from_yaml(path, environ={})
        assert settings.batch_size == 25
        assert settings.rest_url == "https://db.example.com"

    def test_yaml_overrides_env(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("batch_size: 25\n")
        settings = ImportSettings.from_yaml(
            path, environ={"JOBBER_RECONCILE_BATCH_SIZE": "10", "JOBBER_RECONCILE_DB": "env.db"}
        )
        assert settings.batch_size == 25
        assert settings.db_path == Path("env.db")

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert ImportSettings.from_yaml(path, environ={}).batch_size == 500

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            ImportSettings.from_yaml(tmp_path / "missing.yaml", environ={})

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            ImportSettings.from_yaml(path, environ={})

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("batch_size: [unclosed\n")
        with pytest.raises(ConfigError):
            ImportSettings.from_yaml(path, environ={})


class TestWithOverrides:
    def test_none_values_ignored(self) -> None:
        settings = ImportSettings(batch_size=10).with_overrides(batch_size=None, db_path=Path("cli.db"))
        assert settings.batch_size == 10
        assert settings.db_path == Path("cli.db")

    def test_invalid_override(self) -> None:
        with pytest.raises(ConfigError):
            ImportSettings().with_overrides(batch_size=-1)
