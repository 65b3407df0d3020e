"""Import settings from defaults, environment and an optional YAML file."""

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from jobber_reconcile.errors import ConfigError
from jobber_reconcile.store.persistence import DEFAULT_BATCH_SIZE

ENV_PREFIX = "JOBBER_RECONCILE_"

# env suffix -> settings field
_ENV_FIELDS = {
    "DB": "db_path",
    "REST_URL": "rest_url",
    "REST_KEY": "rest_api_key",
    "BATCH_SIZE": "batch_size",
}


class ImportSettings(BaseModel):
    """Settings for one import run."""

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0, description="Rows per upsert batch")
    db_path: Path = Field(default=Path("residential.db"), description="SQLite store path")
    rest_url: Optional[str] = Field(default=None, description="Remote REST datastore base URL")
    rest_api_key: Optional[str] = None

    @classmethod
    def _build(cls, data: Mapping[str, Any]) -> "ImportSettings":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"Invalid import settings: {e}") from e

    @staticmethod
    def _env_values(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for suffix, name in _ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return values

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """Defaults overlaid with JOBBER_RECONCILE_* environment variables."""
        return cls._build(cls._env_values(environ))

    @classmethod
    def from_yaml(cls, path: str | Path, environ: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """Environment settings overlaid with a YAML file. Supports nested (import:) or flat structure."""
        try:
            data = yaml.safe_load(Path(path).read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        nested = data.get("import", {}) or {}
        values = cls._env_values(environ)
        for name in cls.model_fields:
            if name in nested:
                values[name] = nested[name]
            elif name in data:
                values[name] = data[name]
        return cls._build(values)

    def with_overrides(self, **overrides: Any) -> "ImportSettings":
        """Copy with explicit (e.g. CLI) values applied; None values are ignored."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return self._build(values)
