"""
Configuration Management.

Secrets come from config/.env, everything else from config/settings/*.yaml.
All paths are relative to the directory holding the .project_root marker.

Secrets (.env):
    JWT_SECRET   verifies Bearer tokens; required
    DB_PASSWORD  PostgreSQL only; SQLite drivers ignore it

Settings (YAML):
    application.yaml   - identity, server, cors, note/task/tag limits
    database.yaml      - driver and pool; SQLite uses `name` as file path
    logging.yaml       - level, format and the JSONL file handler
    features.yaml      - tags_atomic_upsert, api_request_logging
    security.yaml      - JWT algorithm and audience, rate limit window
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notedesk.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """Like find_project_root, but exits run.py with a readable message."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    db_password: str = ""
    jwt_secret: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    The five YAML files, each validated by its schema in config_schema.

    Built once by get_app_config; an unknown or missing key fails at start-up
    rather than on first use.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._features = _load_validated(FeaturesSchema, "features.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")

    @property
    def application(self) -> ApplicationSchema:
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        return self._logging

    @property
    def features(self) -> FeaturesSchema:
        return self._features

    @property
    def security(self) -> SecuritySchema:
        return self._security


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Build the SQLAlchemy URL from database.yaml and DB_PASSWORD.

    SQLite drivers treat `name` as the database file path
    (":memory:" for an in-memory database).
    """
    db = get_app_config().database
    if db.driver.startswith("sqlite"):
        return f"{db.driver}:///{db.name}"
    password = get_settings().db_password
    return f"{db.driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"
