"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All settings come from SIMPLEDB_* environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process
    - database_url falls back to a SQLite file named after store_name

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for everything: works out-of-the-box with a local SQLite file
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SIMPLEDB_", case_sensitive=False,
    )

    # Provider
    provider_name: str = "simpledb.dataprovider"
    uri_scheme: str = "content"
    store_name: str = "simpledb"
    store_version: int = 1
    schema_path: str = "schema.json"
    strict_projection: bool = True

    # Database
    database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosted platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Change notifications
    notification_queue_size: int = 100

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def resolved_database_url(self) -> str:
        return self.database_url or f"sqlite+aiosqlite:///{self.store_name}.db"


@lru_cache
def get_settings() -> Settings:
    return Settings()
