"""Store database settings.

The CTA stores (dismissal ledger, surveys, user stage, app settings) are
small and local: SQLite through aiosqlite by default, with ":memory:"
for tests. A PostgreSQL URL can be configured for hosted runs.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

MEMORY_PATH = ":memory:"


class DatabaseSettings(BaseSettings):
    """
    Where and how the CTA stores are persisted.

    Example environment variables:
        DB_DRIVER=sqlite+aiosqlite
        DB_SQLITE_PATH=:memory:
        DB_ECHO_SQL=true
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    driver: str = Field(
        default="sqlite+aiosqlite",
        description="SQLAlchemy async driver name"
    )
    sqlite_path: Path = Field(
        default=Path("data/cta.db"),
        description="SQLite file, or :memory: for a throwaway database"
    )

    # Server databases only
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    name: str = Field(default="cta_engine")
    user: str = Field(default="")
    password: str = Field(default="")
    pool_size: int = Field(default=5, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)

    echo_sql: bool = Field(default=False, description="Log every SQL statement")
    query_timeout: int = Field(default=30, ge=1, description="Seconds before a statement gives up")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.driver.lower().startswith("sqlite")

    @computed_field
    @property
    def is_postgres(self) -> bool:
        return self.driver.lower().startswith("postgresql")

    @property
    def is_memory(self) -> bool:
        """True for a SQLite database that lives only as long as its connection."""
        return self.is_sqlite and str(self.sqlite_path) == MEMORY_PATH

    @computed_field
    @property
    def async_url(self) -> str:
        """Connection URL for create_async_engine (password included)."""
        if self.is_memory:
            return f"{self.driver}:///{MEMORY_PATH}"
        if self.is_sqlite:
            return f"{self.driver}:///{self.sqlite_path.absolute()}"

        url = URL.create(
            self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )
        return url.render_as_string(hide_password=False)

    def get_connect_args(self) -> Dict[str, Any]:
        """Driver-level connect() arguments."""
        if self.is_sqlite:
            # Stores are read from the dispatcher's loop thread
            return {"check_same_thread": False, "timeout": self.query_timeout}
        return {"command_timeout": self.query_timeout}


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Cached settings loaded from the environment."""
    return DatabaseSettings()
