"""Database connection settings.

PostgreSQL (asyncpg) in production, a SQLite file (aiosqlite) for local
runs and tests. Everything is read from DB_* environment variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """
    Where the workforce database lives and how connections are pooled.

    Example:
        DB_DRIVER=postgresql+asyncpg DB_HOST=db DB_USER=workforce DB_PASSWORD=...
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    driver: str = Field(
        default="sqlite+aiosqlite",
        description="SQLAlchemy async driver: sqlite+aiosqlite or postgresql+asyncpg",
    )
    sqlite_path: Path = Field(default=Path("data/workforce.db"))

    host: str = "localhost"
    port: int = 5432
    name: str = "workforce"
    user: Optional[str] = None
    password: Optional[str] = None

    # Ignored for SQLite, which runs without a pool
    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=20, ge=0, le=100)
    pool_recycle: int = Field(default=1800, ge=60, description="Seconds before a connection is recycled")

    echo_sql: bool = False
    statement_timeout: int = Field(default=30, ge=1, description="Seconds")

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")

    @property
    def async_url(self) -> URL:
        """Connection URL; creates the SQLite file's directory if needed."""
        if self.is_sqlite:
            self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            return URL.create(self.driver, database=str(self.sqlite_path.absolute()))

        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        )

    def get_connect_args(self) -> Dict[str, Any]:
        """Driver-level arguments; the timeout key differs per driver."""
        if self.is_sqlite:
            return {"timeout": self.statement_timeout}
        return {"command_timeout": self.statement_timeout}

    def describe(self) -> str:
        """Location without credentials, for logs."""
        if self.is_sqlite:
            return f"{self.driver} ({self.sqlite_path})"
        return f"{self.driver} ({self.host}:{self.port}/{self.name})"


@lru_cache
def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings()
