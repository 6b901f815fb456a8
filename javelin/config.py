"""
Configuration settings for Javelin.

Uses Pydantic Settings to load environment variables for the database
connection and logging. A properties-style file (``KEY=value`` lines) can be
loaded explicitly with ``Settings.from_file``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("javelin", alias="DB_NAME")
    db_schema: Optional[str] = Field(None, alias="DB_SCHEMA")
    db_connect_timeout: int = Field(10, alias="DB_CONNECT_TIMEOUT")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def dsn(self) -> str:
        """Compose a PostgreSQL URL from the connection fields."""
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @classmethod
    def from_file(cls, location: Union[str, Path]) -> "Settings":
        """
        Load settings from a properties file.

        Values in the file override defaults; real environment variables still
        take precedence, as with the default ``.env`` lookup.

        Raises
        ------
        FileNotFoundError
            If ``location`` does not point to an existing file.
        """
        path = Path(location)
        if not path.is_file():
            raise FileNotFoundError(f"File not found at path specified: {location}")
        return cls(_env_file=path)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
