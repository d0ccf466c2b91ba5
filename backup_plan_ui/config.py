"""
Configuration and settings for the backup plan UI.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SourceKind = Literal["csv", "sqlite", "mysql"]

MYSQL_ENV_VARS = {
    "mysql_host": "MYSQL_HOST",
    "mysql_port": "MYSQL_PORT",
    "mysql_user": "MYSQL_USER",
    "mysql_pass": "MYSQL_PASS",
    "mysql_database": "MYSQL_DATABASE",
}


class Settings(BaseSettings):
    """Environment-backed settings for the UI server and converter."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Storage backend
    source: SourceKind = Field(
        default="csv", validation_alias="BACKUP_PLAN_UI_SOURCE"
    )
    data_path: Optional[str] = Field(
        default=None, validation_alias="BACKUP_PLAN_UI_DATA_PATH"
    )

    # HTTP listener
    host: str = Field(default="0.0.0.0", validation_alias="BACKUP_PLAN_UI_HOST")
    port: int = Field(default=4000, validation_alias="BACKUP_PLAN_UI_PORT")
    log_level: str = Field(
        default="INFO", validation_alias="BACKUP_PLAN_UI_LOG_LEVEL"
    )

    # MySQL
    mysql_host: Optional[str] = Field(default=None, validation_alias="MYSQL_HOST")
    mysql_port: Optional[str] = Field(default=None, validation_alias="MYSQL_PORT")
    mysql_user: Optional[str] = Field(default=None, validation_alias="MYSQL_USER")
    mysql_pass: Optional[str] = Field(default=None, validation_alias="MYSQL_PASS")
    mysql_database: Optional[str] = Field(
        default=None, validation_alias="MYSQL_DATABASE"
    )
    mysql_table: str = Field(default="entries", validation_alias="MYSQL_TABLE")

    def missing_mysql_settings(self) -> list[str]:
        """Names of the MySQL environment variables that are not set."""
        return [
            env_name
            for attr, env_name in MYSQL_ENV_VARS.items()
            if not getattr(self, attr)
        ]

    def with_overrides(self, **overrides) -> "Settings":
        """Copy of these settings with every non-None override applied."""
        return self.model_copy(
            update={k: v for k, v in overrides.items() if v is not None}
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
