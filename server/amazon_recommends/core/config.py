"""Application configuration loaded from environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central place for strongly typed application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    app_name: str = Field(default="Amazon Recommends")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    log_level: str = Field(default="INFO")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=1232, validation_alias="PORT")

    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    db_driver: str = Field(default="postgresql", validation_alias="DB_DRIVER")
    db_host: str = Field(default="127.0.0.1", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_user: str = Field(default="docker", validation_alias="DB_USER")
    db_password: str = Field(default="docker", validation_alias="DB_PASSWORD")
    db_name: str = Field(default="amazonRecommends", validation_alias="DB_NAME")

    auto_create_schema: bool = Field(default=True)

    @model_validator(mode="after")
    def resolve_database_url(self) -> "Settings":
        """Build the URL from its parts when DATABASE_URL is not given.

        Also converts postgresql+psycopg:// (psycopg3) to postgresql:// (psycopg2).
        """
        if not self.database_url:
            self.database_url = (
                f"{self.db_driver}://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        if self.database_url.startswith("postgresql+psycopg://"):
            self.database_url = self.database_url.replace("postgresql+psycopg://", "postgresql://")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance so downstream code can import directly."""

    return Settings()
