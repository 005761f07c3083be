"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database - a single SQLite file by default
    database_url: str = Field(
        default="sqlite+aiosqlite:///./server.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")

    # Server
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")

    # "production" additionally serves the built client from static_dir at /
    env: str = Field(default="development", validation_alias="ENV")
    static_dir: str = Field(default="./dist", validation_alias="STATIC_DIR")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Scope of GET /bookmarks when neither `unsorted` nor `folder_id` is given:
    # "all" returns every bookmark, "unsorted" only those without a folder.
    bookmarks_default_scope: Literal["all", "unsorted"] = Field(
        default="all",
        validation_alias="BOOKMARKS_DEFAULT_SCOPE",
    )

    # What DELETE /folders/{id} does with bookmarks still pointing at the folder:
    #   keep     - leave them with a dangling folder_id
    #   restrict - refuse the delete (409)
    #   nullify  - move them to unsorted first
    folder_delete_policy: Literal["keep", "restrict", "nullify"] = Field(
        default="keep",
        validation_alias="FOLDER_DELETE_POLICY",
    )

    @property
    def is_production(self) -> bool:
        """Whether static assets should be served alongside the API."""
        return self.env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
