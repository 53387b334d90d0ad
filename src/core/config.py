"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Tasksync")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Storage
    database_url: str = Field(
        default="sqlite:///./tasks.db",
        description="SQLAlchemy URL of the task store",
    )
    storage_namespace: str = Field(
        default="todos",
        min_length=1,
        description="Bucket that scopes the records of one logical list",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON lines instead of console output",
    )

    # Input
    commit_key: str = Field(
        default="Enter",
        description="Key that commits the new-task input and inline edits",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def echo_sql(self) -> bool:
        """Echo SQL statements in debug mode outside production."""
        return self.debug and not self.is_production


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
