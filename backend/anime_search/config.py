"""pydantic-settings based application settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Anime search backend settings.

    All values are loaded from environment variables.
    A .env file in the backend directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Database ---
    DATABASE_URL: str = "postgresql+asyncpg://anime:anime@db:5432/anime"

    # --- HTTP ---
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    EXPOSE_ERROR_DETAILS: bool = True  # pass database error text through on 500s

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Search ---
    SEARCH_DEFAULT_PER_PAGE: int = 10
    SEARCH_MAX_PER_PAGE: int = 50
    SEARCH_HIGHLIGHT_DESCRIPTION_LENGTH: int = 100
    SEARCH_MAX_KEYWORD_LENGTH: int = 100
    SEARCH_MAX_CANDIDATES: int = 0  # 0 = rank every matching row

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver."""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
