from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

# sync driver prefix -> async driver prefix
ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "sqlite+pysqlite": "sqlite+aiosqlite",
    "mysql": "mysql+aiomysql",
    "mysql+pymysql": "mysql+aiomysql",
    "postgresql": "postgresql+asyncpg",
    "postgresql+psycopg2": "postgresql+asyncpg",
}


def to_async_url(url: str) -> str:
    """Swap the driver of a sync SQLAlchemy URL for its asyncio counterpart."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError(f"Not a database URL: {url!r}")
    if scheme in ASYNC_DRIVERS.values():
        return url
    if scheme not in ASYNC_DRIVERS:
        raise ValueError(
            f"No async driver known for '{scheme}'; set DATABASE_ASYNC_URL explicitly"
        )
    return f"{ASYNC_DRIVERS[scheme]}://{rest}"


class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "datarepo"
    APP_DESCRIPTION: str = "Generic CRUD repository/service layer over SQLModel"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True

    # --- Database (SQLModel) ---
    # Single named connection string; the async URL is derived from it
    DATABASE_URL: str = "sqlite:///./datarepo.db"
    DATABASE_ASYNC_URL: Optional[str] = None
    DATABASE_ECHO: bool = False

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        return self.DATABASE_ASYNC_URL or to_async_url(self.DATABASE_URL)

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 20

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    # --- API route prefixes ---
    API_V1_SAMPLES_PREFIX: str = "/api/v1/samples"

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
