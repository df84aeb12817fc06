# foodprint/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Database selection (first match wins):
      - DB_USE_SQLITE=true  -> local SQLite file at SQLITE_PATH
      - DATABASE_URL        -> any SQLAlchemy URL
      - DB_HOST/DB_NAME/... -> assembled from discrete parameters

    Object storage (DigitalOcean Spaces or any S3-compatible endpoint) is
    optional; uploads are skipped unless all four DO_* values are set.
    """

    PROJECT_NAME: str = "FoodPrint"
    API_PREFIX: str = "/app"

    # Database
    DB_USE_SQLITE: bool = False
    SQLITE_PATH: str = "foodprint.sqlite"
    DATABASE_URL: str | None = None
    DB_DIALECT: str = "mysql+pymysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "foodprint"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_ECHO: bool = False

    # Session tokens
    SESSION_SECRET: str = "change-me-in-production"
    SESSION_ALG: str = "HS256"
    SESSION_TTL_MINUTES: int = 60 * 24
    SESSION_COOKIE_NAME: str = "foodprint_session"
    SESSION_COOKIE_SECURE: bool = False

    # Wallet linking
    WALLET_EMAIL_DOMAIN: str = "foodprint"
    # When false, connect requests without signature+message are trusted.
    REQUIRE_WALLET_SIGNATURE: bool = False

    # DigitalOcean Spaces
    DO_ENDPOINT: str | None = None
    DO_KEY_ID: str | None = None
    DO_SECRET: str | None = None
    DO_BUCKET_NAME: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
