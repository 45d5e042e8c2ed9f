"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "AgroStudy"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Backends
    # "memory" keeps every collection in-process (demo mode, tests)
    gateway_backend: Literal["sql", "memory"] = "sql"
    storage_backend: Literal["s3", "memory"] = "s3"
    suggestion_backend: Literal["simulated", "anthropic"] = "simulated"

    # Database
    # database_url_override (e.g. a hosted Postgres URL with sslmode) wins over the parts below
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "agrostudy"
    postgres_password: str = ""
    postgres_db: str = "agrostudy"

    def _database_url_with(self, scheme: str) -> str:
        if not self.database_url_override:
            return (
                f"{scheme}://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        _, _, rest = self.database_url_override.partition("://")
        return f"{scheme}://{rest}"

    @computed_field
    @property
    def database_url(self) -> str:
        """Async (asyncpg) database URL. Query params are dropped; SSL goes through connect_args."""
        return self._database_url_with("postgresql+asyncpg").split("?")[0]

    @computed_field
    @property
    def database_requires_ssl(self) -> bool:
        override = self.database_url_override or ""
        return "sslmode=require" in override or "ssl=require" in override

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """Sync database URL, used by Alembic."""
        return self._database_url_with("postgresql")

    # Auth / JWT
    jwt_secret_key: str  # Required - no default, must be set in .env
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days
    password_hash_iterations: int = 260_000

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Set to true when frontend and backend are on different domains
    cookie_cross_domain: bool = False

    # Object storage (S3 or compatible)
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_s3_bucket: str = "agrostudy"
    aws_s3_region: str = "sa-east-1"
    aws_s3_endpoint_url: str | None = None  # Set for MinIO/LocalStack (e.g. http://localhost:9000)
    storage_public_base_url: str | None = None  # CDN or bucket website in front of the objects

    # Anthropic API
    anthropic_api_key: str | None = None
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2000

    # Simulated assistant
    simulated_reply_delay_seconds: float = 1.5

    # PDF upload
    max_pdf_size_bytes: int = 50 * 1024 * 1024  # 50MB

    # Agenda
    week_starts_on: Literal["sunday", "monday"] = "sunday"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
