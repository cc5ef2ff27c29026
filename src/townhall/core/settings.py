"""Application settings and configuration.

This module defines all configuration options for the Townhall application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Townhall", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./townhall.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Trust score weights and the contributor eligibility threshold
    trust_post_weight: int = Field(default=5, alias="TRUST_POST_WEIGHT")
    trust_comment_weight: int = Field(default=1, alias="TRUST_COMMENT_WEIGHT")
    trust_vote_weight: int = Field(default=1, alias="TRUST_VOTE_WEIGHT")
    contributor_trust_threshold: int = Field(default=50, alias="CONTRIBUTOR_TRUST_THRESHOLD")

    # Unique-constraint races on votes are retried this many times
    vote_conflict_retries: int = Field(default=1, ge=0, alias="VOTE_CONFLICT_RETRIES")

    # External AI content generator
    ai_generator_url: str | None = Field(default=None, alias="AI_GENERATOR_URL")
    ai_generator_api_key: str | None = Field(default=None, alias="AI_GENERATOR_API_KEY")
    ai_generator_timeout_seconds: float = Field(
        default=60.0,
        alias="AI_GENERATOR_TIMEOUT_SECONDS",
    )
    ai_default_cron: str = Field(default="0 12 * * *", alias="AI_DEFAULT_CRON")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def trust_weights(self) -> dict[str, int]:
        """Return the trust score weights as a convenience dictionary."""
        return {
            "post": self.trust_post_weight,
            "comment": self.trust_comment_weight,
            "vote": self.trust_vote_weight,
        }


settings = Settings()  # type: ignore[call-arg]
