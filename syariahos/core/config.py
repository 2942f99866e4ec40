"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./syariahos.db"

    # Bearer token (supports key rotation)
    JWT_SECRET: str = "change-this-secret-before-deploying-to-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 24 * 7

    # CORS (comma-separated)
    CORS_ORIGINS: str = "http://localhost:5173"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5
    RATE_LIMIT_API: int = 60

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""

    # Generative AI provider (Gemini)
    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    GEMINI_MODEL: str = "gemini-pro"
    GEMINI_TIMEOUT: float = 30.0

    # Quran / Hadith reference APIs
    QURAN_API_URL: str = "https://equran.id/api/v2"
    HADITH_API_URL: str = "https://api.hadith.gading.dev"
    REFERENCE_TIMEOUT: float = 15.0
    REFERENCE_CACHE_SECONDS: int = 24 * 60 * 60

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets


settings = Settings()
