"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="SCT Clinic API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")

    # Redis
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_username: str = Field(default="default", alias="REDIS_USERNAME")
    redis_password: str = Field(default="", alias="REDIS_PASSWORD")
    redis_decode_responses: bool = Field(default=True, alias="REDIS_DECODE_RESPONSES")

    # Admin session (JWT)
    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    # 8 hours, same as the dashboard login
    session_expire_minutes: int = Field(default=480, alias="SESSION_EXPIRE_MINUTES")
    session_cookie_name: str = Field(default="clinic_session", alias="SESSION_COOKIE_NAME")

    # Admin credentials
    admin_email: str = Field(default="", alias="ADMIN_EMAIL")
    admin_password_hash: str = Field(
        default="",
        alias="ADMIN_PASSWORD_HASH",
        description="bcrypt hash, see scripts/generate_admin_hash.py",
    )
    admin_name: str = Field(default="Admin User", alias="ADMIN_NAME")

    # reCAPTCHA v3
    recaptcha_secret_key: str = Field(default="", alias="RECAPTCHA_SECRET_KEY")
    recaptcha_verify_url: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify",
        alias="RECAPTCHA_VERIFY_URL",
    )
    recaptcha_min_score: float = Field(default=0.5, alias="RECAPTCHA_MIN_SCORE")
    recaptcha_action: str = Field(default="appointment_booking", alias="RECAPTCHA_ACTION")

    # Clinic calendar
    clinic_timezone: str = Field(default="Asia/Kolkata", alias="CLINIC_TIMEZONE")

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        if isinstance(self.cors_origins_str, str):
            return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]
        return [self.cors_origins_str]

    # Rate limiting and caching
    booking_rate_limit_per_minute: int = Field(default=5, alias="BOOKING_RATE_LIMIT_PER_MINUTE")
    ticker_cache_ttl: int = Field(default=60, alias="TICKER_CACHE_TTL")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
