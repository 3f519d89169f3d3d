from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Search .env in CWD first, then parent dir.
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Database (required) ---
    DATABASE_URL: str

    # --- Security (required) ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --- Session cookie ---
    COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"

    # --- Redis (shared cooldown store) ---
    REDIS_URL: str = "redis://localhost:6379/0"
    # Applies to both connect and read; keeps a slow store from stalling requests
    REDIS_SOCKET_TIMEOUT: float = 1.0

    # --- Submission cooldown ---
    SUBMIT_COOLDOWN_SECONDS: int = 10
    SUBMIT_COOLDOWN_PRECHECK: bool = False

    # --- Per-IP throttling of auth endpoints (slowapi) ---
    AUTH_RATE_LIMIT: str = "10/minute"
    RATELIMIT_STORAGE_URI: str = "memory://"

    # --- Observability ---
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # development | staging | production

    # --- HTTP ---
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    TRUST_PROXY: bool = False

    @field_validator("SECRET_KEY")
    @classmethod
    def secret_key_must_be_strong(cls, v: str) -> str:
        """Reject weak or placeholder secret keys at startup."""
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        weak_values = {"your-secret-key-change-in-production", "secret", "changeme"}
        if v.lower() in weak_values:
            raise ValueError("SECRET_KEY is set to an insecure placeholder value")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_valid(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}")
        return v.upper()

    @field_validator("COOKIE_SAMESITE")
    @classmethod
    def samesite_must_be_valid(cls, v: str) -> str:
        if v.lower() not in {"lax", "strict", "none"}:
            raise ValueError("COOKIE_SAMESITE must be one of lax, strict, none")
        return v.lower()

    @field_validator("SUBMIT_COOLDOWN_SECONDS")
    @classmethod
    def cooldown_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SUBMIT_COOLDOWN_SECONDS must be positive")
        return v

    @field_validator("REDIS_SOCKET_TIMEOUT")
    @classmethod
    def redis_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("REDIS_SOCKET_TIMEOUT must be positive")
        return v

    def get_cors_origins(self) -> List[str]:
        """Parse comma-separated CORS_ORIGINS into a list."""
        return [
            origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()
        ]

    @property
    def is_dev_like(self) -> bool:
        return self.ENVIRONMENT.lower() in {"development", "dev", "testing", "test"}


settings = Settings()
