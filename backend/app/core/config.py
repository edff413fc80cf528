# backend/app/core/config.py
"""
Application configuration using pydantic-settings.

Security considerations:
- ENCRYPTION_KEY has no default: the vault refuses to start without it
- JWT secrets have dev defaults that are rejected in production
- CORS_ORIGINS parsed from comma-separated env var, never defaults to "*"
- Database URLs normalized for async drivers automatically
"""
import base64
import binascii
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.app.core.errors import ConfigurationError

# AES-256 key length in bytes
MASTER_KEY_BYTES = 32

_INSECURE_JWT_DEFAULTS = {
    "INSECURE_DEV_KEY_CHANGE_IN_PRODUCTION",
    "INSECURE_DEV_REFRESH_KEY_CHANGE_IN_PRODUCTION",
}


class Settings(BaseSettings):
    """
    Strictly typed application settings.

    Priority for loading:
    1. Environment variables (highest priority)
    2. .env file (via pydantic-settings)
    3. Default values (lowest priority, dev-safe only)
    """

    # ─────────────────────────────────────────────────────────────
    # Application metadata
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "OTP Vault"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    ENVIRONMENT: str = "development"

    # ─────────────────────────────────────────────────────────────
    # Security: JWT Configuration
    # Access and refresh tokens are signed with different secrets
    # ─────────────────────────────────────────────────────────────
    SECRET_KEY: str = "INSECURE_DEV_KEY_CHANGE_IN_PRODUCTION"
    REFRESH_SECRET_KEY: str = "INSECURE_DEV_REFRESH_KEY_CHANGE_IN_PRODUCTION"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # ─────────────────────────────────────────────────────────────
    # Security: Secret vault
    # ENCRYPTION_KEY is the AES-256-GCM master key for stored OTP secrets.
    # Either "base64:<urlsafe b64 of 32 bytes>" or a string of >= 32 bytes.
    # ─────────────────────────────────────────────────────────────
    ENCRYPTION_KEY: Optional[str] = None

    # Adjacent 30s steps accepted on each side when verifying a code
    OTP_VERIFY_WINDOW: int = 1

    # ─────────────────────────────────────────────────────────────
    # Database Configuration
    # Priority: DATABASE_URL env var → SQLite fallback for local dev
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./otp_vault.db"

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """
        Normalize database URLs for async SQLAlchemy compatibility.

        Conversions:
        - postgres://     → postgresql+asyncpg://
        - postgresql://   → postgresql+asyncpg://
        - sqlite:///      → sqlite+aiosqlite:///
        """
        if v is None:
            return "sqlite+aiosqlite:///./otp_vault.db"

        url = v.strip()

        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)

        if url.startswith("postgresql://") and "+asyncpg" not in url:
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite:///") and "+aiosqlite" not in url:
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

        return url

    # MUST be False in production to prevent SQL query exposure
    DATABASE_ECHO: bool = False

    # ─────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"

    # ─────────────────────────────────────────────────────────────
    # CORS Configuration
    # Empty string → empty list (NOT "*" for security)
    # ─────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8000"

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        """Parse CORS_ORIGINS string into a list of allowed origins."""
        if not self.CORS_ORIGINS or not self.CORS_ORIGINS.strip():
            return []

        return [
            origin.strip()
            for origin in self.CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        # Extra fields in .env are ignored (prevents config injection)
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database (local development)."""
        return "sqlite" in self.DATABASE_URL.lower()


def parse_master_key(raw: Optional[str]) -> bytes:
    """
    Turn the ENCRYPTION_KEY setting into a 32-byte AES-256 key.

    Accepted forms:
    - "base64:<b64>" where the decoded value is exactly 32 bytes
    - any other string whose UTF-8 encoding is at least 32 bytes;
      the first 32 bytes are used as the key

    Raises:
        ConfigurationError: key missing, undecodable or too short
    """
    if not raw:
        raise ConfigurationError("ENCRYPTION_KEY environment variable is required")

    if raw.startswith("base64:"):
        b64 = raw.split(":", 1)[1]
        try:
            key = base64.urlsafe_b64decode(b64)
        except (binascii.Error, ValueError) as exc:
            raise ConfigurationError("ENCRYPTION_KEY is not valid base64") from exc
        if len(key) != MASTER_KEY_BYTES:
            raise ConfigurationError(
                f"ENCRYPTION_KEY must decode to {MASTER_KEY_BYTES} bytes, got {len(key)}"
            )
        return key

    key = raw.encode("utf-8")
    if len(key) < MASTER_KEY_BYTES:
        raise ConfigurationError(
            f"ENCRYPTION_KEY must be at least {MASTER_KEY_BYTES} characters long"
        )
    return key[:MASTER_KEY_BYTES]


@dataclass(frozen=True)
class VaultConfig:
    """
    Immutable configuration handed to the binding vault.

    Built once at startup and shared read-only by every request.
    """
    master_key: bytes = field(repr=False)
    verify_window: int = 1

    def __post_init__(self):
        if len(self.master_key) != MASTER_KEY_BYTES:
            raise ConfigurationError(f"Master key must be {MASTER_KEY_BYTES} bytes")
        if self.verify_window < 0:
            raise ConfigurationError("OTP_VERIFY_WINDOW must not be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "VaultConfig":
        if settings.is_production:
            if settings.SECRET_KEY in _INSECURE_JWT_DEFAULTS or \
                    settings.REFRESH_SECRET_KEY in _INSECURE_JWT_DEFAULTS:
                raise ConfigurationError("JWT secrets must be set in production")
        return cls(
            master_key=parse_master_key(settings.ENCRYPTION_KEY),
            verify_window=settings.OTP_VERIFY_WINDOW,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    providing consistent configuration across the application.
    """
    return Settings()


# Existing code imports `settings` directly from this module
settings = get_settings()
