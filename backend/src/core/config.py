"""
Application Configuration

Settings are read once from the environment (and an optional .env file)
and passed explicitly to the services that need them.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from src.domain.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./app_persistence.db"
DEV_JWT_SECRET = "dev-only-insecure-secret"

# Explicitly include loopback IPs which browsers sometimes use instead of 'localhost'
BASE_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


@dataclass
class Settings:
    """Runtime configuration for the API and its services."""
    database_url: str = DEFAULT_DATABASE_URL
    jwt_access_secret: str = DEV_JWT_SECRET
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7
    email_verification_ttl_hours: int = 24
    bcrypt_rounds: int = 12
    environment: str = "development"
    public_base_url: Optional[str] = None
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(BASE_CORS_ORIGINS))

    def __post_init__(self):
        # Adjust URL for SQLAlchemy if it starts with postgres:// (old Heroku/Render format)
        if self.database_url.startswith("postgres://"):
            self.database_url = self.database_url.replace("postgres://", "postgresql://", 1)
        if self.public_base_url is None:
            self.public_base_url = f"http://localhost:{self.port}"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: if JWT_ACCESS_SECRET is missing outside development
                or a numeric variable cannot be parsed.
        """
        load_dotenv(env_file)

        environment = os.getenv("ENVIRONMENT", "development")

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            database_url = DEFAULT_DATABASE_URL
            logger.warning(f"DATABASE_URL not found. Falling back to SQLite: {database_url}")

        secret = os.getenv("JWT_ACCESS_SECRET")
        if not secret:
            if environment.lower() != "development":
                raise ConfigurationError("Missing JWT_ACCESS_SECRET in env")
            secret = DEV_JWT_SECRET
            logger.warning("JWT_ACCESS_SECRET not set. Using insecure development secret.")

        extra_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
        # Combine and remove duplicates, keeping order
        origins = list(dict.fromkeys(BASE_CORS_ORIGINS + extra_origins))

        return cls(
            database_url=database_url,
            jwt_access_secret=secret,
            access_token_ttl_minutes=_int_env("ACCESS_TOKEN_TTL_MINUTES", 15),
            refresh_token_ttl_days=_int_env("REFRESH_TOKEN_TTL_DAYS", 7),
            email_verification_ttl_hours=_int_env("EMAIL_VERIFICATION_TTL_HOURS", 24),
            bcrypt_rounds=_int_env("BCRYPT_ROUNDS", 12),
            environment=environment,
            public_base_url=os.getenv("PUBLIC_BASE_URL"),
            port=_int_env("PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=origins,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
