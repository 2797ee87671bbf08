"""Application settings using Pydantic Settings.

Centralized configuration for the workforce platform.

SECURITY: Production requires the following environment variables:
- APP_JWT_SECRET: JWT verification key (min 32 chars)

Generate secrets with: python -c "import secrets; print(secrets.token_hex(32))"
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ChainSettings(BaseSettings):
    """On-chain task log configuration (best-effort telemetry)."""

    model_config = SettingsConfigDict(
        env_prefix="CHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Submit completion logs on-chain")
    rpc_url: Optional[str] = Field(
        default=None,
        description="JSON-RPC endpoint of a node managing the sender account"
    )
    from_address: Optional[str] = Field(
        default=None,
        description="Sender account; transactions are self-transfers carrying the log"
    )
    timeout: float = Field(default=15.0, gt=0, description="RPC timeout in seconds")

    @property
    def is_configured(self) -> bool:
        """Check whether enough is set to submit transactions."""
        return self.enabled and bool(self.rpc_url) and bool(self.from_address)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    name: str = Field(default="Workforce Platform", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment name")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    json_logs: bool = Field(default=False, description="Emit JSON formatted logs")
    log_file: Optional[Path] = Field(default=None, description="Also write JSON logs to this file")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=5000, description="API port")

    # Security
    # CRITICAL: Must be set via APP_JWT_SECRET environment variable in production
    jwt_secret: str = Field(
        default="change-me-in-production-INSECURE",
        description="Secret used to verify bearer tokens - MUST be set in production"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # Event bus leak detection
    event_bus_max_subscribers: int = Field(
        default=20,
        ge=1,
        description="Subscriber count per event above which a warning is logged"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def chain(self) -> ChainSettings:
        return ChainSettings()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ("production", "prod", "staging")

    def validate_production_security(self) -> List[str]:
        """
        Validate security requirements for production.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.is_production:
            return errors

        if "INSECURE" in self.jwt_secret:
            errors.append("APP_JWT_SECRET must be set in production")
        elif len(self.jwt_secret) < 32:
            errors.append("APP_JWT_SECRET must be at least 32 characters")

        if self.debug:
            errors.append("APP_DEBUG must be disabled in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Cached settings loaded from environment.
    """
    settings = Settings()
    for error in settings.validate_production_security():
        logger.error(f"Security configuration error: {error}")
    return settings
