"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.

A missing store URL or access key is a fatal startup condition: building
Settings raises a ValidationError and nothing downstream is constructed.
"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Secrets should never be committed to code - use .env.local (gitignored).
    """

    # Record store selection
    store_backend: Literal["supabase", "sql"] = Field(
        default="supabase",
        description="Which record store implementation backs the repository"
    )

    # Supabase Configuration
    supabase_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        description="Base URL of the Supabase project"
    )
    supabase_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        description="Supabase access key (anon or service role)"
    )

    # SQL Configuration (local development and tests)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/chat.db",
        description="SQLAlchemy connection URL used by the sql backend"
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        description="bcrypt work factor (log2 of the number of rounds)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root logging level"
    )
    log_json: bool = Field(
        default=True,
        description="Emit single-line JSON log records"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
        populate_by_name=True,
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Validate the Supabase URL format.

        Blank values are treated as missing so the backend check below
        reports them.
        """
        if v is None or v.strip() == "":
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"SUPABASE_URL must be an http(s) URL. Got: {v[:20]}..."
            )
        return v.rstrip("/")

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v.strip() == "":
            return None
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        Ensures URL has proper scheme and is not a placeholder.
        """
        if not v or v.strip() == "":
            raise ValueError("DATABASE_URL is required and cannot be empty")

        valid_schemes = ["sqlite", "sqlite+aiosqlite", "postgresql", "postgresql+asyncpg"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {', '.join(valid_schemes)}. "
                f"Got: {v[:20]}..."
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level. Got: {v}")
        return level

    @model_validator(mode="after")
    def require_supabase_credentials(self) -> "Settings":
        """
        Refuse to start the supabase backend without both credentials.

        Raises:
            ValueError: If SUPABASE_URL or SUPABASE_KEY is missing
        """
        if self.store_backend != "supabase":
            return self

        missing = []
        if self.supabase_url is None:
            missing.append("SUPABASE_URL")
        if self.supabase_key is None:
            missing.append("SUPABASE_KEY")
        if missing:
            raise ValueError(
                f"Missing Supabase environment variables: {', '.join(missing)}"
            )
        return self
