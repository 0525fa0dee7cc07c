"""Application configuration using Pydantic settings."""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Groupkeeper", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Environment"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=8000, description="Port to bind to")
    reload: bool = Field(default=False, description="Auto-reload on code changes")

    # Database
    database_url: str = Field(
        default="sqlite:///./groupkeeper.db",
        description="Database connection URL (PostgreSQL or SQLite)",
    )
    db_pool_size: int = Field(default=10, description="Database connection pool size")
    db_max_overflow: int = Field(default=20, description="Database max overflow connections")
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Security
    secret_key: str = Field(
        default="your-secret-key-change-this-in-production-at-least-32-chars-long",
        description="Secret key for signing tokens (64+ chars recommended)",
        min_length=32,
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_lifetime_hours: int = Field(
        default=24, gt=0, description="Bearer token lifetime in hours"
    )

    # Bootstrap account, created at startup when set and absent
    bootstrap_email: str = Field(default="", description="Email of the initial elevated account")
    bootstrap_password: str = Field(default="", description="Password of the initial account")
    bootstrap_name: str = Field(default="admin", description="Name of the initial account")

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, description="Enable OpenTelemetry")
    otel_service_name: str = Field(default="groupkeeper", description="Service name for traces")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4318", description="OTLP exporter endpoint"
    )
    otel_exporter_otlp_headers: str = Field(
        default="", description="OTLP headers (comma-separated key=value pairs)"
    )
    otel_resource_attributes: str = Field(
        default="", description="Resource attributes (comma-separated key=value pairs)"
    )
    otel_traces_exporter: Literal["otlp", "console", "none"] = Field(
        default="otlp", description="Traces exporter"
    )

    @field_validator("bootstrap_email")
    @classmethod
    def validate_bootstrap_email(cls, v: str) -> str:
        """Hold the bootstrap address to the same rule as API-created accounts."""
        if v and not re.match(EMAIL_PATTERN, v):
            raise ValueError(f"bootstrap_email is not a valid email address: {v!r}")
        return v.lower()

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    def get_otlp_headers(self) -> dict[str, str]:
        """Parse OTLP headers from comma-separated string."""
        if not self.otel_exporter_otlp_headers:
            return {}
        return dict(
            item.split("=", 1)
            for item in self.otel_exporter_otlp_headers.split(",")
            if "=" in item
        )

    def get_resource_attributes(self) -> dict[str, str]:
        """Parse resource attributes from comma-separated string."""
        if not self.otel_resource_attributes:
            return {}
        return dict(
            item.split("=", 1) for item in self.otel_resource_attributes.split(",") if "=" in item
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
