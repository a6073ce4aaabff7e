"""
Settings for the studiosync fee core.

Every group reads upper-case environment variables (and a local .env file)
through pydantic-settings. Groups are nested under `Settings`; services take
the group they need so tests can pass their own instances.
"""

from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError, field_errors_from_pydantic

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
ENVIRONMENTS = ('development', 'staging', 'production', 'testing')


class EnvSettings(BaseSettings):
    """Shared environment binding for all settings groups"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class LoggingSettings(EnvSettings):
    """Package logger output"""

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text
    LOG_FILE: Optional[str] = Field(default=None)

    # Also route structlog loggers through the package handlers
    ENABLE_STRUCTURED_LOGGING: bool = Field(default=True)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'LOG_LEVEL must be one of {", ".join(LOG_LEVELS)}')
        return level

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v):
        fmt = v.lower()
        if fmt not in ('json', 'text'):
            raise ValueError('LOG_FORMAT must be "json" or "text"')
        return fmt


class FeeSettings(EnvSettings):
    """Fee scheduling and distribution"""

    FEES_DEFAULT_DURATION_MONTHS: int = Field(default=12, ge=1)

    # Distribution write policy
    FEES_ATOMIC_DISTRIBUTION: bool = Field(default=True)
    FEES_MAX_BATCH_WRITES: int = Field(default=500, ge=1, le=500)

    # When end-date clipping drops installments, recompute the declared
    # total and duration from the entries that were actually generated.
    FEES_RECONCILE_CLIPPED_TOTAL: bool = Field(default=False)

    FEES_CURRENCY_QUANTUM: str = Field(default="0.01")

    @field_validator('FEES_CURRENCY_QUANTUM')
    @classmethod
    def validate_quantum(cls, v):
        try:
            quantum = Decimal(v)
        except InvalidOperation as e:
            raise ValueError(f'Invalid currency quantum: {v}') from e
        if not quantum.is_finite() or quantum <= 0:
            raise ValueError('Currency quantum must be a positive decimal')
        return v

    @property
    def currency_quantum(self) -> Decimal:
        return Decimal(self.FEES_CURRENCY_QUANTUM)


class StudioContextSettings(EnvSettings):
    """Studio context cache and branding defaults"""

    CONTEXT_CACHE_DURATION_SECONDS: int = Field(default=3600, ge=1)
    CONTEXT_DEFAULT_PRIMARY_COLOR: str = Field(default="#3DCED7")
    CONTEXT_DEFAULT_SECONDARY_COLOR: str = Field(default="#3A506B")
    CONTEXT_DEFAULT_STUDIO_NAME: str = Field(default="Studio Sync")


class Settings(EnvSettings):
    """Top-level settings"""

    ENVIRONMENT: str = Field(default="development")
    # Forces DEBUG output regardless of LOG_LEVEL
    DEBUG: bool = Field(default=False)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    fees: FeeSettings = Field(default_factory=FeeSettings)
    studio_context: StudioContextSettings = Field(default_factory=StudioContextSettings)

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        if v not in ENVIRONMENTS:
            raise ValueError(f'ENVIRONMENT must be one of {", ".join(ENVIRONMENTS)}')
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        ConfigurationError: If an environment value fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        field_errors = field_errors_from_pydantic(e)
        raise ConfigurationError(
            f"Invalid settings: {', '.join(sorted(field_errors))}",
            field_errors=field_errors,
        ) from e


settings = get_settings()
