"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import parse_duration, validate_duration_range, DurationParseError


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class CatalogConfig(BaseModel):
    """AniList GraphQL client settings."""

    api_url: str = Field(
        "https://graphql.anilist.co", min_length=1, description="GraphQL endpoint"
    )
    request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for catalog calls (seconds)"
    )
    user_agent: str = Field(
        "animap/1.0", min_length=1, description="User-Agent string for HTTP requests"
    )
    rate_limit_per_minute: int = Field(
        90, ge=1, description="Maximum catalog requests per rate-limit window"
    )
    rate_limit_window: str = Field("1m", description="Length of the sliding rate-limit window")
    per_page: int = Field(10, ge=1, le=50, description="Search results requested per query")

    # Computed field
    rate_limit_window_seconds: Optional[int] = None

    @field_validator("api_url", "user_agent")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) endpoint."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must start with http:// or https://, got '{v}'")
        return v

    @field_validator("rate_limit_window")
    @classmethod
    def validate_rate_limit_window(cls, v: str) -> str:
        """Validate the rate-limit window duration."""
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, min_seconds=1, max_seconds=3600, label="Rate limit window")
            return v
        except DurationParseError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def compute_window_seconds(self):
        """Compute the window length in seconds."""
        self.rate_limit_window_seconds = parse_duration(self.rate_limit_window)
        return self


class CacheConfig(BaseModel):
    """On-disk response cache settings."""

    enabled: bool = Field(True, description="Whether catalog responses are cached")
    directory: str = Field("cache", min_length=1, description="Cache directory")
    ttl: str = Field("1h", description="How long a cached response stays valid")

    # Computed field
    ttl_seconds: Optional[int] = None

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: str) -> str:
        """Validate the cache TTL duration."""
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, min_seconds=1, max_seconds=30 * 86400, label="Cache TTL")
            return v
        except DurationParseError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def compute_ttl_seconds(self):
        """Compute the TTL in seconds."""
        self.ttl_seconds = parse_duration(self.ttl)
        return self


class MatchingConfig(BaseModel):
    """Thresholds and boost factors for candidate selection."""

    accept_threshold: float = Field(
        0.4, ge=0.0, le=1.0, description="Minimum boosted score for the best candidate"
    )
    fallback_threshold: float = Field(
        0.7, ge=0.0, le=1.0, description="Base-title similarity for the fallback scan"
    )
    base_title_threshold: float = Field(
        0.85, ge=0.0, le=1.0, description="Base-title similarity that earns the base-title boost"
    )
    season_boost: float = Field(1.3, ge=1.0, description="Multiplier when the season matches")
    base_title_boost: float = Field(
        1.2, ge=1.0, description="Multiplier when the base titles are near-identical"
    )
    clamp_boosted_scores: bool = Field(
        False, description="Cap boosted scores at 1.0 before comparison"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )
    environment: str = Field("local", min_length=1, description="Environment label")

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the title mapper."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig, description="Catalog client")
    cache: CacheConfig = Field(default_factory=CacheConfig, description="Response cache")
    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Candidate selection"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
