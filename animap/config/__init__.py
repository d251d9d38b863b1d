"""Configuration management module for the title mapper."""

from .duration import DurationParseError, parse_duration
from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    CacheConfig,
    CatalogConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_environment_config",
    "parse_duration",
    # Configuration models
    "AppConfig",
    "CatalogConfig",
    "CacheConfig",
    "MatchingConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
    "DurationParseError",
]
