"""Environment variable loading and validation."""

import os
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class EnvironmentConfig:
    """Environment variable overrides for the YAML configuration."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        api_url: Optional[str] = None,
        cache_dir: Optional[str] = None,
        cache_enabled: Optional[bool] = None,
    ):
        """Initialize environment configuration."""
        self.log_level = log_level
        self.api_url = api_url
        self.cache_dir = cache_dir
        self.cache_enabled = cache_enabled

    def apply(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge overrides into a raw configuration dictionary.

        Args:
            config_dict: Raw configuration as loaded from YAML

        Returns:
            New dictionary with overrides applied; sections are copied, not mutated
        """
        merged = {key: dict(value) if isinstance(value, dict) else value for key, value in config_dict.items()}

        if self.log_level:
            merged.setdefault("logging", {})["level"] = self.log_level.upper()
        if self.api_url:
            merged.setdefault("catalog", {})["api_url"] = self.api_url
        if self.cache_dir:
            merged.setdefault("cache", {})["directory"] = self.cache_dir
        if self.cache_enabled is not None:
            merged.setdefault("cache", {})["enabled"] = self.cache_enabled

        return merged


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - ANIMAP_LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ANILIST_API_URL: Override the GraphQL endpoint
    - ANIMAP_CACHE_DIR: Override the response cache directory
    - ANIMAP_CACHE_ENABLED: Enable or disable the response cache (true/false)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("ANIMAP_LOG_LEVEL")
    api_url = os.getenv("ANILIST_API_URL")
    cache_dir = os.getenv("ANIMAP_CACHE_DIR")
    cache_enabled_str = os.getenv("ANIMAP_CACHE_ENABLED")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid ANIMAP_LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if api_url and not api_url.startswith(("http://", "https://")):
        errors.append(f"Invalid ANILIST_API_URL: '{api_url}'. Must be an http(s) URL.")

    cache_enabled = None
    if cache_enabled_str:
        normalized = cache_enabled_str.strip().lower()
        if normalized in TRUE_VALUES:
            cache_enabled = True
        elif normalized in FALSE_VALUES:
            cache_enabled = False
        else:
            errors.append(
                f"Invalid ANIMAP_CACHE_ENABLED: '{cache_enabled_str}'. Use true or false."
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the ANIMAP_* variables in your shell or .env file",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level,
        api_url=api_url,
        cache_dir=cache_dir,
        cache_enabled=cache_enabled,
    )
