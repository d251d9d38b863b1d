"""Integration tests for configuration module."""

from pathlib import Path

import pytest

from animap.config import (
    AppConfig,
    ConfigurationError,
    LogFormat,
    LogLevel,
    load_config,
)
from animap.config.duration import DurationParseError, parse_duration, validate_duration_range
from animap.config.environment import EnvironmentConfig, load_environment_config
from animap.config.models import CacheConfig, CatalogConfig, MatchingConfig
from animap.config.validators import check_for_warnings

# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self):
        """Test loading a fully specified configuration file."""
        config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert config.catalog.request_timeout == 20
        assert config.catalog.user_agent == "animap-tests/1.0"
        assert config.catalog.rate_limit_per_minute == 60
        assert config.catalog.rate_limit_window_seconds == 60
        assert config.catalog.per_page == 15

        assert config.cache.directory == "/tmp/animap-test-cache"
        assert config.cache.ttl_seconds == 6 * 3600

        assert config.matching.accept_threshold == 0.5
        assert config.matching.fallback_threshold == 0.75
        assert config.matching.clamp_boosted_scores is True

        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.logging.environment == "test"

    def test_load_minimal_config(self):
        """Test that omitted sections fall back to defaults."""
        config = load_config(FIXTURES_DIR / "minimal_config.yaml")

        assert config.logging.level == "WARNING"
        assert config.catalog.api_url == "https://graphql.anilist.co"
        assert config.matching.accept_threshold == 0.4
        assert config.cache.ttl_seconds == 3600

    def test_config_file_not_found(self):
        """Test error when an explicit config file doesn't exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "not found" in str(exc_info.value)

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        """Test built-in defaults when no config file is found."""
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == AppConfig()

    def test_discovers_config_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("catalog:\n  per_page: 25\n", encoding="utf-8")

        assert load_config().catalog.per_page == 25

    def test_discovers_config_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text(
            "catalog:\n  per_page: 30\n", encoding="utf-8"
        )

        assert load_config().catalog.per_page == 30

    def test_empty_config_file(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("", encoding="utf-8")

        assert load_config(config_path) == AppConfig()

    def test_invalid_yaml_syntax(self, tmp_path):
        """Test error on malformed YAML."""
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("catalog: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(config_path)

    def test_top_level_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- catalog\n- cache\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(config_path)

    @pytest.mark.filterwarnings("ignore::UserWarning")
    def test_invalid_values_are_all_reported(self):
        """Test that every validation error is collected."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_config.yaml")

        errors = exc_info.value.errors
        assert any("api_url" in error for error in errors)
        assert any("request_timeout" in error for error in errors)
        assert any("rate_limit_window" in error for error in errors)
        assert any("accept_threshold" in error for error in errors)
        assert any("level" in error for error in errors)
        assert exc_info.value.suggestions

    def test_error_message_lists_errors(self):
        error = ConfigurationError("Broken", errors=["first", "second"], suggestions=["fix it"])

        message = str(error)

        assert message.startswith("Broken")
        assert "1. first" in message
        assert "2. second" in message
        assert "- fix it" in message


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_no_overrides(self):
        env_config = load_environment_config()

        assert env_config.log_level is None
        assert env_config.cache_enabled is None

    def test_overrides_applied(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ANIMAP_LOG_LEVEL", "debug")
        monkeypatch.setenv("ANILIST_API_URL", "http://localhost:8080/graphql")
        monkeypatch.setenv("ANIMAP_CACHE_DIR", "/var/cache/animap")

        config = load_config()

        assert config.logging.level == "DEBUG"
        assert config.catalog.api_url == "http://localhost:8080/graphql"
        assert config.cache.directory == "/var/cache/animap"

    def test_environment_wins_over_file(self, monkeypatch):
        monkeypatch.setenv("ANIMAP_LOG_LEVEL", "ERROR")

        config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert config.logging.level == "ERROR"
        assert config.logging.format == "json"

    @pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("ON", True), ("no", False)])
    def test_cache_enabled_values(self, monkeypatch, value, expected):
        monkeypatch.setenv("ANIMAP_CACHE_ENABLED", value)

        assert load_environment_config().cache_enabled is expected

    def test_cache_disabled_warns(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ANIMAP_CACHE_ENABLED", "false")

        with pytest.warns(UserWarning, match="cache is disabled"):
            config = load_config()

        assert config.cache.enabled is False

    def test_invalid_environment_values(self, monkeypatch):
        monkeypatch.setenv("ANIMAP_LOG_LEVEL", "verbose")
        monkeypatch.setenv("ANILIST_API_URL", "graphql.anilist.co")
        monkeypatch.setenv("ANIMAP_CACHE_ENABLED", "maybe")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 3

    def test_apply_does_not_mutate_input(self):
        original = {"logging": {"level": "INFO"}}

        merged = EnvironmentConfig(log_level="warning").apply(original)

        assert merged["logging"]["level"] == "WARNING"
        assert original == {"logging": {"level": "INFO"}}


class TestConfigModels:
    """Test schema defaults and validation."""

    def test_app_config_defaults(self):
        config = AppConfig()

        assert config.catalog.rate_limit_per_minute == 90
        assert config.catalog.rate_limit_window_seconds == 60
        assert config.catalog.request_timeout == 30
        assert config.catalog.per_page == 10
        assert config.cache.enabled is True
        assert config.matching.season_boost == 1.3
        assert config.matching.base_title_boost == 1.2
        assert config.matching.base_title_threshold == 0.85
        assert config.matching.clamp_boosted_scores is False
        assert config.logging.level == LogLevel.INFO.value
        assert config.logging.format == LogFormat.KEY_VALUE.value

    def test_api_url_must_be_http(self):
        with pytest.raises(ValueError, match="http"):
            CatalogConfig(api_url="graphql.anilist.co")

    def test_strips_whitespace(self):
        assert CatalogConfig(user_agent="  animap/2.0  ").user_agent == "animap/2.0"

    @pytest.mark.parametrize("ttl", ["0s", "31d", "soon"])
    def test_invalid_cache_ttl(self, ttl):
        with pytest.raises(ValueError):
            CacheConfig(ttl=ttl)

    def test_boost_cannot_be_below_one(self):
        with pytest.raises(ValueError):
            MatchingConfig(season_boost=0.9)


class TestConfigWarnings:
    """Test non-fatal configuration warnings."""

    def test_no_warnings_for_defaults(self):
        assert check_for_warnings({}) == []

    def test_rate_limit_above_anilist_limit(self):
        warnings = check_for_warnings({"catalog": {"rate_limit_per_minute": 120}})

        assert len(warnings) == 1
        assert "90" in warnings[0]

    def test_fallback_below_accept(self):
        warnings = check_for_warnings({"matching": {"accept_threshold": 0.8, "fallback_threshold": 0.5}})

        assert len(warnings) == 1
        assert "fallback_threshold" in warnings[0]


class TestDurationParsing:
    """Test duration parsing."""

    def test_parse_human_readable(self):
        assert parse_duration("30s") == 30
        assert parse_duration("1m") == 60
        assert parse_duration("1h") == 3600
        assert parse_duration("2d") == 172800

    def test_parse_human_readable_combined(self):
        assert parse_duration("1h30m") == 5400

    def test_parse_iso8601(self):
        assert parse_duration("PT1M") == 60
        assert parse_duration("PT1H30M") == 5400
        assert parse_duration("P1D") == 86400
        assert parse_duration("PT30S") == 30

    @pytest.mark.parametrize("value", ["", "invalid", "15x", "1h30x", "PT", "0m"])
    def test_parse_invalid(self, value):
        with pytest.raises(DurationParseError):
            parse_duration(value)

    def test_validate_duration_range_too_short(self):
        with pytest.raises(DurationParseError, match="Cache TTL too short"):
            validate_duration_range(0, min_seconds=1, max_seconds=60, label="Cache TTL")

    def test_validate_duration_range_too_long(self):
        with pytest.raises(DurationParseError, match="Maximum is 1 hour"):
            validate_duration_range(7200, min_seconds=1, max_seconds=3600)

    def test_validate_duration_range_valid(self):
        validate_duration_range(60, min_seconds=1, max_seconds=3600)
