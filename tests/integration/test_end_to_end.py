"""End-to-end mapping tests.

Runs the complete mapper (normalization, search strategies, selection,
confidence) against fixture-backed and mocked-HTTP catalogs:

- Season-aware selection between sequel entries
- Fansub and bracketed release names
- The real AniList client with cache and rate limiter, minus the network
- Structured logging of a whole mapping call

Uses no network access.
"""

import io
import json
import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from animap.catalog import AniListClient, ResponseCache, SlidingWindowRateLimiter
from animap.config.models import AppConfig
from animap.logging.config import configure_logging
from animap.main import build_mapper

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

SOLO_LEVELING = (
    "Solo Leveling S02 1080p CR WEB-DL DUAL AAC2.0 H 264-VARYG "
    "(Ore dake Level Up na Ken, Dual-Audio, Multi-Subs)"
)


@pytest.fixture
def mapper(fixture_catalog, fixed_clock):
    mapper = build_mapper(AppConfig(), catalog=fixture_catalog)
    mapper.clock = fixed_clock
    return mapper


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def anilist_session():
    """Mock session that answers every request with the recorded search response."""
    with open(FIXTURES_DIR / "anilist_responses" / "search_solo_leveling.json", encoding="utf-8") as f:
        payload = json.load(f)

    response = Mock()
    response.status_code = 200
    response.headers = {}
    response.json.return_value = payload

    session = Mock()
    session.headers = {}
    session.request.return_value = response
    return session


class TestFixtureCatalogMapping:
    """Mapping scenarios against the YAML fixture catalog."""

    def test_season_two_release(self, mapper):
        result = mapper.map(SOLO_LEVELING)

        assert result.anilist_match.id == 176496
        assert result.anilist_match.title.english == "Solo Leveling Season 2 -Arise from the Shadow-"
        assert 0.8 < result.confidence <= 1.0

    def test_fansub_release(self, mapper):
        result = mapper.map("[SubsPlease] Frieren - 05 (1080p)")

        assert result.anilist_match.id == 154587

    def test_season_word_release(self, mapper):
        result = mapper.map("Attack on Titan Season 3 [1080p]")

        assert result.anilist_match.id == 104578
        assert result.confidence > 0.9

    def test_unknown_release(self, mapper):
        result = mapper.map("Totally Unknown Release S01 1080p")

        assert result.is_match is False
        assert result.to_dict()["confidence"] == 0.0

    def test_explicit_id_overrides_title(self, mapper):
        result = mapper.map("[SubsPlease] Frieren - 05 (1080p)", explicit_id=151807)

        assert result.anilist_match.id == 151807
        assert result.confidence is None

    def test_mapping_is_repeatable(self, mapper):
        first = mapper.map(SOLO_LEVELING)
        second = mapper.map(SOLO_LEVELING)

        assert first == second


class TestAniListClientMapping:
    """Mapping through the real AniList client with a mocked HTTP session."""

    def test_maps_and_caches(self, anilist_session, tmp_path, fixed_clock):
        limiter = SlidingWindowRateLimiter(limit=90, window_seconds=60)
        client = AniListClient(
            session=anilist_session,
            rate_limiter=limiter,
            cache=ResponseCache(tmp_path / "cache"),
        )
        mapper = build_mapper(AppConfig(), catalog=client)
        mapper.clock = fixed_clock

        first = mapper.map(SOLO_LEVELING)
        second = mapper.map(SOLO_LEVELING)

        assert first.anilist_match.id == 176496
        assert second == first
        assert anilist_session.request.call_count == 1
        assert limiter.remaining() == 89


class TestStructuredLogging:
    """Log output of a full mapping call."""

    def test_json_log_lines_share_mapping_id(self, mapper, restore_root_logger):
        stream = io.StringIO()
        configure_logging(level="DEBUG", format_type="json", environment="test", stream=stream)
        offset = len(stream.getvalue())

        mapper.map(SOLO_LEVELING)

        records = [json.loads(line) for line in stream.getvalue()[offset:].splitlines() if line.strip()]
        events = [record.get("event") for record in records]
        assert "pipeline.strategy.tried" in events
        assert "matching.select.accepted" in events
        assert events[-1] == "mapping.run.completed"

        mapping_ids = {record.get("mapping_id") for record in records}
        assert len(mapping_ids) == 1
        assert None not in mapping_ids
        assert all(record["torrent_title"] == SOLO_LEVELING for record in records)
        assert records[-1]["anilist_id"] == 176496
