"""Tests for TitleMapper orchestration."""

import logging

import pytest

from animap.catalog.exceptions import CatalogError
from animap.domain.models import MappingResult
from animap.logging.context import get_log_context
from animap.pipeline import TitleMapper
from tests.helpers import FixtureCatalog, make_entry

SOLO_LEVELING = (
    "Solo Leveling S02 1080p CR WEB-DL DUAL AAC2.0 H 264-VARYG "
    "(Ore dake Level Up na Ken, Dual-Audio, Multi-Subs)"
)


class ContextRecordingCatalog(FixtureCatalog):
    """FixtureCatalog that records the log context seen by each search."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.contexts = []

    def search(self, query):
        self.contexts.append(get_log_context())
        return super().search(query)


@pytest.fixture
def mapper(fixture_catalog, fixed_clock):
    return TitleMapper(fixture_catalog, clock=fixed_clock)


class TestSearchMapping:
    """Tests for mapping through the search pipeline."""

    def test_solo_leveling_season_two(self, mapper, fixture_catalog, fixed_clock):
        result = mapper.map(SOLO_LEVELING)

        assert isinstance(result, MappingResult)
        assert result.torrent_title == SOLO_LEVELING
        assert result.anilist_match.id == 176496
        assert 0.8 < result.confidence <= 1.0
        assert result.matched_at == fixed_clock()
        assert fixture_catalog.search_calls == ["Solo Leveling S02 Ore dake Level Up na Ken"]
        assert fixture_catalog.lookup_calls == []

    def test_fansub_release(self, mapper):
        result = mapper.map("[SubsPlease] Frieren - 05 (1080p)")

        assert result.anilist_match.id == 154587
        assert result.confidence > 0.4

    def test_no_candidates(self, mapper):
        result = mapper.map("Completely Unknown Show S01 1080p")

        assert result.anilist_match is None
        assert result.confidence == 0.0
        assert result.is_match is False

    def test_candidates_without_acceptable_match(self, fixed_clock):
        catalog = FixtureCatalog()
        catalog.add_search("Frieren", make_entry(1, romaji="xqzvw"))

        result = TitleMapper(catalog, clock=fixed_clock).map("Frieren 1080p")

        assert result.anilist_match is None
        assert result.confidence == 0.0

    def test_empty_title(self, mapper, fixture_catalog):
        result = mapper.map("")

        assert result.anilist_match is None
        assert result.confidence == 0.0
        assert fixture_catalog.search_calls == []

    def test_catalog_error_propagates(self, fixed_clock):
        catalog = FixtureCatalog(error=CatalogError("AniList API rate limit exceeded"))
        mapper = TitleMapper(catalog, clock=fixed_clock)

        with pytest.raises(CatalogError, match="rate limit"):
            mapper.map("Frieren S02 1080p")

        assert get_log_context() == {}

    def test_mapping_context_available_to_catalog(self, fixed_clock):
        catalog = ContextRecordingCatalog()

        TitleMapper(catalog, clock=fixed_clock).map("Frieren S02 1080p")

        assert catalog.contexts
        assert all(ctx["torrent_title"] == "Frieren S02 1080p" for ctx in catalog.contexts)
        assert len({ctx["mapping_id"] for ctx in catalog.contexts}) == 1

    def test_each_call_gets_new_mapping_id(self, fixed_clock):
        catalog = ContextRecordingCatalog()
        mapper = TitleMapper(catalog, clock=fixed_clock)

        mapper.map("Frieren 1080p")
        mapper.map("Frieren 1080p")

        assert catalog.contexts[0]["mapping_id"] != catalog.contexts[-1]["mapping_id"]

    def test_logs_completion_event(self, mapper, caplog):
        with caplog.at_level(logging.INFO, logger="animap.pipeline.runner"):
            mapper.map(SOLO_LEVELING)

        completed = [
            r for r in caplog.records if getattr(r, "event", None) == "mapping.run.completed"
        ]
        assert len(completed) == 1
        assert completed[0].matched is True
        assert completed[0].anilist_id == 176496
        assert completed[0].strategy == "normalized_title"


class TestExplicitIdMapping:
    """Tests for mapping with a caller-supplied catalog ID."""

    def test_explicit_id_skips_search(self, mapper, fixture_catalog):
        result = mapper.map(SOLO_LEVELING, explicit_id=151807)

        assert result.anilist_match.id == 151807
        assert result.confidence is None
        assert fixture_catalog.lookup_calls == [151807]
        assert fixture_catalog.search_calls == []

    def test_explicit_id_not_found(self, mapper, fixture_catalog):
        result = mapper.map("Anything", explicit_id=999999)

        assert result.anilist_match is None
        assert result.confidence == 0.0
        assert fixture_catalog.search_calls == []

    def test_explicit_id_result_serializes(self, mapper):
        record = mapper.map("Anything", explicit_id=154587).to_dict()

        assert record["anilist_match"]["id"] == 154587
        assert record["confidence"] is None
        assert record["matched_at"] == "2025-01-05T12:00:00Z"
