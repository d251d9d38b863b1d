"""Tests for the search strategy pipeline."""

import logging

import pytest

from animap.catalog.exceptions import CatalogError
from animap.pipeline import DEFAULT_STRATEGIES, SearchStrategyPipeline, Strategy, StrategyContext
from animap.pipeline.strategies import (
    base_title_query,
    leading_title_query,
    main_title_query,
)
from tests.helpers import FixtureCatalog, make_entry

SOLO_LEVELING = (
    "Solo Leveling S02 1080p CR WEB-DL DUAL AAC2.0 H 264-VARYG "
    "(Ore dake Level Up na Ken, Dual-Audio, Multi-Subs)"
)
SOLO_LEVELING_NORMALIZED = "Solo Leveling S02 Ore dake Level Up na Ken"
SOLO_LEVELING_BASE = "Solo Leveling CR WEB-DL DUAL AAC2.0 H 264-VARYG"


@pytest.fixture
def pipeline():
    return SearchStrategyPipeline()


@pytest.fixture
def frieren():
    return make_entry(154587, romaji="Sousou no Frieren", english="Frieren: Beyond Journey's End")


class TestStrategyContext:
    """Tests for the shared per-call context."""

    def test_build_context(self, pipeline):
        context = pipeline.build_context(SOLO_LEVELING)

        assert context.raw_title == SOLO_LEVELING
        assert context.normalized_title == SOLO_LEVELING_NORMALIZED
        assert context.base_title == SOLO_LEVELING_BASE

    def test_main_title_drops_season_clause(self):
        context = StrategyContext(
            raw_title="", normalized_title=SOLO_LEVELING_NORMALIZED, base_title=""
        )

        assert context.main_title == "Solo Leveling"

    def test_main_title_without_season(self):
        context = StrategyContext(raw_title="", normalized_title="Frieren", base_title="")

        assert context.main_title == "Frieren"


class TestQueryBuilders:
    """Tests for individual strategy query builders."""

    def test_base_title_skipped_when_same_as_normalized(self):
        context = StrategyContext("Frieren 1080p", "Frieren", "Frieren")

        assert base_title_query(context.raw_title, context) is None

    def test_main_title_skipped_when_same_as_base(self):
        context = StrategyContext("Frieren S02 1080p", "Frieren S02", "Frieren")

        assert main_title_query(context.raw_title, context) is None

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Frieren S02 1080p", "Frieren"),
            ("Attack on Titan Season 3 [1080p]", "Attack on Titan"),
            ("Your Name (Kimi no Na wa)", "Your Name"),
            ("One S02", None),
            ("[Group] Show S01", None),
            ("Frieren 1080p", None),
        ],
    )
    def test_leading_title(self, raw, expected):
        context = StrategyContext(raw, "", "")

        assert leading_title_query(raw, context) == expected

    def test_default_strategy_order(self):
        assert [strategy.name for strategy in DEFAULT_STRATEGIES] == [
            "normalized_title",
            "base_title",
            "main_title",
            "raw_title",
            "leading_title",
            "alternate_title",
        ]


class TestSearchStrategyPipeline:
    """Tests for SearchStrategyPipeline.resolve."""

    def test_all_strategies_fail(self, pipeline):
        catalog = FixtureCatalog()

        candidates, strategy = pipeline.resolve_with_strategy("Frieren S02 1080p", catalog.search)

        assert candidates == []
        assert strategy is None
        assert catalog.search_calls == ["Frieren S02", "Frieren", "Frieren S02 1080p", "Frieren"]

    def test_first_strategy_short_circuits(self, pipeline, frieren):
        catalog = FixtureCatalog()
        catalog.add_search("Frieren S02", frieren)

        candidates, strategy = pipeline.resolve_with_strategy("Frieren S02 1080p", catalog.search)

        assert candidates == [frieren]
        assert strategy == "normalized_title"
        assert catalog.search_calls == ["Frieren S02"]

    def test_base_title_strategy(self, pipeline, frieren):
        catalog = FixtureCatalog()
        catalog.add_search("Frieren", frieren)

        candidates, strategy = pipeline.resolve_with_strategy("Frieren S02 1080p", catalog.search)

        assert candidates == [frieren]
        assert strategy == "base_title"
        assert catalog.search_calls == ["Frieren S02", "Frieren"]

    def test_main_title_strategy(self, pipeline):
        entry = make_entry(151807, english="Solo Leveling")
        catalog = FixtureCatalog()
        catalog.add_search("Solo Leveling", entry)

        candidates, strategy = pipeline.resolve_with_strategy(SOLO_LEVELING, catalog.search)

        assert candidates == [entry]
        assert strategy == "main_title"
        assert catalog.search_calls == [
            SOLO_LEVELING_NORMALIZED,
            SOLO_LEVELING_BASE,
            "Solo Leveling",
        ]

    def test_alternate_title_strategy_runs_last(self, pipeline):
        entry = make_entry(151807, romaji="Ore dake Level Up na Ken")
        catalog = FixtureCatalog()
        catalog.add_search("Ore dake Level Up na Ken", entry)

        candidates, strategy = pipeline.resolve_with_strategy(SOLO_LEVELING, catalog.search)

        assert candidates == [entry]
        assert strategy == "alternate_title"
        assert catalog.search_calls == [
            SOLO_LEVELING_NORMALIZED,
            SOLO_LEVELING_BASE,
            "Solo Leveling",
            SOLO_LEVELING,
            "Solo Leveling",
            "Ore dake Level Up na Ken",
        ]

    def test_candidates_keep_catalog_order(self, pipeline):
        first = make_entry(1, romaji="Frieren")
        second = make_entry(2, romaji="Frieren Beyond")
        catalog = FixtureCatalog()
        catalog.add_search("Frieren", first, second)

        assert pipeline.resolve("Frieren 1080p", catalog.search) == [first, second]

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_blank_title_never_searches(self, pipeline, raw):
        catalog = FixtureCatalog()

        assert pipeline.resolve(raw, catalog.search) == []
        assert catalog.search_calls == []

    def test_search_errors_propagate(self, pipeline):
        catalog = FixtureCatalog(error=CatalogError("catalog unavailable"))

        with pytest.raises(CatalogError, match="catalog unavailable"):
            pipeline.resolve("Frieren S02 1080p", catalog.search)

        assert catalog.search_calls == ["Frieren S02"]

    def test_custom_strategies(self, frieren):
        pipeline = SearchStrategyPipeline(
            strategies=[Strategy("upper", lambda raw, context: raw.upper())]
        )
        catalog = FixtureCatalog()
        catalog.add_search("FRIEREN", frieren)

        candidates, strategy = pipeline.resolve_with_strategy("Frieren", catalog.search)

        assert candidates == [frieren]
        assert strategy == "upper"

    def test_logs_each_attempt(self, caplog):
        test_logger = logging.getLogger("test_strategies_pipeline")
        pipeline = SearchStrategyPipeline(logger_instance=test_logger)
        catalog = FixtureCatalog()

        with caplog.at_level(logging.DEBUG, logger="test_strategies_pipeline"):
            pipeline.resolve("Frieren S02 1080p", catalog.search)

        tried = [r for r in caplog.records if getattr(r, "event", None) == "pipeline.strategy.tried"]
        assert [r.strategy for r in tried] == ["normalized_title", "base_title", "raw_title", "leading_title"]
        assert any(getattr(r, "event", None) == "pipeline.strategy.exhausted" for r in caplog.records)
