"""Mapping orchestration: raw release title to catalog match."""

import time
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from animap.catalog.base import CatalogClient
from animap.domain.models import MappingResult
from animap.logging import get_logger
from animap.logging.context import log_context
from animap.matching.engine import ConfidenceCalculator, MatchSelector
from animap.normalization import TitleNormalizer
from animap.utils.timestamps import utc_now

from .strategies import SearchStrategyPipeline

logger = get_logger(__name__, component="pipeline")


class TitleMapper:
    """
    Maps one raw release title to a catalog entry.

    The mapper coordinates the search strategy pipeline, candidate selection
    and confidence scoring. It holds no per-call state and can be shared by
    concurrent callers.

    Catalog errors are not caught: they abort the mapping call and reach the
    caller unchanged.
    """

    def __init__(
        self,
        catalog: CatalogClient,
        normalizer: Optional[TitleNormalizer] = None,
        pipeline: Optional[SearchStrategyPipeline] = None,
        selector: Optional[MatchSelector] = None,
        confidence_calculator: Optional[ConfidenceCalculator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the mapper.

        Args:
            catalog: Catalog client (search and by-id lookup)
            normalizer: Shared TitleNormalizer (defaults to standard vocabulary)
            pipeline: Search strategy pipeline
            selector: Candidate selector
            confidence_calculator: Confidence scorer
            clock: Time source for matched_at
        """
        self.catalog = catalog
        self.normalizer = normalizer or TitleNormalizer()
        self.pipeline = pipeline or SearchStrategyPipeline(normalizer=self.normalizer)
        self.selector = selector or MatchSelector(normalizer=self.normalizer)
        self.confidence_calculator = confidence_calculator or ConfidenceCalculator(
            normalizer=self.normalizer
        )
        self.clock = clock

    def map(self, raw_title: str, explicit_id: Optional[int] = None) -> MappingResult:
        """
        Map a raw release title to the catalog.

        With an explicit ID only the by-id lookup runs; no similarity is
        computed and confidence is None. Otherwise:
        1. Search with the strategy pipeline
        2. Select a candidate
        3. Compute the unboosted confidence of the selection

        Args:
            raw_title: Unparsed release title
            explicit_id: Catalog ID the caller already trusts

        Returns:
            MappingResult; a missing match has anilist_match=None and confidence 0.0

        Raises:
            CatalogError: If the catalog client fails
        """
        started = time.monotonic()

        with log_context(mapping_id=uuid4().hex, torrent_title=raw_title):
            if explicit_id is not None:
                entry = self.catalog.get_by_id(explicit_id)
                result = MappingResult(
                    torrent_title=raw_title,
                    anilist_match=entry,
                    confidence=None if entry is not None else 0.0,
                    matched_at=self.clock(),
                )
                self._log_completed(result, started, mode="explicit_id", strategy=None)
                return result

            candidates, strategy = self.pipeline.resolve_with_strategy(raw_title, self.catalog.search)

            match = self.selector.select(raw_title, candidates) if candidates else None
            confidence = (
                self.confidence_calculator.confidence(raw_title, match) if match is not None else 0.0
            )

            result = MappingResult(
                torrent_title=raw_title,
                anilist_match=match,
                confidence=confidence,
                matched_at=self.clock(),
            )
            self._log_completed(result, started, mode="search", strategy=strategy)
            return result

    def _log_completed(
        self,
        result: MappingResult,
        started: float,
        mode: str,
        strategy: Optional[str],
    ) -> None:
        logger.info(
            "Mapping completed" if result.is_match else "Mapping completed without match",
            extra={
                "event": "mapping.run.completed",
                "mode": mode,
                "strategy": strategy,
                "matched": result.is_match,
                "anilist_id": result.anilist_match.id if result.anilist_match else None,
                "confidence": round(result.confidence, 4) if result.confidence is not None else None,
                "duration_ms": round((time.monotonic() - started) * 1000, 2),
            },
        )
