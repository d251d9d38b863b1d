"""Search strategies for turning a raw release title into catalog queries.

Each strategy is a pure function (raw_title, context) -> Optional[str]. The
pipeline tries them in order and stops at the first one whose query is
non-empty and returns at least one catalog entry.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from animap.domain.models import CatalogEntry
from animap.logging import get_logger
from animap.normalization import TitleNormalizer, base_title_from_torrent, extract_alternate_title
from animap.normalization.tokens import LEADING_ALNUM_TITLE, TRAILING_SEASON_CLAUSE

logger = get_logger(__name__, component="pipeline")

SearchFn = Callable[[str], Sequence[CatalogEntry]]

# Shorter leading titles and fragments are too ambiguous to search for
MIN_QUERY_LENGTH = 3


@dataclass(frozen=True)
class StrategyContext:
    """Values shared by all strategies of one resolve call.

    Computed eagerly once, before any strategy runs.
    """

    raw_title: str
    normalized_title: str
    base_title: str

    @property
    def main_title(self) -> str:
        """Normalized title with a trailing season clause and everything after it removed."""
        return TRAILING_SEASON_CLAUSE.sub("", self.normalized_title).strip()


def normalized_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    return context.normalized_title


def base_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    if context.base_title != context.normalized_title:
        return context.base_title
    return None


def main_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    main_title = context.main_title
    if main_title not in (context.normalized_title, context.base_title):
        return main_title
    return None


def raw_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    return raw_title


def leading_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    """Leading alphanumeric run before a season marker or bracket, if longer than 3."""
    match = LEADING_ALNUM_TITLE.match(raw_title)
    if match:
        leading = match.group(1).strip()
        if len(leading) > MIN_QUERY_LENGTH:
            return leading
    return None


def alternate_title_query(raw_title: str, context: StrategyContext) -> Optional[str]:
    """Parenthesized alternate-language title, technical suffix removed."""
    return extract_alternate_title(raw_title)


class Strategy(NamedTuple):
    name: str
    build_query: Callable[[str, StrategyContext], Optional[str]]


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("normalized_title", normalized_title_query),
    Strategy("base_title", base_title_query),
    Strategy("main_title", main_title_query),
    Strategy("raw_title", raw_title_query),
    Strategy("leading_title", leading_title_query),
    Strategy("alternate_title", alternate_title_query),
)


class SearchStrategyPipeline:
    """Runs the ordered search strategies until one yields candidates.

    Strategies run strictly sequentially and short-circuit on the first
    non-empty result. Empty queries are skipped without calling the
    catalog. Errors raised by the search function propagate unchanged.
    """

    def __init__(
        self,
        normalizer: Optional[TitleNormalizer] = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize SearchStrategyPipeline.

        Args:
            normalizer: TitleNormalizer for the first strategy (defaults to standard vocabulary)
            strategies: Ordered strategies (defaults to DEFAULT_STRATEGIES)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.normalizer = normalizer or TitleNormalizer()
        self.strategies = tuple(strategies)
        self.logger = logger_instance or logger

    def build_context(self, raw_title: str) -> StrategyContext:
        """Compute the shared strategy context for a raw title."""
        return StrategyContext(
            raw_title=raw_title,
            normalized_title=self.normalizer.normalize(raw_title),
            base_title=base_title_from_torrent(raw_title),
        )

    def resolve(self, raw_title: str, search_fn: SearchFn) -> List[CatalogEntry]:
        """Return the candidates of the first successful strategy.

        Args:
            raw_title: Unparsed release title
            search_fn: Catalog search callable (query -> entries)

        Returns:
            Candidates in catalog order; empty list when every strategy fails
        """
        candidates, _strategy = self.resolve_with_strategy(raw_title, search_fn)
        return candidates

    def resolve_with_strategy(
        self, raw_title: str, search_fn: SearchFn
    ) -> Tuple[List[CatalogEntry], Optional[str]]:
        """Like resolve(), also returning the name of the winning strategy.

        Returns:
            (candidates, strategy name); (empty list, None) when every strategy fails
        """
        context = self.build_context(raw_title or "")

        for strategy in self.strategies:
            query = strategy.build_query(context.raw_title, context)
            if not query or not query.strip():
                continue

            results = list(search_fn(query))

            self.logger.debug(
                f"Strategy {strategy.name} returned {len(results)} candidates",
                extra={
                    "event": "pipeline.strategy.tried",
                    "strategy": strategy.name,
                    "query": query,
                    "result_count": len(results),
                },
            )

            if results:
                return results, strategy.name

        self.logger.info(
            "No search strategy produced candidates",
            extra={
                "event": "pipeline.strategy.exhausted",
                "normalized_title": context.normalized_title,
            },
        )
        return [], None
