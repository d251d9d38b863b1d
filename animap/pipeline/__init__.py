"""Mapping pipeline: search strategies and orchestration."""

from .runner import TitleMapper
from .strategies import (
    DEFAULT_STRATEGIES,
    SearchStrategyPipeline,
    Strategy,
    StrategyContext,
)

__all__ = [
    "TitleMapper",
    "SearchStrategyPipeline",
    "Strategy",
    "StrategyContext",
    "DEFAULT_STRATEGIES",
]
