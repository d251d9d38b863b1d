"""Context propagation for structured logging.

Fields pushed here are injected into every log record emitted within the
scope, e.g. the mapping_id and torrent_title of the mapping call in progress.
Context uses contextvars, so concurrent mapping calls on separate threads or
tasks keep separate fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Push new context fields onto the logging context stack.

    This merges new fields with existing context. Use pop_log_context()
    to restore the previous state.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Returns:
        Token that can be used to restore previous context state

    Example:
        >>> token = push_log_context(mapping_id="abc123", torrent_title="Show S01")
        >>> # ... do work, all logs will include mapping_id and torrent_title ...
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state captured by token."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields.

    This is primarily useful for testing.
    """
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Automatically pushes context on entry and pops on exit, even if
    an exception occurs.

    Example:
        >>> with log_context(mapping_id="abc123"):
        ...     logger.info("Resolving title")  # includes mapping_id
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False  # Don't suppress exceptions
