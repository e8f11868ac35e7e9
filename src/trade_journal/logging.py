"""Logging configuration helpers (structlog)."""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOG_LEVEL_ENV_VAR = "TRADE_JOURNAL_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def resolve_log_level(raw: str | None) -> int:
    """
    Turn a level name ("info") or number ("20") into a `logging` level.

    Unset or blank values give WARNING. Unrecognized values also give WARNING, after a
    notice on stderr naming the rejected value.
    """
    if raw is None or not raw.strip():
        return DEFAULT_LOG_LEVEL

    value = raw.strip().upper()
    if value.isdigit():
        return int(value)

    level = logging.getLevelNamesMapping().get(value)
    if level is None:
        print(
            f"Invalid {LOG_LEVEL_ENV_VAR}={raw!r}; falling back to WARNING",
            file=sys.__stderr__,
            flush=True,
        )
        return DEFAULT_LOG_LEVEL
    return level


def configure_structlog(level: str | None = None) -> int:
    """
    Configure structlog for this package and return the level applied.

    Default behavior:
    - Logs go to stderr (keeps stdout clean for CLI output and `--json`).
    - Level comes from `level` when given, else `TRADE_JOURNAL_LOG_LEVEL`, else WARNING.

    Called once at import; the CLI calls it again after loading `.env` so a level set
    there takes effect.
    """
    resolved = resolve_log_level(level if level is not None else os.getenv(LOG_LEVEL_ENV_VAR))

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(resolved),
        logger_factory=structlog.PrintLoggerFactory(file=sys.__stderr__),
        cache_logger_on_first_use=True,
    )
    return resolved
