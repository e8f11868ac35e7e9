"""Configuration for the FIFO position tracker."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _env_positive_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {value})")
    return value


@dataclass(frozen=True)
class TrackerConfig:
    """Configuration for `FifoPositionTracker`."""

    parallel_wallets: bool = False
    max_workers: int | None = None
    skip_foreign_wallet_trades: bool = False

    @classmethod
    def from_env(cls) -> TrackerConfig:
        """Load configuration from environment variables.

        Optional:
            TRADE_JOURNAL_PARALLEL_WALLETS: Process wallets on worker threads (default: false)
            TRADE_JOURNAL_MAX_WORKERS: Thread pool size for parallel mode (default: executor default)
            TRADE_JOURNAL_SKIP_FOREIGN_WALLET_TRADES: Skip trades whose wallet differs from the
                requested wallet in single-wallet calculations (default: false)
        """
        return cls(
            parallel_wallets=_env_bool("TRADE_JOURNAL_PARALLEL_WALLETS", False),
            max_workers=_env_positive_int("TRADE_JOURNAL_MAX_WORKERS"),
            skip_foreign_wallet_trades=_env_bool("TRADE_JOURNAL_SKIP_FOREIGN_WALLET_TRADES", False),
        )
