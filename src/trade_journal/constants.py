"""Named constants for position tracking policy.

Centralizes literals shared between the tracker, the grouping validator, and the CLI.
"""

from __future__ import annotations

# =============================================================================
# Diagnostics
# =============================================================================

# Prefix for the single `errors` entry produced when a calculation fails outside
# the per-trade loop. Callers match on it to tell partial failures from total ones.
FATAL_ERROR_PREFIX: str = "Fatal error in FIFO calculation"

# =============================================================================
# Manual grouping
# =============================================================================

# A position groups trades of one token against (at most) one quote token.
MAX_TOKENS_PER_GROUP: int = 2

# =============================================================================
# Token symbols
# =============================================================================

# Unknown token addresses are displayed as "<first N>...<last N>".
SYMBOL_ABBREVIATION_CHARS: int = 4

__all__ = [
    "FATAL_ERROR_PREFIX",
    "MAX_TOKENS_PER_GROUP",
    "SYMBOL_ABBREVIATION_CHARS",
]
