"""Token symbol lookup.

The tracker only knows token addresses. Display symbols come from a resolver the
caller supplies, so no chain-specific token registry is baked in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from trade_journal.constants import SYMBOL_ABBREVIATION_CHARS

if TYPE_CHECKING:
    from collections.abc import Mapping


class TokenSymbolResolver(Protocol):
    """Protocol for mapping token addresses to display symbols."""

    def resolve(self, token: str) -> str:
        """Return the display symbol for a token address."""
        ...


def abbreviate_address(token: str, chars: int = SYMBOL_ABBREVIATION_CHARS) -> str:
    """Shorten a token address to `abcd...wxyz`; short values are returned unchanged."""
    if len(token) <= chars * 2 + 3:
        return token
    return f"{token[:chars]}...{token[-chars:]}"


class AbbreviatingSymbolResolver:
    """Default resolver: display every token as its abbreviated address."""

    def resolve(self, token: str) -> str:
        return abbreviate_address(token)


class StaticSymbolResolver:
    """Resolver backed by a caller-supplied address -> symbol mapping.

    Unknown addresses fall back to `fallback` (abbreviation by default).
    """

    def __init__(
        self,
        symbols: Mapping[str, str],
        fallback: TokenSymbolResolver | None = None,
    ) -> None:
        self._symbols = dict(symbols)
        self._fallback = fallback or AbbreviatingSymbolResolver()

    def resolve(self, token: str) -> str:
        symbol = self._symbols.get(token)
        if symbol:
            return symbol
        return self._fallback.resolve(token)
