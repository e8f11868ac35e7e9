"""Position tracking errors and exception types."""

from __future__ import annotations


class PositionTrackingError(Exception):
    """Base exception for position tracking errors."""


class InvalidTradeError(PositionTrackingError):
    """Trade carries no usable token or a non-positive quantity."""

    def __init__(self, message: str, *, trade_id: str | None = None) -> None:
        super().__init__(message)
        self.trade_id = trade_id
