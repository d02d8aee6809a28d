from __future__ import annotations

from enum import Enum


class WatchlistError(Exception):
    """Base for every failure surfaced by the watchlist; str() is user-facing."""

    code = "WATCHLIST_ERROR"

    def __init__(self, message: str, *, symbol: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.symbol = symbol


class InvalidSymbolError(WatchlistError):
    code = "INVALID_SYMBOL"


class AlreadyTrackedError(WatchlistError):
    code = "ALREADY_TRACKED"


class NotTrackedError(WatchlistError):
    code = "NOT_TRACKED"


class FetchErrorKind(str, Enum):
    TRANSPORT = "TRANSPORT"
    MALFORMED = "MALFORMED"
    NO_DATA = "NO_DATA"


class FetchError(WatchlistError):
    code = "FETCH_FAILED"

    def __init__(self, message: str, *, kind: FetchErrorKind, symbol: str | None = None) -> None:
        super().__init__(message, symbol=symbol)
        self.kind = kind


class InsufficientHistoryError(WatchlistError):
    code = "INSUFFICIENT_HISTORY"


class InvalidDataError(WatchlistError):
    code = "INVALID_DATA"


class TaskFailureError(WatchlistError):
    code = "TASK_FAILURE"
