from __future__ import annotations

from typing import Protocol

from stockwatch.schemas.market import LatestQuote


class MarketDataGateway(Protocol):
    """Per-symbol market data source. Failures raise ``FetchError``."""

    def fetch_latest(self, symbol: str) -> LatestQuote: ...

    def fetch_historical(self, symbol: str) -> list[float]: ...


def percentage_change(open_price: float, close_price: float) -> float:
    if open_price == 0:
        return float("nan")
    return ((close_price - open_price) / open_price) * 100.0
