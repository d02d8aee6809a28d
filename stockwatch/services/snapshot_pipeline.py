from __future__ import annotations

import math
import time

from stockwatch.errors import InsufficientHistoryError, InvalidDataError
from stockwatch.schemas.market import LatestQuote, MarketSnapshot
from stockwatch.services.ema import DEFAULT_EMA_PERIOD, DEFAULT_EMA_WINDOW, calculate_ema
from stockwatch.services.market_gateway import MarketDataGateway


def validate_quote(quote: LatestQuote) -> None:
    fields = (quote.open, quote.close, quote.percentage_change)
    if any(not math.isfinite(value) for value in fields):
        raise InvalidDataError(f"Received non-numeric market data for {quote.symbol}.", symbol=quote.symbol)
    if quote.open == 0 or quote.close == 0:
        raise InvalidDataError(f"Received zero open/close for {quote.symbol}.", symbol=quote.symbol)


class SnapshotPipeline:
    """historical -> EMA -> latest -> validate, strictly in that order."""

    def __init__(
        self,
        gateway: MarketDataGateway,
        *,
        ema_period: int = DEFAULT_EMA_PERIOD,
        ema_window: int = DEFAULT_EMA_WINDOW,
        ema_double_seed: bool = True,
    ) -> None:
        self.gateway = gateway
        self.ema_period = ema_period
        self.ema_window = ema_window
        self.ema_double_seed = ema_double_seed

    def build(self, symbol: str) -> MarketSnapshot:
        history = self.gateway.fetch_historical(symbol)
        recent_ema = calculate_ema(
            history,
            self.ema_period,
            window=self.ema_window,
            double_seed=self.ema_double_seed,
        )
        if recent_ema is None:
            raise InsufficientHistoryError(
                f"Not enough history for {symbol} to compute EMA "
                f"({len(history)} of {self.ema_period} data points).",
                symbol=symbol,
            )

        quote = self.gateway.fetch_latest(symbol)
        validate_quote(quote)

        return MarketSnapshot(
            symbol=symbol,
            open=quote.open,
            close=quote.close,
            percentage_change=quote.percentage_change,
            recent_ema=recent_ema,
            updated_at=int(time.time()),
        )
