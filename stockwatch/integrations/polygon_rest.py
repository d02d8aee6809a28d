from __future__ import annotations

from datetime import date
from typing import Any, Callable, Optional

import requests

from stockwatch.errors import FetchError, FetchErrorKind
from stockwatch.schemas.market import LatestQuote
from stockwatch.services.market_gateway import percentage_change
from stockwatch.services.trading_days import historical_window, market_today, prior_trading_day


class PolygonRestClient:
    """Polygon.io daily open/close and aggregates client."""

    _DEFAULT_BASE_URL = "https://api.polygon.io"

    def __init__(
        self,
        api_key: str,
        *,
        session: Optional[Any] = None,
        base_url: Optional[str] = None,
        timeout_sec: float = 5.0,
        today_fn: Optional[Callable[[], date]] = None,
    ) -> None:
        if not api_key:
            raise ValueError("Polygon client requires an API key")

        self.api_key = api_key
        self.base_url = (base_url or self._DEFAULT_BASE_URL).rstrip("/")
        self.session = session or requests
        self.timeout_sec = timeout_sec
        self._today_fn = today_fn or market_today

    @staticmethod
    def _to_float(value: Any, default: float = 0.0) -> float:
        try:
            if value is None or value == "" or isinstance(value, bool):
                return default
            return float(value)
        except (TypeError, ValueError):
            return default

    def _get_json(self, symbol: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                params={**params, "apiKey": self.api_key},
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            print(f"[POLYGON][request_error] symbol={symbol} path={path} error={exc}", flush=True)
            raise FetchError(
                f"request for {symbol} failed: {exc}",
                kind=FetchErrorKind.TRANSPORT,
                symbol=symbol,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(
                f"response for {symbol} is not valid JSON",
                kind=FetchErrorKind.MALFORMED,
                symbol=symbol,
            ) from exc
        if not isinstance(payload, dict):
            raise FetchError(
                f"response for {symbol} must be an object",
                kind=FetchErrorKind.MALFORMED,
                symbol=symbol,
            )
        return payload

    def fetch_latest(self, symbol: str) -> LatestQuote:
        day = prior_trading_day(self._today_fn())
        payload = self._get_json(
            symbol,
            f"/v1/open-close/{symbol}/{day.isoformat()}",
            {"adjusted": "true"},
        )

        open_price = self._to_float(payload.get("open"))
        close_price = self._to_float(payload.get("close"))
        return LatestQuote(
            symbol=symbol,
            open=open_price,
            close=close_price,
            percentage_change=percentage_change(open_price, close_price),
        )

    def fetch_historical(self, symbol: str) -> list[float]:
        start, end = historical_window(self._today_fn())
        payload = self._get_json(
            symbol,
            f"/v2/aggs/ticker/{symbol}/range/1/day/{start.isoformat()}/{end.isoformat()}",
            {"adjusted": "true", "sort": "asc"},
        )

        results = payload.get("results")
        if not isinstance(results, list):
            raise FetchError(
                f"no historical data available for {symbol}",
                kind=FetchErrorKind.NO_DATA,
                symbol=symbol,
            )

        closes: list[float] = []
        for row in results:
            if not isinstance(row, dict):
                continue
            close = row.get("c")
            # skip bars without a numeric close instead of zero-filling them
            if isinstance(close, (int, float)) and not isinstance(close, bool):
                closes.append(float(close))

        if not closes:
            raise FetchError(
                f"no valid close prices found for {symbol}",
                kind=FetchErrorKind.NO_DATA,
                symbol=symbol,
            )
        return closes
