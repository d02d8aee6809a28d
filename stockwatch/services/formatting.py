from __future__ import annotations

from stockwatch.schemas.market import MarketSnapshot
from stockwatch.schemas.watchlist import WatchlistRow


def format_currency(value: float) -> str:
    return f"${value:.2f}"


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def format_ema(values: list[float]) -> str:
    return "[" + ", ".join(f"{v:.2f}" for v in values) + "]"


def to_row(snapshot: MarketSnapshot) -> WatchlistRow:
    return WatchlistRow(
        symbol=snapshot.symbol,
        open=format_currency(snapshot.open),
        close=format_currency(snapshot.close),
        change=format_percentage(snapshot.percentage_change),
        ema=format_ema(snapshot.recent_ema),
    )
