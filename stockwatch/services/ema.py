from __future__ import annotations

from typing import Sequence

DEFAULT_EMA_PERIOD = 14
DEFAULT_EMA_WINDOW = 5


def _step(price: float, previous: float, k: float) -> float:
    return price * k + previous * (1 - k)


def calculate_ema(
    prices: Sequence[float],
    period: int,
    *,
    window: int = DEFAULT_EMA_WINDOW,
    double_seed: bool = True,
) -> list[float] | None:
    """Return the most recent ``window`` EMA values, oldest first.

    ``None`` means there are fewer prices than ``period``.

    With ``double_seed`` (the default) the state is seeded with the first
    price, the first price is fed once more and dropped, then every price is
    fed and recorded. This keeps output identical to the historical
    watchlist numbers. ``double_seed=False`` records the first price as-is
    and runs the recurrence over the rest.
    """
    if period < 1:
        raise ValueError("period must be a positive integer")
    if window < 1:
        raise ValueError("window must be a positive integer")
    if len(prices) < period:
        return None

    k = 2.0 / (period + 1)
    values: list[float] = []

    if double_seed:
        ema = float(prices[0])
        ema = _step(float(prices[0]), ema, k)
        for price in prices:
            ema = _step(float(price), ema, k)
            values.append(ema)
    else:
        ema = float(prices[0])
        values.append(ema)
        for price in prices[1:]:
            ema = _step(float(price), ema, k)
            values.append(ema)

    return values[-window:]
