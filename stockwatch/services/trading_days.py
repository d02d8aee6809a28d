from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

US_EASTERN = ZoneInfo("America/New_York")
_SATURDAY = 5


def market_today(tz: ZoneInfo = US_EASTERN, now: datetime | None = None) -> date:
    """Return today's date in the market timezone."""
    current = now or datetime.now(tz)

    if current.tzinfo is None:
        local_now = current.replace(tzinfo=tz)
    else:
        local_now = current.astimezone(tz)

    return local_now.date()


def prior_trading_day(today: date) -> date:
    """Most recent weekday strictly before ``today``. Exchange holidays are not modelled."""
    day = today - timedelta(days=1)
    while day.weekday() >= _SATURDAY:
        day -= timedelta(days=1)
    return day


def historical_window(today: date) -> tuple[date, date]:
    return today.replace(day=1), prior_trading_day(today)
