import unittest
from datetime import date, datetime
from zoneinfo import ZoneInfo

from stockwatch.services.trading_days import historical_window, market_today, prior_trading_day


class TestTradingDays(unittest.TestCase):
    def test_prior_trading_day_midweek_is_yesterday(self):
        self.assertEqual(prior_trading_day(date(2026, 10, 15)), date(2026, 10, 14))

    def test_prior_trading_day_skips_weekend(self):
        self.assertEqual(prior_trading_day(date(2026, 10, 19)), date(2026, 10, 16))
        self.assertEqual(prior_trading_day(date(2026, 10, 18)), date(2026, 10, 16))

    def test_historical_window_starts_at_month_start(self):
        self.assertEqual(historical_window(date(2026, 10, 14)), (date(2026, 10, 1), date(2026, 10, 13)))

    def test_market_today_uses_market_timezone(self):
        # 02:00 UTC on the 15th is still the 14th in New York
        now = datetime(2026, 10, 15, 2, 0, tzinfo=ZoneInfo("UTC"))
        self.assertEqual(market_today(now=now), date(2026, 10, 14))


if __name__ == "__main__":
    unittest.main()
