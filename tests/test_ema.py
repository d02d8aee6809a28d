import unittest

from stockwatch.services.ema import calculate_ema


def _reference_double_seed(prices, period):
    k = 2 / (period + 1)
    ema = prices[0]
    ema = prices[0] * k + ema * (1 - k)
    out = []
    for p in prices:
        ema = p * k + ema * (1 - k)
        out.append(ema)
    return out


class CalculateEmaTest(unittest.TestCase):
    def test_fewer_prices_than_period_returns_none(self):
        self.assertIsNone(calculate_ema([float(i) for i in range(13)], 14))
        self.assertIsNone(calculate_ema([], 1))

    def test_exactly_period_prices_returns_last_five(self):
        prices = [10.0 + i for i in range(14)]

        result = calculate_ema(prices, 14)

        expected = _reference_double_seed(prices, 14)
        self.assertEqual(len(result), 5)
        self.assertEqual(result, expected[-5:])
        self.assertEqual(result[-1], expected[-1])

    def test_values_follow_recurrence_with_k_two_fifteenths(self):
        prices = [10.0 + i for i in range(14)]
        k = 2 / 15

        result = calculate_ema(prices, 14)

        for previous, current, price in zip(result, result[1:], prices[-4:]):
            self.assertAlmostEqual(current, price * k + previous * (1 - k), places=12)

    def test_double_seed_first_value_equals_first_price(self):
        prices = [20.0, 21.0, 22.0]

        result = calculate_ema(prices, 3)

        self.assertAlmostEqual(result[0], 20.0, places=12)
        self.assertAlmostEqual(result[1], 21.0 * 0.5 + 20.0 * 0.5, places=12)

    def test_fewer_than_five_values_returns_all_in_order(self):
        prices = [1.0, 2.0, 3.0]

        result = calculate_ema(prices, 2)

        self.assertEqual(len(result), 3)
        self.assertEqual(result, sorted(result))

    def test_long_series_keeps_only_most_recent_window(self):
        prices = [float(i) for i in range(1, 41)]

        result = calculate_ema(prices, 14)

        self.assertEqual(result, _reference_double_seed(prices, 14)[-5:])

    def test_single_seed_variant_records_first_price_then_recurrence(self):
        prices = [10.0, 20.0]
        k = 2 / 3

        result = calculate_ema(prices, 2, double_seed=False)

        self.assertEqual(result[0], 10.0)
        self.assertAlmostEqual(result[1], 20.0 * k + 10.0 * (1 - k), places=12)

    def test_custom_window(self):
        prices = [float(i) for i in range(1, 21)]

        result = calculate_ema(prices, 14, window=3)

        self.assertEqual(result, _reference_double_seed(prices, 14)[-3:])

    def test_non_positive_period_rejected(self):
        with self.assertRaises(ValueError):
            calculate_ema([1.0, 2.0], 0)

    def test_input_is_not_mutated(self):
        prices = [5.0] * 14
        calculate_ema(prices, 14)
        self.assertEqual(prices, [5.0] * 14)


if __name__ == "__main__":
    unittest.main()
