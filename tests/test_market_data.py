import unittest
from datetime import date, datetime, timezone
from unittest import mock

import requests

from etf_pricer.errors import ProviderError
from etf_pricer.market_data import YahooChartClient


def _ts(day: date) -> int:
    return int(datetime(day.year, day.month, day.day, 13, 30, tzinfo=timezone.utc).timestamp())


def _response(payload, status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestYahooChartClient(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.session.headers = {}
        self.client = YahooChartClient(session=self.session, base_url="https://example.test/chart/", timeout=2.5)

    def test_quote_reads_regular_market_price(self):
        self.session.get.return_value = _response(
            {"chart": {"result": [{"meta": {"regularMarketPrice": 187.42}}], "error": None}}
        )
        quote = self.client.get_quote("AAPL")
        self.assertEqual(quote.symbol, "AAPL")
        self.assertEqual(quote.spot_price, 187.42)

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://example.test/chart/AAPL")
        self.assertEqual(kwargs["timeout"], 2.5)
        self.assertIn("User-Agent", self.session.headers)

    def test_quote_without_price(self):
        self.session.get.return_value = _response({"chart": {"result": [{"meta": {}}], "error": None}})
        self.assertIsNone(self.client.get_quote("AAPL").spot_price)

    def test_history_parses_and_sorts_closes(self):
        days = [date(2026, 10, 1), date(2026, 9, 30), date(2026, 10, 2)]
        self.session.get.return_value = _response({
            "chart": {
                "result": [{
                    "meta": {"regularMarketPrice": 101.0},
                    "timestamp": [_ts(d) for d in days],
                    "indicators": {"quote": [{"close": [100.5, 99.0, None]}]},
                }],
                "error": None,
            }
        })
        bars = self.client.get_history("XOM", date(2026, 9, 18), date(2026, 10, 18))

        self.assertEqual([b.date for b in bars], [date(2026, 9, 30), date(2026, 10, 1)])
        self.assertEqual([b.close for b in bars], [99.0, 100.5])

        params = self.session.get.call_args[1]["params"]
        self.assertEqual(params["interval"], "1d")
        self.assertEqual(params["period1"], int(datetime(2026, 9, 18, tzinfo=timezone.utc).timestamp()))
        self.assertEqual(params["period2"], int(datetime(2026, 10, 19, tzinfo=timezone.utc).timestamp()))

    def test_provider_error_payload(self):
        self.session.get.return_value = _response(
            {"chart": {"result": None, "error": {"code": "Not Found", "description": "No data found"}}},
            status_code=404,
        )
        with self.assertRaises(ProviderError) as ctx:
            self.client.get_quote("NOPE")
        self.assertEqual(ctx.exception.symbol, "NOPE")
        self.assertIn("No data found", str(ctx.exception))

    def test_transport_failure(self):
        self.session.get.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(ProviderError) as ctx:
            self.client.get_history("AAPL", date(2026, 9, 18), date(2026, 10, 18))
        self.assertIsInstance(ctx.exception.cause, requests.Timeout)

    def test_invalid_json(self):
        response = _response(None, status_code=502)
        response.json.side_effect = ValueError("Expecting value")
        self.session.get.return_value = response
        with self.assertRaises(ProviderError):
            self.client.get_quote("AAPL")

    def test_http_error_without_chart_error(self):
        self.session.get.return_value = _response({"chart": {"result": [], "error": None}}, status_code=500)
        with self.assertRaises(ProviderError):
            self.client.get_quote("AAPL")

    def test_mismatched_series(self):
        self.session.get.return_value = _response({
            "chart": {
                "result": [{"timestamp": [_ts(date(2026, 10, 1))], "indicators": {"quote": [{"close": [1.0, 2.0]}]}}],
                "error": None,
            }
        })
        with self.assertRaises(ProviderError):
            self.client.get_history("AAPL", date(2026, 9, 18), date(2026, 10, 18))


if __name__ == '__main__':
    unittest.main()
