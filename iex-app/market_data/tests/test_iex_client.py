from datetime import date
from decimal import Decimal
from unittest.mock import Mock, patch
import json
import requests
from django.test import SimpleTestCase
from market_data.exceptions import IEXApiError
from market_data.iex_client import IEXApiClient

BASE_URL = "https://iex.test/stable"


def _response(body=None, status_code=200, text=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text if text is not None else json.dumps(body)
    if body is None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
    else:
        response.json.return_value = body
    return response


@patch('market_data.iex_client.requests.get')
class IEXApiClientTest(SimpleTestCase):
    def setUp(self):
        self.client = IEXApiClient(base_url=BASE_URL + "/", token="test_token", timeout=5)

    def test_get_all_symbols(self, mock_get):
        mock_get.return_value = _response([
            {"symbol": "A", "exchange": "NYS", "name": "Agilent Technologies Inc.", "date": "2021-10-18",
             "type": "cs", "iexId": "IEX_46574843354B2D52", "region": "US", "currency": "USD", "isEnabled": True},
            {"symbol": "AA", "name": "Alcoa Corp"},
        ])

        symbols = self.client.get_all_symbols()

        mock_get.assert_called_once_with(f"{BASE_URL}/ref-data/symbols", params={'token': 'test_token'}, timeout=5)
        self.assertEqual([s.symbol for s in symbols], ['A', 'AA'])
        self.assertEqual(symbols[0].iex_id, "IEX_46574843354B2D52")
        self.assertTrue(symbols[0].is_enabled)
        self.assertIsNone(symbols[1].exchange)

    def test_token_is_omitted_when_not_configured(self, mock_get):
        mock_get.return_value = _response([])
        client = IEXApiClient(base_url=BASE_URL, token=None)

        client.get_all_symbols()

        self.assertEqual(mock_get.call_args.kwargs['params'], {})
        self.assertEqual(mock_get.call_args.kwargs['timeout'], 10)

    def test_last_traded_price_batches_symbols(self, mock_get):
        mock_get.return_value = _response([
            {"symbol": "FB", "price": 186.3011, "size": 100, "time": 1634587199914},
            {"symbol": "AAPL", "price": 146.55, "size": 50, "time": 1634587199000},
        ])

        prices = self.client.get_last_traded_price_for_symbols(['FB', 'AAPL'])

        mock_get.assert_called_once_with(
            f"{BASE_URL}/tops/last",
            params={'symbols': 'FB,AAPL', 'token': 'test_token'},
            timeout=5,
        )
        self.assertEqual(prices[0].symbol, 'FB')
        self.assertEqual(prices[0].price, Decimal('186.3011'))
        self.assertEqual(prices[0].size, 100)
        self.assertEqual(prices[0].time, 1634587199914)

    def test_historical_price_for_date(self, mock_get):
        mock_get.return_value = _response([
            {"close": 335.34, "high": 335.89, "low": 327.5, "open": 328.95,
             "volume": 21585018, "date": "2021-10-18", "symbol": "IGNORED"},
        ])

        prices = self.client.get_historical_price_for_date('FB', '20211018')

        mock_get.assert_called_once_with(
            f"{BASE_URL}/stock/FB/chart/date/20211018",
            params={'chartByDay': 'true', 'token': 'test_token'},
            timeout=5,
        )
        self.assertEqual(len(prices), 1)
        price = prices[0]
        self.assertIsNone(price.pk)
        self.assertEqual(price.symbol, 'FB')
        self.assertEqual(price.date, date(2021, 10, 18))
        self.assertEqual(price.close, Decimal('335.34'))
        self.assertEqual(price.high, Decimal('335.89'))
        self.assertEqual(price.low, Decimal('327.5'))
        self.assertEqual(price.open, Decimal('328.95'))
        self.assertEqual(price.volume, 21585018)

    def test_historical_prices_for_range(self, mock_get):
        mock_get.return_value = _response([
            {"close": 331.62, "high": 332.15, "low": 323.2, "open": 327.49, "volume": 20786502, "date": "2021-11-03"},
            {"close": 332.0, "high": 333.0, "low": 325.0, "open": 330.0, "volume": 18000000, "date": "2021-11-04"},
        ])

        prices = self.client.get_historical_prices_for_range('FB', '5d')

        mock_get.assert_called_once_with(f"{BASE_URL}/stock/FB/chart/5d", params={'token': 'test_token'}, timeout=5)
        self.assertEqual([p.date for p in prices], [date(2021, 11, 3), date(2021, 11, 4)])

    def test_empty_upstream_result_is_not_an_error(self, mock_get):
        mock_get.return_value = _response([])
        self.assertEqual(self.client.get_historical_price_for_date('FB', '20211016'), [])

    def test_timeout_raises_iex_api_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("read timed out")
        with self.assertRaises(IEXApiError) as ctx:
            self.client.get_all_symbols()
        self.assertIsNone(ctx.exception.status_code)

    def test_connection_error_raises_iex_api_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(IEXApiError):
            self.client.get_last_traded_price_for_symbols(['FB'])

    def test_non_2xx_raises_with_status_code(self, mock_get):
        mock_get.return_value = _response(text="Unknown symbol", status_code=404)
        with self.assertRaises(IEXApiError) as ctx:
            self.client.get_historical_prices_for_range('FBFB', '5d')
        self.assertEqual(ctx.exception.status_code, 404)

    def test_non_json_body_raises(self, mock_get):
        mock_get.return_value = _response(text="<html>oops</html>")
        with self.assertRaises(IEXApiError):
            self.client.get_all_symbols()

    def test_non_list_body_raises(self, mock_get):
        mock_get.return_value = _response({"error": "unexpected"})
        with self.assertRaises(IEXApiError):
            self.client.get_all_symbols()

    def test_malformed_chart_entry_raises(self, mock_get):
        mock_get.return_value = _response([{"close": 1.0, "volume": 10}])
        with self.assertRaises(IEXApiError):
            self.client.get_historical_prices_for_range('FB', '5d')

    def test_null_last_traded_price_raises(self, mock_get):
        mock_get.return_value = _response([{"symbol": "FB", "price": None, "size": 100, "time": 1634587199914}])
        with self.assertRaises(IEXApiError):
            self.client.get_last_traded_price_for_symbols(['FB'])

    def test_missing_last_traded_fields_are_not_defaulted(self, mock_get):
        mock_get.return_value = _response([{"symbol": "FB"}])
        with self.assertRaises(IEXApiError):
            self.client.get_last_traded_price_for_symbols(['FB'])

    def test_non_object_entries_raise(self, mock_get):
        mock_get.return_value = _response(["FB", "AAPL"])
        with self.assertRaises(IEXApiError):
            self.client.get_last_traded_price_for_symbols(['FB', 'AAPL'])
        with self.assertRaises(IEXApiError):
            self.client.get_all_symbols()
        with self.assertRaises(IEXApiError):
            self.client.get_historical_prices_for_range('FB', '5d')
