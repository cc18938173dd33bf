# iex-app/market_data/iex_client.py
import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
import requests
from .entities import IexLastTradedPrice, IexSymbol
from .exceptions import IEXApiError
from .models import HistoricalPrice

logger = logging.getLogger(__name__)


class IEXApiClient:
    """
    A client for the IEX Cloud market data API.

    Each public method maps to one upstream endpoint and returns parsed
    records. Failures are never retried here: timeouts, connection problems,
    non-2xx responses and malformed payloads all raise IEXApiError.

    Attributes:
        base_url (str): The IEX API root, e.g. 'https://cloud.iexapis.com/stable'.
        token (str | None): The publishable API token. Omitted from requests when empty.
        timeout (float): Seconds to wait for the upstream before giving up.
    """
    def __init__(self, base_url, token=None, timeout=10):
        """
        Initializes the IEXApiClient.

        Args:
            base_url (str): The IEX API root URL.
            token (str, optional): The IEX API token. Defaults to None.
            timeout (float, optional): Request timeout in seconds. Defaults to 10.
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        logger.info(f"IEXApiClient instantiated for {self.base_url} (token {'set' if token else 'not set'})")

    def _send_request(self, path, params=None):
        """
        Sends a GET request to the IEX API and returns the decoded JSON array.

        Args:
            path (str): The API endpoint path, starting with '/'.
            params (dict, optional): Extra query parameters.

        Returns:
            list: The JSON array returned by the endpoint.

        Raises:
            IEXApiError: On timeout, transport error, non-2xx status or a
                         response body that is not a JSON array.
        """
        url = f"{self.base_url}{path}"
        query = dict(params or {})
        if self.token:
            query['token'] = self.token

        try:
            response = requests.get(url, params=query, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"IEX request timed out after {self.timeout}s. URL: {url}")
            raise IEXApiError(f"IEX request to {path} timed out.") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"IEX request failed. URL: {url}, Error: {e}")
            raise IEXApiError(f"IEX request to {path} failed: {e}") from e

        if not response.ok:
            logger.warning(f"IEX API returned {response.status_code}. URL: {url}, Response: {response.text[:200]}")
            raise IEXApiError(
                f"IEX API returned {response.status_code} for {path}.",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"IEX API returned a non-JSON body. URL: {url}, Response: {response.text[:200]}")
            raise IEXApiError(f"IEX API returned a non-JSON body for {path}.", status_code=response.status_code) from e

        if not isinstance(body, list):
            logger.error(f"IEX API returned {type(body).__name__} where a list was expected. URL: {url}")
            raise IEXApiError(f"IEX API returned an unexpected payload for {path}.", status_code=response.status_code)
        return body

    def get_all_symbols(self):
        """
        Fetches every symbol IEX supports. This is close to 9,000 entries.

        Returns:
            list[IexSymbol]: One entry per listed symbol.
        """
        return self._parse_items(IexSymbol.from_api, self._send_request('/ref-data/symbols'), 'symbol list')

    def get_last_traded_price_for_symbols(self, symbols):
        """
        Fetches the last traded price for several symbols in one call.

        Args:
            symbols (list[str]): The stock symbols (tickers).

        Returns:
            list[IexLastTradedPrice]: One entry per symbol IEX recognized.
        """
        params = {'symbols': ','.join(symbols)}
        return self._parse_items(IexLastTradedPrice.from_api, self._send_request('/tops/last', params=params), 'last traded price')

    def get_historical_prices_for_range(self, symbol, range_expr):
        """
        Fetches daily OHLCV history for a symbol over an IEX range such as '5d' or '1y'.

        Returns:
            list[HistoricalPrice]: Unsaved model instances stamped with `symbol`.
        """
        body = self._send_request(f"/stock/{symbol}/chart/{range_expr}")
        return [self._to_historical_price(symbol, item) for item in body]

    def get_historical_price_for_date(self, symbol, wire_date):
        """
        Fetches the daily OHLCV bar for a single day.

        Args:
            symbol (str): The stock symbol (ticker).
            wire_date (str): The day in 'YYYYMMDD' format.

        Returns:
            list[HistoricalPrice]: Unsaved model instances; empty when IEX has no data for the day.
        """
        body = self._send_request(f"/stock/{symbol}/chart/date/{wire_date}", params={'chartByDay': 'true'})
        return [self._to_historical_price(symbol, item) for item in body]

    @staticmethod
    def _parse_items(parse, body, what):
        try:
            return [parse(item) for item in body]
        except (KeyError, TypeError, ValueError, InvalidOperation, AttributeError) as e:
            logger.error(f"IEX API returned a malformed {what} entry: {e!r}")
            raise IEXApiError(f"IEX API returned a malformed {what} entry.") from e

    @staticmethod
    def _to_historical_price(symbol, item):
        # Upstream 'symbol'/'key' fields are ignored; the requested symbol is authoritative.
        try:
            return HistoricalPrice(
                symbol=symbol,
                date=date.fromisoformat(item['date']),
                open=_to_decimal(item.get('open')),
                low=_to_decimal(item.get('low')),
                high=_to_decimal(item.get('high')),
                close=_to_decimal(item.get('close')),
                volume=int(item['volume']) if item.get('volume') is not None else None,
            )
        except (KeyError, TypeError, ValueError, InvalidOperation, AttributeError) as e:
            raise IEXApiError(f"IEX API returned a malformed chart entry for {symbol}: {item!r}") from e


def _to_decimal(value):
    if value is None:
        return None
    return Decimal(str(value))
