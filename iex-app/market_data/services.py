import logging
import threading
from functools import lru_cache
from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from .config import load_api_token
from .iex_client import IEXApiClient
from .models import HistoricalPrice
from .ranges import canonicalize_date, range_to_start_date

logger = logging.getLogger(__name__)

DATE_RANGE = 'date'
DATE_LOCK_STRIPES = 64


class MarketDataService:
    """
    Transformation and caching layer between the IEX endpoints and the IEX API.

    Historical prices are cached in the HistoricalPrice table. Single-day
    requests are looked up by (symbol, date). Range requests rely on a
    watermark: the earliest range start fetched so far. A range whose start is
    not earlier than the watermark is assumed to be fully stored already.
    """
    def __init__(self, client, default_range='1m', today=None):
        """
        Args:
            client (IEXApiClient): The upstream client.
            default_range (str, optional): Range used when a request has neither
                                           range nor date. Defaults to '1m'.
            today (callable, optional): Returns the current date. Defaults to
                                        `django.utils.timezone.localdate`.
        """
        self.client = client
        self.default_range = default_range
        self._today = today or timezone.localdate
        self._earliest_range_start = None
        self._range_lock = threading.Lock()
        self._date_locks = [threading.Lock() for _ in range(DATE_LOCK_STRIPES)]

    @property
    def earliest_range_start(self):
        return self._earliest_range_start

    def get_all_symbols(self):
        return self.client.get_all_symbols()

    def get_last_traded_price_for_symbols(self, symbols):
        """
        Returns the last traded price for each symbol passed in.

        An empty list short-circuits to an empty result so that IEX is never
        called without a symbols value.
        """
        symbols = [s for s in (symbols or []) if s and s.strip()]
        if not symbols:
            return []
        return self.client.get_last_traded_price_for_symbols(symbols)

    def range_to_start_date(self, range_expr):
        return range_to_start_date(range_expr, self._today())

    def get_historical_prices(self, symbol, range_expr=None, date=None):
        """
        Returns daily OHLCV data for a symbol over a range or for a single day.

        A non-empty `date` always wins: the request is served as a single-day
        lookup whatever `range_expr` says.

        Args:
            symbol (str): The stock symbol. Empty means there is nothing to do.
            range_expr (str, optional): An IEX range ('5d', '1m', '2y') or 'date'.
                                        Defaults to the configured default range.
            date (str, optional): A day in 'YYYYMMDD' format.

        Returns:
            list[HistoricalPrice]: The matching records.

        Raises:
            InvalidDateError: If `date` is malformed.
            InvalidRangeError: If the range amount is malformed.
            IEXApiError: If the upstream call fails.
        """
        if not symbol or not symbol.strip():
            logger.warning("Received historical price request for empty symbol. Returning empty list.")
            return []

        if date:
            if range_expr and range_expr != DATE_RANGE:
                logger.warning(f"Received range = '{range_expr}' and date = '{date}'. Returning historical price for date.")
            return self._get_historical_price_for_date(symbol, date)

        if range_expr == DATE_RANGE:
            logger.warning("Received range = 'date' without a date. Returning empty list.")
            return []

        return self._get_historical_prices_for_range(symbol, range_expr or self.default_range)

    def _get_historical_price_for_date(self, symbol, wire_date):
        search_date = canonicalize_date(wire_date)

        with self._lock_for(symbol, search_date):
            logger.info(f"Searching store for symbol {symbol} and date {search_date}")
            if HistoricalPrice.objects.exists_by_symbol_and_date(symbol, search_date):
                logger.info(f"Historical price for symbol {symbol}, date {search_date} found in store.")
                return HistoricalPrice.objects.find_by_symbol_and_date(symbol, search_date)

            logger.info(f"Requesting historical price for symbol {symbol}, date {wire_date} from IEX.")
            prices = self.client.get_historical_price_for_date(symbol, wire_date)
            self._save_fetched(prices)
            return prices

    def _get_historical_prices_for_range(self, symbol, range_expr):
        range_start = self.range_to_start_date(range_expr)

        with self._range_lock:
            if self._earliest_range_start is not None and range_start >= self._earliest_range_start:
                logger.info(f"Historical prices for {symbol}, range {range_expr} (from {range_start}) found in store.")
                return HistoricalPrice.objects.find_by_symbol_and_date_gte(symbol, range_start)

            logger.info(f"Requesting historical prices for {symbol}, range {range_expr} from IEX.")
            prices = self.client.get_historical_prices_for_range(symbol, range_expr)
            self._earliest_range_start = range_start
            logger.info(f"Earliest requested range start is now {range_start}.")
            self._save_fetched(prices)
            return prices

    def warm_symbol(self, symbol, range_expr=None):
        """
        Fetches a range for one symbol from IEX and stores it, whatever the watermark says.

        Reads go through the watermark, so a warm-up that consulted it would
        skip every symbol after the first and every day after the first run.
        The watermark is only moved back, once the rows are stored, when this
        range starts earlier than anything fetched so far.

        Args:
            symbol (str): The stock symbol.
            range_expr (str, optional): An IEX range. Defaults to the configured default range.

        Returns:
            int: The number of records IEX returned.

        Raises:
            InvalidRangeError: If the range amount is malformed.
            IEXApiError: If the upstream call fails.
        """
        range_expr = range_expr or self.default_range
        range_start = self.range_to_start_date(range_expr)

        logger.info(f"Warming historical prices for {symbol}, range {range_expr} from IEX.")
        prices = self.client.get_historical_prices_for_range(symbol, range_expr)
        self._save_fetched(prices)

        with self._range_lock:
            if self._earliest_range_start is None or range_start < self._earliest_range_start:
                self._earliest_range_start = range_start
                logger.info(f"Earliest requested range start is now {range_start}.")
        return len(prices)

    def _save_fetched(self, prices):
        # The read succeeds even if the write-back does not.
        if not prices:
            return
        try:
            saved = HistoricalPrice.objects.save_all(prices)
            logger.info(f"Saved {len(saved)} historical prices to store.")
        except DatabaseError as e:
            logger.error(f"Failed to save fetched historical prices: {e}", exc_info=True)

    def _lock_for(self, symbol, search_date):
        # Fixed pool; unrelated keys may share a stripe.
        return self._date_locks[hash((symbol, search_date)) % DATE_LOCK_STRIPES]

    def reset_service(self):
        """
        Forgets the watermark and empties the store. Meant for test isolation.
        """
        with self._range_lock:
            self._earliest_range_start = None
            deleted = HistoricalPrice.objects.delete_all()
        logger.info(f"Market data service reset. Deleted {deleted} historical prices.")


@lru_cache(maxsize=1)
def get_market_data_service():
    """Builds the process-wide MarketDataService from Django settings."""
    client = IEXApiClient(
        base_url=settings.IEX_API_BASE_URL,
        token=load_api_token(),
        timeout=settings.IEX_REQUEST_TIMEOUT,
    )
    return MarketDataService(client, default_range=settings.IEX_DEFAULT_RANGE)
