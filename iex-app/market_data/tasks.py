import logging
from celery import shared_task
from django.conf import settings

from .exceptions import MarketDataError
from .services import get_market_data_service

logger = logging.getLogger(__name__)


def warm_historical_prices(symbols, range_expr=None, date=None):
    """
    Fetches historical prices for each symbol and stores them so that later reads hit the store.

    Ranges are always fetched from IEX; a single day is only fetched when it is not stored yet.

    A symbol that fails is logged and skipped; the others are still processed.

    Args:
        symbols (list[str]): The symbols to warm.
        range_expr (str, optional): The range to request. Defaults to the service default.
        date (str, optional): A single 'YYYYMMDD' day to request instead of a range.

    Returns:
        dict[str, int | None]: Records returned per symbol, None for a failed symbol.
    """
    service = get_market_data_service()
    results = {}
    for symbol in symbols:
        try:
            if date:
                count = len(service.get_historical_prices(symbol, date=date))
            else:
                count = service.warm_symbol(symbol, range_expr)
            results[symbol] = count
            logger.info(f"[{symbol}] Warmed {count} historical prices.")
        except MarketDataError as e:
            results[symbol] = None
            logger.error(f"[{symbol}] Failed to warm historical prices: {e}", exc_info=True)
    return results


@shared_task
def warm_historical_prices_task(symbols=None, range_expr=None):
    """
    Celery task that refreshes the historical price cache.
    Scheduled daily after the US close; symbols default to IEX_WARM_SYMBOLS.
    """
    symbols = symbols or settings.IEX_WARM_SYMBOLS
    if not symbols:
        logger.warning("No symbols configured for the historical price warm-up. Skipping.")
        return 0

    logger.info(f"Celery Task: Warming historical prices for {len(symbols)} symbols.")
    results = warm_historical_prices(symbols, range_expr or settings.IEX_WARM_RANGE)
    warmed = sum(1 for count in results.values() if count is not None)
    logger.info(f"Celery Task: Historical price warm-up finished. {warmed}/{len(symbols)} symbols succeeded.")
    return warmed
