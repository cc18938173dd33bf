import logging
from django.conf import settings
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from .exceptions import IEXApiError, InvalidDateError, InvalidRangeError
from .serializers import (
    HistoricalPriceSerializer,
    HistoricalPricesQuerySerializer,
    IexLastTradedPriceSerializer,
    IexSymbolSerializer,
)
from .services import get_market_data_service

logger = logging.getLogger(__name__)


def _upstream_error_response(error):
    """
    Maps an IEXApiError to a response. An upstream 404 means IEX does not know
    the symbol and is passed through; anything else is a service failure.
    """
    if error.status_code == status.HTTP_404_NOT_FOUND:
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'error': str(error)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class SymbolListAPIView(APIView):
    """
    Lists every symbol available on IEX.
    """
    def get(self, request, *args, **kwargs):
        try:
            symbols = get_market_data_service().get_all_symbols()
        except IEXApiError as e:
            logger.error(f"Failed to fetch symbols from IEX: {e}")
            return _upstream_error_response(e)
        return Response(IexSymbolSerializer(symbols, many=True).data, status=status.HTTP_200_OK)


class LastTradedPriceAPIView(APIView):
    """
    Returns the last traded price for each requested symbol.

    Symbols may be given comma-separated (`?symbols=FB,AAPL`), repeated
    (`?symbols=FB&symbols=AAPL`) or both. No symbols yields an empty list.
    """
    def get(self, request, *args, **kwargs):
        symbols = [
            symbol.strip()
            for value in request.query_params.getlist('symbols')
            for symbol in value.split(',')
            if symbol.strip()
        ]
        try:
            prices = get_market_data_service().get_last_traded_price_for_symbols(symbols)
        except IEXApiError as e:
            logger.error(f"Failed to fetch last traded prices for {symbols}: {e}")
            return _upstream_error_response(e)
        return Response(IexLastTradedPriceSerializer(prices, many=True).data, status=status.HTTP_200_OK)


class HistoricalPricesAPIView(APIView):
    """
    Returns daily OHLCV data for a symbol over a range or for a single day.

    Query parameters:
        symbol: Required. A blank value returns an empty list.
        range:  An IEX range such as '5d', '1m', '2y'. Defaults to IEX_DEFAULT_RANGE.
        date:   Optional 'YYYYMMDD'. Takes precedence over range.
    """
    def get(self, request, *args, **kwargs):
        query = HistoricalPricesQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        symbol = query.validated_data['symbol']
        range_expr = query.validated_data.get('range') or settings.IEX_DEFAULT_RANGE
        date = query.validated_data.get('date') or None

        try:
            prices = get_market_data_service().get_historical_prices(symbol, range_expr, date)
        except (InvalidDateError, InvalidRangeError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except IEXApiError as e:
            logger.error(f"Failed to fetch historical prices for {symbol}: {e}")
            return _upstream_error_response(e)
        return Response(HistoricalPriceSerializer(prices, many=True).data, status=status.HTTP_200_OK)
