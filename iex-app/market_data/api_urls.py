from django.urls import path
from . import api_views

app_name = 'market_data_api'

urlpatterns = [
    # Every symbol supported by IEX.
    path('symbols', api_views.SymbolListAPIView.as_view(), name='symbols'),

    # Last traded price for one or more symbols.
    path('lastTradedPrice', api_views.LastTradedPriceAPIView.as_view(), name='last-traded-price'),

    # Daily OHLCV history, served from the local store when possible.
    path('historicalPrices', api_views.HistoricalPricesAPIView.as_view(), name='historical-prices'),
]
