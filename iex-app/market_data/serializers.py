from rest_framework import serializers
from .models import HistoricalPrice


class IexSymbolSerializer(serializers.Serializer):
    """
    Renders an IexSymbol with the key names IEX itself uses.
    """
    symbol = serializers.CharField()
    exchange = serializers.CharField(allow_null=True)
    name = serializers.CharField(allow_null=True)
    date = serializers.CharField(allow_null=True)
    type = serializers.CharField(allow_null=True)
    iexId = serializers.CharField(source='iex_id', allow_null=True)
    region = serializers.CharField(allow_null=True)
    currency = serializers.CharField(allow_null=True)
    isEnabled = serializers.BooleanField(source='is_enabled', allow_null=True)


class IexLastTradedPriceSerializer(serializers.Serializer):
    symbol = serializers.CharField()
    price = serializers.DecimalField(max_digits=14, decimal_places=4)
    size = serializers.IntegerField()
    time = serializers.IntegerField()


class HistoricalPriceSerializer(serializers.ModelSerializer):
    """
    Renders a HistoricalPrice without its storage id. Dates come out as 'YYYY-MM-DD'.
    """
    class Meta:
        model = HistoricalPrice
        fields = ['symbol', 'date', 'open', 'high', 'low', 'close', 'volume']


class HistoricalPricesQuerySerializer(serializers.Serializer):
    """
    Validates the query string of the historical prices endpoint.

    `symbol` must be present but may be blank (which yields an empty result).
    The date format itself is checked by the service.
    """
    symbol = serializers.CharField(allow_blank=True, trim_whitespace=True)
    range = serializers.CharField(required=False, allow_blank=True)
    date = serializers.CharField(required=False, allow_blank=True)
