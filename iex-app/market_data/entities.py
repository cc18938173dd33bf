"""
Value objects for IEX data that is passed through and never persisted.
Historical prices are persisted, so they live in models.py instead.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class IexSymbol:
    symbol: str
    exchange: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    type: Optional[str] = None
    iex_id: Optional[str] = None
    region: Optional[str] = None
    currency: Optional[str] = None
    is_enabled: Optional[bool] = None

    @classmethod
    def from_api(cls, data: dict) -> "IexSymbol":
        return cls(
            symbol=data['symbol'],
            exchange=data.get('exchange'),
            name=data.get('name'),
            date=data.get('date'),
            type=data.get('type'),
            iex_id=data.get('iexId'),
            region=data.get('region'),
            currency=data.get('currency'),
            is_enabled=data.get('isEnabled'),
        )


@dataclass(frozen=True)
class IexLastTradedPrice:
    symbol: str
    price: Decimal
    size: int
    time: int

    @classmethod
    def from_api(cls, data: dict) -> "IexLastTradedPrice":
        return cls(
            symbol=data['symbol'],
            price=Decimal(str(data['price'])),
            size=int(data['size']),
            time=int(data['time']),
        )
