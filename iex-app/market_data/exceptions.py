# iex-app/market_data/exceptions.py


class MarketDataError(Exception):
    """Base class for errors raised by the market_data app."""


class InvalidDateError(MarketDataError, ValueError):
    """A date query parameter is not a real calendar day in YYYYMMDD form."""


class InvalidRangeError(MarketDataError, ValueError):
    """A range expression has no usable amount (e.g. 'xd', '0m', '')."""


class IEXApiError(MarketDataError):
    """
    Raised when a call to the IEX API fails.

    Covers timeouts, connection errors, non-2xx responses and payloads that are
    not the JSON shape the endpoint is documented to return.

    Attributes:
        status_code (int | None): The upstream HTTP status, if a response was received.
    """
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
