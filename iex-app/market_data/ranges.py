import logging
import re
from datetime import datetime
from dateutil.relativedelta import relativedelta
from .exceptions import InvalidDateError, InvalidRangeError

logger = logging.getLogger(__name__)

# Unit suffixes of an IEX range expression ('5d', '1m', '2y')
RANGE_UNITS = {
    'd': 'days',
    'm': 'months',
    'y': 'years',
}
DEFAULT_RANGE_UNIT = 'd'

_WIRE_DATE_RE = re.compile(r'^\d{8}$')


def parse_range(range_expr: str):
    """
    Splits a range expression into an amount and a relativedelta unit name.

    The trailing character is the unit code and the leading characters are the
    amount. An unknown unit falls back to days with a warning rather than
    failing the request.

    Args:
        range_expr (str): A range such as '5d', '1m' or '2y'.

    Returns:
        tuple[int, str]: The amount and one of 'days', 'months', 'years'.

    Raises:
        InvalidRangeError: If the amount is missing, not an integer, or not positive.
    """
    range_expr = (range_expr or '').strip()
    if len(range_expr) < 2:
        raise InvalidRangeError(f"Range must look like '5d', '1m' or '2y'; received {range_expr!r}.")

    suffix = range_expr[-1]
    unit = RANGE_UNITS.get(suffix)
    if unit is None:
        logger.warning(f"Range must end with 'd', 'm' or 'y'; received {suffix!r}. Assuming units of days.")
        unit = RANGE_UNITS[DEFAULT_RANGE_UNIT]

    amount_str = range_expr[:-1]
    if not amount_str.isdigit() or int(amount_str) <= 0:
        raise InvalidRangeError(f"Range amount must be a positive integer; received {amount_str!r}.")
    return int(amount_str), unit


def range_to_start_date(range_expr: str, today):
    """Returns the first calendar day covered by `range_expr`, counting back from `today`."""
    amount, unit = parse_range(range_expr)
    return today - relativedelta(**{unit: amount})


def canonicalize_date(wire_date: str) -> str:
    """
    Converts a 'YYYYMMDD' date into the canonical 'YYYY-MM-DD' store key.

    Raises:
        InvalidDateError: If the value is not eight digits or not a real calendar day.
    """
    if not wire_date or not _WIRE_DATE_RE.match(wire_date):
        raise InvalidDateError(f"Date must be in YYYYMMDD format; received {wire_date!r}.")
    try:
        parsed = datetime.strptime(wire_date, '%Y%m%d').date()
    except ValueError as e:
        raise InvalidDateError(f"Date {wire_date!r} is not a valid calendar day.") from e
    return parsed.isoformat()
