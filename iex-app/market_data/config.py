# iex-app/market_data/config.py
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


def load_api_token(keys_file=None):
    """
    Resolves the IEX API token.

    `settings.IEX_API_TOKEN` wins when set. Otherwise the first line of the keys
    file is read, expected as 'name,token'. A missing file or a malformed line
    is not fatal: requests are then sent without a token, which is what mocked
    and test environments expect.

    Args:
        keys_file (str, optional): Path to the keys file. Defaults to
                                   `settings.IEX_KEYS_FILE`.

    Returns:
        str | None: The token, or None if none could be found.
    """
    token = getattr(settings, 'IEX_API_TOKEN', None)
    if token:
        return token

    keys_file = keys_file or getattr(settings, 'IEX_KEYS_FILE', None)
    if not keys_file:
        logger.warning("No IEX API token configured. Requests will be sent without a token.")
        return None

    try:
        with open(keys_file, 'r', encoding='utf-8') as f:
            first_line = f.readline().strip()
    except OSError as e:
        logger.warning(f"Could not read IEX keys file {keys_file}: {e}. Requests will be sent without a token.")
        return None

    parts = first_line.split(',')
    if len(parts) < 2 or not parts[1].strip():
        logger.warning(f"IEX keys file {keys_file} has no token on its first line.")
        return None
    return parts[1].strip()
