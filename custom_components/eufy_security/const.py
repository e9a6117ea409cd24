"""Constants for eufy_security."""

from datetime import timedelta
from logging import Logger, getLogger

LOGGER: Logger = getLogger(__package__)

DOMAIN = "eufy_security"
MANUFACTURER = "Eufy"

CONF_COUNTRY = "country"
CONF_VERIFY_CODE = "verify_code"
CONF_TOKEN = "token"
CONF_TOKEN_EXPIRATION = "token_expiration"
CONF_API_BASE = "api_base"
CONF_OPENUDID = "openudid"
CONF_SERIAL_NUMBER = "serial_number"

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"

DEFAULT_COUNTRY = "US"
DEFAULT_SCAN_INTERVAL = timedelta(minutes=10)

OPENUDID_LENGTH = 16
SERIAL_NUMBER_LENGTH = 12
