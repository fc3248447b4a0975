"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

DEFAULT_TOKEN_TTL_MINUTES = 5

# Daily absence sweep runs at 23:05 server time.
DEFAULT_RECONCILE_HOUR = 23
DEFAULT_RECONCILE_MINUTE = 5

DEFAULT_TOKEN_PURGE_HOURS = 6
DEFAULT_QR_TOKEN_BYTES = 32

# Lower bound for "since joining" reports when a user has no creation date.
EPOCH_DATE = date(1970, 1, 1)
