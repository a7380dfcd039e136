"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TARGET_PERCENTAGE = 75.0
DEFAULT_SCAN_INTERVAL_SECONDS = 3600
DEFAULT_CUTOFF_TIME = time(23, 59)
DEFAULT_FETCH_WORKERS = 4
DEFAULT_CLASS_TYPE = "none"
