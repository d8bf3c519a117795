r"""Default configuration values for retried requests.

This module gathers the constants used when a caller does not override
the retry behavior of ``retry_request``.
"""

from __future__ import annotations

__all__ = [
    "BASE_DELAY_MS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_OBJECT_MODE",
    "INFORMATIONAL_STATUS_CODES",
    "MAX_JITTER_MS",
    "RATE_LIMITED_STATUS_CODE",
    "SERVER_ERROR_STATUS_CODES",
]

# Default maximum number of retries
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 2

# Streams carry raw byte chunks unless object mode is requested
DEFAULT_OBJECT_MODE = False

# Delay before the Nth retry = 2 ** N * BASE_DELAY_MS + jitter
# With the defaults: 1st retry waits 2-3s, 2nd waits 4-5s, 3rd waits 8-9s
BASE_DELAY_MS = 1000.0

# Upper bound (exclusive) of the uniform jitter added to each delay
MAX_JITTER_MS = 1000.0

# Status codes treated as transient by the default retry policy
# 1xx: Informational - the final response never arrived
# 429: Too Many Requests - Rate limiting
# 5xx: Server errors
INFORMATIONAL_STATUS_CODES = range(100, 200)
RATE_LIMITED_STATUS_CODE = 429
SERVER_ERROR_STATUS_CODES = range(500, 600)
