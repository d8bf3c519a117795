r"""Core configuration defaults and validation helpers."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_OBJECT_MODE",
    "validate_retry_number",
    "validate_retry_params",
]

from retryrequest.core.config import DEFAULT_MAX_RETRIES, DEFAULT_OBJECT_MODE
from retryrequest.core.validation import validate_retry_number, validate_retry_params
