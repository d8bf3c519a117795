r"""Unit tests for the default configuration values."""

from __future__ import annotations

import pytest

from retryrequest.core import config


def test_default_max_retries() -> None:
    assert config.DEFAULT_MAX_RETRIES == 2


def test_default_object_mode() -> None:
    assert config.DEFAULT_OBJECT_MODE is False


def test_delay_constants() -> None:
    assert config.BASE_DELAY_MS == 1000.0
    assert config.MAX_JITTER_MS == 1000.0


@pytest.mark.parametrize("status_code", [100, 150, 199])
def test_informational_status_codes(status_code: int) -> None:
    assert status_code in config.INFORMATIONAL_STATUS_CODES


@pytest.mark.parametrize("status_code", [500, 503, 599])
def test_server_error_status_codes(status_code: int) -> None:
    assert status_code in config.SERVER_ERROR_STATUS_CODES


@pytest.mark.parametrize("status_code", [99, 200, 499, 600])
def test_status_codes_outside_retryable_ranges(status_code: int) -> None:
    assert status_code not in config.INFORMATIONAL_STATUS_CODES
    assert status_code not in config.SERVER_ERROR_STATUS_CODES
    assert status_code != config.RATE_LIMITED_STATUS_CODE
