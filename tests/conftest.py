from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from retryrequest.backoff import ConstantBackoff


@pytest.fixture
def no_backoff() -> ConstantBackoff:
    """Backoff strategy without delay to make tests run faster."""
    return ConstantBackoff(delay=0.0)


@pytest.fixture
def mock_response() -> httpx.Response:
    """Create a mock httpx.Response for testing."""
    return Mock(spec=httpx.Response, status_code=200)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks.

    Returns:
        A Mock object that can be used as a completion callback.
    """
    return Mock()
