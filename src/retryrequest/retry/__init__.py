r"""Retry orchestration.

This package contains the state machine driving the attempts of one
operation and the collaborators it is built from.

Public API:
    - RetryPolicy: Configuration of one operation
    - Outcome: Result of one attempt
    - should_retry_request: Default retry policy
    - AttemptReporter: Reporting path of one attempt
    - RetryCoordinator: State machine issuing and retrying attempts
    - CoordinatorListener: Event surface observed by the adapters
"""

from __future__ import annotations

__all__ = [
    "Attempt",
    "AttemptFactory",
    "AttemptHandle",
    "AttemptReporter",
    "CoordinatorListener",
    "CoordinatorState",
    "Outcome",
    "RetryCoordinator",
    "RetryPolicy",
    "RetryPredicate",
    "RetryState",
    "should_retry_request",
]

from retryrequest.retry.attempt import AttemptFactory, AttemptHandle, AttemptReporter
from retryrequest.retry.config import RetryPolicy
from retryrequest.retry.coordinator import Attempt, CoordinatorState, RetryCoordinator, RetryState
from retryrequest.retry.decider import Outcome, RetryPredicate, should_retry_request
from retryrequest.retry.events import CoordinatorListener
