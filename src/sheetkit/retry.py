"""Quota-aware retry for Sheets API calls."""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

import backoff
from googleapiclient.errors import HttpError
from pydantic import BaseModel, Field, model_validator

from .errors import TRANSPORT_ERRORS, QuotaExceededError, SheetsAPIError

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "Quota exceeded"

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """How long to wait between attempts of a quota-limited call.

    Waits follow ``initial_delay * multiplier ** n`` capped at ``max_delay``.
    With ``jitter`` enabled up to one extra second is added to each wait, so
    no wait is ever shorter than ``initial_delay``. When the next attempt could
    not start before ``max_elapsed`` runs out, the call gives up instead of
    sleeping for less than ``initial_delay``.
    """

    initial_delay: float = Field(default=2.5, ge=0)
    multiplier: float = Field(default=2.0, ge=1)
    max_delay: Optional[float] = Field(default=60.0, gt=0)
    # None retries for as long as the quota error persists
    max_attempts: Optional[int] = Field(default=8, ge=1)
    max_elapsed: Optional[float] = Field(default=None, gt=0)
    jitter: bool = True

    @model_validator(mode="after")
    def _check_max_delay(self) -> "RetryPolicy":
        if self.max_delay is not None and self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must not be shorter than initial_delay ({self.initial_delay})"
            )
        return self


def is_quota_error(error: BaseException) -> bool:
    """Return True when an error signals a quota or rate-limit condition."""
    if QUOTA_MESSAGE in str(error):
        return True
    if isinstance(error, HttpError):
        return getattr(error.resp, "status", None) == 429
    return False


def _log_backoff(details: dict) -> None:
    logger.warning(
        f"Quota exceeded, backing off for {details['wait']:.1f} seconds "
        f"(attempt {details['tries']})..."
    )


def call_with_quota_retry(
    func: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    action: str = "call the Sheets API",
) -> T:
    """Run ``func``, retrying it while it fails with a quota error.

    Any failure whose text reports an exceeded quota is retried. Other
    ``HttpError`` and transport failures are not retried and surface as
    ``SheetsAPIError``. A quota failure that outlives the policy surfaces as
    ``QuotaExceededError``.
    """
    policy = policy or RetryPolicy()
    started = time.monotonic()

    def out_of_time() -> bool:
        if policy.max_elapsed is None:
            return False
        return time.monotonic() - started + policy.initial_delay > policy.max_elapsed

    retrying: Callable[[], Any] = backoff.on_exception(
        backoff.expo,
        Exception,
        max_tries=policy.max_attempts,
        jitter=backoff.random_jitter if policy.jitter else None,
        giveup=lambda e: not is_quota_error(e) or out_of_time(),
        on_backoff=_log_backoff,
        logger=None,
        base=policy.multiplier,
        factor=policy.initial_delay,
        max_value=policy.max_delay,
    )(func)

    try:
        return retrying()
    except Exception as e:
        if is_quota_error(e):
            logger.error(f"Failed to {action}: {e}")
            raise QuotaExceededError.from_error(e, action) from e
        if isinstance(e, (HttpError,) + TRANSPORT_ERRORS):
            logger.error(f"Failed to {action}: {e}")
            raise SheetsAPIError.from_error(e, action) from e
        raise
