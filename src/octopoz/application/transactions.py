from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from octopoz.application.errors import ConcurrencyConflictError
from octopoz.application.metrics.engine_metrics import record_transaction_retry
from octopoz.application.ports.repositories import (
    TransientConflictError,
    UnitOfWork,
    UnitOfWorkFactory,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_seconds: float = 0.05
    max_backoff_seconds: float = 1.0
    jitter_factor: float = 0.25

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")
        if self.max_backoff_seconds < self.backoff_seconds:
            raise ValueError("max_backoff_seconds must be >= backoff_seconds")
        if not 0 <= self.jitter_factor <= 1:
            raise ValueError("jitter_factor must be between 0 and 1")

    def delay_for(self, attempt: int) -> float:
        capped = min(self.backoff_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)
        jitter = capped * self.jitter_factor
        return max(0.0, capped + random.uniform(-jitter, jitter))


def run_in_transaction(
    uow_factory: UnitOfWorkFactory,
    work: Callable[[UnitOfWork], T],
    *,
    operation: str,
    retry_policy: RetryPolicy | None = None,
    read_only: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``work`` inside one unit of work, committing only if it returns.

    Any exception rolls the whole unit back. Lost write races are retried with
    backoff a bounded number of times before surfacing as ConcurrencyConflictError.
    With ``read_only`` the unit is opened read-only and never committed.
    """
    policy = retry_policy or RetryPolicy()
    for attempt in range(1, policy.max_attempts + 1):
        try:
            with uow_factory(read_only=read_only) as uow:
                result = work(uow)
                if not read_only:
                    uow.commit()
                return result
        except TransientConflictError as exc:
            record_transaction_retry(operation)
            if attempt >= policy.max_attempts:
                logger.warning(
                    "transaction_conflict_exhausted",
                    extra={"operation": operation, "attempt": attempt},
                )
                raise ConcurrencyConflictError(
                    f"{operation} lost a concurrent update race, retry later",
                    details={"attempts": attempt},
                ) from exc
            delay = policy.delay_for(attempt)
            logger.info(
                "transaction_conflict_retry",
                extra={
                    "operation": operation,
                    "attempt": attempt,
                    "delay_ms": round(delay * 1000, 2),
                },
            )
            sleep(delay)

    raise RuntimeError("unreachable: retry loop exited without result")
