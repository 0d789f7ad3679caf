from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import FakeStore

from octopoz.application.errors import CapacityExceededError, ConcurrencyConflictError
from octopoz.application.transactions import RetryPolicy, run_in_transaction


def _no_jitter(max_attempts: int = 3) -> RetryPolicy:
    return RetryPolicy(max_attempts=max_attempts, backoff_seconds=0.01, jitter_factor=0.0)


def test_commits_once_on_success() -> None:
    store = FakeStore()

    result = run_in_transaction(store.uow_factory, lambda uow: "done", operation="noop")

    assert result == "done"
    assert store.commits == 1


def test_retries_transient_conflicts_with_backoff() -> None:
    store = FakeStore()
    store.transient_failures = 2
    delays: list[float] = []

    result = run_in_transaction(
        store.uow_factory,
        lambda uow: "ok",
        operation="create_order",
        retry_policy=_no_jitter(),
        sleep=delays.append,
    )

    assert result == "ok"
    assert store.opened == 3
    assert delays == [0.01, 0.02]


def test_gives_up_after_max_attempts() -> None:
    store = FakeStore()
    store.transient_failures = 5

    with pytest.raises(ConcurrencyConflictError) as exc_info:
        run_in_transaction(
            store.uow_factory,
            lambda uow: None,
            operation="create_reservation",
            retry_policy=_no_jitter(max_attempts=2),
            sleep=lambda _: None,
        )

    assert exc_info.value.details == {"attempts": 2}
    assert store.opened == 2
    assert store.commits == 0


def test_business_errors_are_not_retried() -> None:
    store = FakeStore()

    def _work(uow):
        raise CapacityExceededError("full")

    with pytest.raises(CapacityExceededError):
        run_in_transaction(store.uow_factory, _work, operation="create_order")
    assert store.opened == 1
    assert store.commits == 0


def test_backoff_is_capped_and_policy_validated() -> None:
    policy = RetryPolicy(backoff_seconds=0.5, max_backoff_seconds=1.0, jitter_factor=0.0)
    assert policy.delay_for(1) == 0.5
    assert policy.delay_for(5) == 1.0

    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


def test_read_only_units_are_never_committed_but_still_retried() -> None:
    store = FakeStore()
    store.transient_failures = 1

    result = run_in_transaction(
        store.uow_factory,
        lambda uow: "read",
        operation="list_reservations",
        retry_policy=_no_jitter(),
        read_only=True,
        sleep=lambda _: None,
    )

    assert result == "read"
    assert store.read_only_opened == 2
    assert store.commits == 0
