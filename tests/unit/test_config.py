from __future__ import annotations

import sys
from datetime import time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from octopoz.infrastructure.config import load_retry_policy, load_slot_policy


def test_slot_policy_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("SLOT_OPENING_TIME", "12:00")
    monkeypatch.setenv("SLOT_CLOSING_TIME", "22:00")
    monkeypatch.setenv("SLOT_STEP_MINUTES", "15")

    policy = load_slot_policy()

    assert (policy.opening_time, policy.closing_time) == (time(12, 0), time(22, 0))
    assert policy.step_minutes == 15


@pytest.mark.parametrize("raw", ["25:00", "noon", "11:75"])
def test_bad_opening_time_names_the_variable(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("SLOT_OPENING_TIME", raw)

    with pytest.raises(RuntimeError, match="SLOT_OPENING_TIME"):
        load_slot_policy()


def test_closing_before_opening_is_a_config_error(monkeypatch) -> None:
    monkeypatch.setenv("SLOT_OPENING_TIME", "20:00")
    monkeypatch.setenv("SLOT_CLOSING_TIME", "10:00")

    with pytest.raises(RuntimeError, match="invalid slot policy"):
        load_slot_policy()


def test_retry_policy_backoff_raises_the_cap(monkeypatch) -> None:
    monkeypatch.setenv("TX_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("TX_BACKOFF_SECONDS", "2.5")

    policy = load_retry_policy()

    assert policy.max_attempts == 5
    assert policy.backoff_seconds == 2.5
    assert policy.max_backoff_seconds == 2.5


def test_bad_retry_settings_are_config_errors(monkeypatch) -> None:
    monkeypatch.setenv("TX_BACKOFF_SECONDS", "fast")
    with pytest.raises(RuntimeError, match="TX_BACKOFF_SECONDS"):
        load_retry_policy()

    monkeypatch.setenv("TX_BACKOFF_SECONDS", "0.1")
    monkeypatch.setenv("TX_MAX_ATTEMPTS", "0")
    with pytest.raises(RuntimeError, match="invalid retry policy"):
        load_retry_policy()
