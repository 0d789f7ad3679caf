from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fakes import NOW, FakePromotionRepository, FakeStore

from octopoz.application.errors import PromotionNotApplicableError
from octopoz.application.services.promotion_ledger import PromotionLedger
from octopoz.application.use_cases.list_active_promotions import ListActivePromotions
from octopoz.domain.common.ids import PromotionId, TenantId

TENANT = TenantId("tnt_001")


def _ledger(store: FakeStore) -> PromotionLedger:
    return PromotionLedger(FakePromotionRepository(store.state))


def _reason(store: FakeStore, promotion_id: str, now: datetime = NOW) -> str:
    with pytest.raises(PromotionNotApplicableError) as exc_info:
        _ledger(store).apply_usage(TENANT, PromotionId(promotion_id), now)
    return exc_info.value.details["reason"]


def test_apply_usage_returns_new_count() -> None:
    store = FakeStore()
    store.add_promotion(usage_limit=2)

    assert _ledger(store).apply_usage(TENANT, PromotionId("prm_001"), NOW) == 1
    assert _ledger(store).apply_usage(TENANT, PromotionId("prm_001"), NOW) == 2
    assert _reason(store, "prm_001") == "usage_limit_reached"


def test_unlimited_promotion_never_runs_out() -> None:
    store = FakeStore()
    store.add_promotion(usage_limit=None, used_count=10_000)

    assert _ledger(store).apply_usage(TENANT, PromotionId("prm_001"), NOW) == 10_001


def test_rejection_reasons() -> None:
    store = FakeStore()
    store.add_promotion("prm_off", active=False)
    store.add_promotion("prm_other", tenant_id="tnt_002")
    store.add_promotion("prm_window")

    assert _reason(store, "prm_missing") == "not_found"
    assert _reason(store, "prm_other") == "not_found"
    assert _reason(store, "prm_off") == "inactive"
    february = datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert _reason(store, "prm_window", february) == "outside_window"


def test_window_bounds_are_inclusive() -> None:
    store = FakeStore()
    promotion = store.add_promotion(usage_limit=None)

    assert _ledger(store).apply_usage(TENANT, promotion.promotion_id, promotion.start_date) == 1
    assert _ledger(store).apply_usage(TENANT, promotion.promotion_id, promotion.end_date) == 2


def test_active_promotions_exclude_exhausted_and_expired() -> None:
    store = FakeStore()
    store.add_tenant()
    store.add_promotion("prm_late", end_date=datetime(2024, 1, 31, tzinfo=timezone.utc))
    store.add_promotion("prm_soon", end_date=datetime(2024, 1, 20, tzinfo=timezone.utc))
    store.add_promotion("prm_spent", usage_limit=3, used_count=3)
    store.add_promotion("prm_paused", active=False)
    store.add_promotion("prm_over", end_date=datetime(2024, 1, 10, tzinfo=timezone.utc))

    response = ListActivePromotions(store.uow_factory, clock=lambda: NOW).execute(TENANT)

    assert [p.promotionId for p in response.promotions] == ["prm_soon", "prm_late"]
    assert response.promotions[0].usedCount == 0
