from __future__ import annotations

import logging
from datetime import datetime
from typing import NoReturn

from octopoz.application.errors import PromotionNotApplicableError
from octopoz.application.metrics.engine_metrics import record_promotion_redemption
from octopoz.application.ports.repositories import PromotionRepository
from octopoz.domain.common.ids import PromotionId, TenantId
from octopoz.domain.promotion.entities import Promotion

logger = logging.getLogger(__name__)


class PromotionLedger:
    def __init__(self, promotions: PromotionRepository) -> None:
        self._promotions = promotions

    def apply_usage(self, tenant_id: TenantId, promotion_id: PromotionId, now: datetime) -> int:
        """Redeem one use of a promotion and return the new used_count."""
        promotion = self._promotions.get(tenant_id=tenant_id, promotion_id=promotion_id)
        if promotion is None:
            self._reject(tenant_id, promotion_id, "not_found")

        reason = promotion.rejection_reason(now)
        if reason is not None:
            self._reject(tenant_id, promotion_id, reason)

        # The limit is re-checked by the store in the same statement as the increment.
        used_count = self._promotions.increment_usage_if_available(
            tenant_id=tenant_id,
            promotion_id=promotion_id,
        )
        if used_count is None:
            self._reject(tenant_id, promotion_id, "usage_limit_reached")

        record_promotion_redemption(str(tenant_id), "applied")
        return used_count

    def list_active(self, tenant_id: TenantId, now: datetime) -> list[Promotion]:
        promotions = self._promotions.list_for_tenant(tenant_id)
        active = [promotion for promotion in promotions if promotion.rejection_reason(now) is None]
        return sorted(
            active,
            key=lambda promotion: (promotion.end_date, str(promotion.promotion_id)),
        )

    def _reject(self, tenant_id: TenantId, promotion_id: PromotionId, reason: str) -> NoReturn:
        record_promotion_redemption(str(tenant_id), reason)
        logger.info(
            "promotion_not_applicable",
            extra={
                "tenant_id": str(tenant_id),
                "promotion_id": str(promotion_id),
                "reason": reason,
            },
        )
        raise PromotionNotApplicableError(
            f"promotion {promotion_id} is not applicable: {reason}",
            details={"promotionId": str(promotion_id), "reason": reason},
        )
