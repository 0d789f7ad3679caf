from __future__ import annotations

from octopoz.application.dto.responses import PromotionResponse
from octopoz.domain.promotion.entities import Promotion


def to_promotion_response(promotion: Promotion) -> PromotionResponse:
    return PromotionResponse(
        promotionId=str(promotion.promotion_id),
        name=promotion.name,
        type=promotion.promotion_type,
        discountValue=promotion.discount_value,
        usageLimit=promotion.usage_limit,
        usedCount=promotion.used_count,
        startDate=promotion.start_date,
        endDate=promotion.end_date,
    )
