from __future__ import annotations

from datetime import datetime
from typing import Callable

from octopoz.application.dto.responses import ActivePromotionsResponse
from octopoz.application.mappers.promotion_mapper import to_promotion_response
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.services.promotion_ledger import PromotionLedger
from octopoz.application.transactions import RetryPolicy, run_in_transaction
from octopoz.application.use_cases.context import utcnow
from octopoz.domain.common.ids import TenantId


class ListActivePromotions:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Callable[[], datetime] = utcnow,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._retry_policy = retry_policy

    def execute(self, tenant_id: TenantId) -> ActivePromotionsResponse:
        now = self._clock()
        promotions = run_in_transaction(
            self._uow_factory,
            lambda uow: PromotionLedger(uow.promotions).list_active(tenant_id, now),
            operation="list_active_promotions",
            retry_policy=self._retry_policy,
            read_only=True,
        )
        return ActivePromotionsResponse(
            promotions=[to_promotion_response(promotion) for promotion in promotions]
        )
