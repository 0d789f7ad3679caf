from __future__ import annotations

from fastapi import APIRouter, Depends

from octopoz.api.dependencies import get_retry_policy, get_uow_factory
from octopoz.application.dto.responses import ActivePromotionsResponse
from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.application.transactions import RetryPolicy
from octopoz.application.use_cases.list_active_promotions import ListActivePromotions
from octopoz.domain.common.ids import TenantId

router = APIRouter(prefix="/v1/tenants/{tenant_id}", tags=["promotions"])


@router.get("/active-promotions", response_model=ActivePromotionsResponse)
def list_active_promotions(
    tenant_id: str,
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> ActivePromotionsResponse:
    use_case = ListActivePromotions(uow_factory, retry_policy=retry_policy)
    return use_case.execute(TenantId(tenant_id))
