from __future__ import annotations

from octopoz.application.errors import TenantInactiveError, TenantNotFoundError
from octopoz.application.ports.repositories import TenantRepository
from octopoz.domain.common.ids import TenantId
from octopoz.domain.tenant.entities import Tenant


def load_tenant(tenants: TenantRepository, tenant_id: TenantId) -> Tenant:
    tenant = tenants.get(tenant_id)
    if tenant is None:
        raise TenantNotFoundError(f"tenant {tenant_id} not found")
    return tenant


def load_active_tenant(tenants: TenantRepository, tenant_id: TenantId) -> Tenant:
    tenant = load_tenant(tenants, tenant_id)
    if not tenant.is_active:
        raise TenantInactiveError(
            f"tenant {tenant_id} is {tenant.status.value}",
            details={"status": tenant.status.value},
        )
    return tenant
