from __future__ import annotations

import logging
from datetime import date

from octopoz.application.errors import CapacityExceededError
from octopoz.application.metrics.engine_metrics import record_capacity_rejection
from octopoz.application.ports.repositories import CounterStore
from octopoz.domain.tenant.entities import Tenant, monthly_counter_key

logger = logging.getLogger(__name__)


class AdmissionController:
    """Gates new orders against the tenant's monthly quota."""

    def __init__(self, counters: CounterStore) -> None:
        self._counters = counters

    def reserve_capacity(self, tenant: Tenant, period: date) -> int:
        """Claim one order slot for the month containing ``period``.

        Returns the number of slots still free after this claim.
        """
        key = monthly_counter_key(tenant.tenant_id, period)
        claimed = self._counters.increment_if_below(key, tenant.monthly_capacity)
        if claimed is None:
            record_capacity_rejection(str(tenant.tenant_id))
            logger.info(
                "capacity_exceeded",
                extra={"tenant_id": str(tenant.tenant_id), "period": key.period_value},
            )
            raise CapacityExceededError(
                f"monthly capacity of {tenant.monthly_capacity} orders reached "
                f"for tenant {tenant.tenant_id} in {key.period_value}",
                details={
                    "monthlyCapacity": tenant.monthly_capacity,
                    "period": key.period_value,
                },
            )
        return tenant.monthly_capacity - claimed
