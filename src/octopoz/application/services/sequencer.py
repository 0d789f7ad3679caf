from __future__ import annotations

from datetime import date

from octopoz.application.ports.repositories import CounterStore
from octopoz.domain.common.ids import TenantId
from octopoz.domain.order.entities import format_order_number
from octopoz.domain.tenant.entities import daily_sequence_key


class OrderSequencer:
    def __init__(self, counters: CounterStore) -> None:
        self._counters = counters

    def next_order_number(self, tenant_id: TenantId, day: date) -> str:
        sequence = self._counters.increment(daily_sequence_key(tenant_id, day))
        return format_order_number(day, sequence)
