from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from octopoz.domain.common.ids import TableId, TenantId


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    OUT_OF_SERVICE = "out_of_service"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    tenant_id: TenantId
    table_number: int
    capacity: int
    status: TableStatus

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be > 0")

    def seats(self, party_size: int) -> bool:
        return self.status == TableStatus.AVAILABLE and self.capacity >= party_size
