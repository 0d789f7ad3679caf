from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from rows import table_row, tenant_row

from octopoz.domain.common.ids import TenantId
from octopoz.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork

TENANT = TenantId("tnt_001")


def test_read_only_unit_reads_while_a_writer_holds_the_lock(engine, seed) -> None:
    seed(tenant_row(), table_row(1, 4), table_row(2, 2))

    with SqlAlchemyUnitOfWork(engine) as writer:
        assert writer.tenants.get(TENANT) is not None
        with SqlAlchemyUnitOfWork(engine, read_only=True) as reader:
            tables = reader.tables.list_for_tenant(TENANT)

    assert sorted(table.table_number for table in tables) == [1, 2]


def test_read_only_unit_refuses_to_commit(engine, seed) -> None:
    seed(tenant_row())

    with SqlAlchemyUnitOfWork(engine, read_only=True) as reader:
        assert reader.tenants.get(TENANT) is not None
        with pytest.raises(RuntimeError, match="read-only"):
            reader.commit()
