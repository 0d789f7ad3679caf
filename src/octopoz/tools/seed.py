from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import Engine, inspect
from sqlalchemy.orm import Session

from octopoz.infrastructure.db.dialect import insert_if_absent
from octopoz.infrastructure.db.models.promotion import PromotionModel
from octopoz.infrastructure.db.models.table import TableModel
from octopoz.infrastructure.db.models.tenant import TenantModel
from octopoz.infrastructure.db.session import get_engine

DEMO_TENANT_ID = "tnt_demo"
DEMO_TABLE_CAPACITIES = (2, 2, 4, 4, 6, 8)
DEMO_PROMOTION_ID = "prm_welcome"


def seed_demo_data(engine: Engine, now: datetime | None = None) -> bool:
    """Insert the demo tenant, its floor plan and one promotion if they are missing.

    Returns False when the schema has not been migrated yet.
    """
    required_tables = {"tenants", "tables", "promotions"}
    if not required_tables.issubset(set(inspect(engine).get_table_names())):
        return False

    now = now or datetime.now(timezone.utc)
    with Session(engine) as session:
        insert_if_absent(
            session,
            TenantModel,
            values={
                "id": DEMO_TENANT_ID,
                "name": "Downtown Test Kitchen",
                "monthly_capacity": 1000,
                "status": "active",
            },
            index_elements=["id"],
        )
        for number, capacity in enumerate(DEMO_TABLE_CAPACITIES, start=1):
            insert_if_absent(
                session,
                TableModel,
                values={
                    "id": f"tbl_{number:03d}",
                    "tenant_id": DEMO_TENANT_ID,
                    "table_number": number,
                    "capacity": capacity,
                    "status": "available",
                },
                index_elements=["id"],
            )
        insert_if_absent(
            session,
            PromotionModel,
            values={
                "id": DEMO_PROMOTION_ID,
                "tenant_id": DEMO_TENANT_ID,
                "name": "Welcome 10% off",
                "description": "Ten percent off the first order",
                "type": "percentage",
                "discount_value": 10,
                "usage_limit": 100,
                "used_count": 0,
                "active": True,
                "start_date": now - timedelta(days=30),
                "end_date": now + timedelta(days=90),
            },
            index_elements=["id"],
        )
        session.commit()
    return True


def main() -> None:
    if seed_demo_data(get_engine(timeout_seconds=2.0)):
        print("seed complete")
    else:
        print("no schema yet")


if __name__ == "__main__":
    main()
