from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def insert_if_absent(
    session: Session,
    model: type[Any],
    values: dict[str, Any],
    index_elements: list[str],
) -> None:
    dialect_name = session.get_bind().dialect.name
    if dialect_name == "postgresql":
        statement = postgresql.insert(model)
    elif dialect_name == "sqlite":
        statement = sqlite.insert(model)
    else:
        raise RuntimeError(f"unsupported database dialect: {dialect_name}")
    session.execute(
        statement.values(**values).on_conflict_do_nothing(index_elements=index_elements)
    )
