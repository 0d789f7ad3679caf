from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import Engine
from sqlalchemy.orm import Session

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from octopoz.application.ports.repositories import UnitOfWorkFactory
from octopoz.infrastructure.db import session as db_session
from octopoz.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork

PROJECT_DIR = Path(__file__).resolve().parents[2]


def _alembic_config(database_url: str) -> Config:
    config = Config(str(PROJECT_DIR / "alembic.ini"))
    config.set_main_option(
        "script_location",
        str(PROJECT_DIR / "src" / "octopoz" / "infrastructure" / "db" / "migrations"),
    )
    config.set_main_option("sqlalchemy.url", database_url)
    config.attributes["configure_logger"] = False
    return config


@pytest.fixture
def engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Engine]:
    database_url = f"sqlite:///{tmp_path / 'octopoz.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("REDIS_URL", raising=False)
    db_session._build_engine.cache_clear()

    command.upgrade(_alembic_config(database_url), "head")

    engine = db_session.get_engine()
    yield engine
    engine.dispose()
    db_session._build_engine.cache_clear()


@pytest.fixture
def uow_factory(engine: Engine) -> UnitOfWorkFactory:
    def _open(read_only: bool = False) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(engine, read_only=read_only)

    return _open


@pytest.fixture
def seed(engine: Engine):
    """Insert rows directly, bypassing the engine's own invariants."""

    def _seed(*models) -> None:
        with Session(engine) as session:
            for model in models:
                session.add(model)
                session.flush()
            session.commit()

    return _seed
