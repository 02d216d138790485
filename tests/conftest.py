from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from devicesync.adapters.sqlalchemy import start_mappers
from devicesync.adapters.sqlalchemy.migrations import upgrade_head
from devicesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.reconciliation import FakeUnitOfWorkFactory, FixedClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyReconciliationUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyReconciliationUnitOfWork:
        return SqlAlchemyReconciliationUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def fake_uow() -> FakeUnitOfWorkFactory:
    return FakeUnitOfWorkFactory()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def sqlite_file_unit_of_work(
    tmp_path: Path,
) -> Iterator[Callable[[], SqlAlchemyReconciliationUnitOfWork]]:
    """Unit of work over an on-disk database, shared by connections on any thread."""
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'devicesync.db'}",
        future=True,
        connect_args={"timeout": 30},
    )
    startup(engine=engine, force=True)
    try:
        yield SqlAlchemyReconciliationUnitOfWork
    finally:
        shutdown()
