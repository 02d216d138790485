from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from devicesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from devicesync.domain.errors import TransactionFailure
from devicesync.domain.model import Device, FeedRun

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyReconciliationUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_uses_configured_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    startup()

    engine = configured_engine()
    assert engine is not None
    assert (engine.url.drivername, engine.url.database) == ("sqlite+pysqlite", ":memory:")


def test_unit_of_work_persists_on_commit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        uow.repositories.feed_runs.add(FeedRun(id=1))
        uow.repositories.devices.add(Device(tenant_id=1, external_id="SIM-1"))
        uow.commit()

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        assert uow.repositories.feed_runs.get(1) is not None
        assert uow.repositories.devices.get(1, "SIM-1") is not None


def test_unit_of_work_discards_uncommitted_changes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        uow.repositories.devices.add(Device(tenant_id=1, external_id="SIM-1"))

    with SqlAlchemyReconciliationUnitOfWork() as uow:
        assert uow.repositories.devices.get(1, "SIM-1") is None


def test_storage_errors_surface_as_transaction_failure(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(TransactionFailure) as excinfo, SqlAlchemyReconciliationUnitOfWork() as uow:
        uow.repositories.devices.add(Device(tenant_id=1, external_id="SIM-1"))
        raise OperationalError("INSERT INTO device", {}, Exception("disk I/O error"))

    assert isinstance(excinfo.value.__cause__, OperationalError)
    with SqlAlchemyReconciliationUnitOfWork() as uow:
        assert uow.repositories.devices.get(1, "SIM-1") is None


def test_domain_errors_pass_through_unchanged(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(LookupError), SqlAlchemyReconciliationUnitOfWork():
        raise LookupError("missing")


def test_session_access_outside_context_fails(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyReconciliationUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
