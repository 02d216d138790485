from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from devicesync import app
from devicesync.config import ReconciliationConfig
from devicesync.domain.errors import FeedRunNotFoundError
from devicesync.domain.model import EffectiveStatus, FeedRun
from tests.helpers.reconciliation import FakeUnitOfWorkFactory, make_device, make_record

if TYPE_CHECKING:
    from collections.abc import Callable

    from devicesync.adapters.sqlalchemy.unit_of_work import SqlAlchemyReconciliationUnitOfWork


def test_build_engine_applies_config(fake_uow: FakeUnitOfWorkFactory) -> None:
    engine = app.build_engine(
        unit_of_work_factory=fake_uow,
        config=ReconciliationConfig(missing_flag_key="custom", missing_flag_default=True),
    )

    assert engine.missing_flag_key == "custom"
    assert engine.missing_flag_default is True
    assert engine.locks is app.build_engine(unit_of_work_factory=fake_uow).locks


def test_reconcile_feed_run_uses_config_default(fake_uow: FakeUnitOfWorkFactory) -> None:
    store = fake_uow.store
    store.devices.extend([make_device("SIM-1"), make_device("SIM-2")])
    run_id = store.add_run()
    store.stage([make_record("SIM-1", run_id=run_id)])

    result = app.reconcile_feed_run(
        run_id,
        unit_of_work_factory=fake_uow,
        config=ReconciliationConfig(missing_flag_default=True),
    )

    assert result.flipped_unknown == 1
    assert store.device(1, "SIM-2").effective_status is EffectiveStatus.UNKNOWN


def test_reconcile_each_tenant_returns_one_result_per_tenant(
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    store = fake_uow.store
    run_id = store.add_run()
    store.stage(
        [
            make_record("SIM-1", run_id=run_id, tenant_id=1),
            make_record("SIM-2", run_id=run_id, tenant_id=3),
        ]
    )

    results = app.reconcile_each_tenant(
        run_id, unit_of_work_factory=fake_uow, config=ReconciliationConfig()
    )

    assert [result.tenant_id for result in results] == [1, 3]
    assert all(result.inserted == 1 for result in results)


def test_summarize_feed_run_uses_started_adapter(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.feed_runs.add(FeedRun(id=7, tenant_scope=2))
        uow.commit()

    summary = app.summarize_feed_run(7)

    assert summary.tenant_scope == 2
    assert summary.processed_at is None
    with pytest.raises(FeedRunNotFoundError):
        app.reconcile_feed_run(8, config=ReconciliationConfig())
