from __future__ import annotations

import pytest

from devicesync.domain.errors import FeedRunNotFoundError
from devicesync.domain.model import TenantStatusSnapshot
from devicesync.domain.reporting import RunSummaryReporter
from tests.helpers.reconciliation import NOW, FakeUnitOfWorkFactory


def test_summary_reports_run_stamp_and_snapshots(fake_uow: FakeUnitOfWorkFactory) -> None:
    store = fake_uow.store
    run_id = store.add_run()
    run = store.runs[run_id]
    run.is_valid = True
    run.mark_processed(at=NOW, unknown_flips=2)
    store.snapshots.extend(
        [
            TenantStatusSnapshot(run_id=run_id, tenant_id=2, active_count=4),
            TenantStatusSnapshot(run_id=run_id, tenant_id=1, unknown_count=2),
        ]
    )

    summary = RunSummaryReporter(fake_uow).summarize(run_id)

    assert summary.is_valid is True
    assert summary.processed_at == NOW
    assert summary.unknown_flip_count == 2
    assert [snapshot.tenant_id for snapshot in summary.snapshots] == [1, 2]
    assert not fake_uow.created[-1].committed


def test_summary_of_unknown_run_raises(fake_uow: FakeUnitOfWorkFactory) -> None:
    with pytest.raises(FeedRunNotFoundError):
        RunSummaryReporter(fake_uow).summarize(404)
