"""Read-only run summaries for KPI and alerting collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devicesync.domain.errors import FeedRunNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from devicesync.domain.model import TenantStatusSnapshot
    from devicesync.domain.ports import ReconciliationUnitOfWork


@dataclass(frozen=True, slots=True)
class RunSummary:
    run_id: int
    tenant_scope: int | None
    is_valid: bool | None
    processed_at: datetime | None
    unknown_flip_count: int
    snapshots: tuple[TenantStatusSnapshot, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class RunSummaryReporter:
    """Expose a feed run's processing stamp and flip counter without mutating anything."""

    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork]

    def summarize(self, run_id: int) -> RunSummary:
        with self.unit_of_work_factory() as uow:
            run = uow.repositories.feed_runs.get(run_id)
            if run is None:
                raise FeedRunNotFoundError(run_id)
            snapshots = tuple(
                sorted(
                    uow.repositories.snapshots.for_run(run_id),
                    key=lambda snapshot: snapshot.tenant_id,
                )
            )
            return RunSummary(
                run_id=run_id,
                tenant_scope=run.tenant_scope,
                is_valid=run.is_valid,
                processed_at=run.processed_at,
                unknown_flip_count=run.unknown_flip_count,
                snapshots=snapshots,
            )
