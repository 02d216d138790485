"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from devicesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    is_started,
    startup,
)
from devicesync.config import get_reconciliation_config
from devicesync.domain.reconciliation import ReconciliationEngine, TenantLocks
from devicesync.domain.reporting import RunSummary, RunSummaryReporter
from devicesync.domain.ports.unit_of_work import ReconciliationUnitOfWork

if TYPE_CHECKING:
    from devicesync.config import ReconciliationConfig
    from devicesync.domain.reconciliation import ReconcileResult

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


log = getLogger(__name__)

# Shared by every engine built in this process so concurrent calls for the
# same tenant serialise.
_TENANT_LOCKS = TenantLocks()


def _resolve_factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyReconciliationUnitOfWork


def build_engine(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> ReconciliationEngine:
    """Return a reconciliation engine wired to the configured adapters."""

    effective_config = config or get_reconciliation_config()
    return ReconciliationEngine(
        unit_of_work_factory=_resolve_factory(unit_of_work_factory),
        missing_flag_key=effective_config.missing_flag_key,
        missing_flag_default=effective_config.missing_flag_default,
        locks=_TENANT_LOCKS,
    )


def reconcile_feed_run(
    run_id: int,
    tenant_id: int | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> ReconcileResult:
    """Reconcile one feed run, optionally restricted to a single tenant."""

    engine = build_engine(unit_of_work_factory=unit_of_work_factory, config=config)
    log.info("Starting reconciliation: run_id=%s, tenant_id=%s", run_id, tenant_id)
    return engine.reconcile(run_id, tenant_id)


def reconcile_each_tenant(
    run_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> list[ReconcileResult]:
    """Reconcile a feed run one tenant at a time, each in its own transaction."""

    engine = build_engine(unit_of_work_factory=unit_of_work_factory, config=config)
    log.info("Starting per-tenant reconciliation: run_id=%s", run_id)
    return engine.reconcile_each_tenant(run_id)


def summarize_feed_run(
    run_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunSummary:
    """Return the processing stamp, flip counter and tenant counts of a feed run."""

    return RunSummaryReporter(_resolve_factory(unit_of_work_factory)).summarize(run_id)
