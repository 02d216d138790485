"""Orchestrator for device status reconciliation.

One ``reconcile`` call is one unit of work: gate check, three-way diff,
status transitions, audit entries and run counters are committed together or
not at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from devicesync.domain.audit import AuditRecorder, entries_from_changes
from devicesync.domain.clock import Clock, utcnow
from devicesync.domain.errors import FeedRunNotFoundError
from devicesync.domain.feature_flags import IMMEDIATE_UNKNOWN_ON_MISSING, resolve_flags
from devicesync.domain.model import TenantStatusSnapshot, count_statuses
from devicesync.domain.status_mapping import MapStatus, StatusMapper

from .contracts import ReconcileResult
from .diff import partition
from .gate import ConsistentBatchGate, FeedValidityGate, GateVerdict
from .locks import TenantLocks
from .policy import MissingDevicePolicy, TransitionResult, apply_transitions

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime

    from devicesync.domain.model import Device, StagingRecord
    from devicesync.domain.ports import ReconciliationRepositories, ReconciliationUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Reconcile device state against the staging snapshot of a feed run."""

    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork]
    gate: FeedValidityGate = field(default_factory=ConsistentBatchGate)
    map_status: MapStatus = field(default_factory=StatusMapper)
    missing_flag_key: str = IMMEDIATE_UNKNOWN_ON_MISSING
    missing_flag_default: bool = False
    clock: Clock = utcnow
    locks: TenantLocks = field(default_factory=TenantLocks)

    def reconcile(self, run_id: int, tenant_id: int | None = None) -> ReconcileResult:
        """Reconcile ``run_id`` for one tenant, or for the run's whole scope."""

        with self.unit_of_work_factory() as uow:
            repos = uow.repositories
            run = repos.feed_runs.get(run_id)
            if run is None:
                raise FeedRunNotFoundError(run_id)

            now = self.clock()
            if not run.admits_tenant(tenant_id):
                verdict = GateVerdict.invalid(
                    f"tenant {tenant_id} is outside run scope {run.tenant_scope}"
                )
                log.warning(
                    "Skipping feed run %s (tenant=%s): %s", run_id, tenant_id, verdict.reason
                )
                return ReconcileResult.skip(
                    run_id=run_id, tenant_id=tenant_id, processed_at=now, verdict=verdict
                )

            scope = tenant_id if tenant_id is not None else run.tenant_scope
            records = repos.staging.for_run(run_id, tenant_id=scope)
            verdict = self.gate.evaluate(run, records)

            if not verdict.is_valid:
                repos.feed_runs.mark_processed(
                    run_id, at=now, is_valid=False if run.covers_whole_scope(tenant_id) else None
                )
                uow.commit()
                log.warning(
                    "Skipping feed run %s (tenant=%s): %s", run_id, tenant_id, verdict.reason
                )
                return ReconcileResult.skip(
                    run_id=run_id, tenant_id=tenant_id, processed_at=now, verdict=verdict
                )

            tenants = _tenants_in_play(scope, records)
            with self.locks.hold(tenants):
                transitions = self._apply(repos, run_id, records, tenants, now)
                audited = AuditRecorder(repos.audit).record(
                    entries_from_changes(transitions.changes, run_id=run_id, recorded_at=now)
                )
                repos.feed_runs.mark_processed(
                    run_id,
                    at=now,
                    unknown_flips=transitions.flipped_unknown,
                    is_valid=True if run.covers_whole_scope(tenant_id) else None,
                )
                uow.commit()

        result = ReconcileResult(
            run_id=run_id,
            tenant_id=tenant_id,
            processed_at=now,
            verdict=verdict,
            updated=transitions.updated,
            inserted=len(transitions.inserted),
            flipped_unknown=transitions.flipped_unknown,
            audited=audited,
            tenants=tenants,
        )
        log.info(
            "Reconciled feed run %s (tenants=%s): updated=%s, inserted=%s, "
            "flipped_unknown=%s, audited=%s",
            run_id,
            ",".join(str(tenant) for tenant in tenants),
            result.updated,
            result.inserted,
            result.flipped_unknown,
            result.audited,
        )
        return result

    def reconcile_each_tenant(self, run_id: int) -> list[ReconcileResult]:
        """Reconcile every tenant present in the run's staging as its own unit of work."""

        with self.unit_of_work_factory() as uow:
            run = uow.repositories.feed_runs.get(run_id)
            if run is None:
                raise FeedRunNotFoundError(run_id)
            if run.tenant_scope is not None:
                tenants: tuple[int, ...] = (run.tenant_scope,)
            else:
                tenants = _tenants_in_play(None, uow.repositories.staging.for_run(run_id))

        if not tenants:
            return [self.reconcile(run_id)]
        return [self.reconcile(run_id, tenant) for tenant in tenants]

    def _apply(
        self,
        repos: ReconciliationRepositories,
        run_id: int,
        records: Sequence[StagingRecord],
        tenants: tuple[int, ...],
        now: datetime,
    ) -> TransitionResult:
        missing = MissingDevicePolicy(
            resolve_flags(
                repos.flags.candidates(self.missing_flag_key, tenants),
                key=self.missing_flag_key,
                tenant_ids=tenants,
                default=self.missing_flag_default,
            )
        )
        devices = list(repos.devices.for_tenants(tenants, lock=True))

        transitions = apply_transitions(
            partition(devices, records),
            map_status=self.map_status,
            missing=missing,
            run_id=run_id,
            at=now,
        )
        for device in transitions.inserted:
            repos.devices.add(device)

        self._record_snapshots(repos, run_id, tenants, [*devices, *transitions.inserted], now)
        return transitions

    @staticmethod
    def _record_snapshots(
        repos: ReconciliationRepositories,
        run_id: int,
        tenants: Iterable[int],
        devices: Sequence[Device],
        now: datetime,
    ) -> None:
        for tenant_id in tenants:
            counts = count_statuses(
                device.effective_status for device in devices if device.tenant_id == tenant_id
            )
            snapshot = repos.snapshots.get(run_id, tenant_id)
            if snapshot is None:
                snapshot = TenantStatusSnapshot(run_id=run_id, tenant_id=tenant_id)
                snapshot.apply_counts(counts)
                snapshot.recorded_at = now
                repos.snapshots.add(snapshot)
            elif snapshot.counts != counts:
                snapshot.apply_counts(counts)
                snapshot.recorded_at = now


def _tenants_in_play(scope: int | None, records: Iterable[StagingRecord]) -> tuple[int, ...]:
    if scope is not None:
        return (scope,)
    return tuple(sorted({record.tenant_id for record in records if record.has_key}))

