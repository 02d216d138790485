"""Ports for persisting reconciliation aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from devicesync.domain.model import (
    AuditEntry,
    Device,
    FeatureFlag,
    FeedRun,
    StagingRecord,
    TenantStatusSnapshot,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from devicesync.domain.model import EffectiveStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class FeedRunRepository(Repository[FeedRun], Protocol):
    """Persistence contract for feed runs."""

    def get(self, run_id: int) -> FeedRun | None: ...

    def mark_processed(
        self,
        run_id: int,
        *,
        at: datetime,
        unknown_flips: int = 0,
        is_valid: bool | None = None,
    ) -> None:
        """Stamp ``run_id`` as processed and add ``unknown_flips`` to its counter.

        The counter is incremented in place so concurrent per-tenant reconciles
        of the same run never overwrite each other. ``is_valid`` is left
        untouched when ``None``.
        """
        ...


@runtime_checkable
class StagingRepository(Repository[StagingRecord], Protocol):
    """Read access to the staging snapshot of a feed run."""

    def for_run(self, run_id: int, *, tenant_id: int | None = None) -> Sequence[StagingRecord]: ...


@runtime_checkable
class DeviceRepository(Repository[Device], Protocol):
    """Persistence contract for devices."""

    def get(self, tenant_id: int, external_id: str) -> Device | None: ...

    def for_tenants(self, tenant_ids: Iterable[int], *, lock: bool = False) -> Sequence[Device]:
        """Return every device of ``tenant_ids``; ``lock`` holds them until commit."""
        ...


@runtime_checkable
class AuditRepository(Repository[AuditEntry], Protocol):
    """Append-only store of audit entries."""

    def for_run(self, run_id: int) -> Sequence[AuditEntry]: ...

    def with_new_status(
        self, status: EffectiveStatus, *, run_id: int | None = None
    ) -> Sequence[AuditEntry]: ...


@runtime_checkable
class FeatureFlagRepository(Repository[FeatureFlag], Protocol):
    """Lookup of feature flag rows."""

    def candidates(self, key: str, tenant_ids: Iterable[int]) -> Sequence[FeatureFlag]:
        """Return the global row and the rows of ``tenant_ids`` for ``key``."""
        ...


@runtime_checkable
class StatusSnapshotRepository(Repository[TenantStatusSnapshot], Protocol):
    """Per-tenant status counts recorded for reconciled runs."""

    def get(self, run_id: int, tenant_id: int) -> TenantStatusSnapshot | None: ...

    def for_run(self, run_id: int) -> Sequence[TenantStatusSnapshot]: ...
