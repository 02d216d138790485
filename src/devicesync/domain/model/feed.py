"""Feed runs and the staging snapshot they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from devicesync.domain.model.enums import EffectiveStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from devicesync.domain.model.device import DeviceKey


@dataclass(eq=False, kw_only=True)
class FeedRun:
    """One execution of carrier data ingestion.

    Created by the ingestion side; reconciliation only writes ``is_valid``,
    ``processed_at`` and ``unknown_flip_count``.
    """

    id: int | None = None
    # None means the run covers every tenant present in its staging rows.
    tenant_scope: int | None = None
    is_valid: bool | None = None
    processed_at: datetime | None = None
    unknown_flip_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def covers_whole_scope(self, tenant_id: int | None) -> bool:
        return tenant_id is None or tenant_id == self.tenant_scope

    def admits_tenant(self, tenant_id: int | None) -> bool:
        """Whether a reconcile for ``tenant_id`` falls inside this run's scope."""
        return tenant_id is None or self.tenant_scope is None or tenant_id == self.tenant_scope

    def mark_processed(
        self, *, at: datetime, unknown_flips: int = 0, is_valid: bool | None = None
    ) -> None:
        if is_valid is not None:
            self.is_valid = is_valid
        self.processed_at = at
        self.unknown_flip_count = (self.unknown_flip_count or 0) + unknown_flips


@dataclass(eq=False, kw_only=True)
class StagingRecord:
    """A carrier-reported device status staged for one feed run."""

    id: int | None = None
    run_id: int
    tenant_id: int
    external_id: str | None
    raw_status: str | None = None
    # Carrier refresh batch the row belongs to.
    refreshed_at: datetime | None = None
    staged_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def key(self) -> DeviceKey:
        return (self.tenant_id, (self.external_id or "").strip())

    @property
    def has_key(self) -> bool:
        return bool(self.external_id and self.external_id.strip())


@dataclass(eq=False, kw_only=True)
class TenantStatusSnapshot:
    """Per-tenant device counts by effective status after a reconciled run."""

    id: int | None = None
    run_id: int
    tenant_id: int
    active_count: int = 0
    suspended_count: int = 0
    inactive_count: int = 0
    unknown_count: int = 0
    recorded_at: datetime | None = None

    @property
    def counts(self) -> dict[EffectiveStatus, int]:
        return {
            EffectiveStatus.ACTIVE: self.active_count,
            EffectiveStatus.SUSPENDED: self.suspended_count,
            EffectiveStatus.INACTIVE: self.inactive_count,
            EffectiveStatus.UNKNOWN: self.unknown_count,
        }

    def apply_counts(self, counts: Mapping[EffectiveStatus, int]) -> None:
        self.active_count = counts.get(EffectiveStatus.ACTIVE, 0)
        self.suspended_count = counts.get(EffectiveStatus.SUSPENDED, 0)
        self.inactive_count = counts.get(EffectiveStatus.INACTIVE, 0)
        self.unknown_count = counts.get(EffectiveStatus.UNKNOWN, 0)


def count_statuses(statuses: Iterable[EffectiveStatus]) -> dict[EffectiveStatus, int]:
    counts = dict.fromkeys(EffectiveStatus, 0)
    for status in statuses:
        counts[status] += 1
    return counts
