"""Carrier-managed device records and their status transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from devicesync.domain.model.entity import Entity
from devicesync.domain.model.enums import EffectiveStatus, StatusReason

if TYPE_CHECKING:
    from datetime import datetime

type DeviceKey = tuple[int, str]


@dataclass(frozen=True, slots=True)
class StatusChange:
    """An effective-status transition applied to one device."""

    tenant_id: int
    external_id: str
    previous: EffectiveStatus | None
    new: EffectiveStatus
    reason: StatusReason
    changed_at: datetime


@dataclass(frozen=True, slots=True)
class DeviceMutation:
    """Fields touched on one device, plus the status change if there was one."""

    device: Device
    changed_fields: tuple[str, ...] = ()
    status_change: StatusChange | None = None

    @property
    def modified(self) -> bool:
        return bool(self.changed_fields)


@dataclass(eq=False, kw_only=True)
class Device(Entity):
    """A subscriber/SIM record whose effective status is owned by reconciliation.

    Mutate only through :meth:`observe` and :meth:`mark_missing`; both compare
    before writing so a no-op resync leaves every field (``updated_at``
    included) untouched.
    """

    tenant_id: int
    external_id: str
    raw_carrier_status: str | None = None
    effective_status: EffectiveStatus = EffectiveStatus.UNKNOWN
    previous_effective_status: EffectiveStatus | None = None
    status_reason: StatusReason = StatusReason.CARRIER_STATUS
    status_changed_at: datetime | None = None
    last_seen_at: datetime | None = None
    last_seen_run_id: int | None = None
    # Moment the device most recently left ACTIVE.
    deactivated_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def key(self) -> DeviceKey:
        return (self.tenant_id, self.external_id)

    @classmethod
    def discovered(
        cls,
        *,
        tenant_id: int,
        external_id: str,
        raw_status: str | None,
        status: EffectiveStatus,
        run_id: int,
        at: datetime,
    ) -> tuple[Device, StatusChange]:
        """Create a device first reported by the carrier feed."""

        device = cls(
            tenant_id=tenant_id,
            external_id=external_id,
            raw_carrier_status=raw_status,
            effective_status=status,
            status_reason=StatusReason.CARRIER_STATUS,
            status_changed_at=at,
            last_seen_at=at,
            last_seen_run_id=run_id,
            created_at=at,
            updated_at=at,
        )
        change = StatusChange(
            tenant_id=tenant_id,
            external_id=external_id,
            previous=None,
            new=status,
            reason=StatusReason.CARRIER_STATUS,
            changed_at=at,
        )
        return device, change

    def observe(
        self,
        *,
        raw_status: str | None,
        status: EffectiveStatus,
        run_id: int,
        at: datetime,
    ) -> DeviceMutation:
        """Apply a carrier-reported status from a valid feed run."""

        changed: list[str] = []
        if self.raw_carrier_status != raw_status:
            self.raw_carrier_status = raw_status
            changed.append("raw_carrier_status")
        if self.last_seen_run_id != run_id:
            self.last_seen_at = at
            self.last_seen_run_id = run_id
            changed.extend(("last_seen_at", "last_seen_run_id"))
        status_change = self._transition(status, StatusReason.CARRIER_STATUS, at, changed)
        return self._finish(changed, status_change, at)

    def mark_missing(self, *, at: datetime) -> DeviceMutation:
        """Flip to UNKNOWN because a valid feed no longer reports the device.

        ``last_seen_at``/``last_seen_run_id`` keep the last known-good sighting.
        """

        changed: list[str] = []
        status_change = self._transition(
            EffectiveStatus.UNKNOWN, StatusReason.NOT_FOUND_IN_FEED, at, changed
        )
        return self._finish(changed, status_change, at)

    def _transition(
        self,
        status: EffectiveStatus,
        reason: StatusReason,
        at: datetime,
        changed: list[str],
    ) -> StatusChange | None:
        if self.status_reason != reason:
            self.status_reason = reason
            changed.append("status_reason")
        if self.effective_status == status:
            return None

        previous = self.effective_status
        if previous == EffectiveStatus.ACTIVE:
            self.deactivated_at = at
            changed.append("deactivated_at")
        self.previous_effective_status = previous
        self.effective_status = status
        self.status_changed_at = at
        changed.extend(("previous_effective_status", "effective_status", "status_changed_at"))
        return StatusChange(
            tenant_id=self.tenant_id,
            external_id=self.external_id,
            previous=previous,
            new=status,
            reason=reason,
            changed_at=at,
        )

    def _finish(
        self,
        changed: list[str],
        status_change: StatusChange | None,
        at: datetime,
    ) -> DeviceMutation:
        if changed:
            self.updated_at = at
        return DeviceMutation(
            device=self, changed_fields=tuple(changed), status_change=status_change
        )
