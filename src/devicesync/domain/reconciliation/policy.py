"""Status-transition policy applied to a device partition.

Responsibilities of this stage:
- map carrier statuses for present devices (known and new)
- apply the missing-device rule to absent devices
- collect the status changes that must be audited

Everything here works on in-memory objects; persistence stays with the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devicesync.domain.model import Device, EffectiveStatus, StatusReason

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from devicesync.domain.model import DeviceMutation, StatusChange
    from devicesync.domain.status_mapping import MapStatus

    from .diff import DevicePartition


@dataclass(frozen=True, slots=True)
class MissingDevicePolicy:
    """Per-tenant resolution of the immediate-unknown-on-missing flag.

    Resolved once before the partition is applied so a whole reconcile call
    observes one value per tenant.
    """

    immediate_unknown: Mapping[int, bool] = field(default_factory=dict[int, bool])

    def enabled_for(self, tenant_id: int) -> bool:
        return self.immediate_unknown.get(tenant_id, False)

    def apply(self, device: Device, *, at: datetime) -> DeviceMutation | None:
        """Flip ``device`` to UNKNOWN when enabled; otherwise leave it untouched."""

        if not self.enabled_for(device.tenant_id):
            return None
        return device.mark_missing(at=at)


@dataclass(slots=True)
class TransitionResult:
    """In-memory outcome of applying the policy to one partition."""

    inserted: list[Device] = field(default_factory=list["Device"])
    mutations: list[DeviceMutation] = field(default_factory=list["DeviceMutation"])
    changes: list[StatusChange] = field(default_factory=list["StatusChange"])

    @property
    def updated(self) -> int:
        return sum(1 for mutation in self.mutations if mutation.modified)

    @property
    def flipped_unknown(self) -> int:
        return sum(
            1
            for change in self.changes
            if change.new == EffectiveStatus.UNKNOWN
            and change.reason == StatusReason.NOT_FOUND_IN_FEED
        )


def apply_transitions(
    partition: DevicePartition,
    *,
    map_status: MapStatus,
    missing: MissingDevicePolicy,
    run_id: int,
    at: datetime,
) -> TransitionResult:
    """Apply carrier statuses and the missing rule to every device in ``partition``."""

    result = TransitionResult()

    for device, record in partition.present:
        mutation = device.observe(
            raw_status=record.raw_status,
            status=map_status(record.raw_status),
            run_id=run_id,
            at=at,
        )
        _collect(result, mutation)

    # New devices are inserted whatever the missing-device flag says.
    for record in partition.new:
        device, change = Device.discovered(
            tenant_id=record.tenant_id,
            external_id=record.key[1],
            raw_status=record.raw_status,
            status=map_status(record.raw_status),
            run_id=run_id,
            at=at,
        )
        result.inserted.append(device)
        result.changes.append(change)

    for device in partition.absent:
        mutation = missing.apply(device, at=at)
        if mutation is not None:
            _collect(result, mutation)

    return result


def _collect(result: TransitionResult, mutation: DeviceMutation) -> None:
    if not mutation.modified:
        return
    result.mutations.append(mutation)
    if mutation.status_change is not None:
        result.changes.append(mutation.status_change)
