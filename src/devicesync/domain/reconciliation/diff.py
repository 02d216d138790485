"""Three-way partition of current devices against a staging snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devicesync.domain.model import Device, DeviceKey, StagingRecord


@dataclass(slots=True)
class DevicePartition:
    """Disjoint device sets for one reconcile call, each ordered by device key."""

    present: list[tuple[Device, StagingRecord]] = field(
        default_factory=list["tuple[Device, StagingRecord]"]
    )
    new: list[StagingRecord] = field(default_factory=list["StagingRecord"])
    absent: list[Device] = field(default_factory=list["Device"])


def _precedence(record: StagingRecord) -> tuple[object, int]:
    return (record.staged_at, record.id or 0)


def latest_by_key(records: Iterable[StagingRecord]) -> dict[DeviceKey, StagingRecord]:
    """Collapse duplicate rows per device key.

    The most recently staged row wins; equal ``staged_at`` values fall back to
    the highest staging sequence id. Rows without an external id are dropped.
    """

    winners: dict[DeviceKey, StagingRecord] = {}
    for record in records:
        if not record.has_key:
            continue
        key = record.key
        current = winners.get(key)
        if current is None or _precedence(record) > _precedence(current):
            winners[key] = record
    return winners


def partition(
    devices: Iterable[Device],
    records: Iterable[StagingRecord],
) -> DevicePartition:
    """Hash-join ``devices`` with ``records`` on ``(tenant_id, external_id)``.

    Callers pass devices and records already scoped to the same tenants.
    """

    staged = latest_by_key(records)
    by_key = {device.key: device for device in devices}

    result = DevicePartition()
    for key in sorted(by_key.keys() | staged.keys()):
        device = by_key.get(key)
        record = staged.get(key)
        if device is not None and record is not None:
            result.present.append((device, record))
        elif record is not None:
            result.new.append(record)
        elif device is not None:
            result.absent.append(device)
    return result
