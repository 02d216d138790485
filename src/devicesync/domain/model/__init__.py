"""Public domain model surface."""

from __future__ import annotations

from devicesync.domain.model.audit import AuditEntry
from devicesync.domain.model.device import Device, DeviceKey, DeviceMutation, StatusChange
from devicesync.domain.model.entity import Entity, new_id
from devicesync.domain.model.enums import EffectiveStatus, StatusReason
from devicesync.domain.model.feed import (
    FeedRun,
    StagingRecord,
    TenantStatusSnapshot,
    count_statuses,
)
from devicesync.domain.model.flags import FeatureFlag

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # devices
    "Device",
    "DeviceKey",
    "DeviceMutation",
    "StatusChange",
    # feed
    "FeedRun",
    "StagingRecord",
    "TenantStatusSnapshot",
    "count_statuses",
    # audit
    "AuditEntry",
    # flags
    "FeatureFlag",
    # enums
    "EffectiveStatus",
    "StatusReason",
]
