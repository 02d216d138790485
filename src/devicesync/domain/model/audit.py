"""Append-only audit records for effective-status transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from devicesync.domain.model.entity import Entity

if TYPE_CHECKING:
    from devicesync.domain.model.enums import EffectiveStatus, StatusReason


@dataclass(eq=False, kw_only=True)
class AuditEntry(Entity):
    """One effective-status transition of one device in one feed run.

    ``previous_status`` is None when the run discovered the device.
    """

    external_id: str
    tenant_id: int
    run_id: int
    previous_status: EffectiveStatus | None
    new_status: EffectiveStatus
    reason: StatusReason
    recorded_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
