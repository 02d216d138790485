"""Append-only recording and querying of effective-status transitions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from devicesync.domain.model import AuditEntry, EffectiveStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from devicesync.domain.model import StatusChange
    from devicesync.domain.ports import AuditRepository

log = getLogger(__name__)


def entries_from_changes(
    changes: Iterable[StatusChange],
    *,
    run_id: int,
    recorded_at: datetime,
) -> list[AuditEntry]:
    """Build one audit entry per status change, ordered by device key."""

    ordered = sorted(changes, key=lambda change: (change.tenant_id, change.external_id))
    return [
        AuditEntry(
            external_id=change.external_id,
            tenant_id=change.tenant_id,
            run_id=run_id,
            previous_status=change.previous,
            new_status=change.new,
            reason=change.reason,
            recorded_at=recorded_at,
        )
        for change in ordered
    ]


class AuditRecorder:
    """Append entries through the caller's unit of work.

    Entries are written by the same transaction as the device mutations that
    produced them, so they commit or roll back together.
    """

    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    def record(self, entries: Iterable[AuditEntry]) -> int:
        written = 0
        for entry in entries:
            self._repository.add(entry)
            written += 1
        if written:
            log.debug("Appended %s audit entries", written)
        return written

    def entries_for_run(self, run_id: int) -> Sequence[AuditEntry]:
        return self._repository.for_run(run_id)

    def entries_with_status(
        self,
        status: EffectiveStatus = EffectiveStatus.UNKNOWN,
        *,
        run_id: int | None = None,
    ) -> Sequence[AuditEntry]:
        return self._repository.with_new_status(status, run_id=run_id)
