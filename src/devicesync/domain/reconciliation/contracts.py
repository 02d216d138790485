"""Result types returned by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .gate import GateVerdict

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconcileResult:
    """Outcome of one reconcile call.

    ``skipped`` is True when the gate rejected the run; nothing but the run's
    ``processed_at`` (and possibly its validity verdict) was written then. A
    tenant outside the run's scope is skipped without writing anything.
    ``updated`` counts existing devices with at least one changed field and
    includes the ``flipped_unknown`` devices.
    """

    run_id: int
    tenant_id: int | None
    processed_at: datetime
    verdict: GateVerdict = field(default_factory=GateVerdict.valid)
    updated: int = 0
    inserted: int = 0
    flipped_unknown: int = 0
    audited: int = 0
    tenants: tuple[int, ...] = ()

    @property
    def skipped(self) -> bool:
        return not self.verdict.is_valid

    @classmethod
    def skip(
        cls,
        *,
        run_id: int,
        tenant_id: int | None,
        processed_at: datetime,
        verdict: GateVerdict,
    ) -> ReconcileResult:
        return cls(
            run_id=run_id,
            tenant_id=tenant_id,
            processed_at=processed_at,
            verdict=verdict,
        )
