"""Feed validity gate.

Decides whether a feed run's staging snapshot is complete enough to reconcile
against. The decision happens before any device is touched; an invalid run is
an ordinary outcome carried by :class:`GateVerdict`, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devicesync.domain.model import FeedRun, StagingRecord


@dataclass(frozen=True, slots=True)
class GateVerdict:
    is_valid: bool
    reason: str | None = None

    @classmethod
    def valid(cls) -> GateVerdict:
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, reason: str) -> GateVerdict:
        return cls(is_valid=False, reason=reason)


class FeedValidityGate(Protocol):
    """Read-only policy judging one run's staging records for one scope.

    Implementations must be deterministic: the same persisted run and records
    always yield the same verdict.
    """

    def evaluate(self, run: FeedRun, records: Sequence[StagingRecord]) -> GateVerdict: ...


@dataclass(frozen=True, slots=True)
class ConsistentBatchGate:
    """Trust a run only if its scope holds records from exactly one refresh batch."""

    def evaluate(self, run: FeedRun, records: Sequence[StagingRecord]) -> GateVerdict:
        if run.is_valid is False:
            return GateVerdict.invalid("feed run marked invalid upstream")
        usable = [record for record in records if record.has_key]
        if not usable:
            return GateVerdict.invalid("no staging records for scope")
        batches = {record.refreshed_at for record in usable}
        if len(batches) > 1:
            return GateVerdict.invalid(f"staging mixes {len(batches)} refresh batches")
        return GateVerdict.valid()
