"""Reconciliation of device state against carrier feed runs.

Flow of one reconcile call:
1) load the feed run and its staging snapshot for the requested scope
2) ask the validity gate whether the snapshot can be trusted
3) resolve the missing-device flag per tenant
4) partition devices into present, new and absent
5) apply status transitions and collect status changes
6) append audit entries and update run counters in the same transaction
"""

from __future__ import annotations

from .contracts import ReconcileResult
from .diff import DevicePartition, latest_by_key, partition
from .engine import ReconciliationEngine
from .gate import ConsistentBatchGate, FeedValidityGate, GateVerdict
from .locks import TenantLocks
from .policy import MissingDevicePolicy, TransitionResult, apply_transitions

__all__ = [
    "ConsistentBatchGate",
    "DevicePartition",
    "FeedValidityGate",
    "GateVerdict",
    "MissingDevicePolicy",
    "ReconcileResult",
    "ReconciliationEngine",
    "TenantLocks",
    "TransitionResult",
    "apply_transitions",
    "latest_by_key",
    "partition",
]
