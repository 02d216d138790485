"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AuditRepository,
    DeviceRepository,
    FeatureFlagRepository,
    FeedRunRepository,
    Repository,
    StagingRepository,
    StatusSnapshotRepository,
)
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AuditRepository",
    "DeviceRepository",
    "FeatureFlagRepository",
    "FeedRunRepository",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "StagingRepository",
    "StatusSnapshotRepository",
    "UnitOfWork",
]
