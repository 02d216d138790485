"""SQLAlchemy adapter package for devicesync."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAuditRepository,
    SqlAlchemyDeviceRepository,
    SqlAlchemyFeatureFlagRepository,
    SqlAlchemyFeedRunRepository,
    SqlAlchemyStagingRepository,
    SqlAlchemyStatusSnapshotRepository,
)
from .unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAuditRepository",
    "SqlAlchemyDeviceRepository",
    "SqlAlchemyFeatureFlagRepository",
    "SqlAlchemyFeedRunRepository",
    "SqlAlchemyReconciliationUnitOfWork",
    "SqlAlchemyStagingRepository",
    "SqlAlchemyStatusSnapshotRepository",
    "StartupError",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
