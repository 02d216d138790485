"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from devicesync.domain.ports.persistence import (
        AuditRepository,
        DeviceRepository,
        FeatureFlagRepository,
        FeedRunRepository,
        StagingRepository,
        StatusSnapshotRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Leaving the context without ``commit`` discards every pending change.
    """

    @property
    def repositories(self) -> TRepositories: ...  # the repo list itself should be immutable

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ReconciliationRepositories(RepositoryCollection):
    """Repositories one reconcile call reads and writes inside a single transaction."""

    feed_runs: FeedRunRepository
    staging: StagingRepository
    devices: DeviceRepository
    audit: AuditRepository
    flags: FeatureFlagRepository
    snapshots: StatusSnapshotRepository


type ReconciliationUnitOfWork = UnitOfWork[ReconciliationRepositories]
