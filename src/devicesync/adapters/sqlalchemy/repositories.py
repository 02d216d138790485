"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import or_, select, update

from devicesync.adapters.sqlalchemy.mappings import (
    audit_entry_table,
    device_table,
    feature_flag_table,
    feed_run_table,
    staging_record_table,
    tenant_status_snapshot_table,
)
from devicesync.domain.model import (
    AuditEntry,
    Device,
    FeatureFlag,
    FeedRun,
    StagingRecord,
    TenantStatusSnapshot,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sqlalchemy.orm import Session

    from devicesync.domain.model import EffectiveStatus


class SqlAlchemyFeedRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: FeedRun) -> None:
        self.session.add(entity)

    def get(self, run_id: int) -> FeedRun | None:
        return self.session.get(FeedRun, run_id)

    def mark_processed(
        self,
        run_id: int,
        *,
        at: datetime,
        unknown_flips: int = 0,
        is_valid: bool | None = None,
    ) -> None:
        values: dict[str, Any] = {
            "processed_at": at,
            "unknown_flip_count": feed_run_table.c.unknown_flip_count + unknown_flips,
        }
        if is_valid is not None:
            values["is_valid"] = is_valid
        # The increment runs in SQL; "fetch" refreshes any FeedRun already loaded.
        stmt = (
            update(FeedRun)
            .where(feed_run_table.c.id == run_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)


class SqlAlchemyStagingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: StagingRecord) -> None:
        self.session.add(entity)

    def for_run(self, run_id: int, *, tenant_id: int | None = None) -> list[StagingRecord]:
        stmt = (
            select(StagingRecord)
            .where(staging_record_table.c.run_id == run_id)
            .order_by(staging_record_table.c.id)
        )
        if tenant_id is not None:
            stmt = stmt.where(staging_record_table.c.tenant_id == tenant_id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyDeviceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Device) -> None:
        self.session.add(entity)

    def get(self, tenant_id: int, external_id: str) -> Device | None:
        stmt = (
            select(Device)
            .where(device_table.c.tenant_id == tenant_id)
            .where(device_table.c.external_id == external_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_tenants(self, tenant_ids: Iterable[int], *, lock: bool = False) -> list[Device]:
        tenants = sorted(set(tenant_ids))
        if not tenants:
            return []
        stmt = (
            select(Device)
            .where(device_table.c.tenant_id.in_(tenants))
            .order_by(device_table.c.tenant_id, device_table.c.external_id)
        )
        if lock:
            # Ignored by SQLite; row locks on databases that support them.
            stmt = stmt.with_for_update()
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyAuditRepository:
    """Append-only: exposes no update or delete operations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AuditEntry) -> None:
        self.session.add(entity)

    def for_run(self, run_id: int) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(audit_entry_table.c.run_id == run_id)
            .order_by(audit_entry_table.c.tenant_id, audit_entry_table.c.external_id)
        )
        return list(self.session.execute(stmt).scalars())

    def with_new_status(
        self, status: EffectiveStatus, *, run_id: int | None = None
    ) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(audit_entry_table.c.new_status == status)
            .order_by(audit_entry_table.c.recorded_at, audit_entry_table.c.external_id)
        )
        if run_id is not None:
            stmt = stmt.where(audit_entry_table.c.run_id == run_id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyFeatureFlagRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: FeatureFlag) -> None:
        self.session.add(entity)

    def candidates(self, key: str, tenant_ids: Iterable[int]) -> list[FeatureFlag]:
        tenants = sorted(set(tenant_ids))
        tenant_column = feature_flag_table.c.tenant_id
        stmt = (
            select(FeatureFlag)
            .where(feature_flag_table.c.key == key)
            .where(or_(tenant_column.is_(None), tenant_column.in_(tenants)))
            .order_by(feature_flag_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyStatusSnapshotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: TenantStatusSnapshot) -> None:
        self.session.add(entity)

    def get(self, run_id: int, tenant_id: int) -> TenantStatusSnapshot | None:
        stmt = (
            select(TenantStatusSnapshot)
            .where(tenant_status_snapshot_table.c.run_id == run_id)
            .where(tenant_status_snapshot_table.c.tenant_id == tenant_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_run(self, run_id: int) -> list[TenantStatusSnapshot]:
        stmt = (
            select(TenantStatusSnapshot)
            .where(tenant_status_snapshot_table.c.run_id == run_id)
            .order_by(tenant_status_snapshot_table.c.tenant_id)
        )
        return list(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from devicesync.domain.ports.persistence import (
        AuditRepository,
        DeviceRepository,
        FeatureFlagRepository,
        FeedRunRepository,
        StagingRepository,
        StatusSnapshotRepository,
    )

    _session_stub = cast("Session", object())
    _feed_run_repo: FeedRunRepository = SqlAlchemyFeedRunRepository(_session_stub)
    _staging_repo: StagingRepository = SqlAlchemyStagingRepository(_session_stub)
    _device_repo: DeviceRepository = SqlAlchemyDeviceRepository(_session_stub)
    _audit_repo: AuditRepository = SqlAlchemyAuditRepository(_session_stub)
    _flag_repo: FeatureFlagRepository = SqlAlchemyFeatureFlagRepository(_session_stub)
    _snapshot_repo: StatusSnapshotRepository = SqlAlchemyStatusSnapshotRepository(_session_stub)
