"""SQLAlchemy mapping metadata for the devicesync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    event,
    orm,
)
from sqlalchemy.orm import configure_mappers

from devicesync.domain.errors import AuditEntryImmutableError
from devicesync.domain.model import (
    AuditEntry,
    Device,
    EffectiveStatus,
    FeatureFlag,
    FeedRun,
    StagingRecord,
    StatusReason,
    TenantStatusSnapshot,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.orm import Mapper

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tables ----------------------------------------------------------------------

feed_run_table = Table(
    "feed_run",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_scope", Integer, nullable=True),
    Column("is_valid", Boolean, nullable=True),
    Column("processed_at", UTCDateTime(), nullable=True),
    Column("unknown_flip_count", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
)

staging_record_table = Table(
    "staging_record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "run_id",
        Integer,
        ForeignKey("feed_run.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("tenant_id", Integer, nullable=False),
    Column("external_id", String, nullable=True),
    Column("raw_status", String, nullable=True),
    Column("refreshed_at", UTCDateTime(), nullable=True),
    Column("staged_at", UTCDateTime(), nullable=False),
    Index("ix_staging_record_run_tenant", "run_id", "tenant_id"),
)

device_table = Table(
    "device",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("tenant_id", Integer, nullable=False),
    Column("external_id", String, nullable=False),
    Column("raw_carrier_status", String, nullable=True),
    Column("effective_status", Enum(EffectiveStatus, native_enum=False), nullable=False),
    Column(
        "previous_effective_status",
        Enum(EffectiveStatus, native_enum=False),
        nullable=True,
    ),
    Column("status_reason", Enum(StatusReason, native_enum=False), nullable=False),
    Column("status_changed_at", UTCDateTime(), nullable=True),
    Column("last_seen_at", UTCDateTime(), nullable=True),
    Column("last_seen_run_id", Integer, nullable=True),
    Column("deactivated_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    UniqueConstraint("tenant_id", "external_id", name="uq_device_tenant_external_id"),
)

audit_entry_table = Table(
    "audit_entry",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("external_id", String, nullable=False),
    Column("tenant_id", Integer, nullable=False),
    Column("run_id", Integer, nullable=False),
    Column("previous_status", Enum(EffectiveStatus, native_enum=False), nullable=True),
    Column("new_status", Enum(EffectiveStatus, native_enum=False), nullable=False),
    Column("reason", Enum(StatusReason, native_enum=False), nullable=False),
    Column("recorded_at", UTCDateTime(), nullable=False),
    Index("ix_audit_entry_run", "run_id"),
    Index("ix_audit_entry_new_status", "new_status"),
)

feature_flag_table = Table(
    "feature_flag",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("key", String, nullable=False),
    Column("tenant_id", Integer, nullable=True),
    Column("enabled", Boolean, nullable=False, default=False),
    UniqueConstraint("key", "tenant_id", name="uq_feature_flag_key_tenant"),
)

# NULL tenant ids never collide in the composite constraint; keep one global row per key.
Index(
    "uq_feature_flag_global_key",
    feature_flag_table.c.key,
    unique=True,
    sqlite_where=feature_flag_table.c.tenant_id.is_(None),
    postgresql_where=feature_flag_table.c.tenant_id.is_(None),
)

tenant_status_snapshot_table = Table(
    "tenant_status_snapshot",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "run_id",
        Integer,
        ForeignKey("feed_run.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("tenant_id", Integer, nullable=False),
    Column("active_count", Integer, nullable=False, default=0),
    Column("suspended_count", Integer, nullable=False, default=0),
    Column("inactive_count", Integer, nullable=False, default=0),
    Column("unknown_count", Integer, nullable=False, default=0),
    Column("recorded_at", UTCDateTime(), nullable=True),
    UniqueConstraint("run_id", "tenant_id", name="uq_tenant_status_snapshot_run_tenant"),
)


def _reject_audit_update(
    _mapper: Mapper[AuditEntry],
    _connection: Connection,
    target: AuditEntry,
) -> None:
    raise AuditEntryImmutableError(f"Audit entry {target.id} is append-only")


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(FeedRun, feed_run_table)
    mapper_registry.map_imperatively(StagingRecord, staging_record_table)
    mapper_registry.map_imperatively(Device, device_table)
    mapper_registry.map_imperatively(AuditEntry, audit_entry_table)
    mapper_registry.map_imperatively(FeatureFlag, feature_flag_table)
    mapper_registry.map_imperatively(TenantStatusSnapshot, tenant_status_snapshot_table)

    event.listen(AuditEntry, "before_update", _reject_audit_update)

    configure_mappers()
    return mapper_registry

