"""Initial reconciliation schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from devicesync.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_EFFECTIVE_STATUS = ("ACTIVE", "SUSPENDED", "INACTIVE", "UNKNOWN")
_STATUS_REASON = ("CARRIER_STATUS", "NOT_FOUND_IN_FEED", "FEED_INVALID")


def _effective_status() -> sa.Enum:
    return sa.Enum(*_EFFECTIVE_STATUS, name="effectivestatus", native_enum=False)


def _status_reason() -> sa.Enum:
    return sa.Enum(*_STATUS_REASON, name="statusreason", native_enum=False)


def upgrade() -> None:
    op.create_table(
        "feed_run",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_scope", sa.Integer(), nullable=True),
        sa.Column("is_valid", sa.Boolean(), nullable=True),
        sa.Column("processed_at", UTCDateTime(), nullable=True),
        sa.Column("unknown_flip_count", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_feed_run")),
    )
    op.create_table(
        "staging_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("run_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(), nullable=True),
        sa.Column("raw_status", sa.String(), nullable=True),
        sa.Column("refreshed_at", UTCDateTime(), nullable=True),
        sa.Column("staged_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["feed_run.id"],
            name=op.f("fk_staging_record_run_id_feed_run"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_staging_record")),
    )
    op.create_index("ix_staging_record_run_tenant", "staging_record", ["run_id", "tenant_id"])
    op.create_table(
        "device",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("raw_carrier_status", sa.String(), nullable=True),
        sa.Column("effective_status", _effective_status(), nullable=False),
        sa.Column("previous_effective_status", _effective_status(), nullable=True),
        sa.Column("status_reason", _status_reason(), nullable=False),
        sa.Column("status_changed_at", UTCDateTime(), nullable=True),
        sa.Column("last_seen_at", UTCDateTime(), nullable=True),
        sa.Column("last_seen_run_id", sa.Integer(), nullable=True),
        sa.Column("deactivated_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_device")),
        sa.UniqueConstraint("tenant_id", "external_id", name="uq_device_tenant_external_id"),
    )
    op.create_table(
        "audit_entry",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("run_id", sa.Integer(), nullable=False),
        sa.Column("previous_status", _effective_status(), nullable=True),
        sa.Column("new_status", _effective_status(), nullable=False),
        sa.Column("reason", _status_reason(), nullable=False),
        sa.Column("recorded_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_audit_entry")),
    )
    op.create_index("ix_audit_entry_run", "audit_entry", ["run_id"])
    op.create_index("ix_audit_entry_new_status", "audit_entry", ["new_status"])
    op.create_table(
        "feature_flag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_feature_flag")),
        sa.UniqueConstraint("key", "tenant_id", name="uq_feature_flag_key_tenant"),
    )
    op.create_table(
        "tenant_status_snapshot",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("run_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("active_count", sa.Integer(), nullable=False),
        sa.Column("suspended_count", sa.Integer(), nullable=False),
        sa.Column("inactive_count", sa.Integer(), nullable=False),
        sa.Column("unknown_count", sa.Integer(), nullable=False),
        sa.Column("recorded_at", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["feed_run.id"],
            name=op.f("fk_tenant_status_snapshot_run_id_feed_run"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tenant_status_snapshot")),
        sa.UniqueConstraint(
            "run_id", "tenant_id", name="uq_tenant_status_snapshot_run_tenant"
        ),
    )


def downgrade() -> None:
    op.drop_table("tenant_status_snapshot")
    op.drop_table("feature_flag")
    op.drop_index("ix_audit_entry_new_status", table_name="audit_entry")
    op.drop_index("ix_audit_entry_run", table_name="audit_entry")
    op.drop_table("audit_entry")
    op.drop_table("device")
    op.drop_index("ix_staging_record_run_tenant", table_name="staging_record")
    op.drop_table("staging_record")
    op.drop_table("feed_run")
