"""One global feature flag row per key

Revision ID: 0002_global_flag_key
Revises: 0001_initial_schema
Create Date: 2026-10-19 14:30:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0002_global_flag_key"
down_revision: str | Sequence[str] | None = "0001_initial_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_GLOBAL_ROW = sa.text("tenant_id IS NULL")


def upgrade() -> None:
    op.create_index(
        "uq_feature_flag_global_key",
        "feature_flag",
        ["key"],
        unique=True,
        sqlite_where=_GLOBAL_ROW,
        postgresql_where=_GLOBAL_ROW,
    )


def downgrade() -> None:
    op.drop_index("uq_feature_flag_global_key", table_name="feature_flag")
