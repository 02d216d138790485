from __future__ import annotations

from devicesync.domain.feature_flags import (
    IMMEDIATE_UNKNOWN_ON_MISSING,
    resolve_flag,
    resolve_flags,
)
from devicesync.domain.model import FeatureFlag

KEY = IMMEDIATE_UNKNOWN_ON_MISSING


def test_tenant_row_overrides_global_row() -> None:
    flags = [
        FeatureFlag(key=KEY, tenant_id=None, enabled=True),
        FeatureFlag(key=KEY, tenant_id=7, enabled=False),
    ]

    assert resolve_flag(flags, key=KEY, tenant_id=7) is False
    assert resolve_flag(flags, key=KEY, tenant_id=8) is True


def test_global_row_applies_when_tenant_row_missing() -> None:
    flags = [FeatureFlag(key=KEY, tenant_id=None, enabled=True)]

    assert resolve_flag(flags, key=KEY, tenant_id=3) is True


def test_default_applies_when_no_row_exists() -> None:
    assert resolve_flag([], key=KEY, tenant_id=3) is False
    assert resolve_flag([], key=KEY, tenant_id=3, default=True) is True


def test_rows_for_other_keys_are_ignored() -> None:
    flags = [FeatureFlag(key="something-else", tenant_id=3, enabled=True)]

    assert resolve_flag(flags, key=KEY, tenant_id=3) is False


def test_resolve_flags_returns_one_value_per_tenant() -> None:
    flags = [
        FeatureFlag(key=KEY, tenant_id=None, enabled=False),
        FeatureFlag(key=KEY, tenant_id=2, enabled=True),
    ]

    assert resolve_flags(flags, key=KEY, tenant_ids=(1, 2, 3)) == {1: False, 2: True, 3: False}
