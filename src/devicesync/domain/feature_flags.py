"""Feature flag resolution with tenant-over-global precedence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

IMMEDIATE_UNKNOWN_ON_MISSING: Final[str] = "immediate-unknown-on-missing"

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devicesync.domain.model import FeatureFlag


def resolve_flag(
    flags: Iterable[FeatureFlag],
    *,
    key: str,
    tenant_id: int | None,
    default: bool = False,
) -> bool:
    """Resolve ``key`` for ``tenant_id``: tenant row, then global row, then ``default``."""

    global_value: bool | None = None
    for flag in flags:
        if flag.key != key:
            continue
        if tenant_id is not None and flag.tenant_id == tenant_id:
            return flag.enabled
        if flag.tenant_id is None:
            global_value = flag.enabled
    if global_value is None:
        return default
    return global_value


def resolve_flags(
    flags: Iterable[FeatureFlag],
    *,
    key: str,
    tenant_ids: Iterable[int],
    default: bool = False,
) -> dict[int, bool]:
    """Resolve ``key`` once per tenant so a whole run sees one consistent value."""

    rows = list(flags)
    return {
        tenant_id: resolve_flag(rows, key=key, tenant_id=tenant_id, default=default)
        for tenant_id in tenant_ids
    }
