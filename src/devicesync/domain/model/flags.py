"""Feature flag rows with an optional tenant override."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class FeatureFlag:
    id: int | None = None
    key: str
    # None marks the global row.
    tenant_id: int | None = None
    enabled: bool = False
