"""Reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass

from devicesync.domain.feature_flags import IMMEDIATE_UNKNOWN_ON_MISSING

from .env import env_flag, optional_env_var


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    missing_flag_key: str = IMMEDIATE_UNKNOWN_ON_MISSING
    # Used when neither a tenant nor a global flag row exists.
    missing_flag_default: bool = False


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        missing_flag_key=optional_env_var(
            "DEVICESYNC_MISSING_FLAG_KEY", IMMEDIATE_UNKNOWN_ON_MISSING
        ),
        missing_flag_default=env_flag("DEVICESYNC_MISSING_FLAG_DEFAULT", default=False),
    )
