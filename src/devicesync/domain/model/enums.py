"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EffectiveStatus(StrEnum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"


class StatusReason(StrEnum):
    """Why a device holds its current effective status."""

    CARRIER_STATUS = "carrier_status"
    NOT_FOUND_IN_FEED = "not_found_in_feed"
    FEED_INVALID = "feed_invalid"
