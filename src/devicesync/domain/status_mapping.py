"""Mapping from raw carrier status strings to effective statuses."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final, Protocol

from devicesync.domain.model import EffectiveStatus

DEFAULT_VOCABULARY: Final[Mapping[str, EffectiveStatus]] = MappingProxyType(
    {
        "a": EffectiveStatus.ACTIVE,
        "active": EffectiveStatus.ACTIVE,
        "activated": EffectiveStatus.ACTIVE,
        "s": EffectiveStatus.SUSPENDED,
        "suspend": EffectiveStatus.SUSPENDED,
        "suspended": EffectiveStatus.SUSPENDED,
        "c": EffectiveStatus.INACTIVE,
        "canceled": EffectiveStatus.INACTIVE,
        "cancelled": EffectiveStatus.INACTIVE,
        "deactivated": EffectiveStatus.INACTIVE,
        "inactive": EffectiveStatus.INACTIVE,
        "terminated": EffectiveStatus.INACTIVE,
        "unknown": EffectiveStatus.UNKNOWN,
    }
)


class MapStatus(Protocol):
    """Callable port: raw carrier status to effective status. Must be total."""

    def __call__(self, raw_status: str | None) -> EffectiveStatus: ...


class StatusMapper:
    """Case-insensitive, total mapping over a carrier vocabulary.

    ``None``, blank and unrecognised values map to ``UNKNOWN``; lookup never raises.
    """

    def __init__(self, extra: Mapping[str, EffectiveStatus] | None = None) -> None:
        vocabulary = dict(DEFAULT_VOCABULARY)
        for raw, status in (extra or {}).items():
            vocabulary[_normalize(raw)] = EffectiveStatus(status)
        self._vocabulary: Mapping[str, EffectiveStatus] = MappingProxyType(vocabulary)

    def map(self, raw_status: str | None) -> EffectiveStatus:
        if raw_status is None:
            return EffectiveStatus.UNKNOWN
        return self._vocabulary.get(_normalize(raw_status), EffectiveStatus.UNKNOWN)

    def __call__(self, raw_status: str | None) -> EffectiveStatus:
        return self.map(raw_status)


def _normalize(raw_status: str) -> str:
    return raw_status.strip().casefold()
