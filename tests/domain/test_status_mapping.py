from __future__ import annotations

import pytest

from devicesync.domain.model import EffectiveStatus
from devicesync.domain.status_mapping import DEFAULT_VOCABULARY, StatusMapper


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("A", EffectiveStatus.ACTIVE),
        ("active", EffectiveStatus.ACTIVE),
        ("  Activated ", EffectiveStatus.ACTIVE),
        ("S", EffectiveStatus.SUSPENDED),
        ("SUSPENDED", EffectiveStatus.SUSPENDED),
        ("C", EffectiveStatus.INACTIVE),
        ("Cancelled", EffectiveStatus.INACTIVE),
        ("deactivated", EffectiveStatus.INACTIVE),
        ("unknown", EffectiveStatus.UNKNOWN),
    ],
)
def test_maps_known_vocabulary_case_insensitively(raw: str, expected: EffectiveStatus) -> None:
    assert StatusMapper().map(raw) is expected


@pytest.mark.parametrize("raw", [None, "", "   ", "ported-out", "Z", "äctive"])
def test_unrecognised_values_map_to_unknown(raw: str | None) -> None:
    assert StatusMapper()(raw) is EffectiveStatus.UNKNOWN


def test_every_vocabulary_entry_maps_to_a_member() -> None:
    mapper = StatusMapper()
    for raw, status in DEFAULT_VOCABULARY.items():
        assert mapper.map(raw.upper()) is status


def test_extra_vocabulary_overrides_and_extends_defaults() -> None:
    mapper = StatusMapper(
        extra={"Hotlined": EffectiveStatus.SUSPENDED, "C": EffectiveStatus.UNKNOWN}
    )

    assert mapper.map("hotlined") is EffectiveStatus.SUSPENDED
    assert mapper.map("c") is EffectiveStatus.UNKNOWN
    assert mapper.map("A") is EffectiveStatus.ACTIVE


def test_default_vocabulary_is_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_VOCABULARY["x"] = EffectiveStatus.ACTIVE  # type: ignore[index]
