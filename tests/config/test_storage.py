from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from devicesync.config import ConfigurationError, storage


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("DEVICESYNC_DATA_DIR", str(custom))

    assert storage.get_storage_config().data_dir == custom.resolve()


def test_storage_config_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DEVICESYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    config = storage.get_storage_config()

    assert config.data_dir == (tmp_path / "share" / "devicesync").resolve()
    assert not config.data_dir.exists()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("DEVICESYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_config().uri

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.is_dir()


def test_data_dir_that_is_a_file_is_rejected(tmp_path: Path) -> None:
    occupied = tmp_path / "occupied"
    occupied.write_text("not a directory")

    with pytest.raises(ConfigurationError, match="Data directory is a file"):
        storage.StorageConfig(data_dir=occupied).sqlite_uri()
