"""Where reconciliation state is stored.

``DATABASE_URI`` wins when set. Otherwise devicesync keeps a SQLite file in its
data directory: ``DEVICESYNC_DATA_DIR`` if given, else
``$XDG_DATA_HOME/devicesync`` (``~/.local/share/devicesync``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATA_DIR_ENV: Final[str] = "DEVICESYNC_DATA_DIR"
DEFAULT_DB_FILENAME: Final[str] = "devicesync.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """On-disk home of the SQLite database used when no URI is configured."""

    data_dir: Path

    @property
    def database_path(self) -> Path:
        return self.data_dir / DEFAULT_DB_FILENAME

    def sqlite_uri(self) -> str:
        """Return the SQLite URI for :attr:`database_path`, creating the directory."""
        if self.data_dir.exists() and not self.data_dir.is_dir():
            raise ConfigurationError(f"Data directory is a file: {self.data_dir}")
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_path}"


def _data_dir_from_env() -> Path:
    explicit = optional_env_var(DATA_DIR_ENV, "")
    if explicit:
        return Path(explicit).expanduser().resolve()
    share = optional_env_var("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))
    return (Path(share).expanduser() / "devicesync").resolve()


def get_storage_config() -> StorageConfig:
    return StorageConfig(data_dir=_data_dir_from_env())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_ENV, "")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri())
