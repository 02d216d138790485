"""Root logger setup for the devicesync command line."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "DEVICESYNC_LOG_LEVEL"
_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# Both narrate migrations and connection handling at INFO.
_QUIET_BELOW_DEBUG: Final[tuple[str, ...]] = ("alembic", "sqlalchemy.engine")


def resolve_log_level(level: str | int | None = None) -> int:
    """Turn ``level``, or ``DEVICESYNC_LOG_LEVEL`` when it is ``None``, into a number."""

    if isinstance(level, int):
        return level
    name = (level or optional_env_var(LOG_LEVEL_ENV, "INFO")).strip().upper()
    resolved = logging.getLevelNamesMapping().get(name)
    if resolved is None:
        raise ConfigurationError(f"Invalid log level for {LOG_LEVEL_ENV}: {name!r}")
    return resolved


def configure_logging(*, level: str | int | None = None, force: bool = False) -> None:
    """Configure the root logger for batch output.

    Alembic and the SQLAlchemy engine stay at WARNING unless DEBUG is requested.
    """

    resolved = resolve_log_level(level)
    logging.basicConfig(
        level=resolved,
        format=_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        force=force,
    )
    for name in _QUIET_BELOW_DEBUG:
        logging.getLogger(name).setLevel(
            resolved if resolved <= logging.DEBUG else logging.WARNING
        )
