"""Runtime settings and logging setup.

Settings come from explicit overrides (command line options), then
``MONEYBOX_*`` environment variables, then defaults.
"""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from dateutil import tz as dateutil_tz

from moneybox.database.factories import DEFAULT_TIMEOUT, default_database_path
from moneybox.domain.errors import ValidationError

DEFAULT_USER = "local"
DEFAULT_TIMEZONE = "America/Sao_Paulo"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    database_path: str
    user_id: str
    timezone: str
    db_timeout: float

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)


def resolve_timezone(name: str) -> tzinfo:
    """Look up an IANA time zone name such as ``America/Sao_Paulo``."""
    zone = dateutil_tz.gettz(name) if name else None
    if zone is None:
        raise ValidationError(f"Unknown time zone '{name}'")
    return zone


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as e:
        raise ValidationError(f"Invalid database timeout '{value}'") from e
    if timeout <= 0:
        raise ValidationError("Database timeout must be greater than zero")
    return timeout


def load_settings(
    database_path: Optional[str] = None,
    user_id: Optional[str] = None,
    timezone: Optional[str] = None,
    db_timeout: Optional[float] = None,
) -> Settings:
    """Build settings from overrides, the environment and defaults.

    Raises:
        ValidationError: If the time zone or timeout is invalid
    """
    if db_timeout is None:
        db_timeout = _parse_timeout(os.environ.get("MONEYBOX_DB_TIMEOUT", str(DEFAULT_TIMEOUT)))
    settings = Settings(
        database_path=database_path or default_database_path(),
        user_id=user_id or os.environ.get("MONEYBOX_USER") or DEFAULT_USER,
        timezone=timezone or os.environ.get("MONEYBOX_TIMEZONE") or DEFAULT_TIMEZONE,
        db_timeout=db_timeout,
    )
    resolve_timezone(settings.timezone)
    return settings


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr; ``debug`` turns on the package's DEBUG output."""
    logging.basicConfig(
        level=logging.WARNING, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
    )
    logging.getLogger("moneybox").setLevel(logging.DEBUG if debug else logging.WARNING)
