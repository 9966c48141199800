# config.py -- Runtime configuration for the Access Log Viewer.
# Implements DESIGN.md Component 3.8: settings read from the environment,
# time zone resolution and logging setup.

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from access_log import AccessLogError

DEFAULT_LOG_FILE = "access_log.json"
DEFAULT_LOG_LEVEL = "WARNING"


class ConfigError(AccessLogError):
    """Raised when a configuration value is invalid."""
    pass


@dataclass
class Config:
    log_file: str = DEFAULT_LOG_FILE
    audit_file: str | None = None
    timezone: str | None = None
    templates_file: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(environ=None) -> Config:
    """Build a Config from ACCESS_LOG_* environment variables.

    Unset or empty variables keep their defaults.
    """
    if environ is None:
        environ = os.environ
    return Config(
        log_file=environ.get("ACCESS_LOG_FILE") or DEFAULT_LOG_FILE,
        audit_file=environ.get("ACCESS_LOG_AUDIT_FILE") or None,
        timezone=environ.get("ACCESS_LOG_TIMEZONE") or None,
        templates_file=environ.get("ACCESS_LOG_TEMPLATES") or None,
        log_level=environ.get("ACCESS_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
    )


def resolve_timezone(name: str | None) -> ZoneInfo | None:
    """Return the ZoneInfo for name, or None (host local time) if name is empty."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Invalid timezone: {name}") from e


def configure_logging(level: str) -> None:
    """Configure the root logger at the named level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Invalid log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
