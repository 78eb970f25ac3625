"""
Settings for the converter.

Defaults suit the University of Ottawa student centre. Every field can be
overridden with a ``UO2ICAL_*`` environment variable, and the command line
overrides both.
"""

import logging
import os
import sys
from dataclasses import dataclass
from functools import cached_property
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from .errors import ConfigError

DEFAULT_INPUT = "SA_LEARNER_SERVICES.html"

ENV_PREFIX = "UO2ICAL_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    # campus time zone; every event is pinned to it
    timezone: str = "America/Toronto"

    # X-WR-CALNAME, shown by most clients as the calendar title
    calendar_name: str = "Class Schedule"

    # appended to every LOCATION so maps apps can find the room,
    # e.g., "Ottawa, ON, Canada"
    campus_address: str = ""

    # minutes before each class for a display alarm, 0 disables it
    reminder_minutes: int = 30

    # waitlisted courses are left out unless asked for
    include_waitlisted: bool = False

    # name of the row matcher that knows the page layout
    layout: str = "list-view"

    log_level: str = "WARNING"

    def __post_init__(self):
        if self.reminder_minutes < 0:
            raise ConfigError(
                f"reminder must not be negative, got {self.reminder_minutes}")

    @cached_property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f"unknown time zone: {self.timezone!r}") from None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from ``UO2ICAL_*`` environment variables."""
        defaults = cls()
        return cls(
            timezone=os.getenv(ENV_PREFIX + "TIMEZONE", defaults.timezone),
            calendar_name=os.getenv(ENV_PREFIX + "CALENDAR_NAME", defaults.calendar_name),
            campus_address=os.getenv(ENV_PREFIX + "CAMPUS_ADDRESS", defaults.campus_address),
            reminder_minutes=_env_int(ENV_PREFIX + "REMINDER_MINUTES",
                                      defaults.reminder_minutes),
            include_waitlisted=_env_bool(ENV_PREFIX + "INCLUDE_WAITLISTED",
                                         defaults.include_waitlisted),
            layout=os.getenv(ENV_PREFIX + "LAYOUT", defaults.layout),
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", defaults.log_level),
        )


def configure_logging(log_level: str = "WARNING") -> None:
    """
    Set up structlog for console output.

    Logs go to stderr so that ``-o -`` can stream the calendar on stdout.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level: {log_level!r}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
