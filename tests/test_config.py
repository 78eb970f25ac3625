import pytest

from uo2ical.config import Settings, configure_logging
from uo2ical.errors import ConfigError
from uo2ical.matchers import ColumnTableMatcher, ListViewMatcher, get_matcher


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TIMEZONE", "CALENDAR_NAME", "CAMPUS_ADDRESS", "REMINDER_MINUTES",
                 "INCLUDE_WAITLISTED", "LAYOUT", "LOG_LEVEL"):
        monkeypatch.delenv("UO2ICAL_" + name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.timezone == "America/Toronto"
    assert settings.reminder_minutes == 30
    assert settings.include_waitlisted is False
    assert settings.layout == "list-view"
    assert settings.tz.key == "America/Toronto"


def test_from_env(monkeypatch):
    monkeypatch.setenv("UO2ICAL_TIMEZONE", "America/Vancouver")
    monkeypatch.setenv("UO2ICAL_CALENDAR_NAME", "Fall")
    monkeypatch.setenv("UO2ICAL_REMINDER_MINUTES", "0")
    monkeypatch.setenv("UO2ICAL_INCLUDE_WAITLISTED", "yes")
    monkeypatch.setenv("UO2ICAL_LAYOUT", "table")
    monkeypatch.setenv("UO2ICAL_CAMPUS_ADDRESS", "Ottawa, ON, Canada")

    settings = Settings.from_env()
    assert settings.timezone == "America/Vancouver"
    assert settings.calendar_name == "Fall"
    assert settings.reminder_minutes == 0
    assert settings.include_waitlisted is True
    assert settings.layout == "table"
    assert settings.campus_address == "Ottawa, ON, Canada"


@pytest.mark.parametrize("name, value", [
    ("UO2ICAL_REMINDER_MINUTES", "soon"),
    ("UO2ICAL_INCLUDE_WAITLISTED", "maybe"),
    ("UO2ICAL_REMINDER_MINUTES", "-5"),
])
def test_bad_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        Settings.from_env()


def test_unknown_time_zone():
    with pytest.raises(ConfigError, match="Mars/Olympus_Mons"):
        Settings(timezone="Mars/Olympus_Mons").tz


def test_get_matcher():
    assert isinstance(get_matcher("list-view"), ListViewMatcher)
    assert isinstance(get_matcher("table"), ColumnTableMatcher)
    with pytest.raises(ConfigError, match="unknown layout"):
        get_matcher("grid")


def test_configure_logging_rejects_unknown_level():
    configure_logging("info")
    with pytest.raises(ConfigError):
        configure_logging("chatty")
