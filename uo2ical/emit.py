import datetime as dt
import hashlib
from collections import Counter
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

import structlog
from icalendar import Alarm, Calendar, Event

from .config import Settings
from .schedule import ClassMeeting

logger = structlog.get_logger()

PRODID = "-//uo2ical//Class Schedule//EN"
UTC = ZoneInfo("UTC")

# the recurrence ends at the very end of the last day of term
END_OF_DAY = dt.time(23, 59, 59)


def meeting_uid(meeting: ClassMeeting, ordinal: int) -> str:
    # ordinal tells apart records with the same course, section and days
    key = "|".join((meeting.course_code, meeting.section, meeting.pattern))
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:20]
    return f"{digest}-{ordinal}@uo2ical"


def describe(meeting: ClassMeeting) -> str:
    parts = [("Name", meeting.title), ("Section", meeting.section),
             ("Component", meeting.component), ("Instructor", meeting.instructor)]
    return " | ".join(f"{label}: {value}" for label, value in parts if value)


def location_text(meeting: ClassMeeting, settings: Settings) -> str:
    """``FTX 147, Fauteux Hall, Ottawa, ON, Canada``, or empty without a room."""
    if not meeting.location:
        return ""
    parts = (meeting.location, meeting.building, settings.campus_address)
    return ", ".join(part for part in parts if part)


def create_event(meeting: ClassMeeting, uid: str, settings: Settings) -> Event:
    tz = settings.tz

    # ClassMeeting guarantees this falls within the term
    first_day = meeting.first_meeting_date()

    # this would break on a meeting past midnight but the page can't express one
    start_dt = dt.datetime.combine(first_day, meeting.start_time, tzinfo=tz)
    end_dt = dt.datetime.combine(first_day, meeting.end_time, tzinfo=tz)
    until = dt.datetime.combine(meeting.term_end, END_OF_DAY, tzinfo=tz).astimezone(UTC)

    evt = Event()
    evt.add("uid", uid)
    # derived from the input rather than the clock so reruns are identical
    evt.add("dtstamp", dt.datetime.combine(meeting.term_start, dt.time(), tzinfo=UTC))
    evt.add("summary", meeting.summary)
    evt.add("dtstart", start_dt)
    evt.add("dtend", end_dt)
    evt.add("rrule", {"freq": "weekly", "byday": meeting.byday, "until": until})
    location = location_text(meeting, settings)
    if location:
        evt.add("location", location)
    description = describe(meeting)
    if description:
        evt.add("description", description)

    if settings.reminder_minutes:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", dt.timedelta(minutes=-settings.reminder_minutes))
        alarm.add("description", f"{meeting.summary} starts in "
                                  f"{settings.reminder_minutes} minutes")
        evt.add_component(alarm)

    return evt


def generate_schedule(meetings: Iterable[ClassMeeting],
                      settings: Optional[Settings] = None) -> Calendar:
    settings = settings or Settings()
    meetings = list(meetings)

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", settings.calendar_name)
    cal.add("x-wr-timezone", settings.timezone)

    seen = Counter()
    for meeting in meetings:
        key = (meeting.course_code, meeting.section, meeting.pattern)
        seen[key] += 1
        cal.add_component(create_event(meeting, meeting_uid(meeting, seen[key]), settings))

    if meetings:
        # VTIMEZONE covering just the terms in the calendar
        first = min(m.term_start for m in meetings)
        last = max(m.term_end for m in meetings) + dt.timedelta(days=1)
        cal.add_missing_timezones(first, last)

    logger.info("calendar_generated", events=len(cal.walk("VEVENT")))
    return cal


def render_calendar(meetings: Iterable[ClassMeeting],
                    settings: Optional[Settings] = None) -> str:
    return generate_schedule(meetings, settings).to_ical().decode("utf-8")
