import datetime as dt
import re
from typing import List, Optional, Tuple, Union

import structlog
from bs4 import BeautifulSoup

from .errors import MalformedDocument, MalformedRow
from .matchers import ListViewMatcher, RawRow, RowMatcher
from .schedule import ClassMeeting, UnknownDayToken, parse_days

logger = structlog.get_logger()

TIME_FORMATS = ("%I:%M%p", "%H:%M")
DATE_FORMATS = ("%m/%d/%Y", "%Y-%m-%d")

# "FTX 147 (Fauteux Hall)"
ROOM_RGX = re.compile(r"^(?P<room>.*?)\s*\((?P<building>[^()]*)\)$")

# meetings the student centre has not scheduled yet
UNSCHEDULED = {"TBA", "TBD"}


# helper function to parse a time of the format 11:40AM, 1:15 PM or 13:15
def parse_time(s: str) -> dt.time:
    compact = "".join(s.split()).upper()
    for fmt in TIME_FORMATS:
        try:
            return dt.datetime.strptime(compact, fmt).time()
        except ValueError:
            pass
    raise ValueError(f"not a time of day: {s!r}")


# helper function to parse a time range of the format:
# 11:40AM - 1:15PM
def parse_time_range(s: str) -> Tuple[dt.time, dt.time]:
    start, sep, end = s.partition("-")
    if not sep:
        raise ValueError("expected a range like 10:00AM - 11:20AM")
    return parse_time(start), parse_time(end)


# helper function to parse a mm/dd/yyyy (or yyyy-mm-dd) date
def parse_date(s: str) -> dt.date:
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(s.strip(), fmt).date()
        except ValueError:
            pass
    raise ValueError(f"not a date: {s!r}")


# helper function to parse a date range of the format:
# 01/08/2024 - 04/12/2024
def parse_date_range(s: str) -> Tuple[dt.date, dt.date]:
    start, sep, end = s.partition(" - ")
    if not sep or not end.strip():
        # ongoing classes are not supported, the recurrence needs a bound
        raise ValueError("missing end date")
    return parse_date(start), parse_date(end)


# helper function to split a room cell of the format:
# FTX 147 (Fauteux Hall)
def parse_room(s: str) -> Tuple[str, str]:
    match = ROOM_RGX.match(s.strip())
    if match is None or not match.group("room"):
        return s.strip(), ""
    return match.group("room"), match.group("building").strip()


def parse_row(row: RawRow, include_waitlisted: bool = False) -> Optional[ClassMeeting]:
    """
    Turn one raw row into a ClassMeeting.

    Returns None for rows that carry no meeting: blank rows, dropped or
    (by default) waitlisted courses, and meetings still to be announced.
    Raises MalformedRow naming the row and field for anything else that
    does not parse.
    """
    if row.is_blank():
        return None

    status = row.status.strip().lower()
    if status == "dropped":
        logger.info("skipping_dropped_class", course=row.course, section=row.section)
        return None
    waitlisted = status == "waiting"
    if waitlisted and not include_waitlisted:
        logger.info("skipping_waitlisted_class", course=row.course, section=row.section)
        return None

    if not row.course:
        raise MalformedRow(row.index, "course", row.course, "missing")
    if not row.section:
        raise MalformedRow(row.index, "section", row.section, "missing")

    if (not row.days and not row.time) or row.days.upper() in UNSCHEDULED \
            or row.time.upper() in UNSCHEDULED:
        logger.warning("skipping_unscheduled_meeting", row=row.index,
                       course=row.course, section=row.section)
        return None

    try:
        days = parse_days(row.days)
    except UnknownDayToken as e:
        raise MalformedRow(row.index, "days", row.days, str(e)) from None
    if not days:
        raise MalformedRow(row.index, "days", row.days, "no days")

    try:
        start_time, end_time = parse_time_range(row.time)
    except ValueError as e:
        raise MalformedRow(row.index, "time", row.time, str(e)) from None
    if start_time >= end_time:
        raise MalformedRow(row.index, "time", row.time, "start is not before end")

    try:
        term_start, term_end = parse_date_range(row.dates)
    except ValueError as e:
        raise MalformedRow(row.index, "dates", row.dates, str(e)) from None
    if term_start > term_end:
        raise MalformedRow(row.index, "dates", row.dates, "start is after end")

    location, building = parse_room(row.location)

    try:
        return ClassMeeting(course_code=row.course, section=row.section, days=days,
                            start_time=start_time, end_time=end_time,
                            location=location, building=building,
                            term_start=term_start, term_end=term_end, title=row.title,
                            component=row.component, instructor=row.instructor,
                            waitlisted=waitlisted)
    except ValueError as e:
        # time and term order are checked above, what is left is a term
        # too short to hold any of the meeting days
        raise MalformedRow(row.index, "dates", row.dates, str(e)) from None


def parse_schedule(html: Union[str, bytes], matcher: Optional[RowMatcher] = None,
                   include_waitlisted: bool = False) -> List[ClassMeeting]:
    """Extract every class meeting of a saved schedule page, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    matcher = matcher or ListViewMatcher()

    root = matcher.locate(soup)
    if root is None:
        raise MalformedDocument(
            f"no class schedule found in the document ({matcher.name} layout)")

    meetings = [meeting
                for row in matcher.rows(root)
                for meeting in [parse_row(row, include_waitlisted)]
                if meeting is not None]

    logger.info("schedule_parsed", layout=matcher.name, meetings=len(meetings))
    return meetings
