import datetime as dt
from dataclasses import dataclass
from enum import Enum, unique
from typing import FrozenSet, List


@unique
class Weekday(Enum):
    Monday = 0
    Tuesday = 1
    Wednesday = 2
    Thursday = 3
    Friday = 4
    Saturday = 5
    Sunday = 6

    @property
    def weekday(self) -> int:
        # same numbering as dt.date.weekday()
        return self.value

    @property
    def ics_name(self) -> str:
        return self.name[:2].upper()

    @property
    def abbreviation(self) -> str:
        return self.name[:2]


# abbreviations used by the student centre in the "Days & Times" column.
# two-letter tokens are tried before one-letter ones, so "Th" is never
# read as "T" followed by garbage.
DAY_TOKENS = {
    "Mo": Weekday.Monday,
    "Tu": Weekday.Tuesday,
    "We": Weekday.Wednesday,
    "Th": Weekday.Thursday,
    "Fr": Weekday.Friday,
    "Sa": Weekday.Saturday,
    "Su": Weekday.Sunday,
    "M": Weekday.Monday,
    "T": Weekday.Tuesday,
    "W": Weekday.Wednesday,
    "R": Weekday.Thursday,
    "F": Weekday.Friday,
    "S": Weekday.Saturday,
    "U": Weekday.Sunday,
}


class UnknownDayToken(ValueError):
    def __init__(self, token: str):
        super().__init__(f"unknown day token {token!r}")
        self.token = token


def parse_days(s: str) -> FrozenSet[Weekday]:
    """Split a packed day string such as ``MoWeFr`` or ``MWF`` into weekdays."""
    s = "".join(s.split())
    days = set()
    i = 0
    while i < len(s):
        for width in (2, 1):
            token = s[i:i + width]
            if len(token) == width and token in DAY_TOKENS:
                days.add(DAY_TOKENS[token])
                i += width
                break
        else:
            # report the two-letter chunk, that is what the page shows
            raise UnknownDayToken(s[i:i + 2])

    return frozenset(days)


def sort_days(days) -> List[Weekday]:
    return sorted(days, key=lambda wd: wd.weekday)


@dataclass(frozen=True)
class ClassMeeting:
    # course code, e.g., CSI 2110
    course_code: str

    # section code, e.g., A00 or B01
    section: str

    # the weekday(s) this takes place on, e.g., {Monday, Wednesday}
    days: FrozenSet[Weekday]

    # e.g., 10:00, 11:20
    start_time: dt.time
    end_time: dt.time

    # room name, e.g., FTX 147; may be empty when the page has none
    location: str

    # first and last day of the term this section runs in. this is usually
    # the term's first day, not necessarily the first day of this class
    term_start: dt.date
    term_end: dt.date

    # course title, e.g., Data Structures and Algorithms
    title: str = ""

    # type of class meeting, e.g., Lecture or Laboratory
    component: str = ""

    # course instructor, e.g., Staff
    instructor: str = ""

    # building the room is in, e.g., Fauteux Hall
    building: str = ""

    # whether the course is waitlisted (True) or enrolled (False)
    waitlisted: bool = False

    def __post_init__(self):
        if not self.days:
            raise ValueError("meeting has no days")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start time {self.start_time:%H:%M} is not before "
                f"end time {self.end_time:%H:%M}")
        if self.term_start > self.term_end:
            raise ValueError(
                f"term start {self.term_start} is after term end {self.term_end}")
        if self.first_meeting_date() > self.term_end:
            raise ValueError("no meeting day falls within the term")

    @property
    def summary(self) -> str:
        return f"{self.course_code} {self.section}".strip()

    @property
    def byday(self) -> List[str]:
        return [wd.ics_name for wd in sort_days(self.days)]

    @property
    def pattern(self) -> str:
        return "".join(wd.abbreviation for wd in sort_days(self.days))

    def first_meeting_date(self) -> dt.date:
        """First date on or after the term start that falls on a meeting day."""
        weekdays = {wd.weekday for wd in self.days}
        day = self.term_start
        # terminates within 7 iterations since days is non-empty
        while day.weekday() not in weekdays:
            day += dt.timedelta(days=1)
        return day
