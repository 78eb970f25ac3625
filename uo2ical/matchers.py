"""
Row matchers find the schedule table in a saved page and yield its rows as
plain strings. The extractor never looks at markup itself, so when the
student centre changes its layout only a matcher has to change.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Type

from bs4 import BeautifulSoup, Tag

from .errors import ConfigError, MalformedDocument, MalformedRow


@dataclass
class RawRow:
    # 1-based position among the meeting rows of the document
    index: int

    course: str
    section: str
    days: str
    time: str
    location: str
    dates: str

    title: str = ""
    component: str = ""
    instructor: str = ""

    # Enrolled, Waiting or Dropped; empty when the layout has no status
    status: str = ""

    def is_blank(self) -> bool:
        return not any((self.section, self.component, self.days, self.time,
                        self.location, self.instructor, self.dates))


def cell_text(tag: Tag) -> str:
    # collapses the &nbsp; PeopleSoft puts in empty cells as well
    return " ".join(tag.get_text().split())


class RowMatcher:
    name = ""

    def locate(self, soup: BeautifulSoup) -> Optional[Tag]:
        """Return the element holding the schedule, or None if absent."""
        raise NotImplementedError

    def rows(self, root: Tag) -> Iterator[RawRow]:
        raise NotImplementedError


class ListViewMatcher(RowMatcher):
    """
    "My Class Schedule" in List View, as saved from the student centre.

    Each course is a ``table.PSGROUPBOXWBO`` with a ``td.PAGROUPDIVIDER``
    title of the form ``CSI 2110 - Data Structures``. Inside it the first
    ``PSLEVEL3GRID`` holds status/units/grading, the second the meetings,
    seven cells per row:

        Class Nbr | Section | Component | Days & Times | Room | Instructor
        | Start/End Date

    A blank section or component continues the row above it.
    """

    name = "list-view"

    MEETING_CELLS = 7
    CONTAINERS = ["PSGROUPBOXWBO", "PSLEVEL3GRID"]

    def locate(self, soup):
        if soup.find("td", class_="PAGROUPDIVIDER") is not None:
            return soup
        # an empty schedule still has its (empty) group box or grid; a page
        # with only the title, e.g. term selection, is not a schedule
        if soup.find("table", class_=self.CONTAINERS) is not None:
            return soup
        return None

    def rows(self, root):
        index = 0
        for table in root.find_all("table", class_="PSGROUPBOXWBO"):
            title_tag = table.find("td", class_="PAGROUPDIVIDER")
            if title_tag is None:
                continue

            code, _, title = cell_text(title_tag).partition(" - ")

            grids = table.find_all("table", class_="PSLEVEL3GRID")
            if len(grids) < 2:
                raise MalformedDocument(f"course {code!r} has no meeting table")

            status = self._status(grids[0])

            section = component = ""
            for tr in grids[1].find_all("tr"):
                tds = tr.find_all("td", recursive=False)
                # header rows are all <th>
                if not tds:
                    continue
                index += 1

                cells = [cell_text(td) for td in tds]
                if not any(cells):
                    continue
                if len(cells) != self.MEETING_CELLS:
                    raise MalformedRow(index, "row", " | ".join(cells),
                                       f"expected {self.MEETING_CELLS} cells")

                _, row_section, row_component, days_times, room, instructor, dates = cells
                section = row_section or section
                component = row_component or component
                days, _, times = days_times.partition(" ")

                yield RawRow(index=index, course=code.strip(), title=title.strip(),
                             section=section, component=component,
                             days=days, time=times.strip(), location=room,
                             instructor=instructor, dates=dates, status=status)

    @staticmethod
    def _status(grid: Tag) -> str:
        for tr in grid.find_all("tr"):
            tds = tr.find_all("td", recursive=False)
            if tds:
                return cell_text(tds[0])
        return ""


class ColumnTableMatcher(RowMatcher):
    """
    Any ``<table>`` whose header row names at least the columns Course,
    Section, Days, Time, Location and Dates. Columns are matched by their
    header text, case-insensitively, so their order does not matter.
    """

    name = "table"

    HEADERS = {
        "course": "course",
        "course code": "course",
        "section": "section",
        "days": "days",
        "day": "days",
        "time": "time",
        "times": "time",
        "location": "location",
        "room": "location",
        "dates": "dates",
        "start/end date": "dates",
        "title": "title",
        "component": "component",
        "instructor": "instructor",
        "status": "status",
    }
    REQUIRED = frozenset({"course", "section", "days", "time", "location", "dates"})

    def locate(self, soup):
        for table in soup.find_all("table"):
            if self._header(table) is not None:
                return table
        return None

    def _header(self, table: Tag):
        """Return (header row, {column: field}) or None."""
        for tr in table.find_all("tr"):
            cells = tr.find_all(["th", "td"], recursive=False)
            if not cells:
                continue
            columns = {}
            for i, cell in enumerate(cells):
                field = self.HEADERS.get(cell_text(cell).lower())
                if field is not None:
                    columns[i] = field
            if self.REQUIRED <= set(columns.values()):
                return tr, columns
            # only the first non-empty row can be the header
            return None
        return None

    def rows(self, root):
        header = self._header(root)
        if header is None:
            raise MalformedDocument("schedule table has no header row")
        header_row, columns = header
        labels = [cell_text(c).lower() for c in header_row.find_all(["th", "td"], recursive=False)]
        width = max(columns) + 1

        # the header may sit in a <thead>, so walk every row after it
        all_rows = root.find_all("tr")
        start = next(i for i, tr in enumerate(all_rows) if tr is header_row) + 1

        index = 0
        for tr in all_rows[start:]:
            cells = [cell_text(c) for c in tr.find_all(["th", "td"], recursive=False)]
            if not cells or [c.lower() for c in cells] == labels:
                continue
            index += 1

            if not any(cells):
                continue
            if len(cells) < width:
                raise MalformedRow(index, "row", " | ".join(cells),
                                   f"expected {width} cells")

            values = {field: cells[i] for i, field in columns.items()}
            yield RawRow(index=index, **values)


MATCHERS: Dict[str, Type[RowMatcher]] = {
    ListViewMatcher.name: ListViewMatcher,
    ColumnTableMatcher.name: ColumnTableMatcher,
}


def get_matcher(name: str) -> RowMatcher:
    try:
        return MATCHERS[name]()
    except KeyError:
        raise ConfigError(
            f"unknown layout {name!r}, expected one of {', '.join(MATCHERS)}") from None
