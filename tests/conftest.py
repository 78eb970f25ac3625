import datetime as dt
from pathlib import Path

import pytest
import structlog

from uo2ical.schedule import ClassMeeting, Weekday

DATA_DIR = Path(__file__).parent / "data"

TERM = "01/08/2024 - 04/12/2024"


def list_view_page(*courses) -> str:
    """
    Build a minimal list view page. Each course is a tuple of
    (title, status, rows) and every row holds the seven meeting cells.
    """
    blocks = []
    for title, status, rows in courses:
        meeting_rows = "".join(
            "<tr>" + "".join(f"<td><span>{cell or '&nbsp;'}</span></td>" for cell in row) + "</tr>"
            for row in rows)
        blocks.append(f"""
<table class="PSGROUPBOXWBO">
  <tr><td class="PAGROUPDIVIDER">{title}</td></tr>
  <tr><td><table class="PSLEVEL3GRID">
    <tr><th>Status</th><th>Units</th></tr>
    <tr><td><span>{status}</span></td><td><span>3.00</span></td></tr>
  </table></td></tr>
  <tr><td><table class="PSLEVEL3GRID">
    <tr><th>Class Nbr</th><th>Section</th><th>Component</th><th>Days &amp; Times</th>
        <th>Room</th><th>Instructor</th><th>Start/End Date</th></tr>
    {meeting_rows}
  </table></td></tr>
</table>""")
    if not courses:
        # no enrolments: the page still carries an empty class grid
        blocks.append('<table class="PSLEVEL3GRID"><tr><th>Class Nbr</th><th>Section</th>'
                      '<th>Component</th><th>Days &amp; Times</th><th>Room</th>'
                      '<th>Instructor</th><th>Start/End Date</th></tr></table>')
    return ("<html><head><title>My Class Schedule</title></head><body>"
            + "".join(blocks) + "</body></html>")


def column_table_page(rows, headers=("Course", "Section", "Days", "Time", "Location", "Dates")) -> str:
    head = "<tr>" + "".join(f"<th>{h}</th>" for h in headers) + "</tr>"
    body = "".join("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>" for row in rows)
    return f"<html><body><h1>Schedule</h1><table>{head}{body}</table></body></html>"


@pytest.fixture
def list_view_html() -> str:
    return (DATA_DIR / "list_view.html").read_text(encoding="utf-8")


@pytest.fixture
def make_meeting():
    def _make(**overrides) -> ClassMeeting:
        values = dict(
            course_code="CSI 2110",
            section="A00",
            days=frozenset({Weekday.Monday, Weekday.Wednesday}),
            start_time=dt.time(10, 0),
            end_time=dt.time(11, 20),
            location="FTX 147",
            term_start=dt.date(2024, 1, 8),
            term_end=dt.date(2024, 4, 12),
        )
        values.update(overrides)
        return ClassMeeting(**values)
    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    # configure_logging() binds the current sys.stderr, which capsys swaps out
    yield
    structlog.reset_defaults()
