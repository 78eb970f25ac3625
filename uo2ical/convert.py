"""Read a saved schedule page, convert it, and write the .ics file."""

from pathlib import Path
from typing import Optional, Union

import structlog

from .config import DEFAULT_INPUT, Settings
from .emit import render_calendar
from .errors import InputNotFound, ReadError, WriteError
from .extract import parse_schedule
from .matchers import get_matcher

logger = structlog.get_logger()

PathLike = Union[str, Path]


def output_path_for(input_path: PathLike) -> Path:
    """``Class Schedule.html`` -> ``Class Schedule.ics``"""
    return Path(input_path).with_suffix(".ics")


def read_html(path: PathLike) -> bytes:
    # bytes, so BeautifulSoup can sniff the page's own encoding
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        raise InputNotFound(path) from None
    except OSError as e:
        raise ReadError(path, e) from e


def convert(html: Union[str, bytes], settings: Optional[Settings] = None) -> str:
    settings = settings or Settings()
    meetings = parse_schedule(html, matcher=get_matcher(settings.layout),
                              include_waitlisted=settings.include_waitlisted)
    return render_calendar(meetings, settings)


def write_calendar(text: str, path: PathLike) -> None:
    try:
        # the calendar is already CRLF-terminated, keep it that way
        with open(path, "w", encoding="utf-8", newline="") as fp:
            fp.write(text)
    except OSError as e:
        raise WriteError(path, e) from e


def convert_file(input_path: Optional[PathLike] = None,
                 output_path: Optional[PathLike] = None,
                 settings: Optional[Settings] = None) -> Path:
    input_path = Path(input_path or DEFAULT_INPUT)
    output_path = Path(output_path) if output_path else output_path_for(input_path)

    # render everything before touching the output, a bad row leaves no file
    text = convert(read_html(input_path), settings)
    write_calendar(text, output_path)

    logger.info("calendar_written", input=str(input_path), output=str(output_path))
    return output_path
