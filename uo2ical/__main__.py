import argparse
import dataclasses
import sys

from .config import DEFAULT_INPUT, Settings, configure_logging
from .convert import convert, convert_file, read_html
from .errors import ScheduleError
from .matchers import MATCHERS

VERBOSITY = ["WARNING", "INFO", "DEBUG"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uo2ical",
        description="Convert a saved \"My Class Schedule\" page (List View) "
                    "into an iCalendar file with one weekly event per class.")
    parser.add_argument("path", nargs="?", metavar="FILE",
                        help=f"saved schedule page (default: {DEFAULT_INPUT})")
    parser.add_argument("-o", "--output", metavar="OUTPUT",
                        help="where to write the calendar, '-' for stdout "
                             "(default: FILE with an .ics extension)")
    parser.add_argument("--layout", choices=sorted(MATCHERS),
                        help="page layout to look for (default: list-view)")
    parser.add_argument("--timezone", metavar="TZ",
                        help="campus time zone (default: America/Toronto)")
    parser.add_argument("--name", dest="calendar_name",
                        help="calendar name shown by calendar apps")
    parser.add_argument("--campus", dest="campus_address", metavar="ADDRESS",
                        help="appended to every room, e.g. \"Ottawa, ON, Canada\"")
    parser.add_argument("--reminder", dest="reminder_minutes", type=int, metavar="MIN",
                        help="reminder this many minutes before class, 0 for none")
    parser.add_argument("--include-waitlisted", action="store_true", default=None,
                        help="also add courses you are waitlisted for")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log progress (-vv for debug output)")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    overrides = {name: getattr(args, name)
                 for name in ("layout", "timezone", "calendar_name", "campus_address",
                              "reminder_minutes", "include_waitlisted")
                 if getattr(args, name) is not None}
    if args.verbose:
        overrides["log_level"] = VERBOSITY[min(args.verbose, len(VERBOSITY) - 1)]
    return dataclasses.replace(settings, **overrides)


def run_cli(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
        configure_logging(settings.log_level)

        if args.output == "-":
            sys.stdout.write(convert(read_html(args.path or DEFAULT_INPUT), settings))
        else:
            output = convert_file(args.path, args.output, settings)
            print(f"Wrote {output}", file=sys.stderr)
    except ScheduleError as e:
        print(f"uo2ical: error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(run_cli())
