class ScheduleError(Exception):
    """Base class for everything the converter reports to the user."""


class ConfigError(ScheduleError):
    pass


class InputNotFound(ScheduleError, FileNotFoundError):
    def __init__(self, path):
        super().__init__(f"schedule file not found: {path}")
        self.path = path


class ReadError(ScheduleError):
    def __init__(self, path, cause: OSError):
        super().__init__(f"cannot read schedule file {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class WriteError(ScheduleError):
    def __init__(self, path, cause: OSError):
        super().__init__(f"cannot write calendar to {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class ParseError(ScheduleError):
    pass


class MalformedDocument(ParseError):
    pass


class MalformedRow(ParseError):
    """A data row whose ``field`` cell could not be parsed.

    ``row`` is the 1-based position of the row among the meeting rows of
    the document, counting every row the matcher yielded.
    """

    def __init__(self, row: int, field: str, value: str, reason: str = ""):
        message = f"row {row}: bad {field} {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.row = row
        self.field = field
        self.value = value
        self.reason = reason
