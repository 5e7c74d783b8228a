# rui/errors.py
"""Exception types raised across the framework.

Most failures (bad property values, unknown tags, malformed events) are
recovered where they happen and only logged. The exceptions below cover the
few paths that must unwind a call stack.
"""


class RUIError(Exception):
    """Base class for every exception raised by the framework."""


class BridgeClosedError(RUIError):
    """A script was written to a bridge whose connection is already closed."""


class BindingError(RUIError):
    """A listener names a binding method that is missing or has the wrong signature."""


class DataParseError(RUIError, ValueError):
    """
    Raised by the data-text parser when the text is ill-formed.

    :param message: Human readable description.
    :param line: 1-based line of the failure, if known.
    :param position: 0-based column of the failure, if known.
    """

    def __init__(self, message: str, line: int = 0, position: int = 0):
        if line:
            message = f"{message} (line: {line}, position: {position})"
        super().__init__(message)
        self.line = line
        self.position = position
