"""
Exception hierarchy for the password meter.

Errors are raised at startup or construction time only. Evaluating a
password never raises.
"""


class PasswordMeterError(Exception):
    """Base class for every error raised by pwmeter."""


class DecodeError(PasswordMeterError):
    """The packed dictionary asked for more characters than the previous word has."""

    def __init__(self, message: str, index: int = -1, marker: str = ""):
        super().__init__(message)
        self.index = index
        self.marker = marker


class ConfigurationError(PasswordMeterError):
    """A rule, range or settings object is malformed."""
