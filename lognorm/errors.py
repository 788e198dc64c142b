class LogNormError(Exception):
    """Base class for all lognorm errors."""


class RegistrationError(LogNormError):
    """A log type could not be registered (bad metadata, bad schema or duplicate name)."""


class UnknownLogTypeError(LogNormError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"unregistered log type {name!r}")
        self.name = name


class ScanError(LogNormError, ValueError):
    """The value scanner could not decode its input."""


class ParseError(LogNormError):
    """A raw line could not be turned into events."""

    def __init__(self, log_type: str, message: str):
        super().__init__(f"{log_type}: {message}")
        self.log_type = log_type
        self.message = message


class GrammarError(ParseError):
    pass


class FieldCountError(ParseError):
    def __init__(self, log_type: str, expected: int, actual: int):
        super().__init__(log_type, f"invalid number of fields {actual} (expected {expected})")
        self.expected = expected
        self.actual = actual


class ValidationFailure(ParseError):
    pass


class TimestampFailure(ParseError):
    pass
