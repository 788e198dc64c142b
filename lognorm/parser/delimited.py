import re
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Pattern, Type

from ..errors import FieldCountError, GrammarError
from .base import LogParser
from .jsonlog import LogRecord, dump_record, validate_record
from .values import Event

# Field sub-patterns for access log style lines
RX_UNQUOTED = r"[^\s]+"
RX_BRACKETS = r"\[[^\]]+\]"
RX_QUOTED = r'"[^"]*"'
RX_STATUS_CODE = r"\d{3}"
RX_SIZE = r"-|\d+"

# Splits a line into fields without knowing its format, used to report field counts
RX_TOKEN = re.compile(r'\[[^\]]*\]|"[^"]*"|\S+')


def build_rx(*fields: str) -> Pattern:
    """Wrap each field pattern in a group, join them with whitespace and anchor both ends."""
    groups = [f"({field})" for field in fields]
    return re.compile(r"^\s*" + r"\s+".join(groups) + r"\s*$")


def count_fields(line: str) -> int:
    return len(RX_TOKEN.findall(line))


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def strip_brackets(value: str) -> str:
    if len(value) >= 2 and value[0] == "[" and value[-1] == "]":
        return value[1:-1]
    return value


def non_empty(value: Optional[str]) -> Optional[str]:
    """Empty and dash placeholder fields are absent."""
    if value is None:
        return None
    value = value.strip()
    if value in ("", "-"):
        return None
    return value


def split_request(request: Optional[str]) -> Dict[str, Optional[str]]:
    # GET /index.html HTTP/1.1
    data: Dict[str, Optional[str]] = {"method": None, "uri": None, "protocol": None}
    parts = (request or "").split()
    if len(parts) >= 2:
        data["method"] = parts[0]
        data["uri"] = parts[1]
        data["protocol"] = parts[2] if len(parts) > 2 else None
    return data


class DelimitedLogParser(LogParser):
    """
    Parser for fixed-grammar lines matched by a single anchored pattern.

    Every group of the pattern is one field; a line that matches must
    yield exactly arity fields.
    """

    def __init__(self, name: str, pattern: Pattern, record_model: Type[LogRecord], literal_fields: int = 0):
        super().__init__(name)
        self.pattern = pattern
        self.record_model = record_model
        # fixed tokens in the pattern that are not captured, e.g. a literal dash
        self.literal_fields = literal_fields

    @property
    def arity(self) -> int:
        return self.pattern.groups

    def split(self, line: str) -> List[str]:
        match = self.pattern.match(line)
        if match is None:
            expected = self.arity + self.literal_fields
            count = count_fields(line)
            if count != expected:
                raise FieldCountError(self.name, expected, count)
            raise GrammarError(self.name, f"line does not match the {self.name} format")
        # every group participates in a match, so a matching line always has arity fields
        return list(match.groups())

    def parse(self, line: str) -> List[Event]:
        row = self.split(line)
        record = validate_record(self.name, self.record_model, self.set_row(row))
        event = self.build_event(record)
        event.record = dump_record(self.name, record)
        return [event]

    @abstractmethod
    def set_row(self, row: List[str]) -> Dict[str, Any]:
        """Assign positional fields to named record fields."""
        pass

    @abstractmethod
    def build_event(self, record: Any) -> Event:
        pass
