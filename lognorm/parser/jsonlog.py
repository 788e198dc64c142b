from abc import abstractmethod
from typing import Annotated, Any, Dict, List, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import GrammarError, TimestampFailure, ValidationFailure
from .base import LogParser
from .timestamp import TimestampError
from .values import Event

# A string field that must be present and non-empty
RequiredStr = Annotated[str, Field(min_length=1)]
Port = Annotated[int, Field(ge=0, le=65535)]


class LogRecord(BaseModel):
    """Base for JSON log schemas. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _describe(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {error.get('msg')}")
    return "; ".join(parts)


def validate_record(log_type: str, model: Type[LogRecord], data: Any) -> LogRecord:
    """
    Validate one log record, mapping failures to ParseError types.

    data is either a raw JSON line or a dict of already extracted fields.
    """
    try:
        if isinstance(data, (str, bytes)):
            return model.model_validate_json(data)
        return model.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        if any(error["type"] in ("json_invalid", "model_type") for error in errors):
            raise GrammarError(log_type, f"invalid JSON log: {_describe(errors)}") from e
        if any(isinstance(error.get("ctx", {}).get("error"), TimestampError) for error in errors):
            raise TimestampFailure(log_type, f"invalid timestamp: {_describe(errors)}") from e
        raise ValidationFailure(log_type, f"invalid log record: {_describe(errors)}") from e
    except RecursionError as e:
        raise GrammarError(log_type, "invalid JSON log: nested too deeply") from e


def dump_record(log_type: str, record: LogRecord) -> Dict[str, Any]:
    """The record as a JSON-ready dict keyed by the field names found in the log."""
    try:
        return record.model_dump(mode="json", by_alias=True, exclude_none=True)
    except (ValueError, RecursionError) as e:
        # pydantic gives up on deeply nested free-form values
        raise ValidationFailure(log_type, f"cannot serialize log record: {e}") from e


class JSONLogParser(LogParser):
    """
    Parser for log types whose JSON schema is fully declared.

    The line is validated against the record model, then build_event
    picks the indicator values out of the known fields.
    """

    def __init__(self, name: str, record_model: Type[LogRecord]):
        super().__init__(name)
        self.record_model = record_model

    def parse(self, line: str) -> List[Event]:
        record = validate_record(self.name, self.record_model, line)
        event = self.build_event(record)
        event.record = dump_record(self.name, record)
        return [event]

    @abstractmethod
    def build_event(self, record: Any) -> Event:
        pass
