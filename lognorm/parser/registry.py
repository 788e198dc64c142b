import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from ..errors import RegistrationError, UnknownLogTypeError
from ..utils.locks import ReadWriteLock
from ..utils.logging import get_logger
from .base import LogParser

logger = get_logger("registry")

ParserFactory = Callable[[], LogParser]


@dataclass(frozen=True)
class LogType:
    name: str
    description: str
    schema: Type[BaseModel]
    new_parser: ParserFactory
    reference_url: str = ""

    def check(self):
        if not self.name:
            raise RegistrationError("missing log type name")
        if not self.description:
            raise RegistrationError(f"missing description for log type {self.name!r}")
        if not callable(self.new_parser):
            raise RegistrationError(f"missing parser factory for log type {self.name!r}")
        check_schema(self.name, self.schema)

    def schema_descriptor(self) -> Dict[str, Any]:
        """Logical field shape of the rows produced for this log type."""
        descriptor = _schema_class(self.schema).model_json_schema(by_alias=True)
        descriptor.setdefault("description", self.description)
        return descriptor


def _schema_class(schema: Any) -> Type[BaseModel]:
    if isinstance(schema, BaseModel):
        return type(schema)
    return schema


def check_schema(log_type: str, schema: Any):
    """The schema must be a pydantic model whose description survives a JSON round trip."""
    if schema is None:
        raise RegistrationError(f"nil schema for log type {log_type!r}")
    schema = _schema_class(schema)
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise RegistrationError(f"invalid schema for log type {log_type!r}: {schema!r} is not a model")
    try:
        data = json.dumps(schema.model_json_schema(by_alias=True))
        fields = json.loads(data)
    except (TypeError, ValueError) as e:
        raise RegistrationError(f"invalid schema struct for log type {log_type!r}: {e}") from e
    if not isinstance(fields, dict) or not fields.get("properties"):
        raise RegistrationError(f"invalid schema struct for log type {log_type!r}: no fields")


class Registry:
    """
    Catalog of supported log types.

    Created empty and populated during startup; entries are never removed.
    Lookups may run concurrently with each other.
    """

    def __init__(self, *log_types: LogType):
        self._lock = ReadWriteLock()
        self._entries: Dict[str, LogType] = {}
        for log_type in log_types:
            self.register(log_type)

    def register(self, entry: LogType):
        entry.check()
        with self._lock.write():
            if entry.name in self._entries:
                raise RegistrationError(f"duplicate log type entry {entry.name!r}")
            self._entries[entry.name] = entry
        logger.debug(f"Registered log type {entry.name}")

    def get(self, name: str) -> Optional[LogType]:
        with self._lock.read():
            return self._entries.get(name)

    def must_get(self, name: str) -> LogType:
        entry = self.get(name)
        if entry is None:
            raise UnknownLogTypeError(name)
        return entry

    def available_types(self) -> List[LogType]:
        with self._lock.read():
            entries = list(self._entries.values())
        return sorted(entries, key=lambda entry: entry.name)

    def new_parser(self, name: str) -> LogParser:
        return self.must_get(name).new_parser()

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
